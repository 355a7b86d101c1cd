from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional


@dataclass
class MenuItem:
    key: str
    label: str
    action: Optional[Callable[[], None]] = None
    quits: bool = False


@dataclass
class MenuScreen:
    screen_id: str
    title: str
    items: List[MenuItem] = field(default_factory=list)
    status_line: Optional[str] = None

    def find(self, key: str) -> Optional[MenuItem]:
        for item in self.items:
            if item.key == key:
                return item
        return None
