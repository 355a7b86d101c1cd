"""Main menu loop.

There is a single state, the main menu. Every entry runs its action and
returns to the menu; quitting ends the loop with exit code 0. Fatal storage
errors are not caught here, they end the whole session.
"""

from __future__ import annotations

from disk_manage.logging import LoggerFactory
from disk_manage.menu.model import MenuScreen
from disk_manage.ui.prompts import Prompter


log = LoggerFactory.for_menu()

QUIT_KEYS = ("q", "Q")


class MenuController:
    def __init__(self, screen: MenuScreen, prompter: Prompter) -> None:
        self.screen = screen
        self.prompter = prompter

    def render(self) -> None:
        lines = [""]
        if self.screen.status_line:
            lines.append(self.screen.status_line)
        lines.append(self.screen.title)
        lines.extend(f"{item.key}) {item.label}" for item in self.screen.items)
        self.prompter.show(*lines)

    def dispatch(self, choice: str) -> bool:
        """Run the entry for ``choice``. Returns False when the loop should end."""
        key = "q" if choice in QUIT_KEYS else choice
        item = self.screen.find(key)
        if item is None:
            self.prompter.show("Invalid choice.")
            return True
        if item.quits:
            self.prompter.show("Exiting.")
            return False
        log.info(f"Menu option {item.key}: {item.label}")
        item.action()
        return True

    def run(self) -> int:
        while True:
            self.render()
            choice = self.prompter.ask("Choose an option: ")
            if not self.dispatch(choice):
                return 0
