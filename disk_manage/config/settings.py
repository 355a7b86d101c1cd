"""Settings storage for application configuration."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


SETTINGS_PATH = Path(
    os.environ.get(
        "DISK_MANAGE_SETTINGS_PATH",
        Path.home() / ".config" / "disk-manage" / "settings.json",
    )
)

# Default values - use these constants instead of hardcoding values elsewhere
DEFAULT_PARTITION_WAIT_TIMEOUT = 10
DEFAULT_EFI_WAIT_TIMEOUT = 15
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_SETTLE_GRACE_SECONDS = 1.0
DEFAULT_MOUNT_ROOT = "/mnt"

DEFAULT_SETTINGS: dict[str, Any] = {
    "partition_wait_timeout": DEFAULT_PARTITION_WAIT_TIMEOUT,
    "efi_wait_timeout": DEFAULT_EFI_WAIT_TIMEOUT,
    "poll_interval": DEFAULT_POLL_INTERVAL,
    "settle_grace_seconds": DEFAULT_SETTLE_GRACE_SECONDS,
    "mount_root": DEFAULT_MOUNT_ROOT,
    "partitioner": "gparted",
    "disk_viewer": "gnome-disks",
}


@dataclass
class SettingsStore:
    values: dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_SETTINGS))


settings_store = SettingsStore()


def load_settings(path: Path | None = None) -> None:
    settings_store.values = dict(DEFAULT_SETTINGS)
    path = path or SETTINGS_PATH
    if not path.exists():
        return
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return
    if isinstance(data, dict):
        settings_store.values.update(data)


def get_setting(key: str, default: Any | None = None) -> Any:
    if default is None:
        default = DEFAULT_SETTINGS.get(key)
    return settings_store.values.get(key, default)


def get_float(key: str) -> float:
    value = get_setting(key)
    try:
        return float(value)
    except (TypeError, ValueError):
        return float(DEFAULT_SETTINGS[key])


def get_str(key: str) -> str:
    value = get_setting(key)
    if not isinstance(value, str) or not value:
        return str(DEFAULT_SETTINGS[key])
    return value
