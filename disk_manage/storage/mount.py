"""Mount table queries and mount/unmount helpers.

Functions:
    - mounted_sources(): Source column of the live mount table
    - is_target_mounted(): Prefix match of a device path against mount sources
    - unmount_quietly(): Best-effort umount that never raises
    - mount_partition(): Create the mountpoint and mount a partition
    - mount_efi(): Resolve, unmount and mount a disk's EFI partition
"""

import os
import subprocess
from pathlib import Path

from disk_manage.domain.models import Outcome
from disk_manage.logging import LoggerFactory
from disk_manage.storage import devices
from disk_manage.storage.commands import run_command, sync
from disk_manage.storage.exceptions import DeviceNotFoundError, MountError


MOUNTS_PATH = Path("/proc/mounts")

log = LoggerFactory.for_storage()


def mounted_sources(mounts_path: Path = MOUNTS_PATH) -> list[str]:
    try:
        with open(mounts_path, "r", encoding="utf-8") as mounts_file:
            return [line.split()[0] for line in mounts_file if line.strip()]
    except OSError as error:
        log.warning(f"Could not read {mounts_path}: {error}")
        return []


def is_target_mounted(target: str, mounts_path: Path = MOUNTS_PATH) -> bool:
    """Return True if any mount source starts with ``target``.

    This is a literal prefix match, so ``/dev/sdb`` also matches a mounted
    ``/dev/sdb1`` (and ``/dev/sdb1`` would match ``/dev/sdb10``).
    """
    return any(source.startswith(target) for source in mounted_sources(mounts_path))


def unmount_quietly(device: str) -> Outcome:
    """umount ``device`` and ignore failure (usually "not mounted")."""
    try:
        result = run_command(["umount", device], check=False, log_output=False)
    except OSError as error:
        return Outcome.warn(f"umount {device}: {error}")
    if result.returncode != 0:
        log.debug(f"umount {device} returned {result.returncode}, ignoring")
        return Outcome.warn(f"umount {device} returned {result.returncode}")
    log.debug(f"Unmounted {device}")
    return Outcome.ok()


def mount_partition(partition: str, mount_point: str) -> None:
    """Mount ``partition`` at ``mount_point``, creating the directory.

    Raises:
        MountError: If the directory cannot be created or mount fails
    """
    try:
        os.makedirs(mount_point, exist_ok=True)
    except OSError as error:
        raise MountError(f"Cannot create mountpoint {mount_point}: {error}", partition) from error
    try:
        run_command(["mount", partition, mount_point])
    except (subprocess.CalledProcessError, OSError) as error:
        stderr = getattr(error, "stderr", None)
        detail = stderr.strip() if stderr else str(error)
        raise MountError(f"Failed to mount {partition} at {mount_point}: {detail}", partition) from error


def mount_efi(disk: str, index: int, mount_point: str) -> str:
    """Mount partition ``index`` of ``disk`` at ``mount_point``.

    The mount is left in place for the bootloader step and beyond.

    Returns:
        The partition path that was mounted

    Raises:
        DeviceNotFoundError: If the EFI partition node does not exist
        MountError: If mounting fails
    """
    part = devices.partition_name(disk, index)
    if not devices.is_block_device(part):
        raise DeviceNotFoundError(part, "EFI partition does not exist")

    unmount_quietly(part)
    mount_partition(part, mount_point)
    sync()
    log.info(f"Mounted {part} -> {mount_point}")
    return part
