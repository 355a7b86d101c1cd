"""Filesystem creation for freshly partitioned disks.

Supported Filesystems:
    vfat:   FAT32, used for the EFI System Partition
    ext4:   Linux root filesystem

Every format first tries to unmount the partition (ignoring failure, since a
new partition is normally not mounted). mkfs failure is reported as False or
raised, depending on whether the caller treats it as fatal.
"""

import subprocess

from disk_manage.logging import LoggerFactory
from disk_manage.storage.commands import run_command
from disk_manage.storage.exceptions import FormatOperationError
from disk_manage.storage.mount import unmount_quietly


log = LoggerFactory.for_storage()


def build_format_command(partition_path: str, filesystem: str) -> list[str]:
    filesystem = filesystem.lower()
    if filesystem == "vfat":
        return ["mkfs.vfat", "-F32", partition_path]
    if filesystem == "ext4":
        return ["mkfs.ext4", "-F", partition_path]
    raise ValueError(f"Unsupported filesystem type: {filesystem}")


def format_partition(partition_path: str, filesystem: str) -> None:
    """Unmount and format ``partition_path``.

    Raises:
        FormatOperationError: If mkfs is missing or exits non-zero
    """
    command = build_format_command(partition_path, filesystem)
    unmount_quietly(partition_path)
    log.info(f"Formatting {partition_path} as {filesystem}")
    try:
        run_command(command)
    except subprocess.CalledProcessError as error:
        stderr = (error.stderr or "").strip()
        raise FormatOperationError(
            f"{command[0]} failed on {partition_path}: {stderr or f'exit code {error.returncode}'}",
            partition_path,
        ) from error
    except OSError as error:
        raise FormatOperationError(f"{command[0]} failed on {partition_path}: {error}", partition_path) from error
    log.debug(f"Successfully formatted {partition_path} as {filesystem}")


def try_format_partition(partition_path: str, filesystem: str) -> bool:
    """Format ``partition_path`` and log a warning instead of raising."""
    try:
        format_partition(partition_path, filesystem)
    except FormatOperationError as error:
        log.warning(str(error))
        return False
    return True
