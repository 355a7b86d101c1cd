"""Block device name resolution and inspection.

Resolution:
    Users type devices either as bare names (``sdb``, ``nvme0n1``) or as full
    paths (``/dev/sdb``). :func:`normalize_device` turns either form into an
    absolute path and refuses anything that is not a block-special file.

Partition Naming:
    NVMe and MMC devices end in a digit, so the kernel separates the
    partition number with ``p`` (``/dev/nvme0n1p2``, ``/dev/mmcblk0p1``).
    SATA/SCSI/virtio disks append it directly (``/dev/sdb2``).

Inspection:
    :func:`list_disks` and :func:`describe_disk` print lsblk, parted and blkid
    output for the operator. They are informational and never fatal.

Example:
    >>> partition_name("/dev/nvme0n1", 2)
    '/dev/nvme0n1p2'
    >>> partition_name("/dev/sdb", 2)
    '/dev/sdb2'
"""
import glob
import os
import re
import stat
import subprocess

from disk_manage.domain.models import PartitionNamingScheme
from disk_manage.logging import LoggerFactory
from disk_manage.storage.commands import run_command
from disk_manage.storage.exceptions import DeviceNotFoundError, PartitionTableError


DEV_PREFIX = "/dev/"
P_INFIX_PATTERN = re.compile(r"(nvme|mmcblk)")
LSBLK_LIST_COLUMNS = "NAME,TYPE,TRAN,SIZE,MODEL"
LSBLK_DETAIL_COLUMNS = "NAME,TYPE,FSTYPE,SIZE,MOUNTPOINT,LABEL,UUID"
_HIDDEN_DEVICE_PATTERN = re.compile(r"loop|ram")

log = LoggerFactory.for_storage()


def is_block_device(path: str) -> bool:
    try:
        return stat.S_ISBLK(os.stat(path).st_mode)
    except (OSError, ValueError):
        return False


def to_device_path(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith(DEV_PREFIX):
        return raw
    return f"{DEV_PREFIX}{raw}"


def normalize_device(raw: str) -> str:
    """Return the absolute device path for ``raw``.

    Raises:
        DeviceNotFoundError: If the path is not a block-special file
    """
    device = to_device_path(raw or "")
    if not is_block_device(device):
        raise DeviceNotFoundError(device)
    log.debug(f"Resolved {raw!r} to {device}")
    return device


def naming_scheme(disk: str) -> PartitionNamingScheme:
    if P_INFIX_PATTERN.search(disk):
        return PartitionNamingScheme.P_INFIX
    return PartitionNamingScheme.DIRECT_SUFFIX


def partition_separator(disk: str) -> str:
    return naming_scheme(disk).separator


def partition_name(disk: str, index: int) -> str:
    return f"{disk}{partition_separator(disk)}{index}"


def parent_disk(partition: str) -> str:
    """Strip the partition number (and ``p`` infix) from a partition path."""
    base = partition.rstrip("0123456789")
    if not base:
        return partition
    if naming_scheme(partition) is PartitionNamingScheme.P_INFIX and base.endswith("p"):
        trimmed = base[:-1]
        # nvme0n1 / mmcblk0 themselves end in a digit, so only drop a real infix
        if trimmed and trimmed[-1].isdigit():
            return trimmed
    return base


def default_mount_point(disk: str, index: int, mount_root: str = "/mnt") -> str:
    return f"{mount_root.rstrip('/')}/{os.path.basename(disk)}{partition_separator(disk)}{index}"


def list_disks() -> str:
    """Return the lsblk listing without loop and ram devices."""
    try:
        result = run_command(
            ["lsblk", "-a", "-p", "-o", LSBLK_LIST_COLUMNS],
            check=True,
            log_output=False,
        )
    except (subprocess.CalledProcessError, OSError) as error:
        log.warning(f"lsblk failed: {error}")
        return ""
    lines = [
        line for line in result.stdout.splitlines()
        if not _HIDDEN_DEVICE_PATTERN.search(line)
    ]
    return "\n".join(lines)


def partition_table(disk: str) -> str:
    """Return ``parted -s <disk> print`` output.

    Raises:
        PartitionTableError: If parted fails
    """
    try:
        return run_command(["parted", "-s", disk, "print"]).stdout
    except subprocess.CalledProcessError as error:
        stderr = (error.stderr or "").strip()
        raise PartitionTableError(f"parted print failed on {disk}: {stderr}", disk) from error
    except OSError as error:
        raise PartitionTableError(f"parted print failed on {disk}: {error}", disk) from error


def _best_effort_output(command) -> str:
    try:
        result = run_command(command, check=False, log_output=False)
    except OSError as error:
        log.warning(f"{command[0]} could not be started: {error}")
        return ""
    if result.returncode != 0:
        log.warning(f"{' '.join(command)} returned {result.returncode}")
    return result.stdout or ""


def describe_disk(disk: str) -> dict[str, str]:
    """Collect parted, blkid and lsblk views of ``disk``.

    parted failure propagates; blkid and lsblk are best-effort.
    """
    nodes = sorted(glob.glob(f"{disk}*")) or [disk]
    return {
        "parted": partition_table(disk),
        "blkid": _best_effort_output(["blkid", *nodes]),
        "lsblk": _best_effort_output(
            ["lsblk", "-a", "-p", "-o", LSBLK_DETAIL_COLUMNS, disk]
        ),
    }
