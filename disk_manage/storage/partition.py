"""GPT partitioning for a GRUB-bootable disk.

Layout (fixed, regardless of disk size):
    1. bios   2MiB -  5MiB   bios_grub flag, unformatted (GRUB core image)
    2. efi    5MiB - 45MiB   FAT32, boot + esp flags (EFI System Partition)
    3. ext4  45MiB - 100%    ext4

The run is sequential and not transactional. Any parted failure while the
table is being written is fatal (:class:`PartitionTableError`). After the
table is in place only the ext4 format is fatal. Missing partition nodes,
a failed FAT32 format and rescan/settle failures are logged as warnings and
the run continues.
"""

import subprocess

from disk_manage.config.settings import get_float, get_str
from disk_manage.domain.models import (
    BIOS_PARTITION_INDEX,
    EFI_PARTITION_INDEX,
    GPT_LAYOUT,
    ROOT_PARTITION_INDEX,
    PartitionResult,
)
from disk_manage.logging import LoggerFactory
from disk_manage.storage import devices
from disk_manage.storage.commands import run_command
from disk_manage.storage.exceptions import PartitionTableError
from disk_manage.storage.format import format_partition, try_format_partition
from disk_manage.storage.settle import rescan_and_settle, settle, wait_for_partition


log = LoggerFactory.for_storage()


def _parted(disk: str, *args: str) -> None:
    command = ["parted", "-s", disk, *args]
    try:
        run_command(command)
    except subprocess.CalledProcessError as error:
        stderr = (error.stderr or "").strip()
        raise PartitionTableError(
            f"{' '.join(command)} failed: {stderr or f'exit code {error.returncode}'}", disk
        ) from error
    except OSError as error:
        raise PartitionTableError(f"{' '.join(command)} failed: {error}", disk) from error


def write_partition_table(disk: str) -> None:
    """Write a GPT label and the three fixed partitions with their flags."""
    log.info(f"Creating GPT label on {disk}")
    _parted(disk, "mklabel", "gpt")
    for spec in GPT_LAYOUT:
        log.info(f"Creating partition {spec.index} ({spec.name}) {spec.start}-{spec.end}")
        _parted(disk, *spec.mkpart_args())
        for flag in spec.flags:
            _parted(disk, "set", str(spec.index), flag, "on")


def create_partitions(disk: str, launcher) -> PartitionResult:
    """Partition and format ``disk`` for GPT + GRUB.

    Args:
        disk: Absolute disk path (e.g. /dev/sdb)
        launcher: Opens the interactive partition editor and waits for the
            operator, see :class:`disk_manage.ui.launcher.ToolLauncher`

    Raises:
        PartitionTableError: If a parted step fails
        FormatOperationError: If the ext4 format fails
    """
    log.info(f"Opening partition editor to clear/unmount partitions for {disk}")
    launcher.run_and_wait([get_str("partitioner"), disk])

    write_partition_table(disk)
    rescan_and_settle(disk)

    bios_part = devices.partition_name(disk, BIOS_PARTITION_INDEX)
    efi_part = devices.partition_name(disk, EFI_PARTITION_INDEX)
    root_part = devices.partition_name(disk, ROOT_PARTITION_INDEX)

    # Slow mmc/sd readers can take a while to publish nodes
    timeout = get_float("partition_wait_timeout")
    poll_interval = get_float("poll_interval")
    for part in (bios_part, efi_part, root_part):
        wait_for_partition(part, timeout, poll_interval)

    log.info(f"Formatting partitions: {efi_part} as FAT32 and {root_part} as ext4")
    try_format_partition(efi_part, "vfat")
    settle(disk)

    format_partition(root_part, "ext4")
    settle(disk)

    log.success(f"Partitions created and formatted on {disk}")
    log.info(f"Partitions on {disk}:\n{devices.partition_table(disk)}")
    return PartitionResult(
        disk=disk,
        bios_partition=bios_part,
        efi_partition=efi_part,
        root_partition=root_part,
    )
