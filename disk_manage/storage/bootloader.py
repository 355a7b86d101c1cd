"""GRUB installation for both UEFI and legacy BIOS boot.

Both installs use ``--removable``: the UEFI image goes to the fallback path
(``EFI/BOOT/BOOTX64.EFI``) instead of registering an NVRAM boot entry, so
the disk boots on machines other than the one it was prepared on.

grub-install failures are warnings; the operator is expected to read the
output and decide.
"""

import os

from disk_manage.domain.models import Outcome
from disk_manage.logging import LoggerFactory
from disk_manage.storage.commands import run_best_effort, sync
from disk_manage.storage.exceptions import MountError
from disk_manage.storage.settle import rescan_and_settle


log = LoggerFactory.for_boot()


def boot_directory(efi_mount: str) -> str:
    return f"{efi_mount.rstrip('/')}/efi"


def uefi_command(efi_mount: str) -> list[str]:
    return [
        "grub-install",
        "--target=x86_64-efi",
        f"--efi-directory={efi_mount}",
        f"--boot-directory={boot_directory(efi_mount)}",
        "--removable",
    ]


def bios_command(disk: str, efi_mount: str) -> list[str]:
    return [
        "grub-install",
        "--target=i386-pc",
        disk,
        f"--boot-directory={boot_directory(efi_mount)}",
        "--removable",
        "--recheck",
        "--force",
    ]


def install_grub(disk: str, efi_mount: str) -> list[Outcome]:
    """Install GRUB for x86_64 EFI and i386-pc onto ``disk``.

    Args:
        disk: Whole-disk device path
        efi_mount: Directory where the EFI partition is already mounted

    Returns:
        Outcomes of the UEFI and BIOS installs, in that order

    Raises:
        MountError: If ``efi_mount`` is not a directory
    """
    rescan_and_settle(disk)

    if not os.path.isdir(efi_mount):
        raise MountError(f"EFI mountpoint {efi_mount} not found")

    log.info(f"Installing GRUB (UEFI x86_64) to {efi_mount}")
    uefi = run_best_effort(uefi_command(efi_mount), description="UEFI grub-install")

    log.info(f"Installing GRUB (BIOS i386-pc) to {disk}")
    bios = run_best_effort(bios_command(disk, efi_mount), description="BIOS grub-install")

    sync()
    if uefi.is_ok and bios.is_ok:
        log.success("GRUB installed for UEFI and BIOS")
    else:
        log.warning("GRUB installation attempted. Verify success messages above.")
    return [uefi, bios]
