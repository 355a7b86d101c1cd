"""Menu actions: one method per main menu entry.

Each action runs to completion or raises a fatal
:class:`~disk_manage.storage.exceptions.StorageError`. Warnings from
best-effort steps are logged and the action carries on.
"""

from __future__ import annotations

import os
from typing import Optional

from disk_manage.config.settings import get_float, get_str
from disk_manage.domain.models import EFI_PARTITION_INDEX
from disk_manage.logging import LoggerFactory
from disk_manage.storage import bootloader, devices, flash, mount, ntfs, partition, settle
from disk_manage.ui.launcher import ToolLauncher
from disk_manage.ui.prompts import Prompter


log = LoggerFactory.for_menu()


class MenuActions:
    def __init__(self, prompter: Prompter, launcher: ToolLauncher) -> None:
        self.prompter = prompter
        self.launcher = launcher

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _show_disks(self) -> None:
        self.prompter.show("", "Available block devices:", devices.list_disks(), "")

    def _show_directory(self) -> None:
        try:
            entries = sorted(os.listdir("."))
        except OSError as error:
            log.warning(f"Cannot list current directory: {error}")
            return
        self.prompter.show(*entries)

    def _ask_device(self, question: str) -> str:
        return devices.normalize_device(self.prompter.ask(question))

    def _ask_partition_index(self, question: str, default: Optional[int] = None) -> int:
        while True:
            answer = self.prompter.ask(
                question, default=str(default) if default is not None else None
            )
            if answer.isdigit() and int(answer) > 0:
                return int(answer)
            self.prompter.show(f"Invalid partition number: {answer!r}")

    def _ask_mount_point(self, disk: str, index: int) -> str:
        default = devices.default_mount_point(disk, index, get_str("mount_root"))
        answer = self.prompter.ask(f"Enter mount point for EFI (default {default}): ")
        if not answer:
            self.prompter.show(f"Using default: {default}")
            return default
        return answer

    def _mount_and_install_grub(self, disk: str, index: int, mount_point: str) -> None:
        part = devices.partition_name(disk, index)
        if not settle.wait_for_partition(
            part, get_float("efi_wait_timeout"), get_float("poll_interval")
        ):
            self.prompter.show(f"Proceeding even though {part} may not exist yet")
        mount.mount_efi(disk, index, mount_point)
        bootloader.install_grub(disk, mount_point)

    def _flash(self, image: str, target: str) -> None:
        flash.flash_image(image, target, progress_callback=self.prompter.progress)
        self.prompter.show("", "Flashing complete.")

    # ------------------------------------------------------------------
    # menu entries
    # ------------------------------------------------------------------

    def flash_linux_image(self) -> None:
        self._show_disks()
        target = self._ask_device("Enter target device (e.g., sdb or /dev/sdb): ")
        self.prompter.confirm_destructive(target)
        self.launcher.run_and_wait([get_str("partitioner"), target])
        self._show_directory()
        image = self.prompter.ask("Enter Linux image path (.img or .xz): ")
        self._flash(image, target)
        settle.rescan_and_settle(target)
        self.launcher.run_and_wait([get_str("partitioner"), target])

    def flash_windows_image(self) -> None:
        self._show_disks()
        target = self._ask_device("Enter target device for partitioning (e.g., sdb or /dev/sdb): ")
        self.prompter.confirm_destructive(target)
        self.launcher.run_and_wait([get_str("partitioner"), target])
        self._show_disks()
        part = self._ask_device("Enter partition to flash (e.g., sdb1 or /dev/sdb1): ")
        self.prompter.confirm_destructive(part)
        self._show_directory()
        image = self.prompter.ask("Enter Windows image path (.img or .xz): ")
        self._flash(image, part)
        settle.rescan_and_settle(devices.parent_disk(part))
        self.launcher.run_and_wait([get_str("disk_viewer")])
        ntfs.fixup_ntfs_partition(part)

    def create_gpt_disk(self) -> None:
        self._show_disks()
        disk = self._ask_device("Enter target disk (e.g., sdb or /dev/sdb): ")
        self.prompter.confirm_destructive(disk)
        partition.create_partitions(disk, self.launcher)

        index = self._ask_partition_index(
            f"Enter EFI partition number (default {EFI_PARTITION_INDEX}): ",
            default=EFI_PARTITION_INDEX,
        )
        mount_point = self._ask_mount_point(disk, index)
        self._mount_and_install_grub(disk, index, mount_point)
        self.prompter.show("Done creating GPT disk and installing GRUB.")

    def show_disk_details(self) -> None:
        self._show_disks()
        answer = self.prompter.ask("Enter disk to inspect (e.g., sdb or /dev/sdb) or ENTER to skip: ")
        if not answer:
            return
        disk = devices.normalize_device(answer)
        details = devices.describe_disk(disk)
        self.prompter.show(
            "",
            f"parted print for {disk}:",
            details["parted"],
            "",
            "blkid output:",
            details["blkid"],
            "",
            "Detailed lsblk:",
            details["lsblk"],
        )

    def install_grub_only(self) -> None:
        self._show_disks()
        disk = self._ask_device("Enter disk (e.g., sdb or /dev/sdb) where EFI partition resides: ")
        self.prompter.show(f"Current partitions on {disk}:", devices.partition_table(disk))
        index = self._ask_partition_index("Enter EFI partition number to mount (e.g., 2): ")
        mount_point = self._ask_mount_point(disk, index)
        self._mount_and_install_grub(disk, index, mount_point)
        self.prompter.show("GRUB-only installation attempted.")
