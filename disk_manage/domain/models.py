"""Domain model for disk flashing and GPT disk setup.

Small type-safe objects passed between the storage layer and the menu.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


# ==============================================================================
# Command Outcomes
# ==============================================================================


class OutcomeStatus(Enum):
    OK = "ok"
    WARN = "warn"
    FATAL = "fatal"


@dataclass(frozen=True)
class Outcome:
    """Result of a single external command call site.

    Best-effort steps return WARN instead of raising; the caller decides
    whether a FATAL outcome becomes an exception.
    """

    status: OutcomeStatus
    reason: str = ""

    @classmethod
    def ok(cls) -> Outcome:
        return cls(OutcomeStatus.OK)

    @classmethod
    def warn(cls, reason: str) -> Outcome:
        return cls(OutcomeStatus.WARN, reason)

    @classmethod
    def fatal(cls, reason: str) -> Outcome:
        return cls(OutcomeStatus.FATAL, reason)

    @property
    def is_ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    @property
    def is_warning(self) -> bool:
        return self.status is OutcomeStatus.WARN

    @property
    def is_fatal(self) -> bool:
        return self.status is OutcomeStatus.FATAL


def worst(outcomes) -> Outcome:
    """Return the most severe outcome of a sequence (OK when empty)."""
    order = {OutcomeStatus.OK: 0, OutcomeStatus.WARN: 1, OutcomeStatus.FATAL: 2}
    result = Outcome.ok()
    for outcome in outcomes:
        if order[outcome.status] > order[result.status]:
            result = outcome
    return result


# ==============================================================================
# Devices
# ==============================================================================


class PartitionNamingScheme(Enum):
    """How a partition index composes with its disk path."""

    DIRECT_SUFFIX = ""  # /dev/sdb -> /dev/sdb2
    P_INFIX = "p"  # /dev/nvme0n1 -> /dev/nvme0n1p2

    @property
    def separator(self) -> str:
        return self.value


# ==============================================================================
# Images
# ==============================================================================


class ImageKind(Enum):
    RAW = "raw"
    XZ = "xz"


RAW_IMAGE_SUFFIXES = (".img", ".iso", ".raw")
XZ_IMAGE_SUFFIXES = (".xz",)


def image_kind_for(path: str | Path) -> Optional[ImageKind]:
    """Classify an image by extension, or None when unsupported."""
    name = str(path)
    if name.endswith(XZ_IMAGE_SUFFIXES):
        return ImageKind.XZ
    if name.endswith(RAW_IMAGE_SUFFIXES):
        return ImageKind.RAW
    return None


# ==============================================================================
# Partition Layout
# ==============================================================================


@dataclass(frozen=True)
class PartitionSpec:
    """One entry of the fixed GPT layout passed to parted mkpart."""

    index: int
    name: str
    start: str
    end: str
    fs_type: Optional[str] = None
    flags: tuple[str, ...] = ()

    def mkpart_args(self) -> list[str]:
        args = ["mkpart", self.name]
        if self.fs_type:
            args.append(self.fs_type)
        args.extend([self.start, self.end])
        return args


GPT_LAYOUT: tuple[PartitionSpec, ...] = (
    # Holds GRUB's core image for legacy BIOS boot on a GPT disk
    PartitionSpec(1, "bios", "2MiB", "5MiB", flags=("bios_grub",)),
    PartitionSpec(2, "efi", "5MiB", "45MiB", fs_type="fat32", flags=("boot", "esp")),
    PartitionSpec(3, "ext4", "45MiB", "100%", fs_type="ext4"),
)

BIOS_PARTITION_INDEX = 1
EFI_PARTITION_INDEX = 2
ROOT_PARTITION_INDEX = 3


@dataclass(frozen=True)
class PartitionResult:
    """Device paths produced by the GPT partitioning run."""

    disk: str
    bios_partition: str
    efi_partition: str
    root_partition: str
