"""Writing disk images onto block devices and partitions.

Supported Images:
    .img / .iso / .raw   copied as-is with ``dd if=<image>``
    .xz                  decompressed with ``xzcat`` (or ``7z x -so``) and
                         piped into ``dd``

Every precondition is checked before anything touches the target: the image
is readable and of a known type, the target is a block device that is not
mounted, and a decompressor exists for compressed images. dd is always run
with ``bs=4M status=progress conv=fsync`` and an explicit ``sync`` follows.

Bytes on the target past the end of the image are left untouched.

Example:
    >>> from disk_manage.storage.flash import flash_image
    >>> flash_image("raspios.img.xz", "/dev/sdb")
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional

from disk_manage.domain.models import ImageKind, image_kind_for
from disk_manage.logging import LoggerFactory, ThrottledLogger, operation_context
from disk_manage.storage import devices
from disk_manage.storage.commands import command_exists, run_pipeline_with_progress, sync
from disk_manage.storage.exceptions import (
    DeviceBusyError,
    DeviceNotFoundError,
    FlashOperationError,
    ImageNotFoundError,
    NoDecompressorAvailableError,
    UnsupportedImageTypeError,
)
from disk_manage.storage.mount import is_target_mounted
from disk_manage.storage.progress import format_progress_line, parse_dd_progress


log = LoggerFactory.for_flash()

DD_BLOCK_SIZE = "4M"

DECOMPRESSORS: tuple[tuple[str, ...], ...] = (
    ("xzcat",),
    ("7z", "x", "-so"),
)


def image_kind(image: str | Path) -> ImageKind:
    """Raises UnsupportedImageTypeError for unknown extensions."""
    kind = image_kind_for(image)
    if kind is None:
        raise UnsupportedImageTypeError(str(image))
    return kind


def select_decompressor(image: str | Path) -> list[str]:
    """Return the decompression command for an .xz image.

    Raises:
        NoDecompressorAvailableError: If neither xzcat nor 7z is on PATH
    """
    for candidate in DECOMPRESSORS:
        if command_exists(candidate[0]):
            return [*candidate, str(image)]
    raise NoDecompressorAvailableError(
        str(image), tuple(candidate[0] for candidate in DECOMPRESSORS)
    )


def _dd_command(target: str, source: Optional[str] = None) -> list[str]:
    command = ["dd"]
    if source is not None:
        command.append(f"if={source}")
    command.extend(
        [
            f"of={target}",
            f"bs={DD_BLOCK_SIZE}",
            "status=progress",
            "conv=fsync",
        ]
    )
    return command


def build_flash_commands(image: str | Path, target: str) -> list[list[str]]:
    """Return the pipeline that writes ``image`` onto ``target``."""
    if image_kind(image) is ImageKind.XZ:
        return [select_decompressor(image), _dd_command(target)]
    return [_dd_command(target, source=str(image))]


def validate_flash(image: str | Path, target: str) -> None:
    """Check every flash precondition without touching the target.

    Raises:
        ImageNotFoundError: If the image is missing or unreadable
        UnsupportedImageTypeError: If the extension is not recognised
        DeviceNotFoundError: If the target is not a block device
        DeviceBusyError: If the target (by prefix) appears in the mount table
    """
    image_path = Path(image)
    if not image_path.is_file() or not os.access(image_path, os.R_OK):
        raise ImageNotFoundError(str(image))
    image_kind(image)
    if not devices.is_block_device(target):
        raise DeviceNotFoundError(target, "not a block device/partition")
    if is_target_mounted(target):
        raise DeviceBusyError(target, "appears mounted. Unmount and retry")


def flash_image(
    image: str | Path,
    target: str,
    *,
    progress_callback: Optional[Callable[[str], None]] = None,
) -> None:
    """Write ``image`` onto ``target`` byte for byte.

    Args:
        image: Path to a .img/.iso/.raw/.xz file
        target: Absolute block device or partition path
        progress_callback: Receives formatted progress lines from dd

    Raises:
        ImageError / DeviceError subclasses from :func:`validate_flash`
        NoDecompressorAvailableError: If an .xz image cannot be decompressed
        FlashOperationError: If the copy pipeline fails
    """
    validate_flash(image, target)
    commands = build_flash_commands(image, target)
    total_bytes = Path(image).stat().st_size if image_kind(image) is ImageKind.RAW else None
    throttled = ThrottledLogger(log.bind(tags=["flash", "progress"]), interval_seconds=5.0)

    def on_stderr(line: str) -> None:
        progress = parse_dd_progress(line)
        if progress is None:
            log.debug(f"dd: {line}")
            return
        message = format_progress_line(progress, total_bytes)
        throttled.info("dd", message)
        if progress_callback:
            progress_callback(message)

    with operation_context("flash", image=str(image), target=target):
        try:
            run_pipeline_with_progress(commands, progress_callback=on_stderr)
        except (RuntimeError, OSError) as error:
            raise FlashOperationError(str(error), image=str(image), target=target) from error
        sync()
    log.info("Flashing complete.")
