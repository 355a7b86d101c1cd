"""Custom exceptions for storage operations.

Every exception here is fatal: it is raised before (or, for the ext4 format
step, instead of continuing) a destructive action and ends the session with
exit code 1. Conditions that only warrant a warning are reported through
:class:`disk_manage.domain.models.Outcome` instead.

Exception Hierarchy:
    StorageError (base)
        ├── DeviceError
        │   ├── DeviceNotFoundError
        │   └── DeviceBusyError
        ├── ImageError
        │   ├── ImageNotFoundError
        │   ├── UnsupportedImageTypeError
        │   └── NoDecompressorAvailableError
        ├── PartitionError
        │   └── PartitionTableError
        ├── FormatError
        │   └── FormatOperationError
        ├── MountError
        ├── FlashError
        │   └── FlashOperationError
        └── AbortedByUserError

Usage:
    from disk_manage.storage.exceptions import DeviceNotFoundError

    if not is_block_device(path):
        raise DeviceNotFoundError(path)
"""

from typing import Optional


class StorageError(Exception):
    """Base exception for all storage operations."""


class DeviceError(StorageError):
    """Base exception for device-related errors."""


class DeviceNotFoundError(DeviceError):
    """Device node is missing or is not a block device."""

    def __init__(self, device_name: str, reason: str = ""):
        self.device_name = device_name
        self.reason = reason
        msg = f"Block device '{device_name}' not found"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class DeviceBusyError(DeviceError):
    """Device is currently in use or mounted."""

    def __init__(self, device_name: str, reason: str = ""):
        self.device_name = device_name
        self.reason = reason
        msg = f"Device {device_name} is busy"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ImageError(StorageError):
    """Base exception for image file errors."""


class ImageNotFoundError(ImageError):
    """Image file is missing or unreadable."""

    def __init__(self, image_path: str):
        self.image_path = image_path
        super().__init__(f"Image '{image_path}' not found/readable")


class UnsupportedImageTypeError(ImageError):
    """Image extension is not one of the supported types."""

    def __init__(self, image_path: str):
        self.image_path = image_path
        super().__init__(f"Unsupported image type: {image_path}")


class NoDecompressorAvailableError(ImageError):
    """No tool is available to decompress the image."""

    def __init__(self, image_path: str, candidates: tuple = ("xzcat", "7z")):
        self.image_path = image_path
        self.candidates = candidates
        super().__init__(
            f"No {' or '.join(candidates)} available to decompress {image_path}"
        )


class PartitionError(StorageError):
    """Base exception for partition table operations."""


class PartitionTableError(PartitionError):
    """A parted step failed while writing the partition table."""

    def __init__(self, message: str, device: Optional[str] = None):
        self.device = device
        super().__init__(message)


class FormatError(StorageError):
    """Base exception for format operations."""


class FormatOperationError(FormatError):
    """Generic format operation failure."""

    def __init__(self, message: str, device: Optional[str] = None):
        self.device = device
        super().__init__(message)


class MountError(StorageError):
    """Mounting failed or the mountpoint is unusable."""

    def __init__(self, message: str, device: Optional[str] = None):
        self.device = device
        super().__init__(message)


class FlashError(StorageError):
    """Base exception for flash operations."""


class FlashOperationError(FlashError):
    """The copy pipeline exited with a non-zero status."""

    def __init__(self, message: str, image: Optional[str] = None, target: Optional[str] = None):
        self.image = image
        self.target = target
        super().__init__(message)


class AbortedByUserError(StorageError):
    """Operator declined a destructive action."""

    def __init__(self, target: str = ""):
        self.target = target
        super().__init__("Aborted by user.")
