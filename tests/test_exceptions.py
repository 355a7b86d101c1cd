"""Tests for storage/exceptions.py."""

import pytest

from disk_manage.storage.exceptions import (
    AbortedByUserError,
    DeviceBusyError,
    DeviceError,
    DeviceNotFoundError,
    FlashError,
    FlashOperationError,
    FormatError,
    FormatOperationError,
    ImageError,
    ImageNotFoundError,
    MountError,
    NoDecompressorAvailableError,
    PartitionError,
    PartitionTableError,
    StorageError,
    UnsupportedImageTypeError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error,parent",
        [
            (DeviceNotFoundError("/dev/sdz"), DeviceError),
            (DeviceBusyError("/dev/sdb"), DeviceError),
            (ImageNotFoundError("os.img"), ImageError),
            (UnsupportedImageTypeError("os.zip"), ImageError),
            (NoDecompressorAvailableError("os.img.xz"), ImageError),
            (PartitionTableError("parted failed"), PartitionError),
            (FormatOperationError("mkfs failed"), FormatError),
            (FlashOperationError("dd failed"), FlashError),
            (MountError("mount failed"), StorageError),
            (AbortedByUserError("/dev/sdb"), StorageError),
        ],
    )
    def test_subclass_of(self, error, parent):
        assert isinstance(error, parent)
        assert isinstance(error, StorageError)


class TestMessages:
    def test_device_not_found(self):
        error = DeviceNotFoundError("/dev/sdz")
        assert str(error) == "Block device '/dev/sdz' not found"
        assert error.device_name == "/dev/sdz"

    def test_device_not_found_with_reason(self):
        error = DeviceNotFoundError("/dev/sdb2", "EFI partition does not exist")
        assert str(error) == "Block device '/dev/sdb2' not found: EFI partition does not exist"

    def test_device_busy(self):
        error = DeviceBusyError("/dev/sdb", "appears mounted. Unmount and retry")
        assert str(error) == "Device /dev/sdb is busy: appears mounted. Unmount and retry"

    def test_image_not_found(self):
        assert str(ImageNotFoundError("os.img")) == "Image 'os.img' not found/readable"

    def test_no_decompressor(self):
        error = NoDecompressorAvailableError("os.img.xz")
        assert str(error) == "No xzcat or 7z available to decompress os.img.xz"
        assert error.candidates == ("xzcat", "7z")

    def test_aborted(self):
        error = AbortedByUserError("/dev/sdb")
        assert str(error) == "Aborted by user."
        assert error.target == "/dev/sdb"

    def test_flash_operation_keeps_context(self):
        error = FlashOperationError("dd exited with 1", image="os.img", target="/dev/sdb")
        assert (error.image, error.target) == ("os.img", "/dev/sdb")

    def test_partition_table_keeps_device(self):
        assert PartitionTableError("failed", "/dev/sdb").device == "/dev/sdb"
