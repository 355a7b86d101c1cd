"""Interactive image flashing and GPT+GRUB disk setup utility."""

from disk_manage.__version__ import __version__

__all__ = ["__version__"]
