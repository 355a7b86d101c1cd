"""Main menu definition.

Edit this file to adjust menu labels or ordering.
"""

from __future__ import annotations

from disk_manage.menu.model import MenuItem, MenuScreen


REQUIRED_PACKAGES_LINE = "App Need: grub-pc grub-efi-amd64-bin parted"


def menu_entry(key: str, label: str, *, action=None, quits: bool = False) -> MenuItem:
    if (action is None) == (not quits):
        raise ValueError("Menu entries must define exactly one of action or quits.")
    return MenuItem(key=key, label=label, action=action, quits=quits)


def build_main_menu(actions) -> MenuScreen:
    return MenuScreen(
        screen_id="main",
        title="Main Menu:",
        status_line=REQUIRED_PACKAGES_LINE,
        items=[
            menu_entry("1", "Flash Linux image (to entire device)", action=actions.flash_linux_image),
            menu_entry("2", "Flash Windows image (to partition)", action=actions.flash_windows_image),
            menu_entry("3", "Create GPT disk (partitions, format, install GRUB)", action=actions.create_gpt_disk),
            menu_entry("4", "Show disk details", action=actions.show_disk_details),
            menu_entry("5", "Install GRUB only to existing EFI partition", action=actions.install_grub_only),
            menu_entry("q", "Quit", quits=True),
        ],
    )
