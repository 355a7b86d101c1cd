from disk_manage.menu.controller import MenuController
from disk_manage.menu.definitions import build_main_menu
from disk_manage.menu.model import MenuItem, MenuScreen

__all__ = [
    "MenuController",
    "MenuItem",
    "MenuScreen",
    "build_main_menu",
]
