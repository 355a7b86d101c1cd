"""Tests for menu/controller.py and menu/definitions.py."""

from unittest.mock import Mock

import pytest

from disk_manage.menu import MenuController, build_main_menu
from disk_manage.menu.definitions import menu_entry
from disk_manage.storage.exceptions import DeviceNotFoundError


@pytest.fixture
def actions():
    return Mock()


class TestMainMenuDefinition:
    def test_keys_in_order(self, actions):
        screen = build_main_menu(actions)
        assert [item.key for item in screen.items] == ["1", "2", "3", "4", "5", "q"]

    def test_actions_bound(self, actions):
        screen = build_main_menu(actions)
        assert screen.find("1").action is actions.flash_linux_image
        assert screen.find("3").action is actions.create_gpt_disk
        assert screen.find("5").action is actions.install_grub_only
        assert screen.find("q").quits

    def test_menu_entry_requires_action_or_quit(self):
        with pytest.raises(ValueError):
            menu_entry("x", "Nothing")
        with pytest.raises(ValueError):
            menu_entry("x", "Both", action=lambda: None, quits=True)


class TestMenuController:
    def test_render(self, actions, scripted_prompter):
        prompter = scripted_prompter()

        MenuController(build_main_menu(actions), prompter).render()

        output = prompter.output.getvalue()
        assert "App Need: grub-pc grub-efi-amd64-bin parted" in output
        assert "Main Menu:" in output
        assert "1) Flash Linux image (to entire device)" in output
        assert "q) Quit" in output

    def test_quit_returns_zero(self, actions, scripted_prompter):
        prompter = scripted_prompter("q")

        assert MenuController(build_main_menu(actions), prompter).run() == 0
        assert "Exiting." in prompter.output.getvalue()

    def test_uppercase_quit(self, actions, scripted_prompter):
        assert MenuController(build_main_menu(actions), scripted_prompter("Q")).run() == 0

    def test_invalid_choice_loops(self, actions, scripted_prompter):
        prompter = scripted_prompter("9", "", "q")

        assert MenuController(build_main_menu(actions), prompter).run() == 0
        assert prompter.output.getvalue().count("Invalid choice.") == 2
        assert prompter.output.getvalue().count("Main Menu:") == 3

    def test_action_then_back_to_menu(self, actions, scripted_prompter):
        prompter = scripted_prompter("4", "3", "q")

        MenuController(build_main_menu(actions), prompter).run()

        actions.show_disk_details.assert_called_once_with()
        actions.create_gpt_disk.assert_called_once_with()
        actions.flash_linux_image.assert_not_called()

    def test_fatal_error_propagates(self, actions, scripted_prompter):
        actions.flash_linux_image.side_effect = DeviceNotFoundError("/dev/sdz")

        with pytest.raises(DeviceNotFoundError):
            MenuController(build_main_menu(actions), scripted_prompter("1", "q")).run()
