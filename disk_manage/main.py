import argparse
import os
import sys
from pathlib import Path

from disk_manage.config.settings import load_settings
from disk_manage.logging import LoggerFactory, setup_logging
from disk_manage.menu.actions import MenuActions
from disk_manage.menu.controller import MenuController
from disk_manage.menu.definitions import build_main_menu
from disk_manage.storage.exceptions import StorageError
from disk_manage.ui.launcher import NullLauncher, ToolLauncher
from disk_manage.ui.prompts import Prompter


BANNER = "==== Image Flashing & Disk Setup Utility ===="


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Image flashing & GPT disk setup utility")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable verbose debug output")
    parser.add_argument("--trace", action="store_true", help="Enable trace output (very verbose)")
    parser.add_argument("--log-dir", type=Path, default=None, help="Directory for log files")
    parser.add_argument(
        "--no-gui",
        action="store_true",
        help="Do not launch gparted/gnome-disks between steps",
    )
    return parser


def main(argv=None, prompter=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug, trace=args.trace, log_dir=args.log_dir)
    load_settings()
    log = LoggerFactory.for_system()

    prompter = prompter or Prompter()
    prompter.show(BANNER)

    if os.geteuid() != 0:
        print("ERROR: Run as root", file=sys.stderr)
        return 1

    launcher = NullLauncher(prompter) if args.no_gui else ToolLauncher(prompter)
    controller = MenuController(build_main_menu(MenuActions(prompter, launcher)), prompter)
    try:
        return controller.run()
    except StorageError as error:
        log.error(f"{type(error).__name__}: {error}")
        print(f"ERROR: {error}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        log.warning("Interrupted by operator")
        return 130


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
