"""Launching external GUI disk tools (gparted, gnome-disks).

The tool runs detached; the menu blocks until the operator presses ENTER,
not until the tool exits, because gparted may fork or be left open.

The whole session already runs as root, so tools are started directly. The
tool's stderr stays attached to the terminal so a failure to open a window
(e.g. no X display after ``sudo`` reset the environment) is visible.
"""

from __future__ import annotations

import os
import subprocess
from typing import Mapping, Optional, Sequence

from disk_manage.logging import LoggerFactory
from disk_manage.ui.prompts import Prompter


log = LoggerFactory.for_menu()

DISPLAY_VARIABLES = ("DISPLAY", "WAYLAND_DISPLAY")


def has_display(environ: Optional[Mapping[str, str]] = None) -> bool:
    environ = os.environ if environ is None else environ
    return any(environ.get(name) for name in DISPLAY_VARIABLES)


class ToolLauncher:
    def __init__(self, prompter: Prompter) -> None:
        self.prompter = prompter

    def launch(self, command: Sequence[str]) -> bool:
        self.prompter.show(f"Launching: {' '.join(command)}")
        if not has_display():
            self.prompter.show(
                f"WARNING: DISPLAY is not set, {command[0]} may not open. "
                "Try: sudo --preserve-env=DISPLAY,XAUTHORITY disk-manage"
            )
            log.warning(f"No display available for {command[0]}")
        log.debug(f"Launching detached: {' '.join(command)}")
        try:
            subprocess.Popen(
                list(command),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as error:
            self.prompter.show(f"WARNING: could not launch {command[0]}: {error}")
            log.warning(f"Could not launch {command[0]}: {error}")
            return False
        return True

    def run_and_wait(self, command: Sequence[str]) -> bool:
        """Launch ``command`` and block until the operator acknowledges."""
        launched = self.launch(command)
        self.prompter.wait_for_ack(f"Press ENTER when finished with {command[0]}...")
        return launched


class NullLauncher(ToolLauncher):
    """Skips GUI tools entirely (``--no-gui``)."""

    def launch(self, command: Sequence[str]) -> bool:
        log.info(f"Skipping {command[0]} (GUI tools disabled)")
        return False

    def run_and_wait(self, command: Sequence[str]) -> bool:
        return self.launch(command)
