"""
Pytest configuration and shared fixtures for disk-manage tests.

No test here touches a real block device: every external command and the
block-device check are patched.
"""

import io
import subprocess
from typing import Callable, List
from unittest.mock import Mock

import pytest

from disk_manage.config import settings
from disk_manage.ui.prompts import Prompter


@pytest.fixture(autouse=True)
def default_settings():
    """Every test starts from the built-in defaults."""
    settings.settings_store.values = dict(settings.DEFAULT_SETTINGS)
    yield
    settings.settings_store.values = dict(settings.DEFAULT_SETTINGS)


# ==============================================================================
# Time
# ==============================================================================


class FakeClock:
    """Stands in for the ``time`` module: sleep() advances monotonic()."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock(mocker) -> FakeClock:
    clock = FakeClock()
    mocker.patch("disk_manage.storage.settle.time", clock)
    return clock


# ==============================================================================
# Devices
# ==============================================================================


@pytest.fixture
def block_devices(mocker) -> set:
    """Set of paths that ``is_block_device`` reports as present.

    Tests add or remove paths to simulate udev publishing nodes.
    """
    present: set = set()
    mocker.patch(
        "disk_manage.storage.devices.is_block_device",
        side_effect=lambda path: path in present,
    )
    return present


@pytest.fixture
def mounts_file(tmp_path):
    """Write a /proc/mounts style file and return its path."""

    def _write(*sources: str):
        path = tmp_path / "mounts"
        lines = [f"{source} /mnt/{i} ext4 rw,relatime 0 0" for i, source in enumerate(sources)]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


# ==============================================================================
# Subprocess
# ==============================================================================


def completed(command=None, returncode=0, stdout="", stderr="") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(command or [], returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def mock_subprocess_success(mocker) -> Mock:
    """subprocess.run always succeeds with empty output."""
    return mocker.patch(
        "disk_manage.storage.commands.subprocess.run",
        return_value=completed(),
    )


# ==============================================================================
# Operator I/O
# ==============================================================================


class ScriptedInput:
    """Feeds canned answers to Prompter and records the questions asked."""

    def __init__(self, answers: List[str]) -> None:
        self.answers = list(answers)
        self.questions: List[str] = []

    def __call__(self, question: str) -> str:
        self.questions.append(question)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def scripted_prompter() -> Callable[..., Prompter]:
    def _make(*answers: str) -> Prompter:
        prompter = Prompter(input_func=ScriptedInput(list(answers)), output=io.StringIO())
        return prompter

    return _make


@pytest.fixture
def mock_launcher() -> Mock:
    launcher = Mock()
    launcher.run_and_wait.return_value = True
    return launcher
