"""Terminal prompts for the interactive menu."""

from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO

from disk_manage.storage.exceptions import AbortedByUserError


class Prompter:
    """Reads operator answers and writes plain text to the terminal.

    ``input_func`` and ``output`` are injectable so tests can script a session.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output: Optional[TextIO] = None,
    ) -> None:
        self._input = input_func
        self._output = output

    @property
    def output(self) -> TextIO:
        return self._output or sys.stdout

    def show(self, *lines: str) -> None:
        for line in lines:
            print(line, file=self.output)

    def progress(self, line: str) -> None:
        self.output.write(f"\r{line}\033[K")
        self.output.flush()

    def ask(self, question: str, default: Optional[str] = None) -> str:
        answer = self._input(question).strip()
        if not answer and default is not None:
            return default
        return answer

    def confirm_destructive(self, target: str) -> None:
        """Require the operator to type ``y`` before erasing ``target``.

        Raises:
            AbortedByUserError: For any other answer
        """
        self.show("", f"Selected: {target}", "THIS WILL ERASE DATA. Type y to proceed:")
        answer = self._input("> ").strip()
        if answer != "y":
            raise AbortedByUserError(target)

    def wait_for_ack(self, message: str) -> None:
        self._input(message)
