"""Command execution utilities for external disk tools.

Two tiers of invocation are provided:

* :func:`run_command` runs a command and, with ``check=True``, raises
  ``subprocess.CalledProcessError`` so the caller can turn it into a fatal
  :class:`~disk_manage.storage.exceptions.StorageError`.
* :func:`run_best_effort` never raises; it returns an
  :class:`~disk_manage.domain.models.Outcome` that is WARN when the tool is
  missing or exits non-zero.

:func:`run_pipeline_with_progress` chains commands stdout-to-stdin (e.g.
``xzcat image | dd of=...``) and streams the last stage's stderr line by line
so dd's ``status=progress`` output can be shown and logged.
"""

import shutil
import subprocess
from typing import Callable, Optional, Sequence

from disk_manage.domain.models import Outcome
from disk_manage.logging import LoggerFactory


log = LoggerFactory.for_storage()


def command_exists(name: str) -> bool:
    return shutil.which(name) is not None


def run_command(command, check=True, log_output=True, log_command=True):
    if log_command:
        log.debug(f"Running command: {' '.join(command)}")
    try:
        result = subprocess.run(command, check=check, text=True, capture_output=True)
    except subprocess.CalledProcessError as error:
        log.debug(f"Command failed: {' '.join(command)}")
        if error.stdout:
            log.debug(f"stdout: {error.stdout.strip()}")
        if error.stderr:
            log.debug(f"stderr: {error.stderr.strip()}")
        raise
    if result.stdout and (log_output or result.returncode != 0):
        log.debug(f"stdout: {result.stdout.strip()}")
    if result.stderr and (log_output or result.returncode != 0):
        log.debug(f"stderr: {result.stderr.strip()}")
    if log_command:
        log.debug(f"Command completed with return code {result.returncode}")
    return result


def _failure_reason(result) -> str:
    message = (result.stderr or "").strip() or (result.stdout or "").strip()
    if message:
        return message.splitlines()[-1]
    return f"exit code {result.returncode}"


def run_best_effort(command: Sequence[str], *, description: Optional[str] = None) -> Outcome:
    """Run a command whose failure should only produce a warning."""
    label = description or " ".join(command)
    try:
        result = run_command(list(command), check=False)
    except OSError as error:
        log.warning(f"{label} could not be started: {error}")
        return Outcome.warn(f"{label}: {error}")
    if result.returncode != 0:
        reason = _failure_reason(result)
        log.warning(f"{label} returned non-zero: {reason}")
        return Outcome.warn(f"{label}: {reason}")
    return Outcome.ok()


def sync() -> Outcome:
    return run_best_effort(["sync"])


def run_pipeline_with_progress(
    commands: Sequence[Sequence[str]],
    progress_callback: Optional[Callable[[str], None]] = None,
) -> subprocess.CompletedProcess:
    """Run commands as a shell-style pipeline and stream the last stage's stderr.

    Every stage but the last writes into the next stage's stdin. Earlier
    stages inherit stderr so their own diagnostics reach the terminal.

    Raises:
        RuntimeError: If any stage exits with a non-zero status
        OSError: If a stage cannot be started
    """
    if not commands:
        raise ValueError("Pipeline needs at least one command")

    processes: list[subprocess.Popen] = []
    previous_stdout = None
    try:
        for command in commands[:-1]:
            log.debug(f"Starting pipeline stage: {' '.join(command)}")
            process = subprocess.Popen(
                list(command), stdin=previous_stdout, stdout=subprocess.PIPE
            )
            if previous_stdout is not None:
                previous_stdout.close()
            previous_stdout = process.stdout
            processes.append(process)

        final_command = list(commands[-1])
        log.debug(f"Starting pipeline stage: {' '.join(final_command)}")
        final = subprocess.Popen(
            final_command,
            stdin=previous_stdout,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError:
        for process in processes:
            process.kill()
            process.wait()
        raise
    # Upstream stages must see SIGPIPE if the final stage exits early
    if previous_stdout is not None:
        previous_stdout.close()

    stderr_lines = []
    for line in final.stderr:
        line = line.rstrip("\n")
        if not line:
            continue
        stderr_lines.append(line)
        if progress_callback:
            progress_callback(line)
    final.wait()

    failures = []
    for process in processes:
        returncode = process.wait()
        if returncode != 0:
            failures.append(f"{process.args[0]} exited with {returncode}")
    if final.returncode != 0:
        tail = stderr_lines[-1] if stderr_lines else "no error message"
        failures.append(f"{final_command[0]} exited with {final.returncode}: {tail}")
    if failures:
        pipeline = " | ".join(" ".join(command) for command in commands)
        raise RuntimeError(f"Command failed ({pipeline}): {'; '.join(failures)}")

    return subprocess.CompletedProcess(
        final_command, final.returncode, stdout=None, stderr="\n".join(stderr_lines)
    )
