"""Waiting for the kernel and udev to publish partition device nodes.

After a partition table rewrite the kernel re-reads the table and udev
creates the new ``/dev`` nodes asynchronously. mkfs and mount must not race
ahead of that, so callers either settle the whole disk or poll for a single
node with a bounded timeout.
"""

import time

from disk_manage.config.settings import get_float
from disk_manage.domain.models import Outcome, worst
from disk_manage.logging import LoggerFactory
from disk_manage.storage import devices
from disk_manage.storage.commands import run_best_effort, sync


log = LoggerFactory.for_storage()


def wait_for_partition(path: str, timeout_seconds: float = 10, poll_interval: float = 0.5) -> bool:
    """Poll until ``path`` is a block device or the timeout elapses.

    Returns:
        True once the node exists, False after ``timeout_seconds`` without it
    """
    deadline = time.monotonic() + timeout_seconds
    while True:
        if devices.is_block_device(path):
            log.debug(f"Partition node found: {path}")
            return True
        if time.monotonic() >= deadline:
            break
        time.sleep(poll_interval)
    log.warning(f"Partition device {path} did not appear after {timeout_seconds}s")
    return False


def settle(disk: str) -> Outcome:
    """sync, re-read the partition table and wait for udev, without the grace sleep."""
    return worst(
        [
            sync(),
            run_best_effort(["partprobe", disk]),
            run_best_effort(["udevadm", "settle"]),
        ]
    )


def rescan_and_settle(disk: str) -> Outcome:
    outcome = settle(disk)
    time.sleep(get_float("settle_grace_seconds"))
    return outcome
