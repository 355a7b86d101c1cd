"""NTFS fix-ups after a Windows image is flashed onto a partition.

The image's filesystem is usually smaller than the partition it landed in,
and carries the serial number of the machine it was captured from. ntfsresize
grows the filesystem to fill the partition and ntfslabel assigns a new
serial. Each step is optional and best-effort.
"""

from disk_manage.domain.models import Outcome
from disk_manage.logging import LoggerFactory
from disk_manage.storage.commands import command_exists, run_best_effort, sync
from disk_manage.storage.mount import is_target_mounted, unmount_quietly


log = LoggerFactory.for_storage()


def fixup_ntfs_partition(partition: str) -> list[Outcome]:
    outcomes: list[Outcome] = []

    if is_target_mounted(partition):
        outcomes.append(unmount_quietly(partition))

    if command_exists("ntfsresize"):
        outcomes.append(run_best_effort(["ntfsresize", "-i", "-f", "-v", partition]))
        outcomes.append(run_best_effort(["ntfsresize", "--force", "--force", partition]))
    else:
        log.info("ntfsresize not found, skipping NTFS resize")

    if command_exists("ntfslabel"):
        outcomes.append(run_best_effort(["ntfslabel", "--new-half-serial", partition]))
    else:
        log.info("ntfslabel not found, skipping serial regeneration")

    outcomes.append(sync())
    return outcomes
