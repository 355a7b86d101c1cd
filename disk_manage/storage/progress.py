"""Progress parsing and formatting for dd transfers."""

import re
from dataclasses import dataclass
from typing import Optional


_BYTES_PATTERN = re.compile(r"^(\d+)\s+bytes")
_RATE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*([kMGT]?B)/s")
_ELAPSED_PATTERN = re.compile(r"copied,\s*(\d+(?:\.\d+)?)\s*s")


@dataclass(frozen=True)
class TransferProgress:
    bytes_copied: int
    rate: Optional[str] = None
    elapsed_seconds: Optional[float] = None


def human_size(size_bytes):
    if size_bytes is None:
        return "0B"
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < 1024.0:
            return f"{size:.1f}{unit}"
        size /= 1024.0
    return f"{size:.1f}PB"


def parse_dd_progress(line: str) -> Optional[TransferProgress]:
    """Parse one ``dd status=progress`` line.

    dd prints e.g. ``104857600 bytes (105 MB, 100 MiB) copied, 2 s, 52.4 MB/s``.
    Lines that are not progress reports (``4+0 records in``) return None.
    """
    match = _BYTES_PATTERN.match(line.strip())
    if not match:
        return None
    rate_match = _RATE_PATTERN.search(line)
    elapsed_match = _ELAPSED_PATTERN.search(line)
    return TransferProgress(
        bytes_copied=int(match.group(1)),
        rate=f"{rate_match.group(1)} {rate_match.group(2)}/s" if rate_match else None,
        elapsed_seconds=float(elapsed_match.group(1)) if elapsed_match else None,
    )


def format_progress_line(progress: TransferProgress, total_bytes: Optional[int] = None) -> str:
    """Format a progress report for a single terminal line."""
    line = f"Wrote {human_size(progress.bytes_copied)}"
    if total_bytes:
        percent = min(100.0, (progress.bytes_copied / total_bytes) * 100)
        line = f"{line} ({percent:.1f}%)"
    if progress.rate:
        line = f"{line} at {progress.rate}"
    return line
