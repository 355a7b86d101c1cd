"""Domain models for flashing and disk setup operations."""

from __future__ import annotations

from .models import (
    GPT_LAYOUT,
    ImageKind,
    Outcome,
    OutcomeStatus,
    PartitionNamingScheme,
    PartitionResult,
    PartitionSpec,
)


__all__ = [
    "GPT_LAYOUT",
    "ImageKind",
    "Outcome",
    "OutcomeStatus",
    "PartitionNamingScheme",
    "PartitionResult",
    "PartitionSpec",
]
