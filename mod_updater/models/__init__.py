"""
Data Models Layer.

This package contains the Pydantic models and data classes that define the
core data structures used throughout the application: manifest entries,
configuration, per-entry state and run statistics.
"""

from .config import UpdaterConfig
from .entry import ManifestEntry
from .outcome import Assessment, EntryOutcome, PlannedAction, ReconcileStats
from .state import (
    ActionKind,
    Applicability,
    Classification,
    FailureKind,
    Mode,
    OutcomeStatus,
)

__all__ = [
    "ActionKind",
    "Applicability",
    "Assessment",
    "Classification",
    "EntryOutcome",
    "FailureKind",
    "ManifestEntry",
    "Mode",
    "OutcomeStatus",
    "PlannedAction",
    "ReconcileStats",
    "UpdaterConfig",
]
