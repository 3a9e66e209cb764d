"""
Data classes for planned actions, their results and session statistics.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path

from .entry import ManifestEntry
from .state import ActionKind, Applicability, Classification, FailureKind, OutcomeStatus


@dataclass(frozen=True)
class PlannedAction:
    """A concrete step the executor will take for one entry."""

    kind: ActionKind
    entry: ManifestEntry | None = None
    path: Path | None = None

    @classmethod
    def fetch_and_replace(cls, entry: ManifestEntry) -> "PlannedAction":
        return cls(ActionKind.FETCH_AND_REPLACE, entry=entry)

    @classmethod
    def delete(cls, path: Path) -> "PlannedAction":
        return cls(ActionKind.DELETE, path=path)

    @classmethod
    def none(cls) -> "PlannedAction":
        return cls(ActionKind.NONE)


@dataclass(frozen=True)
class Assessment:
    """Everything learned about one entry before anything is executed."""

    entry: ManifestEntry
    target_path: Path
    applicability: Applicability
    classification: Classification
    action: PlannedAction


@dataclass(frozen=True)
class EntryOutcome:
    """What happened to a single entry during execution."""

    name: str
    path: Path
    status: OutcomeStatus
    failure: FailureKind | None = None
    detail: str = ""
    size: int = 0

    @property
    def ok(self) -> bool:
        return self.status is not OutcomeStatus.FAILED


@dataclass
class ReconcileStats:
    """Tracks the results of one reconciliation run."""

    dry_run: bool = False
    fetched: int = 0
    removed: int = 0
    unchanged: int = 0
    planned: int = 0
    failed: int = 0
    total_size_downloaded: int = 0
    outcomes: list[EntryOutcome] = field(default_factory=list)
    _start_time: float = field(default_factory=time.monotonic, repr=False)

    def record(self, outcome: EntryOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.status is OutcomeStatus.FETCHED:
            self.fetched += 1
            self.total_size_downloaded += outcome.size
        elif outcome.status is OutcomeStatus.REMOVED:
            self.removed += 1
        elif outcome.status is OutcomeStatus.PLANNED:
            self.planned += 1
        elif outcome.status is OutcomeStatus.FAILED:
            self.failed += 1
        else:
            self.unchanged += 1

    @property
    def failures(self) -> list[EntryOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._start_time
