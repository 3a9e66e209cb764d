"""
Enumerations describing the per-run state of manifest entries.
"""

from enum import Enum


class Mode(str, Enum):
    """Which side of the game the managed directory belongs to."""

    SERVER = "server"
    CLIENT = "client"


class Applicability(str, Enum):
    """Whether an entry should currently exist on disk."""

    APPLICABLE = "applicable"
    NOT_APPLICABLE = "not-applicable"
    DEPRECATED = "deprecated"

    @property
    def should_exist(self) -> bool:
        return self is Applicability.APPLICABLE


class Classification(str, Enum):
    """Result of comparing an entry with the filesystem."""

    SATISFIED = "satisfied"
    MISSING = "missing"
    STALE = "stale"
    OBSOLETE_PRESENT = "obsolete-present"


class ActionKind(str, Enum):
    FETCH_AND_REPLACE = "fetch-and-replace"
    DELETE = "delete"
    NONE = "none"


class OutcomeStatus(str, Enum):
    FETCHED = "fetched"
    REMOVED = "removed"
    UNCHANGED = "unchanged"
    PLANNED = "planned"
    FAILED = "failed"


class FailureKind(str, Enum):
    """The step of an entry's processing that failed."""

    DIRECTORY = "directory"
    DOWNLOAD = "download"
    VERIFICATION = "verification"
    PROMOTE = "promote"
    DELETE = "delete"
