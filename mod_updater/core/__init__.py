"""
Core reconciliation engine.

Each manifest entry flows through applicability resolution, classification
against the filesystem and action planning. The `Reconciler` then executes
the planned actions through `FetchAndReplace` or `Deleter`.
"""

from .applicability import is_applicable, resolve_applicability
from .classifier import classify, classify_state, observe
from .deleter import Deleter
from .fetcher import FetchAndReplace, TransactionalWrite
from .planner import detect_collisions, plan
from .reconciler import Reconciler, assess_entries

__all__ = [
    "Deleter",
    "FetchAndReplace",
    "Reconciler",
    "TransactionalWrite",
    "assess_entries",
    "classify",
    "classify_state",
    "detect_collisions",
    "is_applicable",
    "observe",
    "plan",
    "resolve_applicability",
]
