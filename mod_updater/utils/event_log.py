"""
Structured event log for reconciliation runs.
Writes one JSON object per line next to the regular console log.
"""

import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any

from mod_updater.models.outcome import Assessment, EntryOutcome, ReconcileStats

log = logging.getLogger(__name__)


class EventLogger:
    """
    Appends machine-readable run events to ``<log_dir>/mod_updater_<timestamp>.jsonl``.

    A logger created without a directory is a no-op, so callers never need to
    check whether event logging is enabled.
    """

    def __init__(self, log_dir: Path | None = None):
        self.log_dir = log_dir
        self.path: Path | None = None
        self._file = None
        self._run_id = f"{int(time.time())}_{id(self)}"

        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.path = log_dir / f"mod_updater_{timestamp}.jsonl"
            self._file = open(self.path, "a", encoding="utf-8")  # noqa: SIM115

    @property
    def enabled(self) -> bool:
        return self._file is not None and not self._file.closed

    def _write(self, event: str, **context: Any) -> None:
        if not self.enabled:
            return
        entry = {
            "timestamp": datetime.now().isoformat(),
            "run_id": self._run_id,
            "event": event,
            **context,
        }
        try:
            self._file.write(json.dumps(entry, default=str) + "\n")
            self._file.flush()
        except OSError as e:
            log.warning(f"Event log write failed: {e}")

    def run_started(self, manifest: str, root: Path, mode: str, entries: int) -> None:
        self._write(
            "run_started", manifest=manifest, root=str(root), mode=mode, entries=entries
        )

    def entry_assessed(self, assessment: Assessment) -> None:
        self._write(
            "entry_assessed",
            name=assessment.entry.name,
            path=str(assessment.target_path),
            applicability=assessment.applicability.value,
            classification=assessment.classification.value,
            action=assessment.action.kind.value,
        )

    def entry_outcome(self, outcome: EntryOutcome) -> None:
        """Logs fetched, removed and failed entries under their own event names."""
        event = {
            "fetched": "entry_fetched",
            "removed": "entry_removed",
            "failed": "entry_failed",
        }.get(outcome.status.value)
        if event is None:
            return
        context: dict[str, Any] = {"name": outcome.name, "path": str(outcome.path)}
        if outcome.failure:
            context["failure"] = outcome.failure.value
            context["error"] = outcome.detail
        if outcome.size:
            context["size_bytes"] = outcome.size
        self._write(event, **context)

    def run_completed(self, stats: ReconcileStats) -> None:
        self._write(
            "run_completed",
            duration_s=round(stats.elapsed, 2),
            fetched=stats.fetched,
            removed=stats.removed,
            unchanged=stats.unchanged,
            failed=stats.failed,
            total_size_bytes=stats.total_size_downloaded,
        )

    def close(self) -> None:
        if self._file and not self._file.closed:
            self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
