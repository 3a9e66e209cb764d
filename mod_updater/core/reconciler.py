"""
The main orchestrator: assesses every manifest entry against the managed
root, then executes the planned actions one entry at a time.
"""

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from rich.markup import escape

from mod_updater.cli.progress_manager import ProgressManager
from mod_updater.models.config import UpdaterConfig
from mod_updater.models.entry import ManifestEntry
from mod_updater.models.outcome import Assessment, EntryOutcome, ReconcileStats
from mod_updater.models.state import ActionKind, Classification, Mode, OutcomeStatus
from mod_updater.transfer import Downloader
from mod_updater.utils.event_log import EventLogger
from mod_updater.utils.path import display_path

from .classifier import classify_state, observe
from .deleter import Deleter
from .fetcher import FetchAndReplace
from .planner import detect_collisions, plan

log = logging.getLogger(__name__)

_STATUS_LABELS = {
    Classification.SATISFIED: "[green]up to date[/green]",
    Classification.MISSING: "[yellow]missing[/yellow]",
    Classification.STALE: "[yellow]out of date[/yellow]",
    Classification.OBSOLETE_PRESENT: "[magenta]obsolete[/magenta]",
}


def assess_entries(
    entries: Sequence[ManifestEntry], mode: Mode, root: Path
) -> list[Assessment]:
    """
    Observes, classifies and plans every entry.

    Only reads the filesystem. Raises TargetCollisionError before looking at
    any file if two entries share a target path.
    """
    detect_collisions(entries, root)

    assessments = []
    for entry in entries:
        observation = observe(entry, mode, root)
        classification = classify_state(
            observation.applicability, observation.exists, observation.hash_matches
        )
        assessments.append(
            Assessment(
                entry=entry,
                target_path=observation.target_path,
                applicability=observation.applicability,
                classification=classification,
                action=plan(classification, entry, root),
            )
        )
    return assessments


class Reconciler:
    """Brings the managed root into agreement with a parsed manifest."""

    def __init__(
        self,
        config: UpdaterConfig,
        downloader: Downloader | None = None,
        progress_manager: ProgressManager | None = None,
        event_logger: EventLogger | None = None,
        report_entries: bool = False,
    ):
        self.config = config
        self.report_level = logging.INFO if report_entries else logging.DEBUG
        self.root = config.root_path
        self.mode = config.mode
        self.progress_manager = progress_manager
        self.event_logger = event_logger or EventLogger()
        self.stats = ReconcileStats(dry_run=config.dry_run)
        self.fetcher = FetchAndReplace(
            self.root,
            downloader
            or Downloader(
                chunk_size=config.chunk_size,
                connect_timeout=config.connect_timeout,
                read_timeout=config.read_timeout,
            ),
            progress_manager,
        )
        self.deleter = Deleter()

    async def run(self, entries: Sequence[ManifestEntry]) -> ReconcileStats:
        """Assesses and then executes a whole manifest."""
        self.event_logger.run_started(
            self.config.manifest_location, self.root, self.mode.value, len(entries)
        )
        assessments = await asyncio.to_thread(self.assess, entries)
        stats = await self.execute(assessments)
        self.event_logger.run_completed(stats)
        return stats

    def assess(self, entries: Sequence[ManifestEntry]) -> list[Assessment]:
        """Plans every entry against the managed root without changing it."""
        return assess_entries(entries, self.mode, self.root)

    async def execute(self, assessments: Sequence[Assessment]) -> ReconcileStats:
        """
        Executes planned actions sequentially. A failing entry is reported and
        never prevents the remaining entries from being processed.
        """
        if self.progress_manager:
            pending = sum(a.action.kind is not ActionKind.NONE for a in assessments)
            self.progress_manager.initialize_session(pending)

        for assessment in assessments:
            self._report_assessment(assessment)
            outcome = await self._execute_one(assessment)
            self.stats.record(outcome)
            self.event_logger.entry_outcome(outcome)
            self._report_outcome(assessment, outcome)
        return self.stats

    async def _execute_one(self, assessment: Assessment) -> EntryOutcome:
        action = assessment.action
        entry = assessment.entry

        if action.kind is ActionKind.NONE:
            return EntryOutcome(entry.name, assessment.target_path, OutcomeStatus.UNCHANGED)

        if self.config.dry_run:
            return EntryOutcome(
                entry.name,
                assessment.target_path,
                OutcomeStatus.PLANNED,
                detail=action.kind.value,
            )

        try:
            if action.kind is ActionKind.FETCH_AND_REPLACE:
                return await self.fetcher.apply(action.entry)
            return await asyncio.to_thread(self.deleter.remove, action.path, entry.name)
        finally:
            if self.progress_manager:
                self.progress_manager.advance_overall()

    def _report_assessment(self, assessment: Assessment) -> None:
        self.event_logger.entry_assessed(assessment)
        entry = assessment.entry
        version = f" {escape(entry.version)}" if entry.version else ""
        log.log(
            self.report_level,
            f"{escape(f'[{entry.name}]')}{version} -> "
            f"{escape(display_path(assessment.target_path, self.root))}: "
            f"{_STATUS_LABELS[assessment.classification]}"
        )

    def _report_outcome(self, assessment: Assessment, outcome: EntryOutcome) -> None:
        name = escape(outcome.name)
        relative = escape(display_path(outcome.path, self.root))
        if outcome.status is OutcomeStatus.FETCHED:
            verb = "Updated" if assessment.classification is Classification.STALE else "Installed"
            log.info(f"  [green]✓ {verb}:[/] {name} [dim]({relative})[/dim]")
        elif outcome.status is OutcomeStatus.REMOVED:
            log.info(f"  [magenta]✗ Removed:[/] {name} [dim]({relative})[/dim]")
        elif outcome.status is OutcomeStatus.PLANNED:
            log.info(
                f"  [cyan]→ (Dry Run)[/] Would {outcome.detail} {name} "
                f"[dim]({relative})[/dim]"
            )
        elif outcome.status is OutcomeStatus.FAILED:
            log.error(
                f"  [red]✗ Failed ({outcome.failure.value}):[/] {name} "
                f"- {escape(outcome.detail)}"
            )
        else:
            log.debug(f"  [dim]○ Unchanged: {name}[/dim]")
