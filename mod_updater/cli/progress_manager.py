"""
Manages a Rich progress display for the file transfers of a reconciliation run.
Entries are processed one at a time, so at most one transfer bar is active.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)


class ProgressManager:
    """Wraps a Rich Progress instance with an overall entry counter."""

    def __init__(self, console: Console, dry_run: bool = False):
        self.console = console
        self.dry_run = dry_run

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}", justify="left"),
            BarColumn(bar_width=30),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            "•",
            TimeRemainingColumn(),
            console=console,
            transient=True,
        )
        self._overall_task: TaskID | None = None

    async def __aenter__(self) -> "ProgressManager":
        if not self.dry_run:
            self.progress.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        if not self.dry_run:
            self.progress.stop()
        return False

    def initialize_session(self, total_entries: int) -> None:
        """Adds the overall bar counting processed entries."""
        if self.dry_run or total_entries <= 0:
            return
        self._overall_task = self.progress.add_task(
            "[bold blue]Entries", total=total_entries
        )

    def add_transfer_task(self, description: str) -> TaskID:
        return self.progress.add_task(f"[cyan]{description}", total=None)

    def update_task_total(self, task_id: TaskID, total: int | None) -> None:
        self.progress.update(task_id, total=total)

    def update_task_progress(self, task_id: TaskID, completed: int) -> None:
        self.progress.update(task_id, completed=completed)

    def remove_task(self, task_id: TaskID) -> None:
        self.progress.remove_task(task_id)

    def advance_overall(self) -> None:
        if self._overall_task is not None:
            self.progress.advance(self._overall_task)

