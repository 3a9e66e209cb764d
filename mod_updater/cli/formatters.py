"""
Functions for formatting and displaying data in the console using Rich.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from mod_updater.models.entry import ManifestEntry
from mod_updater.models.outcome import Assessment, ReconcileStats
from mod_updater.models.state import ActionKind, Classification
from mod_updater.utils.formatting import format_duration, format_flags, format_size
from mod_updater.utils.path import display_path

_CLASSIFICATION_STYLES = {
    Classification.SATISFIED: "green",
    Classification.MISSING: "yellow",
    Classification.STALE: "yellow",
    Classification.OBSOLETE_PRESENT: "magenta",
}

_ACTION_STYLES = {
    ActionKind.NONE: "dim",
    ActionKind.FETCH_AND_REPLACE: "cyan",
    ActionKind.DELETE: "red",
}


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ManifestFetchError": [
            "• Check the manifest URL or path for typos.",
            "• Make sure the manifest server is reachable from this machine.",
        ],
        "ManifestParseError": [
            "• The manifest must be a JSON array of entry objects.",
            "• Run `mod-updater validate <MANIFEST>` to see which entries are invalid.",
            "• Drop --strict to skip invalid entries instead of aborting.",
        ],
        "TargetCollisionError": [
            "• Two manifest entries install to the same file.",
            "• Give each entry a unique filename/destination pair.",
        ],
        "ConfigurationError": [
            "• Check the values in your configuration file.",
            "• Run `mod-updater init --force` to recreate it with defaults.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the stored configuration."""
    console = Console()
    content = "\n".join(f"{key} = {value}" for key, value in config_data.items())
    console.print(
        Panel(
            escape(content) or "[dim](defaults)[/dim]",
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_manifest_table(entries: Sequence[ManifestEntry], skipped: int = 0):
    """Lists the entries of a parsed manifest."""
    console = Console()
    table = Table(title=f"Manifest ({len(entries)} entries)", box=box.SIMPLE)
    table.add_column("Name", style="cyan")
    table.add_column("Version", style="dim")
    table.add_column("Target")
    table.add_column("Applies to")

    for entry in entries:
        target = "/".join(p for p in (entry.destination_subpath, entry.filename) if p)
        table.add_row(
            escape(entry.name),
            escape(entry.version),
            escape(target),
            format_flags(
                entry.applies_to_server, entry.applies_to_client, entry.deprecated
            ),
        )
    console.print(table)
    if skipped:
        console.print(f"[yellow]⚠ {skipped} invalid entries were skipped.[/yellow]")


def print_plan_table(assessments: Sequence[Assessment], root: Path):
    """Shows the classification and planned action of every entry."""
    console = Console()
    table = Table(box=box.SIMPLE, title="Reconciliation Plan")
    table.add_column("Name", style="cyan")
    table.add_column("Target")
    table.add_column("State")
    table.add_column("Action")

    for a in assessments:
        state_style = _CLASSIFICATION_STYLES[a.classification]
        action_style = _ACTION_STYLES[a.action.kind]
        table.add_row(
            escape(a.entry.name),
            escape(display_path(a.target_path, root)),
            f"[{state_style}]{a.classification.value}[/{state_style}]",
            f"[{action_style}]{a.action.kind.value}[/{action_style}]",
        )
    console.print(table)

    pending = sum(a.action.kind is not ActionKind.NONE for a in assessments)
    if pending:
        console.print(f"[bold]{pending}[/bold] of {len(assessments)} entries need changes.")
    else:
        console.print("[green]✓ Everything is up to date.[/green]")


def print_summary_panel(stats: ReconcileStats, duration_s: float):
    """Displays the final summary of a reconciliation run."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=16)
    stats_table.add_column(style="white", justify="left")

    if stats.dry_run:
        stats_table.add_row("→ Planned:", f"[bold cyan]{stats.planned}[/bold cyan]")
    else:
        stats_table.add_row("✓ Fetched:", f"[bold green]{stats.fetched}[/bold green]")
        stats_table.add_row("✗ Removed:", f"[magenta]{stats.removed}[/magenta]")
    stats_table.add_row("○ Unchanged:", f"[dim]{stats.unchanged}[/dim]")

    if stats.failed > 0:
        stats_table.add_row("⚠ Failed:", f"[bold red]{stats.failed}[/bold red]")

    stats_table.add_row("", "")
    stats_table.add_row(
        "Total Size:", f"[cyan]{format_size(stats.total_size_downloaded)}[/cyan]"
    )
    stats_table.add_row("Time Elapsed:", f"[blue]{format_duration(duration_s)}[/blue]")

    if stats.failures:
        stats_table.add_row("", "")
        for outcome in stats.failures:
            stats_table.add_row(
                f"[red]{outcome.failure.value}[/red]",
                f"{escape(outcome.name)} [dim]{escape(outcome.detail)}[/dim]",
            )

    if stats.dry_run:
        title = "🔍 [bold]Dry Run Summary[/bold]"
        border_color = "yellow"
    elif stats.failed:
        title = "⚠ [bold]Update Finished With Errors[/bold]"
        border_color = "red"
    else:
        title = "✓ [bold]Update Complete![/bold]"
        border_color = "green"

    console.print()
    console.print(
        Panel(
            stats_table,
            title=title,
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
