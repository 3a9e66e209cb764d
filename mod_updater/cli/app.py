"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import json
import logging
import os
import time
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from mod_updater import __version__
from mod_updater.core.reconciler import Reconciler, assess_entries
from mod_updater.exceptions import ModUpdaterError
from mod_updater.manifest import ManifestFetcher, parse_manifest
from mod_updater.models.config import UpdaterConfig
from mod_updater.models.entry import ManifestEntry
from mod_updater.models.outcome import ReconcileStats
from mod_updater.storage.config_manager import ConfigManager
from mod_updater.transfer.downloader import close_connection_pool
from mod_updater.utils.event_log import EventLogger

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_manifest_table,
    print_plan_table,
    print_summary_panel,
)
from .progress_manager import ProgressManager

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("mod_updater")

app = typer.Typer(
    name="mod-updater",
    help=(
        "Keep a directory of mods, shaders and resource packs in sync with a"
        " manifest. Use 'mod-updater <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if override := os.getenv("MOD_UPDATER_CONFIG_DIR"):
        return Path(override).expanduser()
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "mod-updater"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _mode_option(server: bool | None) -> dict[str, Any]:
    if server is None:
        return {}
    return {"mode": "server" if server else "client"}


def _load_config(cli_options: dict[str, Any]) -> UpdaterConfig:
    """Loads settings, failing with exit code 1 on configuration errors."""
    options = {key: value for key, value in cli_options.items() if value is not None}
    try:
        return ConfigManager(CONFIG_FILE).load_config(options)
    except ModUpdaterError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e


def _require_location(config: UpdaterConfig, needs_root: bool = True) -> None:
    if not config.manifest_location:
        raise typer.BadParameter(
            "No manifest given and none configured.", param_hint="MANIFEST"
        )
    if needs_root and not config.root:
        raise typer.BadParameter(
            "No managed root given and none configured.", param_hint="ROOT"
        )


async def _load_entries(config: UpdaterConfig) -> list[ManifestEntry]:
    data = await ManifestFetcher().fetch(config.manifest_location)
    return parse_manifest(data, strict=config.strict_manifest)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v lists every entry, -vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Minecraft mod updater CLI"""
    if version:
        console.print(f"[bold]mod-updater[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    ctx.obj = {"verbose": verbose}
    log_level = "DEBUG" if verbose >= 2 else "INFO"
    logging.getLogger("mod_updater").setLevel(log_level)

    if show_config:
        config_data = ConfigManager(CONFIG_FILE).get_config_as_dict()
        print_config(CONFIG_FILE, config_data)
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    manifest: str | None = typer.Option(
        None, "--manifest", "-m", help="Default manifest URL or path."
    ),
    root: Path | None = typer.Option(  # noqa: B008
        None, "--root", "-r", help="Default managed root directory."
    ),
    server: bool = typer.Option(
        False, "--server/--client", help="Default to server mode."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration without asking."
    ),
):
    """Write a configuration file with default settings."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings: dict[str, Any] = {"mode": "server" if server else "client"}
    if manifest:
        settings["manifest_location"] = manifest
    if root:
        settings["root"] = str(root)

    try:
        ConfigManager(CONFIG_FILE).save_new_config(settings)
    except ModUpdaterError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")


@app.command(name="sync")
def sync_command(
    ctx: typer.Context,
    manifest: str | None = typer.Argument(
        None, help="Manifest URL or local path.", metavar="MANIFEST"
    ),
    root: Path | None = typer.Argument(  # noqa: B008
        None, help="Managed root directory (e.g. your .minecraft folder).", metavar="ROOT"
    ),
    server: bool | None = typer.Option(
        None,
        "--server/--client",
        help="Reconcile for a dedicated server instead of a client (default client).",
    ),
    strict: bool | None = typer.Option(
        None,
        "--strict/--lenient",
        help="Abort if any manifest entry is invalid instead of skipping it.",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Report what would change without touching any file."
    ),
):
    """Download, replace and delete files until ROOT matches MANIFEST."""
    config = _load_config(
        {
            "manifest_location": manifest,
            "root": str(root) if root else None,
            "strict_manifest": strict,
            "dry_run": dry_run,
            **_mode_option(server),
        }
    )
    _require_location(config)
    verbose = (ctx.obj or {}).get("verbose", 0)

    async def _sync_async() -> ReconcileStats:
        entries = await _load_entries(config)
        log.info(
            f"[bold cyan]Reconciling {len(entries)} entries in "
            f"'{config.root_path}' ({config.mode.value} mode)...[/bold cyan]"
        )
        async with ProgressManager(console=console, dry_run=config.dry_run) as pm:
            with EventLogger(config.log_path) as events:
                reconciler = Reconciler(
                    config,
                    progress_manager=pm,
                    event_logger=events,
                    report_entries=verbose >= 1,
                )
                try:
                    return await reconciler.run(entries)
                finally:
                    await close_connection_pool()

    start_time = time.monotonic()
    try:
        stats = asyncio.run(_sync_async())
    except ModUpdaterError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    print_summary_panel(stats, time.monotonic() - start_time)


@app.command(name="plan")
def plan_command(
    manifest: str | None = typer.Argument(
        None, help="Manifest URL or local path.", metavar="MANIFEST"
    ),
    root: Path | None = typer.Argument(  # noqa: B008
        None, help="Managed root directory.", metavar="ROOT"
    ),
    server: bool | None = typer.Option(
        None, "--server/--client", help="Plan for server mode (default client)."
    ),
    strict: bool | None = typer.Option(
        None, "--strict/--lenient", help="Abort if any manifest entry is invalid."
    ),
):
    """Show the state of every manifest entry and what sync would do."""
    config = _load_config(
        {
            "manifest_location": manifest,
            "root": str(root) if root else None,
            "strict_manifest": strict,
            **_mode_option(server),
        }
    )
    _require_location(config)

    try:
        entries = asyncio.run(_load_entries(config))
        assessments = assess_entries(entries, config.mode, config.root_path)
    except ModUpdaterError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    print_plan_table(assessments, config.root_path)


@app.command()
def validate(
    manifest: str | None = typer.Argument(
        None, help="Manifest URL or local path.", metavar="MANIFEST"
    ),
    strict: bool | None = typer.Option(
        None, "--strict/--lenient", help="Fail on the first invalid entry."
    ),
):
    """Fetch and parse a manifest, listing its valid entries."""
    config = _load_config({"manifest_location": manifest, "strict_manifest": strict})
    _require_location(config, needs_root=False)

    async def _fetch_and_parse() -> tuple[list[ManifestEntry], int]:
        data = await ManifestFetcher().fetch(config.manifest_location)
        entries = parse_manifest(data, strict=config.strict_manifest)
        return entries, len(json.loads(data)) - len(entries)

    try:
        entries, skipped = asyncio.run(_fetch_and_parse())
    except ModUpdaterError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    print_manifest_table(entries, skipped)
