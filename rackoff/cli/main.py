"""
RackOff command line.

Stands in for the menu-bar app: clean now, undo the last clean, and change
the same preferences the menu exposes.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..config import Settings, get_settings
from ..core.catalog import FileCatalog
from ..core.preferences import PreferencesStore
from ..core.types import (
    DestinationPolicy,
    FileCategory,
    OrganizationMode,
    Progress as EngineProgress,
    RunResult,
    Schedule,
    UndoResult,
)
from ..organization import EngineBusyError, VacuumEngine, describe_destination
from ..scheduler import DailyScheduler
from ..shared import format_bytes, setup_logging, summarize_result
from ..version import __version__

logger = logging.getLogger(__name__)
console = Console()

MODE_CHOICES = [mode.value for mode in OrganizationMode]
POLICY_CHOICES = [policy.value for policy in DestinationPolicy]
SCHEDULE_CHOICES = [schedule.value for schedule in Schedule]


class AppContext:
    """Engine plus the preferences it was built from."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.store = PreferencesStore(
            settings.preferences_file, settings.save_debounce_seconds
        )
        self.catalog = self.store.apply(FileCatalog())
        self.engine = VacuumEngine(
            catalog=self.catalog,
            mode=self.store.preferences.organization_mode,
            undo_log_path=settings.undo_log_file,
            yield_every=settings.yield_every,
        )

    @property
    def source_directory(self) -> Path:
        prefs = self.store.preferences
        return (prefs.source_directory or self.settings.default_source_directory).expanduser()

    @property
    def archive_directory(self) -> Path:
        prefs = self.store.preferences
        return (
            prefs.archive_directory or self.settings.default_archive_directory
        ).expanduser()

    def configure_engine(self) -> Optional[str]:
        return self.engine.configure(self.source_directory, self.archive_directory)

    def category(self, name: str) -> FileCategory:
        try:
            return self.catalog.get(name)
        except KeyError:
            names = ", ".join(category.name for category in self.catalog)
            console.print(f"[red]✗ Unknown category '{name}' (choose from {names})[/red]")
            sys.exit(1)

    def persist(self, debounced: bool = False) -> None:
        self.store.capture(
            self.catalog, mode=self.engine.mode, last_run=self.engine.last_run
        )
        if debounced:
            self.store.save_debounced()
        else:
            self.store.save()


pass_app = click.make_pass_decorator(AppContext)


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, version: bool, verbose: bool) -> None:
    """
    RackOff - desktop cleaning that gets it.

    Moves screenshots, documents, media and archives off your desktop into
    dated or per-type archive folders. The last clean can always be undone.
    """
    if version:
        console.print(f"RackOff version {__version__}")
        ctx.exit(0)

    settings = get_settings()
    setup_logging(verbose=verbose, level=settings.log_level)
    ctx.obj = AppContext(settings)

    if ctx.invoked_subcommand is None:
        ctx.invoke(status)


@cli.command()
@click.option("--source", type=click.Path(file_okay=False), help="Folder to clean")
@click.option("--archive", type=click.Path(file_okay=False), help="Archive folder")
@click.option("--mode", type=click.Choice(MODE_CHOICES), help="Organization mode")
@pass_app
def clean(app: AppContext, source: Optional[str], archive: Optional[str], mode: Optional[str]) -> None:
    """Clean the source folder now."""
    prefs = app.store.preferences
    if source:
        prefs.source_directory = Path(source).expanduser()
    if archive:
        prefs.archive_directory = Path(archive).expanduser()
    if mode:
        app.engine.mode = OrganizationMode(mode)

    error = app.configure_engine()

    console.print(f"[cyan]Cleaning {app.source_directory} → {app.archive_directory}[/cyan]")
    try:
        result = _run_with_progress(app.engine)
    except EngineBusyError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    app.persist()
    _display_result(result)
    if error:
        sys.exit(1)


@cli.command()
@pass_app
def undo(app: AppContext) -> None:
    """Put back every file moved by the last clean."""
    if not app.engine.can_undo:
        console.print("[yellow]Nothing to undo[/yellow]")
        return

    try:
        result = asyncio.run(app.engine.undo())
    except EngineBusyError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    _display_undo(result)


@cli.command()
@pass_app
def status(app: AppContext) -> None:
    """Show folders, mode, schedule and categories."""
    prefs = app.store.preferences
    engine = app.engine

    console.print("\n[cyan]RackOff Configuration:[/cyan]")
    console.print(f"  Source: {app.source_directory}")
    console.print(f"  Archive: {app.archive_directory}")
    console.print(f"  Mode: {engine.mode.value}")
    schedule_text = prefs.schedule.value
    if prefs.schedule == Schedule.DAILY:
        schedule_text += f" at {prefs.daily_hour:02d}:00"
    console.print(f"  Schedule: {schedule_text}")
    last_run = f"{prefs.last_run:%Y-%m-%d %H:%M}" if prefs.last_run else "never"
    console.print(f"  Last clean: {last_run}")

    table = Table(title="Categories")
    table.add_column("Category", style="cyan")
    table.add_column("Icon", style="dim")
    table.add_column("Enabled", justify="center")
    table.add_column("Destination", style="green")
    table.add_column("Extensions", style="dim")

    for category in app.catalog:
        table.add_row(
            category.name,
            category.icon,
            "✓" if category.enabled else "",
            describe_destination(category, engine.mode),
            " ".join(category.extensions),
        )
    console.print(table)

    if engine.can_undo:
        console.print(
            f"\n[dim]Last clean moved {len(engine.undo_records)} files; "
            f"run 'rackoff undo' to put them back[/dim]"
        )


@cli.command()
@click.argument("name")
@pass_app
def enable(app: AppContext, name: str) -> None:
    """Turn a category on."""
    category = app.category(name)
    app.catalog.set_enabled(category.name, True)
    app.persist()
    console.print(f"[green]✓ {category.name} enabled[/green]")


@cli.command()
@click.argument("name")
@pass_app
def disable(app: AppContext, name: str) -> None:
    """Turn a category off."""
    category = app.category(name)
    app.catalog.set_enabled(category.name, False)
    app.persist()
    console.print(f"[green]✓ {category.name} disabled[/green]")


@cli.command()
@click.argument("name")
@click.argument("policy", type=click.Choice(POLICY_CHOICES))
@click.option("--path", "custom_path", type=click.Path(file_okay=False), help="Folder for the custom policy")
@pass_app
def destination(app: AppContext, name: str, policy: str, custom_path: Optional[str]) -> None:
    """Choose where a category goes in smart_clean mode."""
    category = app.category(name)
    chosen = DestinationPolicy(policy)
    if custom_path and chosen != DestinationPolicy.CUSTOM:
        console.print("[red]✗ --path only applies to the custom policy[/red]")
        sys.exit(1)

    app.catalog.set_destination(
        category.name, chosen, Path(custom_path) if custom_path else None
    )
    app.persist()
    console.print(
        f"[green]✓ {category.name} {describe_destination(category, OrganizationMode.SMART_CLEAN)}[/green]"
    )
    if app.engine.mode != OrganizationMode.SMART_CLEAN:
        console.print("[dim]Destinations are only used in smart_clean mode[/dim]")


@cli.command()
@click.argument("name")
@click.argument("extensions", nargs=-1, required=True)
@pass_app
def extensions(app: AppContext, name: str, extensions: List[str]) -> None:
    """Replace the extensions a category matches."""
    category = app.category(name)
    try:
        app.catalog.set_extensions(category.name, extensions)
    except ValueError as e:
        console.print(f"[red]✗ Invalid extensions: {e}[/red]")
        sys.exit(1)
    app.persist()
    console.print(f"[green]✓ {category.name}: {' '.join(category.extensions)}[/green]")


@cli.command()
@click.argument("mode", type=click.Choice(MODE_CHOICES))
@pass_app
def mode(app: AppContext, mode: str) -> None:
    """Set the organization mode."""
    app.engine.mode = OrganizationMode(mode)
    app.persist()
    console.print(f"[green]✓ Mode set to {mode}[/green]")


@cli.command()
@click.option("--source", type=click.Path(file_okay=False), help="Folder to clean")
@click.option("--archive", type=click.Path(file_okay=False), help="Archive folder")
@pass_app
def folders(app: AppContext, source: Optional[str], archive: Optional[str]) -> None:
    """Show or change the source and archive folders."""
    prefs = app.store.preferences
    if source:
        prefs.source_directory = Path(source).expanduser()
    if archive:
        prefs.archive_directory = Path(archive).expanduser()

    if source or archive:
        error = app.configure_engine()
        if error:
            console.print(f"[red]✗ {error}[/red]")
            sys.exit(1)
        app.persist()

    console.print(f"  Source: {app.source_directory}")
    console.print(f"  Archive: {app.archive_directory}")


@cli.command()
@click.argument("when", type=click.Choice(SCHEDULE_CHOICES))
@click.option("--hour", type=click.IntRange(0, 23), help="Hour of the daily clean")
@pass_app
def schedule(app: AppContext, when: str, hour: Optional[int]) -> None:
    """Choose when cleans run automatically."""
    prefs = app.store.preferences
    prefs.schedule = Schedule(when)
    if hour is not None:
        prefs.daily_hour = hour
    app.persist()
    message = f"Schedule set to {when}"
    if prefs.schedule == Schedule.DAILY:
        message += f" at {prefs.daily_hour:02d}:00"
    console.print(f"[green]✓ {message}[/green]")


@cli.command()
@pass_app
def daemon(app: AppContext) -> None:
    """Run the configured schedule in the foreground."""
    prefs = app.store.preferences
    if prefs.schedule == Schedule.MANUAL:
        console.print("[yellow]Schedule is manual; nothing to run[/yellow]")
        return

    error = app.configure_engine()
    if error:
        console.print(f"[red]✗ {error}[/red]")
        sys.exit(1)

    def scheduled_clean() -> None:
        result = asyncio.run(app.engine.run())
        app.persist(debounced=True)
        console.print(summarize_result(result))

    if prefs.schedule == Schedule.ON_LAUNCH:
        scheduled_clean()
        app.store.flush()
        return

    scheduler = DailyScheduler(scheduled_clean, hour=prefs.daily_hour)
    scheduler.start()
    console.print(
        f"[cyan]Next clean at {scheduler.next_run():%Y-%m-%d %H:%M}; "
        f"press Ctrl-C to stop[/cyan]"
    )
    try:
        scheduler.wait()
    except KeyboardInterrupt:
        console.print("\n[cyan]Stopped[/cyan]")
    finally:
        scheduler.stop()
        app.store.flush()


def _run_with_progress(engine: VacuumEngine) -> RunResult:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total} files"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Cleaning...", total=None)

        def on_progress(snapshot: EngineProgress) -> None:
            if snapshot.total:
                progress.update(task, completed=snapshot.current, total=snapshot.total)

        unsubscribe = engine.subscribe(on_progress)
        try:
            return asyncio.run(engine.run())
        finally:
            unsubscribe()


def _display_result(result: RunResult) -> None:
    """Display clean result."""
    colour = "yellow" if result.errors else "green"
    console.print(f"\n[{colour}]✓ {summarize_result(result)}[/{colour}]\n")

    table = Table(title="Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Moved", str(result.moved_count))
    table.add_row("Size", format_bytes(result.total_bytes))
    table.add_row("Errors", str(len(result.errors)))
    console.print(table)

    _display_errors(result.errors)


def _display_undo(result: UndoResult) -> None:
    """Display undo result."""
    console.print(f"\n[green]✓ Restored {result.restored_count} files[/green]")
    _display_errors(result.errors)


def _display_errors(errors: List[str]) -> None:
    if not errors:
        return
    console.print("\n[red]Errors:[/red]")
    for error in errors[:10]:  # Show first 10
        console.print(f"  [red]• {error}[/red]")
    if len(errors) > 10:
        console.print(f"  [dim]... and {len(errors) - 10} more[/dim]")


if __name__ == "__main__":
    cli()
