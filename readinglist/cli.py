"""
ReadingList Sync v1 - Command Line Interface

Sends new unread Safari Reading List items to Instapaper.

Usage:
    readinglist-sync
    readinglist-sync status
    readinglist-sync credentials
"""

import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import SyncConfig, load_config
from .errors import SyncError
from .settings_store import SettingsStore
from .sync import SyncOrchestrator, SyncResult
from .sync_filter import select
from .safari_parser import SafariReadingListParser

console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def report_error(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx: click.Context):
    """ReadingList Sync - Safari Reading List to Instapaper"""
    config = load_config()
    configure_logging(config.app.log_level)
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        ctx.invoke(sync)


@cli.command()
@click.pass_obj
def sync(config: SyncConfig):
    """
    Send unread Reading List items added since the last run.
    """
    result = SyncOrchestrator(config, console=console).run()
    print_summary(result)

    if not result.ok:
        report_error(result.error_message or result.error.value)
        sys.exit(1)


def print_summary(result: SyncResult) -> None:
    if not result.selected:
        return

    console.print()
    table = Table(title="Sync Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right", style="green")

    table.add_row("Selected", str(len(result.selected)))
    table.add_row("Added", str(len(result.published)))
    table.add_row("Failed", str(len(result.failed)))
    if result.skipped:
        table.add_row("Not attempted", str(len(result.skipped)))

    console.print(table)


@cli.command()
@click.pass_obj
def status(config: SyncConfig):
    """
    Show the last sync time and the items a sync would send.

    Nothing is sent to Instapaper.
    """
    store = SettingsStore(config.settings_path, console=console)
    parser = SafariReadingListParser(config.bookmarks_path, plutil_path=config.paths.plutil_path)

    try:
        settings = store.read()
        entries = parser.fetch_reading_list()
    except SyncError as e:
        report_error(str(e))
        sys.exit(1)

    stats = parser.get_stats(entries)
    pending = select(entries, settings.last_sync)

    console.print(f"\n[bold blue]Reading List Status[/bold blue]")
    console.print(f"Settings file: {escape(str(config.settings_path))}")
    console.print(f"Last sync: {settings.last_sync.isoformat()}")
    console.print(f"Credentials: {'configured' if settings.has_credentials else '[yellow]missing[/yellow]'}")
    console.print(f"Reading List: {stats['total']} items ({stats['unread']} unread)")
    console.print()

    if not pending:
        console.print("[yellow]No links to transfer.[/yellow]")
        return

    added_by_url = {entry.url: entry.date_added for entry in entries}
    table = Table(title="Pending")
    table.add_column("Added", style="cyan")
    table.add_column("URL", style="green")

    for url in pending:
        table.add_row(added_by_url[url].isoformat(), url)

    console.print(table)


@cli.command()
@click.option("--username", "-u", prompt="Instapaper username", help="Instapaper username or email")
@click.option(
    "--password", "-p",
    prompt="Instapaper password",
    hide_input=True,
    help="Instapaper password",
)
@click.pass_obj
def credentials(config: SyncConfig, username: str, password: str):
    """
    Store Instapaper credentials in the settings file.
    """
    store = SettingsStore(config.settings_path, console=console)
    try:
        store.save_credentials(username.strip(), password)
    except SyncError as e:
        report_error(str(e))
        sys.exit(1)

    console.print(f"[green]Credentials saved to {escape(str(config.settings_path))}[/green]")


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == "__main__":
    main()
