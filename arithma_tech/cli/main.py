# arithma_tech/cli/main.py

import itertools
import logging
import time
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from arithma_tech.core.config_manager import load_settings
from arithma_tech.core.exceptions import StoreError, ValidationError
from arithma_tech.core.history_store import HistoryStore
from arithma_tech.core.models import InputMode, OperationKind, OperationRecord
from arithma_tech.core.operation_controller import OperationController
from arithma_tech.core.progress import SimulatedProgress
from arithma_tech.utils.logger import setup_logging

# A single Console object manages all rich-formatted output.
console = Console()
logger = logging.getLogger(__name__)

# Long text payloads are cut down to this many characters in the history table.
TEXT_PREVIEW_LENGTH = 40


def _open_store(db: Path | None) -> HistoryStore:
    """Opens the history store given on the command line, or the one from settings.json."""
    db_path = db if db else load_settings().resolved_database_path()
    return HistoryStore(db_path)


# --- Main Command Group ---
@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.version_option(version="1.0", prog_name="Arithma-Tech")
def atc():
    """
    🗜️ Arithma-Tech - Arithmetic Encoding for text and images.

    Compress or decompress a piece of text or an image file, and review or
    prune the history of every operation. Use `[COMMAND] --help` for more
    information on a specific command.
    """
    setup_logging()


# --- Shared options for the two operation commands ---
def _operation_options(command):
    command = click.option('--interval-ms', type=click.IntRange(min=0), default=None,
                           help="Delay between progress ticks. Defaults to the value in settings.json.")(command)
    command = click.option('--db', type=click.Path(dir_okay=False, path_type=Path), default=None,
                           help="Path to the history database.")(command)
    command = click.option('-f', '--file', 'file_path', type=click.Path(dir_okay=False, path_type=Path),
                           default=None, help="An image file (PNG, JPG, JPEG, BMP, GIF).")(command)
    command = click.option('-t', '--text', default=None, help="Raw text to process.")(command)
    return command


def _run_operation(kind: OperationKind, text: str | None, file_path: Path | None, db: Path | None,
                   interval_ms: int | None):
    """Drives one operation through the controller from start to completion."""
    if (text is None) == (file_path is None):
        raise click.UsageError("Provide exactly one of --text or --file.")

    settings = load_settings()
    if interval_ms is None:
        interval_ms = (settings.compress_interval_ms if kind == OperationKind.COMPRESS
                       else settings.decompress_interval_ms)

    store = HistoryStore(db if db else settings.resolved_database_path())
    store_errors: list[StoreError] = []
    completion: list[str] = []
    controller = OperationController(
        store,
        progress=SimulatedProgress(settings.progress_step),
        on_store_error=store_errors.append,
        on_complete=lambda _kind, _mode, message: completion.append(message),
    )

    try:
        if text is not None:
            controller.switch_mode(InputMode.TEXT)
            controller.set_text(text)
        else:
            controller.switch_mode(InputMode.FILE)
            controller.select_file(str(file_path))
        controller.request(kind)
    except ValidationError as e:
        console.print(f"[bold red]❌ {e.title}: {e.message}[/bold red]")
        click.get_current_context().exit(1)

    console.print(f"[bold cyan]{controller.status_text}[/bold cyan]")
    if store_errors:
        console.print(f"[yellow]⚠️ Could not write history entry: {store_errors[0]}[/yellow]")

    with tqdm(total=100, desc=kind.value, unit="%") as bar:
        while not controller.is_idle():
            before = controller.progress.percent
            controller.tick()
            bar.update(controller.progress.percent - before)
            if interval_ms and not controller.is_idle():
                time.sleep(interval_ms / 1000)

    console.print(f"[bold green]{controller.status_text}[/bold green]")
    for message in completion:
        console.print(message)
    if controller.last_record is not None:
        console.print(f"Logged at [bright_magenta]{controller.last_record.timestamp}[/bright_magenta].")


@atc.command()
@_operation_options
def compress(text, file_path, db, interval_ms):
    """📦 Compresses a piece of text or an image file."""
    _run_operation(OperationKind.COMPRESS, text, file_path, db, interval_ms)


@atc.command()
@_operation_options
def decompress(text, file_path, db, interval_ms):
    """📂 Decompresses a piece of text or an image file."""
    _run_operation(OperationKind.DECOMPRESS, text, file_path, db, interval_ms)


# --- History Commands ---
@atc.group()
def history():
    """📜 Review and manage the operation history."""
    pass


def _preview(text: str) -> str:
    if len(text) <= TEXT_PREVIEW_LENGTH:
        return text
    return text[:TEXT_PREVIEW_LENGTH - 3] + "..."


@history.command(name="list")
@click.option('--db', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Path to the history database.")
@click.option('-n', '--limit', type=click.IntRange(min=1), default=None, help="Show only the newest N entries.")
def list_history(db: Path | None, limit: int | None):
    """Lists recorded operations, newest first."""
    try:
        records: list[OperationRecord] = list(itertools.islice(_open_store(db).list_all(), limit))
    except StoreError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        logger.error("CLI history list command failed.", exc_info=True)
        click.get_current_context().exit(1)

    if not records:
        console.print("[yellow]No operations recorded yet.[/yellow]")
        return

    table = Table(title="File History", style="cyan", title_style="bold magenta")
    table.add_column("Name", style="green", no_wrap=True)
    table.add_column("Operation", style="blue")
    table.add_column("Type")
    table.add_column("File Path")
    table.add_column("Text Content")
    table.add_column("Timestamp", style="yellow", no_wrap=True)
    for record in records:
        table.add_row(record.name, record.operation.value, record.data_type.value,
                      record.file_path, _preview(record.text_content), record.timestamp or "")
    console.print(table)


@history.command(name="delete")
@click.argument('timestamp')
@click.option('--db', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Path to the history database.")
@click.option('-y', '--yes', is_flag=True, help="Delete without asking for confirmation.")
def delete_history(timestamp: str, db: Path | None, yes: bool):
    """🗑️ Deletes every entry recorded at TIMESTAMP (e.g. '2024-05-01 12:30:05')."""
    if not yes:
        click.confirm(f"Delete all history entries recorded at {timestamp}?", abort=True)
    try:
        removed = _open_store(db).delete_by_timestamp(timestamp)
    except StoreError as e:
        console.print(f"[bold red]❌ Could not delete the entry. {e}[/bold red]")
        logger.error("CLI history delete command failed.", exc_info=True)
        click.get_current_context().exit(1)

    if removed == 0:
        console.print(f"[yellow]No entries found at {timestamp}. Nothing to delete.[/yellow]")
    elif removed == 1:
        console.print("[bold green]✅ Deleted 1 entry.[/bold green]")
    else:
        console.print(f"[bold green]✅ Deleted {removed} entries that shared the timestamp {timestamp}.[/bold green]")
