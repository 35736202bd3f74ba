# ABOUTME: Rich table rendering for the logging-status command
# ABOUTME: Turns get_logging_status() output into a two-column table

from typing import Any

from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table

LOG_FILE_LABELS = {
    "main": "📝 Main Log",
    "json": "📊 JSON Log",
    "errors": "🚨 Error Log",
}


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Build the logging configuration table from ``get_logging_status()``.

    Log files that the current mode does not write are left out.
    """
    table = Table(
        title="[bold green]🔍 Logging Configuration[/bold green]",
        box=ROUNDED,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
    )
    table.add_column("Field", style="blue")
    table.add_column("Value", style="white")

    table.add_row("🔧 Mode", status["mode"].title())
    table.add_row("📁 Log Directory", status["log_directory"] or "N/A (production mode)")
    table.add_row("🔇 Suppressed Libraries", ", ".join(status["third_party_suppressed"]))
    for key, label in LOG_FILE_LABELS.items():
        if status["log_files"][key]:
            table.add_row(label, status["log_files"][key])

    return table


def print_rich_table(console: Console, table: Table) -> None:
    console.print()
    console.print(table)
    console.print()
