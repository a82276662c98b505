"""Help text for the REPL commands.

Provides an overview table and per-command detailed help with examples.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

COMMAND_HELP: dict[str, str] = {
    "db": (
        "Show or set the database used for lookups.\n"
        "  .db            — Show the current database\n"
        "  .db wn         — Look words up in WordNet only\n"
        "  .db *          — Search every database (default)\n"
        "  .db !          — Stop at the first database with a definition"
    ),
    "strategy": (
        "Show or set the strategy used by .match.\n"
        "  .strategy          — Show the current strategy\n"
        "  .strategy prefix   — Match words starting with the pattern\n"
        "  .strategy .        — Use the server default (default)"
    ),
    "match": (
        "List words matching a pattern.\n"
        "  .match cat     — Match 'cat' with the current strategy and database"
    ),
    "databases": "List the databases offered by the server.",
    "strategies": "List the matching strategies offered by the server.",
    "info": (
        "Show information about a database.\n"
        "  .info          — Describe the current database\n"
        "  .info wn       — Describe a specific database"
    ),
    "server": "Show the server's own description.",
    "help": (
        "Show help for commands.\n"
        "  .help          — Show overview of available commands\n"
        "  .help <topic>  — Show detailed help for a specific command"
    ),
    "quit": "Close the connection and exit.",
}


def print_help_overview() -> None:
    """Print the command overview table."""
    table = Table(title="Commands", show_header=True, title_style="bold")
    table.add_column("Command", style="cyan", no_wrap=True)
    table.add_column("Description")

    table.add_row("<word>", "Define a word in the current database.")
    for cmd, text in COMMAND_HELP.items():
        desc = text.split("\n")[0]  # First line only
        table.add_row(f".{cmd}", desc)

    console.print(table)


def print_help_topic(topic: str) -> None:
    """Print detailed help for a command (with or without leading dot)."""
    clean = topic.strip().lstrip(".")

    if clean in COMMAND_HELP:
        console.print(Panel(
            COMMAND_HELP[clean],
            title=f".{clean}",
            title_align="left",
            border_style="cyan",
        ))
        return

    console.print(f"[red]No help available for '{topic}'[/red]")
    console.print("[dim]Type .help for a list of available commands[/dim]")
