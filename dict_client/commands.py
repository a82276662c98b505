"""Dot-commands available in the REPL.

Handles commands like .db, .match, .databases, .help, and .quit. Setting the
current database or strategy stays on the client side; everything else is
sent to the server.
"""

from dataclasses import dataclass, field

from rich.markup import escape
from rich.text import Text

from .connection import DictionaryConnection, Result, attempt
from .display import (
    console,
    format_database_table,
    format_strategy_table,
    print_definitions,
    print_matches,
)
from .help import print_help_overview, print_help_topic
from .models import Database, MatchingStrategy

# Sentinel return value for the REPL loop
QUIT = object()


@dataclass(slots=True)
class SessionState:
    """Lookup settings the REPL carries between commands."""

    database: Database = field(default_factory=Database.all)
    strategy: MatchingStrategy = field(default_factory=MatchingStrategy.default)


def define_word(client: DictionaryConnection, state: SessionState, word: str) -> str | None:
    """Look a word up in the current database and print the definitions."""
    result = attempt(client.get_definitions, word, state.database)
    if not result.ok:
        return _error_text(result)
    print_definitions(result.value)
    return None


def handle_dot_command(
    line: str,
    *,
    client: DictionaryConnection,
    state: SessionState,
) -> str | object | None:
    """Handle a dot-command (line starting with '.').

    Args:
        line: The full input line (e.g., ".match cat").
        client: Connected session.
        state: Current database and strategy; updated in place.

    Returns:
        - A string to display to the user.
        - QUIT to signal the REPL should exit.
        - None when output was already printed.
    """
    stripped = line.strip()
    parts = stripped.split(None, 1)
    cmd = parts[0].lower() if parts else ""
    args = parts[1].strip() if len(parts) > 1 else ""

    # --- Client-side commands (no server round-trip) ---

    if cmd == ".help":
        if args:
            print_help_topic(args)
        else:
            print_help_overview()
        return None

    if cmd == ".quit":
        return QUIT

    if cmd == ".db":
        if not args:
            return f"Database: [cyan]{escape(state.database.name)}[/cyan]"
        state.database = Database(args)
        return f"Database set to [cyan]{escape(args)}[/cyan]"

    if cmd == ".strategy":
        if not args:
            return f"Strategy: [cyan]{escape(state.strategy.name)}[/cyan]"
        state.strategy = MatchingStrategy(args)
        return f"Strategy set to [cyan]{escape(args)}[/cyan]"

    # --- Commands sent to the server ---

    if cmd == ".match":
        if not args:
            return "[red]Usage: .match <pattern>[/red]"
        result = attempt(client.get_match_list, args, state.strategy, state.database)
        if not result.ok:
            return _error_text(result)
        print_matches(result.value)
        return None

    if cmd == ".databases":
        result = attempt(client.get_database_list)
        if not result.ok:
            return _error_text(result)
        if not result.value:
            return "[yellow]No databases present[/yellow]"
        console.print(format_database_table(result.value))
        return None

    if cmd == ".strategies":
        result = attempt(client.get_strategy_list)
        if not result.ok:
            return _error_text(result)
        if not result.value:
            return "[yellow]No strategies available[/yellow]"
        console.print(format_strategy_table(result.value))
        return None

    if cmd == ".info":
        database = Database(args) if args else state.database
        result = attempt(client.get_database_info, database)
        if not result.ok:
            return _error_text(result)
        if not result.value:
            return f"[yellow]No information for {escape(database.name)}[/yellow]"
        console.print(Text(result.value))
        return None

    if cmd == ".server":
        result = attempt(client.get_server_info)
        if not result.ok:
            return _error_text(result)
        console.print(Text(result.value))
        return None

    return f"[red]Unknown command: {escape(stripped)}[/red]"


def _error_text(result: Result) -> str:
    return f"[red]Error:[/red] {escape(str(result.error))}"
