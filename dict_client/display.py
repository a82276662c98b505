"""Output formatting for rich terminal display.

Renders definitions as panels, database and strategy listings as tables,
and match results as columns.
"""

from rich.columns import Columns
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import Database, Definition, MatchingStrategy

console = Console()


def format_definition(definition: Definition) -> Panel:
    """Render one definition block in a panel titled by its database."""
    title = (
        f"[bold]{escape(definition.word)}[/bold] "
        f"[dim]({escape(definition.database_name)})[/dim]"
    )
    return Panel(
        Text(definition.text),
        title=title,
        title_align="left",
        border_style="cyan",
    )


def format_database_table(databases: dict[str, Database]) -> Table:
    """Render a database listing sorted by name."""
    table = Table(title="Databases", show_header=True, title_style="bold")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")

    for name in sorted(databases):
        table.add_row(Text(name), Text(databases[name].description))
    return table


def format_strategy_table(strategies: list[MatchingStrategy]) -> Table:
    """Render a strategy listing in server order."""
    table = Table(title="Strategies", show_header=True, title_style="bold")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")

    for strategy in strategies:
        table.add_row(Text(strategy.name), Text(strategy.description))
    return table


def format_matches(matches: list[str]) -> Columns:
    return Columns([Text(match) for match in matches], equal=True, expand=False)


def print_definitions(definitions: list[Definition]) -> None:
    """Print every definition, or a notice when there are none."""
    if not definitions:
        console.print("[yellow]No definitions found[/yellow]")
        return
    for definition in definitions:
        console.print(format_definition(definition))


def print_matches(matches: list[str]) -> None:
    if not matches:
        console.print("[yellow]No matches found[/yellow]")
        return
    console.print(format_matches(matches))
