"""Click CLI entry point for dict-client.

Handles argument parsing and connection setup, then either defines a single
word or hands off to the REPL.
"""

import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.text import Text

from . import __version__
from .commands import SessionState, define_word
from .connection import DictConnectionError, DictionaryConnection
from .models import Database, MatchingStrategy
from .protocol import DEFAULT_PORT
from .repl import run_repl

console = Console()


@click.command()
@click.argument("word", required=False)
@click.option(
    "--host",
    default="dict.org",
    show_default=True,
    envvar="DICT_HOST",
    help="DICT server host.",
)
@click.option(
    "--port",
    default=DEFAULT_PORT,
    show_default=True,
    type=int,
    envvar="DICT_PORT",
    help="DICT server port.",
)
@click.option(
    "--timeout",
    default=None,
    type=float,
    envvar="DICT_TIMEOUT",
    help="Socket timeout in seconds (default: wait indefinitely).",
)
@click.option(
    "--database",
    "-d",
    default="*",
    show_default=True,
    help="Database to search ('*' for all, '!' for first match).",
)
@click.option(
    "--strategy",
    "-s",
    default=".",
    show_default=True,
    help="Matching strategy for .match ('.' for the server default).",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Log protocol traffic to stderr.",
)
@click.version_option(version=__version__, prog_name="dict-client")
def cli(
    word: str | None,
    host: str,
    port: int,
    timeout: float | None,
    database: str,
    strategy: str,
    debug: bool,
) -> None:
    """Look words up on a DICT (RFC 2229) server.

    With WORD, prints its definitions and exits. Without it, starts an
    interactive session.
    """
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    client = DictionaryConnection()
    _connect(client, host, port, timeout)
    state = SessionState(database=Database(database), strategy=MatchingStrategy(strategy))

    if word:
        try:
            error = define_word(client, state, word)
        finally:
            client.close()
        if error:
            console.print(error)
            sys.exit(1)
        return

    _print_banner(client, host)

    run_repl(client, state)


def _connect(client: DictionaryConnection, host: str, port: int, timeout: float | None) -> None:
    """Connect to the server, exiting on failure."""
    try:
        client.connect(host, port, timeout=timeout)
    except DictConnectionError as exc:
        console.print(f"[red]Connection failed:[/red] {escape(str(exc))}", highlight=False)
        sys.exit(1)


def _print_banner(client: DictionaryConnection, host: str) -> None:
    """Print the welcome banner with server info."""
    console.print()
    console.print(f"[bold]dict-client[/bold] — connected to {host}", highlight=False)
    if client.server_banner:
        console.print(Text(client.server_banner, style="dim"))
    console.print("[dim]Type a word to define it, .help for commands, .quit to exit[/dim]")
    console.print()
