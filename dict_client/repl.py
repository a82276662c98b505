"""Interactive REPL for dictionary lookups.

Reads input via prompt_toolkit. A bare word is looked up in the current
database; lines starting with '.' are dot-commands.
"""

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import HTML
from rich.console import Console

from .commands import QUIT, SessionState, define_word, handle_dot_command
from .connection import DictionaryConnection
from .help import COMMAND_HELP
from .history import get_history

console = Console()


def run_repl(client: DictionaryConnection, state: SessionState | None = None) -> None:
    """Run the interactive REPL loop.

    Args:
        client: A connected DictionaryConnection. Closed when the loop ends.
        state: Initial database and strategy.
    """
    state = state or SessionState()
    session: PromptSession = PromptSession(history=get_history())
    completer = _dot_completer()

    try:
        while True:
            try:
                line = session.prompt(_prompt(state), completer=completer)
            except EOFError:
                # Ctrl-D: exit
                console.print("\nGoodbye")
                break
            except KeyboardInterrupt:
                # Ctrl-C: cancel current line
                continue

            result = dispatch_line(line, client=client, state=state)

            if result is QUIT:
                console.print("Goodbye")
                break
            if isinstance(result, str):
                console.print(result, highlight=False)

            if not client.is_connected:
                console.print("[red]Connection to server lost[/red]")
                break
    finally:
        client.close()


def dispatch_line(
    line: str,
    *,
    client: DictionaryConnection,
    state: SessionState,
) -> str | object | None:
    """Route one input line to a word lookup or a dot-command."""
    trimmed = line.strip()
    if not trimmed:
        return None
    if trimmed.startswith("."):
        return handle_dot_command(trimmed, client=client, state=state)
    return define_word(client, state, trimmed)


def _prompt(state: SessionState) -> HTML:
    """Show the current database in the prompt."""
    name = state.database.name.replace("&", "&amp;").replace("<", "&lt;")
    return HTML(f"<style fg='ansigray'>[{name}]</style> <b>&gt;</b> ")


class _DotAwareCompleter(Completer):
    """Completer that treats '.' as part of the word being completed.

    Matches the full text from the last whitespace boundary, preserving the
    leading dot for dot-commands.
    """

    def __init__(self, words: list[str]) -> None:
        self.words = [w.lower() for w in words]

    def get_completions(self, document: Document, complete_event):
        text = document.text_before_cursor
        # Only the first word of a line is a command.
        if " " in text or not text.startswith("."):
            return
        prefix = text.lower()

        for word in self.words:
            if word.startswith(prefix):
                yield Completion(word, start_position=-len(text))


def _dot_completer() -> _DotAwareCompleter:
    return _DotAwareCompleter([f".{cmd}" for cmd in COMMAND_HELP])
