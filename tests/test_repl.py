"""Tests for REPL prompt generation, completion, and line dispatch."""

from unittest.mock import MagicMock, patch

from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import HTML

from dict_client.commands import QUIT, SessionState
from dict_client.models import Database
from dict_client.repl import _dot_completer, _prompt, dispatch_line, run_repl


class TestPrompt:
    def test_default_prompt(self):
        prompt = _prompt(SessionState())
        assert isinstance(prompt, HTML)
        assert "[*]" in prompt.value

    def test_database_prompt(self):
        prompt = _prompt(SessionState(database=Database("wn")))
        assert "[wn]" in prompt.value

    def test_markup_escaped(self):
        prompt = _prompt(SessionState(database=Database("<b>")))
        assert "&lt;b>" in prompt.value


class TestDotCompleter:
    def _complete(self, text):
        completer = _dot_completer()
        doc = Document(text, len(text))
        return [c.text for c in completer.get_completions(doc, CompleteEvent())]

    def test_has_commands(self):
        words = _dot_completer().words
        assert ".match" in words
        assert ".help" in words
        assert ".quit" in words

    def test_prefix(self):
        assert self._complete(".ma") == [".match"]

    def test_shared_prefix(self):
        assert set(self._complete(".s")) == {".strategy", ".strategies", ".server"}

    def test_case_insensitive(self):
        assert self._complete(".QU") == [".quit"]

    def test_words_not_completed(self):
        assert self._complete("ca") == []

    def test_arguments_not_completed(self):
        assert self._complete(".help ma") == []


class TestDispatchLine:
    def test_empty_line(self):
        client = MagicMock()
        assert dispatch_line("   ", client=client, state=SessionState()) is None
        client.get_definitions.assert_not_called()

    def test_word_is_defined(self):
        client = MagicMock()
        state = SessionState()
        with patch("dict_client.repl.define_word", return_value=None) as define:
            dispatch_line("  cat ", client=client, state=state)
        define.assert_called_once_with(client, state, "cat")

    def test_dot_command(self):
        assert dispatch_line(".quit", client=MagicMock(), state=SessionState()) is QUIT


class TestRunRepl:
    def _run(self, inputs, client):
        session = MagicMock()
        session.prompt.side_effect = inputs
        with patch("dict_client.repl.PromptSession", return_value=session), \
                patch("dict_client.repl.get_history"), \
                patch("dict_client.repl.console"):
            run_repl(client)
        return session

    def test_quit_closes_client(self):
        client = MagicMock()
        client.is_connected = True
        self._run([".quit"], client)
        client.close.assert_called_once()

    def test_eof_exits(self):
        client = MagicMock()
        client.is_connected = True
        self._run([EOFError()], client)
        client.close.assert_called_once()

    def test_ctrl_c_continues(self):
        client = MagicMock()
        client.is_connected = True
        session = self._run([KeyboardInterrupt(), ".quit"], client)
        assert session.prompt.call_count == 2

    def test_lost_connection_ends_loop(self):
        client = MagicMock()
        client.is_connected = False
        session = self._run([".db wn", ".quit"], client)
        assert session.prompt.call_count == 1
        client.close.assert_called_once()
