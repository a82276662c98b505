"""Tests for the click entry point."""

from unittest.mock import patch

from click.testing import CliRunner

from dict_client import __version__
from dict_client.connection import DictConnectionError
from dict_client.main import cli
from dict_client.models import Database, Definition


class TestCli:
    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_single_word(self):
        with patch("dict_client.main.DictionaryConnection") as conn_cls:
            conn = conn_cls.return_value
            conn.get_definitions.return_value = [Definition("cat", "wn", ["feline"])]
            result = CliRunner().invoke(cli, ["--host", "localhost", "-d", "wn", "cat"])

        assert result.exit_code == 0
        conn.connect.assert_called_once_with("localhost", 2628, timeout=None)
        conn.get_definitions.assert_called_once_with("cat", Database("wn"))
        conn.close.assert_called_once()

    def test_env_port(self):
        with patch("dict_client.main.DictionaryConnection") as conn_cls:
            conn = conn_cls.return_value
            conn.get_definitions.return_value = []
            result = CliRunner().invoke(cli, ["cat"], env={"DICT_PORT": "12628"})

        assert result.exit_code == 0
        conn.connect.assert_called_once_with("dict.org", 12628, timeout=None)

    def test_connection_failure_exits(self):
        with patch("dict_client.main.DictionaryConnection") as conn_cls:
            conn_cls.return_value.connect.side_effect = DictConnectionError("refused")
            result = CliRunner().invoke(cli, ["cat"])

        assert result.exit_code == 1
        assert "Connection failed" in result.output

    def test_lookup_error_exits(self):
        with patch("dict_client.main.DictionaryConnection") as conn_cls:
            conn = conn_cls.return_value
            conn.get_definitions.side_effect = DictConnectionError("Server closed connection")
            result = CliRunner().invoke(cli, ["cat"])

        assert result.exit_code == 1
        conn.close.assert_called_once()

    def test_no_word_starts_repl(self):
        with patch("dict_client.main.DictionaryConnection") as conn_cls, \
                patch("dict_client.main.run_repl") as run_repl:
            conn_cls.return_value.server_banner = "dict.org dictd"
            result = CliRunner().invoke(cli, [])

        assert result.exit_code == 0
        run_repl.assert_called_once()
