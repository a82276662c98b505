"""Tests for output formatting (display module)."""

from unittest.mock import patch

from rich.console import Console

from dict_client.display import (
    format_database_table,
    format_definition,
    format_matches,
    format_strategy_table,
    print_definitions,
    print_matches,
)
from dict_client.models import Database, Definition, MatchingStrategy


def _render(renderable) -> str:
    console = Console(width=100, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestFormatDefinition:
    def test_title_and_body(self):
        text = _render(format_definition(Definition("cat", "wn", ["feline", "mammal"])))
        assert "cat" in text
        assert "(wn)" in text
        assert "feline" in text
        assert "mammal" in text

    def test_brackets_rendered_literally(self):
        text = _render(format_definition(Definition("cat", "jargon", ["[from `catenate']"])))
        assert "[from `catenate']" in text


class TestTables:
    def test_database_table_sorted(self):
        databases = {
            "wn": Database("wn", "WordNet"),
            "gcide": Database("gcide", "GCIDE"),
        }
        table = format_database_table(databases)
        assert table.row_count == 2
        text = _render(table)
        assert text.index("gcide") < text.index("wn")

    def test_strategy_table_keeps_order(self):
        strategies = [
            MatchingStrategy("prefix", "Match prefixes"),
            MatchingStrategy("exact", "Match headwords exactly"),
        ]
        text = _render(format_strategy_table(strategies))
        assert text.index("prefix") < text.index("exact")

    def test_description_brackets_literal(self):
        text = _render(format_database_table({"x": Database("x", "[beta] dictionary")}))
        assert "[beta] dictionary" in text


class TestMatches:
    def test_columns(self):
        text = _render(format_matches(["cat", "catalog"]))
        assert "cat" in text
        assert "catalog" in text

    def test_print_matches_empty(self):
        with patch("dict_client.display.console") as console:
            print_matches([])
        assert "No matches" in console.print.call_args[0][0]


class TestPrintDefinitions:
    def test_empty(self):
        with patch("dict_client.display.console") as console:
            print_definitions([])
        assert "No definitions" in console.print.call_args[0][0]

    def test_one_panel_per_definition(self):
        definitions = [Definition("cat", "wn", ["a"]), Definition("cat", "gcide", ["b"])]
        with patch("dict_client.display.console") as console:
            print_definitions(definitions)
        assert console.print.call_count == 2
