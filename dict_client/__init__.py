"""Client for DICT (RFC 2229) dictionary servers."""

__version__ = "0.1.0"

from .connection import (
    DictConnectionError,
    DictError,
    DictionaryConnection,
    DictProtocolError,
    Result,
    attempt,
    open_connection,
)
from .models import Database, Definition, MatchingStrategy
from .protocol import DEFAULT_PORT, Status, parse_status, split_atoms

__all__ = [
    "DEFAULT_PORT",
    "Database",
    "Definition",
    "DictConnectionError",
    "DictError",
    "DictProtocolError",
    "DictionaryConnection",
    "MatchingStrategy",
    "Result",
    "Status",
    "attempt",
    "open_connection",
    "parse_status",
    "split_atoms",
]
