"""TCP client for a DICT server (RFC 2229).

One DictionaryConnection owns one socket. Every public operation holds an
I/O lock across the whole send-then-read sequence, so commands issued from
different threads never interleave on the wire.

Usage::

    with open_connection("dict.org") as conn:
        for definition in conn.get_definitions("word", Database.all()):
            print(definition.database_name, definition.text)
"""

import logging
import socket
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable

from .models import Database, Definition, MatchingStrategy
from .protocol import (
    BLOCK_TERMINATOR,
    CMD_DEFINE,
    CMD_MATCH,
    CMD_QUIT,
    CMD_SHOW_DB,
    CMD_SHOW_INFO,
    CMD_SHOW_SERVER,
    CMD_SHOW_STRAT,
    DATABASE_INFO_FOLLOWS,
    DEFAULT_PORT,
    DEFINITIONS_FOLLOW,
    EMPTY_LOOKUP_CODES,
    ENCODING,
    INVALID_DATABASE,
    MATCHES_FOLLOW,
    MAX_RECV,
    NO_DATABASES,
    NO_STRATEGIES,
    SERVER_INFO_FOLLOWS,
    Status,
    is_list_terminator,
    parse_status,
    quote_atom,
    split_atoms,
)


class DictError(Exception):
    """Base class for DICT client failures."""


class DictConnectionError(DictError):
    """Raised when the connection cannot be opened, is refused, or is lost."""


class DictProtocolError(DictError):
    """Raised when a response does not have the shape the command expects."""


class DictionaryConnection:
    """Synchronous DICT protocol session.

    Usage::

        conn = DictionaryConnection()
        conn.connect("dict.org")
        words = conn.get_match_list("cat", MatchingStrategy("prefix"), Database("wn"))
        conn.close()

    Args:
        logger: Logger for wire tracing. Defaults to this module's logger.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger if logger is not None else logging.getLogger(__name__)
        self._sock: socket.socket | None = None
        self._buffer = b""
        self._io_lock = threading.Lock()
        self._connected = False
        # Set after a DEFINE or SHOW INFO body; the server follows those
        # with a 250 completion line that precedes the next status line.
        self._completion_pending = False
        self.server_banner = ""

    # --- Connection lifecycle ---

    def connect(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        timeout: float | None = None,
    ) -> None:
        """Connect to a DICT server and read its banner.

        Args:
            host: Server host name or address.
            port: Server port.
            timeout: Socket timeout in seconds for connecting and for every
                read. None blocks indefinitely.

        Raises:
            DictConnectionError: If the connection fails or the banner is a
                negative reply.
        """
        self._close_socket()

        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as exc:
            raise DictConnectionError(f"Cannot connect to {host}:{port}: {exc}") from exc

        self._sock = sock
        self._buffer = b""
        self._completion_pending = False

        try:
            status = self._read_status()
        except DictProtocolError as exc:
            self._close_socket()
            raise DictConnectionError(f"Unexpected greeting from {host}: {exc}") from exc
        except DictConnectionError:
            self._close_socket()
            raise

        if status.is_negative_reply:
            self._close_socket()
            raise DictConnectionError(
                f"Server refused connection: {status.code} {status.details}"
            )

        self.server_banner = status.details
        self._connected = True
        self._log.debug("Connected to %s:%d: %s", host, port, status.details)

    def close(self) -> None:
        """Send QUIT and close the socket. Never raises."""
        with self._io_lock:
            if self._sock is None:
                return
            try:
                self._sock.sendall(f"{CMD_QUIT}\r\n".encode(ENCODING))
            except OSError as exc:
                self._log.debug("QUIT not sent: %s", exc)
            finally:
                self._close_socket()

    @property
    def is_connected(self) -> bool:
        """True if a socket connection is active."""
        return self._connected and self._sock is not None

    def __enter__(self) -> "DictionaryConnection":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # --- Commands ---

    def get_definitions(self, word: str, database: Database | str) -> list[Definition]:
        """Look up every definition of a word.

        Args:
            word: The word to define.
            database: Database to search. ``*`` searches all databases,
                ``!`` stops at the first database with a definition.

        Returns:
            One Definition per block sent by the server; empty when the
            word or database is unknown.

        Raises:
            DictConnectionError: If the connection fails.
            DictProtocolError: If the response is malformed.
        """
        _require_word(word)
        db_name = _name_of(database)

        with self._exchange():
            status = self._command(f"{CMD_DEFINE} {db_name} {quote_atom(word)}")

            if status.code in EMPTY_LOOKUP_CODES:
                return []
            if status.code != DEFINITIONS_FOLLOW:
                self._log.debug("DEFINE returned %d, no definitions", status.code)
                return []

            count = _definition_count(status)
            definitions = []
            for _ in range(count):
                header = self._read_body_line()
                atoms = split_atoms(header)
                if len(atoms) < 3:
                    raise DictProtocolError(f"Malformed definition header: {header!r}")

                definition = Definition(word=word, database_name=atoms[2])
                for line in self._read_block():
                    definition.append_line(line)
                definitions.append(definition)

            self._completion_pending = True
            return definitions

    def get_match_list(
        self,
        word: str,
        strategy: MatchingStrategy | str,
        database: Database | str,
    ) -> list[str]:
        """Find headwords matching a pattern.

        Returns:
            Matched headwords in arrival order, duplicates removed.

        Raises:
            DictConnectionError: If the connection fails.
            DictProtocolError: If the response is malformed.
        """
        _require_word(word)
        db_name = _name_of(database)
        strategy_name = _name_of(strategy)

        with self._exchange():
            status = self._command(
                f"{CMD_MATCH} {db_name} {strategy_name} {quote_atom(word)}"
            )

            if status.code in EMPTY_LOOKUP_CODES:
                return []
            if status.code != MATCHES_FOLLOW:
                self._log.debug("MATCH returned %d, no matches", status.code)
                return []

            matches = dict.fromkeys(match for _, match in self._read_listing())
            return list(matches)

    def get_database_list(self) -> dict[str, Database]:
        """Return the server's databases keyed by name.

        Raises:
            DictConnectionError: If the connection fails.
            DictProtocolError: If the response is malformed.
        """
        with self._exchange():
            status = self._command(CMD_SHOW_DB)

            if status.is_negative_reply or status.code == NO_DATABASES:
                return {}

            databases = {}
            for name, description in self._read_listing():
                databases[name] = Database(name, description)
            return databases

    def get_strategy_list(self) -> list[MatchingStrategy]:
        """Return the server's matching strategies in listing order.

        Raises:
            DictConnectionError: If the connection fails.
            DictProtocolError: If the response is malformed.
        """
        with self._exchange():
            status = self._command(CMD_SHOW_STRAT)

            if status.is_negative_reply or status.code == NO_STRATEGIES:
                return []

            strategies = dict.fromkeys(
                MatchingStrategy(name, description)
                for name, description in self._read_listing()
            )
            return list(strategies)

    def get_database_info(self, database: Database | str) -> str:
        """Return the information text for a database.

        Returns:
            The body lines joined with newlines, or an empty string if the
            server does not know the database.

        Raises:
            DictConnectionError: If the connection fails.
            DictProtocolError: If the server replies with anything else.
        """
        db_name = _name_of(database)

        with self._exchange():
            status = self._command(f"{CMD_SHOW_INFO} {db_name}")

            if status.code == INVALID_DATABASE:
                return ""
            if status.code != DATABASE_INFO_FOLLOWS:
                raise DictProtocolError(
                    f"Unexpected reply to SHOW INFO: {status.code} {status.details}"
                )

            text = "\n".join(self._read_block())
            self._completion_pending = True
            return text

    def get_server_info(self) -> str:
        """Return the server's own description (``SHOW SERVER``)."""
        with self._exchange():
            status = self._command(CMD_SHOW_SERVER)

            if status.code != SERVER_INFO_FOLLOWS:
                raise DictProtocolError(
                    f"Unexpected reply to SHOW SERVER: {status.code} {status.details}"
                )

            text = "\n".join(self._read_block())
            self._completion_pending = True
            return text

    # --- Internal I/O ---

    @contextmanager
    def _exchange(self):
        """Hold the I/O lock for one command; any failure ends the session.

        After a transport or protocol error the rest of the response is still
        unread, so the stream cannot be trusted for another command.
        """
        with self._io_lock:
            try:
                yield
            except DictError:
                self._close_socket()
                raise

    def _command(self, command: str) -> Status:
        """Send one command line and read its status line. Caller holds the lock."""
        self._send_line(command)
        return self._read_status()

    def _send_line(self, line: str) -> None:
        if self._sock is None:
            raise DictConnectionError("Not connected")

        self._log.debug("-> %s", line)
        try:
            self._sock.sendall(f"{line}\r\n".encode(ENCODING))
        except OSError as exc:
            self._connected = False
            raise DictConnectionError(f"Send failed: {exc}") from exc

    def _read_status(self) -> Status:
        """Read the status line that opens a response.

        Raises:
            DictConnectionError: If the stream ends first.
            DictProtocolError: If the line is not a status line.
        """
        while True:
            line = self._read_line_raw()
            if line is None:
                raise DictConnectionError("Server closed connection")

            if self._completion_pending:
                self._completion_pending = False
                if is_list_terminator(line):
                    self._log.debug("<- %s (completion)", line)
                    continue

            self._log.debug("<- %s", line)
            try:
                return parse_status(line)
            except ValueError as exc:
                raise DictProtocolError(str(exc)) from exc

    def _read_body_line(self) -> str:
        """Read a line inside a response body, where end of stream is a protocol error."""
        line = self._read_line_raw()
        if line is None:
            raise DictProtocolError("Server closed connection in the middle of a response")
        return line

    def _read_block(self) -> list[str]:
        """Read body lines up to (not including) a lone ``.`` line."""
        lines = []
        while True:
            line = self._read_body_line()
            if line == BLOCK_TERMINATOR:
                return lines
            lines.append(line)

    def _read_listing(self) -> list[tuple[str, str]]:
        """Read two-atom listing lines up to the ``250`` completion line.

        Lines that do not split into exactly two atoms are skipped.
        """
        rows = []
        while True:
            line = self._read_body_line()
            if is_list_terminator(line):
                return rows
            atoms = split_atoms(line)
            if len(atoms) == 2:
                rows.append((atoms[0], atoms[1]))

    def _read_line_raw(self) -> str | None:
        """Read one line from the socket.

        Uses an internal buffer to handle partial reads.

        Returns:
            The line without its CRLF or LF terminator, or None at end of
            stream.

        Raises:
            DictConnectionError: On timeout or socket error.
        """
        if self._sock is None:
            raise DictConnectionError("Not connected")

        while b"\n" not in self._buffer:
            try:
                chunk = self._sock.recv(MAX_RECV)
            except socket.timeout as exc:
                self._connected = False
                raise DictConnectionError("Timed out waiting for server") from exc
            except OSError as exc:
                self._connected = False
                raise DictConnectionError(f"Socket error: {exc}") from exc

            if not chunk:
                self._connected = False
                # A final unterminated line is still a line.
                if self._buffer:
                    tail, self._buffer = self._buffer, b""
                    return _decode(tail)
                return None

            self._buffer += chunk

        raw, self._buffer = self._buffer.split(b"\n", 1)
        return _decode(raw)

    def _close_socket(self) -> None:
        self._connected = False
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                pass
            self._sock = None
        self._buffer = b""
        self._completion_pending = False


def open_connection(
    host: str,
    port: int = DEFAULT_PORT,
    *,
    timeout: float | None = None,
    logger: logging.Logger | None = None,
) -> DictionaryConnection:
    """Create a DictionaryConnection and connect it.

    Raises:
        DictConnectionError: If the connection fails or is refused.
    """
    conn = DictionaryConnection(logger=logger)
    conn.connect(host, port, timeout=timeout)
    return conn


# --- Tagged results ---


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of a session operation: a value or the error that stopped it.

    Attributes:
        value: The operation's return value (None on failure).
        error: DictConnectionError or DictProtocolError on failure.
    """

    value: Any = None
    error: DictError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value


def attempt(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Result:
    """Run a session operation and capture DICT errors in a Result.

    Example::

        result = attempt(conn.get_definitions, "word", Database.all())
        if not result.ok:
            ...
    """
    try:
        return Result(value=func(*args, **kwargs))
    except DictError as exc:
        return Result(error=exc)


# --- Helpers ---


def _decode(raw: bytes) -> str:
    return raw.removesuffix(b"\r").decode(ENCODING, errors="replace")


def _name_of(item: Database | MatchingStrategy | str) -> str:
    """Return the command-line name of a database or strategy."""
    return item if isinstance(item, str) else item.name


def _require_word(word: str) -> None:
    if not word:
        raise ValueError("Word must not be empty")


def _definition_count(status: Status) -> int:
    """Read the declared block count from a 150 status line."""
    atoms = split_atoms(status.details)
    try:
        return int(atoms[0])
    except (IndexError, ValueError) as exc:
        raise DictProtocolError(f"Malformed definition count: {status.details!r}") from exc
