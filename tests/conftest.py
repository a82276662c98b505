"""Shared test fixtures for the dict-client test suite."""

import socket
from unittest.mock import patch

import pytest

from dict_client.connection import DictionaryConnection, open_connection

BANNER = "220 dict.example.org dictd 1.12.1 <auth.mime> <100.2@dict.example.org>"


class ScriptedServer:
    """Server end of a socket pair that replays canned response lines."""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock

    def send(self, *lines: str) -> None:
        """Queue response lines for the client, CRLF-terminated."""
        self.sock.sendall("".join(f"{line}\r\n" for line in lines).encode("utf-8"))

    def send_banner(self) -> None:
        self.send(BANNER)

    def send_raw(self, data: bytes) -> None:
        self.sock.sendall(data)

    def hang_up(self) -> None:
        """Close the server's write side so the client sees end of stream."""
        self.sock.shutdown(socket.SHUT_WR)

    def received(self) -> list[str]:
        """Return the command lines the client has sent so far."""
        self.sock.setblocking(False)
        data = b""
        try:
            while True:
                chunk = self.sock.recv(4096)
                if not chunk:
                    break
                data += chunk
        except BlockingIOError:
            pass
        finally:
            self.sock.setblocking(True)
        return [line for line in data.decode("utf-8").split("\r\n") if line]


@pytest.fixture
def server():
    """A scripted server wired in place of socket.create_connection."""
    server_sock, client_sock = socket.socketpair()
    scripted = ScriptedServer(server_sock)
    with patch(
        "dict_client.connection.socket.create_connection",
        return_value=client_sock,
    ) as create_connection:
        scripted.create_connection = create_connection
        yield scripted
    server_sock.close()
    client_sock.close()


@pytest.fixture
def conn(server) -> DictionaryConnection:
    """A session that has completed its handshake with the scripted server."""
    server.send_banner()
    connection = open_connection("dict.example.org")
    yield connection
    connection.close()
