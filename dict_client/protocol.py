"""Protocol constants and line parsing for the DICT protocol (RFC 2229).

Every server reply starts with a status line: a three-digit code, a space,
and free detail text. Listing and definition bodies follow as plain lines.
"""

from dataclasses import dataclass


# --- Connection ---

DEFAULT_PORT = 2628

# Buffer size for socket reads.
MAX_RECV = 4096

ENCODING = "utf-8"

# --- Body terminators ---

BLOCK_TERMINATOR = "."
LIST_TERMINATOR = "250 ok"

# --- Status codes ---

DATABASES_PRESENT = 110
STRATEGIES_PRESENT = 111
DATABASE_INFO_FOLLOWS = 112
SERVER_INFO_FOLLOWS = 114
DEFINITIONS_FOLLOW = 150
DEFINITION_BLOCK = 151
MATCHES_FOLLOW = 152
BANNER = 220
CLOSING = 221
OK = 250
INVALID_DATABASE = 550
INVALID_STRATEGY = 551
NO_MATCH = 552
NO_DATABASES = 554
NO_STRATEGIES = 555

# Negative replies for DEFINE and MATCH that mean "nothing found".
EMPTY_LOOKUP_CODES = frozenset({INVALID_DATABASE, INVALID_STRATEGY, NO_MATCH})

# --- Commands ---

CMD_DEFINE = "DEFINE"
CMD_MATCH = "MATCH"
CMD_SHOW_DB = "SHOW DB"
CMD_SHOW_STRAT = "SHOW STRAT"
CMD_SHOW_INFO = "SHOW INFO"
CMD_SHOW_SERVER = "SHOW SERVER"
CMD_QUIT = "QUIT"


# --- Status lines ---


@dataclass(frozen=True, slots=True)
class Status:
    """Parsed status line.

    Attributes:
        code: Three-digit reply code (100-599).
        details: Text after the code, without the separating space.
    """

    code: int
    details: str

    @property
    def is_negative_reply(self) -> bool:
        """True for 5yz codes: the command cannot proceed as stated."""
        return self.code >= 500


def parse_status(line: str) -> Status:
    """Parse a status line such as ``150 2 definitions retrieved``.

    Raises:
        ValueError: If the line does not start with a three-digit code.
    """
    head = line[:3]
    if len(head) != 3 or not head.isdigit():
        raise ValueError(f"Malformed status line: {line!r}")

    code = int(head)
    if not 100 <= code <= 599:
        raise ValueError(f"Status code out of range: {line!r}")

    rest = line[3:]
    if rest and not rest[0].isspace():
        raise ValueError(f"Malformed status line: {line!r}")

    return Status(code=code, details=rest[1:] if rest else "")


def is_list_terminator(line: str) -> bool:
    """True for the completion line ending a listing.

    Servers append timing text to the completion line
    (``250 ok [d/m/c = 0/12/...]``). A listing row whose first atom is
    ``250`` is not a terminator.
    """
    return line == LIST_TERMINATOR or line.startswith(f"{LIST_TERMINATOR} ")


# --- Atoms ---

_QUOTES = "\"'"


def split_atoms(line: str) -> list[str]:
    """Split a response line into atoms.

    Whitespace separates atoms. A quoted span (single or double quotes) is
    one atom with the quotes removed; inside it a backslash escapes the next
    character. A quote inside an unquoted atom (``O'Brien``) is literal.

    Example:
        >>> split_atoms('wn "WordNet (r) 3.0 (2006)"')
        ['wn', 'WordNet (r) 3.0 (2006)']
    """
    atoms: list[str] = []
    current: list[str] = []
    in_atom = False
    quote = ""
    escaped = False

    for ch in line:
        if quote:
            if escaped:
                current.append(ch)
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = ""
            else:
                current.append(ch)
            continue

        if ch.isspace():
            if in_atom:
                atoms.append("".join(current))
                current = []
                in_atom = False
            continue

        # A quote only opens a quoted span at the start of an atom.
        if ch in _QUOTES and not in_atom:
            quote = ch
        else:
            current.append(ch)
        in_atom = True

    if in_atom:
        atoms.append("".join(current))
    return atoms


def quote_atom(text: str) -> str:
    """Quote a command argument so the server reads it as one atom."""
    if text and not any(ch.isspace() or ch in _QUOTES or ch == "\\" for ch in text):
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
