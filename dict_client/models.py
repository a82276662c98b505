"""Data holders for databases, matching strategies, and definitions."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Database:
    """A dictionary database offered by the server.

    Attributes:
        name: Short name used in commands (e.g. ``wn``).
        description: Human-readable description from ``SHOW DB``.
    """

    name: str
    description: str = ""

    @classmethod
    def all(cls) -> "Database":
        """Pseudo-database ``*``: search every database."""
        return cls("*", "All databases")

    @classmethod
    def first_match(cls) -> "Database":
        """Pseudo-database ``!``: stop at the first database with a hit."""
        return cls("!", "First database with a match")


@dataclass(frozen=True, slots=True)
class MatchingStrategy:
    """A word-matching strategy offered by the server.

    Attributes:
        name: Short name used in commands (e.g. ``prefix``).
        description: Human-readable description from ``SHOW STRAT``.
    """

    name: str
    description: str = ""

    @classmethod
    def default(cls) -> "MatchingStrategy":
        """Strategy ``.``: the server's default strategy."""
        return cls(".", "Server default")


@dataclass(slots=True)
class Definition:
    """One definition block returned by ``DEFINE``.

    Attributes:
        word: The headword that was looked up.
        database_name: Database the block came from.
        lines: Body lines, verbatim and in arrival order.
    """

    word: str
    database_name: str
    lines: list[str] = field(default_factory=list)

    def append_line(self, line: str) -> None:
        self.lines.append(line)

    @property
    def text(self) -> str:
        """Body lines joined with newlines."""
        return "\n".join(self.lines)
