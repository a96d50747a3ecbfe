"""In-memory line buffer loaded from an optional file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Iterable

from kilo.errors import FileOpenError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Row:
    """One line of text, stored as the raw bytes read from the file."""

    chars: bytes = b""

    @property
    def size(self) -> int:
        return len(self.chars)


def strip_line_terminator(line: bytes) -> bytes:
    """Drop at most one trailing ``\\n`` and then at most one ``\\r``."""
    if line.endswith(b"\n"):
        line = line[:-1]
    if line.endswith(b"\r"):
        line = line[:-1]
    return line


@dataclass
class Document:
    """Ordered, append-only sequence of rows."""

    rows: list[Row] = field(default_factory=list)

    @classmethod
    def open(cls, path: str) -> Document:
        """Create a document holding the lines of the file at *path*."""
        document = cls()
        document.load(path)
        return document

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def row(self, index: int) -> Row | None:
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None

    def append_row(self, chars: bytes) -> Row:
        row = Row(bytes(chars))
        self.rows.append(row)
        return row

    def extend(self, lines: Iterable[bytes]) -> None:
        for line in lines:
            self.append_row(strip_line_terminator(line))

    def load(self, path: str) -> None:
        """Append every line of *path*, terminators stripped."""
        try:
            with open(path, "rb") as f:
                self.read_from(f)
        except OSError as exc:
            raise FileOpenError("open", exc) from exc
        logger.info("loaded %s (%d rows)", path, self.num_rows)

    def read_from(self, stream: BinaryIO) -> None:
        self.extend(stream)
