"""Keyboard input decoding for a VT100-style terminal.

Turns the raw byte stream from a :class:`~kilo.terminal.Terminal` into
:class:`KeyEvent` values.  Plain bytes come through as literals; escape
sequences for the navigation keys are resolved through an explicit
sequence table.  A partial or unknown sequence is reported as a bare
escape keypress, never as an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Optional

if TYPE_CHECKING:
    from kilo.terminal import Terminal

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

ESC = 0x1B

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named navigation keys."""

    up = "up"
    down = "down"
    left = "left"
    right = "right"
    page_up = "pageUp"
    page_down = "pageDown"
    home = "home"
    end = "end"
    delete = "delete"


NAVIGATION_KEYS: frozenset[str] = frozenset({
    Key.up,
    Key.down,
    Key.left,
    Key.right,
    Key.page_up,
    Key.page_down,
    Key.home,
    Key.end,
    Key.delete,
})


def ctrl_key(ch: str) -> int:
    """Return the byte a terminal sends for Ctrl+*ch* (``ctrl_key("q") == 0x11``)."""
    return ord(ch) & 0x1F


# ---------------------------------------------------------------------------
# Key events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """One decoded keypress: either a literal byte or a named navigation key."""

    name: Optional[KeyId] = None
    byte: Optional[int] = None

    @classmethod
    def literal(cls, byte: int) -> KeyEvent:
        return cls(byte=byte)

    @classmethod
    def named(cls, name: KeyId) -> KeyEvent:
        return cls(name=name)

    @property
    def is_literal(self) -> bool:
        return self.byte is not None

    @property
    def is_escape(self) -> bool:
        return self.byte == ESC

    def __repr__(self) -> str:
        if self.name is not None:
            return f"KeyEvent({self.name})"
        return f"KeyEvent(byte={self.byte:#04x})"


ESCAPE = KeyEvent.literal(ESC)

# ---------------------------------------------------------------------------
# Escape sequence table
# ---------------------------------------------------------------------------

# Complete sequences -> key names
SEQUENCE_KEYS: dict[bytes, KeyId] = {
    b"\x1b[A": Key.up,
    b"\x1b[B": Key.down,
    b"\x1b[C": Key.right,
    b"\x1b[D": Key.left,
    b"\x1b[H": Key.home,
    b"\x1b[F": Key.end,
    b"\x1bOH": Key.home,
    b"\x1bOF": Key.end,
    b"\x1b[1~": Key.home,
    b"\x1b[3~": Key.delete,
    b"\x1b[4~": Key.end,
    b"\x1b[5~": Key.page_up,
    b"\x1b[6~": Key.page_down,
    b"\x1b[7~": Key.home,
    b"\x1b[8~": Key.end,
}

# Prefixes that need more input.  Every ``ESC [ <1-8>`` waits for the
# final byte, so an unmapped tail such as ``ESC [ 2 ~`` is consumed whole.
_INCOMPLETE_SEQUENCES: frozenset[bytes] = frozenset(
    {b"\x1b", b"\x1b[", b"\x1bO"}
    | {b"\x1b[" + bytes([d]) for d in b"12345678"}
)

SequenceStatus = Literal["complete", "incomplete", "invalid"]


def classify_sequence(seq: bytes) -> SequenceStatus:
    """Classify an escape-sequence prefix read so far.

    Returns ``'complete'`` when *seq* names a key, ``'incomplete'`` when
    more bytes may still complete it, and ``'invalid'`` otherwise.
    """
    if seq in SEQUENCE_KEYS:
        return "complete"
    if seq in _INCOMPLETE_SEQUENCES:
        return "incomplete"
    return "invalid"


def decode_sequence(seq: bytes) -> KeyEvent:
    """Return the event for a complete sequence, or :data:`ESCAPE`."""
    name = SEQUENCE_KEYS.get(seq)
    if name is None:
        return ESCAPE
    return KeyEvent.named(name)


# ---------------------------------------------------------------------------
# Decoder
# ---------------------------------------------------------------------------


class KeyDecoder:
    """Blocking key reader over a :class:`~kilo.terminal.Terminal`.

    The terminal's reads time out every 100ms.  While waiting for the
    first byte of a key a timeout just means "try again"; inside an
    escape sequence a timeout ends the sequence and yields a bare escape.
    """

    def __init__(self, terminal: Terminal) -> None:
        self._terminal = terminal

    def next_key(self) -> KeyEvent:
        byte = self._read_byte()
        if byte != ESC:
            return KeyEvent.literal(byte)
        return self._read_escape_sequence()

    # -- private ------------------------------------------------------------

    def _read_byte(self) -> int:
        while True:
            data = self._terminal.read(1)
            if data:
                return data[0]

    def _read_escape_sequence(self) -> KeyEvent:
        seq = bytes([ESC])
        while True:
            data = self._terminal.read(1)
            if not data:
                return ESCAPE
            seq += data[:1]
            status = classify_sequence(seq)
            if status == "complete":
                return decode_sequence(seq)
            if status == "invalid":
                logger.debug("unrecognized escape sequence %r", seq)
                return ESCAPE


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def parse_key_id(key_id: KeyId) -> tuple[bool, str] | None:
    """Split *key_id* into ``(ctrl, key)``; ``None`` if it is malformed."""
    parts = key_id.split("+")
    if len(parts) == 1:
        return False, parts[0]
    if len(parts) == 2 and parts[0] == "ctrl" and len(parts[1]) == 1:
        return True, parts[1]
    return None


def matches_key(event: KeyEvent, key_id: KeyId) -> bool:
    """Return ``True`` if *event* is the key named by *key_id*.

    *key_id* examples: ``"up"``, ``"pageDown"``, ``"w"``, ``"ctrl+q"``.
    """
    parsed = parse_key_id(key_id)
    if parsed is None or not parsed[1]:
        return False
    has_ctrl, key = parsed

    if has_ctrl:
        return event.byte == ctrl_key(key.lower())

    if key in NAVIGATION_KEYS:
        return event.name == key

    if len(key) == 1:
        return event.byte == ord(key)

    if key == "escape":
        return event.is_escape

    return False
