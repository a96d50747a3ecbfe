"""Frame rendering with a single write per frame.

Each frame is assembled in a :class:`FrameBuffer` and handed to the
terminal in one ``write`` call, so the terminal never shows a half-drawn
screen.
"""

from __future__ import annotations

import wcwidth as _wcwidth

from kilo import __version__
from kilo.document import Document
from kilo.terminal import (
    CLEAR_LINE,
    CURSOR_HOME,
    HIDE_CURSOR,
    SHOW_CURSOR,
    Terminal,
    cursor_position,
)
from kilo.viewport import Viewport

WELCOME_MESSAGE = f"Kilo editor -- version {__version__}"

FILLER = b"~"
_NEWLINE = b"\r\n"


class FrameBuffer:
    """Append-only byte accumulator for one frame."""

    def __init__(self) -> None:
        self._chunks: list[bytes] = []
        self._length = 0

    def append(self, data: bytes) -> None:
        self._chunks.append(data)
        self._length += len(data)

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)

    def __len__(self) -> int:
        return self._length


def truncate_to_width(text: str, max_width: int) -> str:
    """Cut *text* so it occupies at most *max_width* terminal columns."""
    width = 0
    for i, ch in enumerate(text):
        w = max(_wcwidth.wcwidth(ch), 0)
        if width + w > max_width:
            return text[:i]
        width += w
    return text


def welcome_line(screen_cols: int, message: str = WELCOME_MESSAGE) -> bytes:
    """Return *message* centred in *screen_cols*, led by the filler marker."""
    message = truncate_to_width(message, screen_cols)
    width = max(_wcwidth.wcswidth(message), 0)

    out = bytearray()
    padding = (screen_cols - width) // 2
    if padding:
        out += FILLER
        padding -= 1
    out += b" " * padding
    out += message.encode("utf-8")
    return bytes(out)


class Renderer:
    """Draws the visible part of a document through a viewport."""

    def __init__(
        self,
        terminal: Terminal,
        viewport: Viewport,
        document: Document,
        welcome_message: str = WELCOME_MESSAGE,
    ) -> None:
        self.terminal = terminal
        self.viewport = viewport
        self.document = document
        self.welcome_message = welcome_message

    def draw_frame(self) -> None:
        """Redraw the whole screen with exactly one terminal write."""
        frame = self.build_frame()
        self.terminal.write(frame.getvalue())

    def build_frame(self) -> FrameBuffer:
        frame = FrameBuffer()
        frame.append(HIDE_CURSOR)
        frame.append(CURSOR_HOME)

        self._draw_rows(frame)

        row, col = self.viewport.screen_cursor()
        frame.append(cursor_position(row + 1, col + 1))
        frame.append(SHOW_CURSOR)
        return frame

    def _draw_rows(self, frame: FrameBuffer) -> None:
        viewport = self.viewport
        screen_rows = viewport.screen_rows
        screen_cols = viewport.screen_cols

        for y, file_row in enumerate(viewport.visible_rows()):
            row = self.document.row(file_row)
            if row is not None:
                frame.append(row.chars[:screen_cols])
            elif self.document.num_rows == 0 and y == screen_rows // 3:
                frame.append(welcome_line(screen_cols, self.welcome_message))
            else:
                frame.append(FILLER)

            frame.append(CLEAR_LINE)
            # No newline after the last row, or the terminal scrolls
            if y < screen_rows - 1:
                frame.append(_NEWLINE)
