"""Cursor position and vertical scrolling over a document.

Cursor coordinates are in document space: ``cy`` is a row index and may
sit one past the last row, ``cx`` is a screen column.  ``row_offset`` is
the first document row shown at the top of the screen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kilo.keys import Key, KeyId

if TYPE_CHECKING:
    from kilo.document import Document


@dataclass
class CursorPosition:
    cx: int = 0
    cy: int = 0


@dataclass
class Viewport:
    """Cursor movement and scroll state for a fixed-size screen.

    Without a document the cursor roams the screen itself: rows are bound
    by ``screen_rows`` instead of the document length.
    """

    screen_rows: int
    screen_cols: int
    document: Document | None = None
    row_offset: int = 0
    cursor: CursorPosition = field(default_factory=CursorPosition)

    # -- bounds -------------------------------------------------------------

    @property
    def max_row(self) -> int:
        """Largest row index the cursor may reach."""
        if self.document is None:
            return max(self.screen_rows - 1, 0)
        return self.document.num_rows

    @property
    def max_col(self) -> int:
        return max(self.screen_cols - 1, 0)

    # -- transitions --------------------------------------------------------

    def move(self, key: KeyId) -> None:
        """Move the cursor one step for an arrow key."""
        cursor = self.cursor
        if key == Key.left:
            if cursor.cx > 0:
                cursor.cx -= 1
        elif key == Key.right:
            if cursor.cx < self.max_col:
                cursor.cx += 1
        elif key == Key.up:
            if cursor.cy > 0:
                cursor.cy -= 1
        elif key == Key.down:
            if cursor.cy < self.max_row:
                cursor.cy += 1

    def page(self, key: KeyId) -> None:
        """Move a screen height up or down, one row at a time."""
        step = Key.up if key == Key.page_up else Key.down
        for _ in range(self.screen_rows):
            self.move(step)

    def home(self) -> None:
        self.cursor.cx = 0

    def end(self) -> None:
        self.cursor.cx = self.max_col

    def apply(self, key: KeyId) -> None:
        """Dispatch any navigation key to its transition."""
        if key in (Key.up, Key.down, Key.left, Key.right):
            self.move(key)
        elif key in (Key.page_up, Key.page_down):
            self.page(key)
        elif key == Key.home:
            self.home()
        elif key == Key.end:
            self.end()

    # -- scrolling ----------------------------------------------------------

    def recompute_scroll(self) -> None:
        """Scroll the minimum amount that brings the cursor row on screen."""
        cy = self.cursor.cy
        if cy < self.row_offset:
            self.row_offset = cy
        if cy >= self.row_offset + self.screen_rows:
            self.row_offset = cy - self.screen_rows + 1

    def visible_rows(self) -> range:
        """Document row indices covered by the screen, in order."""
        return range(self.row_offset, self.row_offset + self.screen_rows)

    def screen_cursor(self) -> tuple[int, int]:
        """Return the 0-based screen ``(row, col)`` of the cursor."""
        return self.cursor.cy - self.row_offset, self.cursor.cx
