"""The editor main loop: draw, read a key, apply it, repeat."""

from __future__ import annotations

import logging

from kilo.document import Document
from kilo.keybindings import EditorAction, KeybindingsManager
from kilo.keys import Key, KeyDecoder, KeyEvent, KeyId
from kilo.renderer import Renderer
from kilo.terminal import CLEAR_SCREEN, CURSOR_HOME, Terminal
from kilo.viewport import Viewport

logger = logging.getLogger(__name__)

_MOVEMENT_KEYS: dict[EditorAction, KeyId] = {
    "cursorUp": Key.up,
    "cursorDown": Key.down,
    "cursorLeft": Key.left,
    "cursorRight": Key.right,
    "cursorLineStart": Key.home,
    "cursorLineEnd": Key.end,
    "pageUp": Key.page_up,
    "pageDown": Key.page_down,
}


class Editor:
    """Composition root tying the decoder, viewport and renderer together.

    Keys with no binding are ignored.  The loop ends only on the quit
    binding, which clears the screen before :meth:`run` returns status 0.
    """

    def __init__(
        self,
        terminal: Terminal,
        document: Document,
        viewport: Viewport,
        keybindings: KeybindingsManager | None = None,
    ) -> None:
        self.terminal = terminal
        self.document = document
        self.viewport = viewport
        self.keybindings = keybindings or KeybindingsManager()
        self.decoder = KeyDecoder(terminal)
        self.renderer = Renderer(terminal, viewport, document)

    def refresh_screen(self) -> None:
        self.viewport.recompute_scroll()
        self.renderer.draw_frame()

    def handle_key(self, event: KeyEvent) -> bool:
        """Apply *event*; return ``False`` once the editor should stop."""
        if self.keybindings.matches(event, "quit"):
            self.clear_screen()
            return False

        action = self.keybindings.action_for(event)
        if action is None:
            return True

        self.viewport.apply(_MOVEMENT_KEYS[action])
        return True

    def process_keypress(self) -> bool:
        return self.handle_key(self.decoder.next_key())

    def clear_screen(self) -> None:
        self.terminal.write(CLEAR_SCREEN)
        self.terminal.write(CURSOR_HOME)

    def run(self) -> int:
        """Loop until quit and return the process exit status."""
        while True:
            self.refresh_screen()
            if not self.process_keypress():
                logger.debug("quit requested")
                return 0
