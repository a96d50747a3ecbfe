"""Editor keybindings manager."""

from __future__ import annotations

from typing import Literal

from kilo.keys import KeyEvent, KeyId, matches_key

EditorAction = Literal[
    # Cursor movement
    "cursorUp",
    "cursorDown",
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    "pageUp",
    "pageDown",
    # Session
    "quit",
]

KeybindingsConfig = dict[EditorAction, KeyId | list[KeyId]]

DEFAULT_KEYBINDINGS: dict[EditorAction, KeyId | list[KeyId]] = {
    "cursorUp": "up",
    "cursorDown": "down",
    "cursorLeft": "left",
    "cursorRight": "right",
    "cursorLineStart": "home",
    "cursorLineEnd": "end",
    "pageUp": "pageUp",
    "pageDown": "pageDown",
    "quit": "ctrl+q",
}

# Letter movement from the first iteration of the editor
WASD_KEYBINDINGS: KeybindingsConfig = {
    "cursorUp": ["up", "w"],
    "cursorDown": ["down", "s"],
    "cursorLeft": ["left", "a"],
    "cursorRight": ["right", "d"],
}


class KeybindingsManager:
    """Maps decoded key events to editor actions.

    Bindings in *config* replace the default keys for the actions they
    name; every other action keeps its default.
    """

    def __init__(self, config: KeybindingsConfig | None = None) -> None:
        merged = {**DEFAULT_KEYBINDINGS, **(config or {})}
        self._action_to_keys: dict[EditorAction, list[KeyId]] = {
            action: [keys] if isinstance(keys, str) else list(keys)
            for action, keys in merged.items()
        }

    def matches(self, event: KeyEvent, action: EditorAction) -> bool:
        """Check if *event* triggers *action*."""
        return any(matches_key(event, key) for key in self.get_keys(action))

    def action_for(self, event: KeyEvent) -> EditorAction | None:
        """Return the first action bound to *event*, if any."""
        for action, keys in self._action_to_keys.items():
            if any(matches_key(event, key) for key in keys):
                return action
        return None

    def get_keys(self, action: EditorAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])
