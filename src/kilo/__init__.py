"""kilo: a minimal terminal text viewer."""

__version__ = "0.0.1"

from kilo.document import Document, Row
from kilo.editor import Editor
from kilo.errors import (
    FileOpenError,
    KiloError,
    TerminalConfigError,
    TerminalIOError,
    WindowSizeError,
)
from kilo.keybindings import (
    DEFAULT_KEYBINDINGS,
    WASD_KEYBINDINGS,
    EditorAction,
    KeybindingsManager,
)
from kilo.keys import (
    ESCAPE,
    Key,
    KeyDecoder,
    KeyEvent,
    KeyId,
    classify_sequence,
    ctrl_key,
    matches_key,
)
from kilo.renderer import FrameBuffer, Renderer
from kilo.terminal import ProcessTerminal, Terminal, TerminalMode
from kilo.viewport import CursorPosition, Viewport

__all__ = [
    "__version__",
    # Document
    "Document",
    "Row",
    # Editor loop
    "Editor",
    # Errors
    "FileOpenError",
    "KiloError",
    "TerminalConfigError",
    "TerminalIOError",
    "WindowSizeError",
    # Keybindings
    "DEFAULT_KEYBINDINGS",
    "WASD_KEYBINDINGS",
    "EditorAction",
    "KeybindingsManager",
    # Keys
    "ESCAPE",
    "Key",
    "KeyDecoder",
    "KeyEvent",
    "KeyId",
    "classify_sequence",
    "ctrl_key",
    "matches_key",
    # Rendering
    "FrameBuffer",
    "Renderer",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    "TerminalMode",
    # Viewport
    "CursorPosition",
    "Viewport",
]
