"""Terminal abstraction for raw-mode stdin/stdout interaction.

Provides a ``Terminal`` protocol, a ``TerminalMode`` controller that owns
the saved line-discipline settings, and a concrete ``ProcessTerminal``
that reads and writes the process's standard file descriptors.

All output is raw bytes: the escape codes below are a wire-level contract
with a VT100-compatible terminal and are reproduced exactly.
"""

from __future__ import annotations

import atexit
import errno
import logging
import os
import re
import sys
import termios
import tty
from typing import Protocol

from kilo.errors import TerminalConfigError, TerminalIOError, WindowSizeError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

CLEAR_SCREEN = b"\x1b[2J"
CURSOR_HOME = b"\x1b[H"
CLEAR_LINE = b"\x1b[K"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
REQUEST_CURSOR_POSITION = b"\x1b[6n"
CURSOR_FAR_BOTTOM_RIGHT = b"\x1b[999C\x1b[999B"

_CURSOR_POSITION_FMT = "\x1b[{};{}H"

# Longest cursor position report we are willing to read back
_REPORT_MAX_LEN = 31

_CURSOR_REPORT_RE = re.compile(rb"^\x1b\[(\d+);(\d+)$")


def cursor_position(row: int, col: int) -> bytes:
    """Return the code that moves the cursor to 1-indexed ``(row, col)``."""
    return _CURSOR_POSITION_FMT.format(row, col).encode("ascii")


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    def read(self, n: int = 1) -> bytes:
        """Read up to *n* bytes; ``b""`` means the read timed out."""
        ...

    def write(self, data: bytes) -> None: ...

    def get_window_size(self) -> tuple[int, int]:
        """Return ``(rows, cols)``."""
        ...


# ---------------------------------------------------------------------------
# Raw mode
# ---------------------------------------------------------------------------


def _as_os_error(exc: termios.error) -> OSError:
    return OSError(*exc.args)


class TerminalMode:
    """Raw-mode controller for the controlling terminal.

    ``enable()`` snapshots the current attributes and switches the line
    discipline to raw mode with a 100ms read timeout.  ``disable()`` puts
    the snapshot back.  The restore is registered with :mod:`atexit` on
    first enable, and ``disable()`` is idempotent, so the snapshot is
    restored exactly once however the process ends.

    Only one instance may be enabled at a time; the terminal settings are
    process-wide.
    """

    def __init__(self, fd: int | None = None, read_timeout_ds: int = 1) -> None:
        self._fd = fd
        self._read_timeout_ds = read_timeout_ds
        self._original_termios: list | None = None
        self._atexit_registered = False

    @property
    def fd(self) -> int:
        if self._fd is None:
            self._fd = sys.stdin.fileno()
        return self._fd

    @property
    def enabled(self) -> bool:
        return self._original_termios is not None

    # -- enable / disable ---------------------------------------------------

    def enable(self) -> None:
        """Save the current attributes and enter raw mode."""
        if self._original_termios is not None:
            return

        try:
            original = termios.tcgetattr(self.fd)
        except termios.error as exc:
            raise TerminalConfigError("tcgetattr", _as_os_error(exc)) from exc

        self._original_termios = original
        if not self._atexit_registered:
            atexit.register(self.disable)
            self._atexit_registered = True

        raw = make_raw_attributes(original, self._read_timeout_ds)
        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, raw)
        except termios.error as exc:
            raise TerminalConfigError("tcsetattr", _as_os_error(exc)) from exc

        logger.debug("raw mode enabled on fd %d", self.fd)

    def disable(self) -> None:
        """Restore the attributes saved by :meth:`enable`."""
        original = self._original_termios
        if original is None:
            return
        self._original_termios = None

        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, original)
        except termios.error as exc:
            raise TerminalConfigError("tcsetattr", _as_os_error(exc)) from exc

        logger.debug("terminal attributes restored on fd %d", self.fd)

    def __enter__(self) -> TerminalMode:
        self.enable()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.disable()


def make_raw_attributes(attrs: list, read_timeout_ds: int = 1) -> list:
    """Return a raw-mode copy of the ``tcgetattr`` list *attrs*.

    Input: no break signal, no CR->NL, no parity check, no 8th-bit strip,
    no XON/XOFF.  Output: no post-processing.  8-bit characters.  Local:
    no echo, canonical mode, extended input or signal characters.  Reads
    return after *read_timeout_ds* tenths of a second even with no input.
    """
    raw = list(attrs)
    raw[tty.IFLAG] &= ~(
        termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON
    )
    raw[tty.OFLAG] &= ~termios.OPOST
    raw[tty.CFLAG] |= termios.CS8
    raw[tty.LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    cc = list(attrs[tty.CC])
    cc[termios.VMIN] = 0
    cc[termios.VTIME] = read_timeout_ds
    raw[tty.CC] = cc
    return raw


# ---------------------------------------------------------------------------
# Window size
# ---------------------------------------------------------------------------


def parse_cursor_position_report(data: bytes) -> tuple[int, int] | None:
    """Parse a ``\\x1b[<rows>;<cols>`` report (terminating ``R`` removed)."""
    match = _CURSOR_REPORT_RE.match(data)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def probe_window_size(terminal: Terminal) -> tuple[int, int]:
    """Measure the screen by pushing the cursor to the bottom-right corner
    and asking the terminal where it ended up.
    """
    terminal.write(CURSOR_FAR_BOTTOM_RIGHT)
    terminal.write(REQUEST_CURSOR_POSITION)

    report = bytearray()
    while len(report) < _REPORT_MAX_LEN:
        byte = terminal.read(1)
        if not byte or byte == b"R":
            break
        report += byte

    size = parse_cursor_position_report(bytes(report))
    if size is None:
        raise WindowSizeError("get_window_size")
    return size


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by the stdin/stdout file descriptors.

    Reads go straight to :func:`os.read`, so they honour the VMIN/VTIME
    timeout set by :class:`TerminalMode`.  When *write_log* is set every
    write is mirrored to that file for debugging.
    """

    def __init__(
        self,
        input_fd: int | None = None,
        output_fd: int | None = None,
        write_log: str = "",
    ) -> None:
        self._input_fd = input_fd if input_fd is not None else sys.stdin.fileno()
        self._output_fd = output_fd if output_fd is not None else sys.stdout.fileno()
        self._write_log_path = write_log

    # -- read ---------------------------------------------------------------

    def read(self, n: int = 1) -> bytes:
        try:
            return os.read(self._input_fd, n)
        except InterruptedError:
            return b""
        except OSError as exc:
            # Some platforms report a VTIME expiry as EAGAIN
            if exc.errno == errno.EAGAIN:
                return b""
            raise TerminalIOError("read", exc) from exc

    # -- write --------------------------------------------------------------

    def write(self, data: bytes) -> None:
        """Write all of *data* to stdout and optionally to the write log."""
        view = memoryview(data)
        try:
            while view:
                written = os.write(self._output_fd, view)
                view = view[written:]
        except OSError as exc:
            raise TerminalIOError("write", exc) from exc

        if self._write_log_path:
            try:
                with open(self._write_log_path, "ab") as f:
                    f.write(data)
            except OSError:
                logger.warning("could not append to write log %s", self._write_log_path)

    # -- size ---------------------------------------------------------------

    def get_window_size(self) -> tuple[int, int]:
        """Ask the kernel for the window size, probing the terminal if that fails
        or reports a zero dimension.
        """
        try:
            size = os.get_terminal_size(self._output_fd)
        except OSError:
            size = None

        if size is not None and size.columns != 0 and size.lines != 0:
            logger.info("window size %dx%d (ioctl)", size.lines, size.columns)
            return size.lines, size.columns

        rows, cols = probe_window_size(self)
        logger.info("window size %dx%d (cursor position report)", rows, cols)
        return rows, cols
