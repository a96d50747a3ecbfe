"""Exception hierarchy for fatal editor failures.

Every error here is fatal: the CLI resets the screen, reports the failing
operation together with the OS error, and exits with status 1.  Read
timeouts and undecodable escape sequences are *not* errors and never show
up as exceptions.
"""

from __future__ import annotations


class KiloError(Exception):
    """Base class for fatal errors.

    ``context`` names the operation that failed (``"tcgetattr"``,
    ``"read"``, ``"open"`` ...) and is what gets printed before the OS
    error message, ``perror``-style.
    """

    def __init__(self, context: str, cause: OSError | None = None) -> None:
        self.context = context
        self.cause = cause
        super().__init__(self.describe())

    def describe(self) -> str:
        if self.cause is None:
            return self.context
        reason = self.cause.strerror or str(self.cause)
        return f"{self.context}: {reason}"


class TerminalConfigError(KiloError):
    """Getting or setting terminal attributes failed."""


class TerminalIOError(KiloError):
    """A read or write on the terminal failed for a reason other than timeout."""


class FileOpenError(KiloError):
    """The file to display could not be opened or read."""


class WindowSizeError(KiloError):
    """Neither the ioctl nor the cursor-position probe produced a size."""
