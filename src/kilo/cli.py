"""CLI entry point for kilo. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from kilo.config import LOG_LEVELS, EditorConfig
from kilo.document import Document
from kilo.editor import Editor
from kilo.errors import KiloError, TerminalIOError
from kilo.keybindings import WASD_KEYBINDINGS, KeybindingsManager
from kilo.log import configure_logging
from kilo.terminal import CLEAR_SCREEN, CURSOR_HOME, ProcessTerminal, Terminal, TerminalMode
from kilo.viewport import Viewport

logger = logging.getLogger(__name__)


def run_editor(config: EditorConfig, terminal: Terminal | None = None) -> int:
    """Run the editor to completion and return the exit status."""
    if terminal is None:
        terminal = ProcessTerminal(write_log=config.write_log)
    mode = TerminalMode(read_timeout_ds=config.read_timeout_ds)

    try:
        with mode:
            rows, cols = terminal.get_window_size()
            if config.filename:
                document = Document.open(config.filename)
            else:
                document = Document()

            keybindings = KeybindingsManager(WASD_KEYBINDINGS if config.wasd else None)
            viewport = Viewport(screen_rows=rows, screen_cols=cols, document=document)
            editor = Editor(terminal, document, viewport, keybindings)
            return editor.run()
    except KiloError as exc:
        return _fatal(terminal, exc)


def _fatal(terminal: Terminal, exc: KiloError) -> int:
    """Reset the screen, report *exc* on stderr and return status 1."""
    logger.error("fatal: %s", exc.describe(), exc_info=exc)
    try:
        terminal.write(CLEAR_SCREEN)
        terminal.write(CURSOR_HOME)
    except TerminalIOError as write_exc:
        logger.warning("could not reset screen: %s", write_exc.describe())
    click.echo(exc.describe(), err=True)
    return 1


@click.command()
@click.argument("filename", required=False, type=click.Path(dir_okay=False))
@click.option("--log-file", default=None, help="Write debug logs to this file")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS),
    default=None,
    help="Log level (default: warning, or $KILO_LOG_LEVEL)",
)
@click.option("--wasd", is_flag=True, default=False, help="Also move the cursor with w/a/s/d")
def main(filename, log_file, log_level, wasd):
    """View FILENAME in the terminal. Ctrl-Q quits."""
    config = EditorConfig(filename=filename)
    if log_file:
        config.log_file = log_file
    if log_level:
        config.log_level = log_level
    if wasd:
        config.wasd = True
    if config.log_level not in LOG_LEVELS:
        raise click.BadParameter(
            f"{config.log_level!r} is not one of {', '.join(LOG_LEVELS)}",
            param_hint="KILO_LOG_LEVEL",
        )

    configure_logging(config)
    sys.exit(run_editor(config))


if __name__ == "__main__":
    main()
