"""Tests for kilo.cli — process glue, fatal error handling and exit codes."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

import kilo.cli
from kilo.cli import main, run_editor
from kilo.config import EditorConfig
from kilo.errors import TerminalConfigError, WindowSizeError

from .virtual_terminal import VirtualTerminal

QUIT = b"\x11"


class FakeMode:
    """Stand-in for TerminalMode that only records the lifecycle."""

    instances: list[FakeMode] = []

    def __init__(self, fd=None, read_timeout_ds=1, fail=False):
        self.events: list[str] = []
        self.read_timeout_ds = read_timeout_ds
        self.fail = fail
        FakeMode.instances.append(self)

    def __enter__(self):
        if self.fail:
            raise TerminalConfigError("tcgetattr", OSError(25, "Inappropriate ioctl for device"))
        self.events.append("enable")
        return self

    def __exit__(self, *exc_info):
        self.events.append("disable")


class BrokenSizeTerminal(VirtualTerminal):
    def get_window_size(self):
        raise WindowSizeError("get_window_size")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("KILO_LOG_FILE", "KILO_LOG_LEVEL", "KILO_WASD", "KILO_WRITE_LOG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_mode(monkeypatch):
    FakeMode.instances = []
    monkeypatch.setattr(kilo.cli, "TerminalMode", FakeMode)
    return FakeMode


class TestRunEditor:
    def test_quit_exits_zero(self, fake_mode):
        term = VirtualTerminal(rows=5, columns=20)
        term.feed(QUIT)
        assert run_editor(EditorConfig(), term) == 0
        assert fake_mode.instances[0].events == ["enable", "disable"]
        assert term.writes[-2:] == [b"\x1b[2J", b"\x1b[H"]

    def test_shows_file(self, fake_mode, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_bytes(b"first\nsecond\n")
        term = VirtualTerminal(rows=3, columns=20)
        term.feed(QUIT)
        run_editor(EditorConfig(filename=str(path)), term)
        assert term.screen_lines(term.writes[0]) == [b"first", b"second", b"~"]

    def test_empty_document_shows_banner(self, fake_mode):
        term = VirtualTerminal(rows=6, columns=40)
        term.feed(QUIT)
        run_editor(EditorConfig(), term)
        assert b"Kilo editor -- version" in term.writes[0]

    def test_missing_file_is_fatal(self, fake_mode, tmp_path, capsys):
        term = VirtualTerminal()
        status = run_editor(EditorConfig(filename=str(tmp_path / "missing.txt")), term)
        assert status == 1
        assert term.writes == [b"\x1b[2J", b"\x1b[H"]
        assert fake_mode.instances[0].events == ["enable", "disable"]
        assert capsys.readouterr().err.startswith("open: ")

    def test_window_size_failure_is_fatal(self, fake_mode, capsys):
        term = BrokenSizeTerminal()
        assert run_editor(EditorConfig(), term) == 1
        assert capsys.readouterr().err.strip() == "get_window_size"

    def test_raw_mode_failure_is_fatal(self, monkeypatch, capsys):
        monkeypatch.setattr(kilo.cli, "TerminalMode", lambda **kw: FakeMode(fail=True, **kw))
        term = VirtualTerminal()
        assert run_editor(EditorConfig(), term) == 1
        assert term.writes == [b"\x1b[2J", b"\x1b[H"]
        assert "tcgetattr: Inappropriate ioctl for device" in capsys.readouterr().err

    def test_wasd_config(self, fake_mode):
        term = VirtualTerminal(rows=5, columns=20)
        term.feed(b"dd", QUIT)
        run_editor(EditorConfig(wasd=True), term)
        assert term.writes[-3].endswith(b"\x1b[1;3H\x1b[?25h")

    def test_read_timeout_is_passed_to_mode(self, fake_mode):
        term = VirtualTerminal()
        term.feed(QUIT)
        run_editor(EditorConfig(read_timeout_ds=3), term)
        assert fake_mode.instances[0].read_timeout_ds == 3


class TestMain:
    @pytest.fixture
    def captured(self, monkeypatch):
        calls: dict = {}

        def fake_run_editor(config):
            calls["config"] = config
            return 0

        monkeypatch.setattr(kilo.cli, "run_editor", fake_run_editor)
        monkeypatch.setattr(kilo.cli, "configure_logging", lambda config: None)
        return calls

    def test_help(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Ctrl-Q quits" in result.output

    def test_no_arguments(self, captured):
        result = CliRunner().invoke(main, [])
        assert result.exit_code == 0
        config = captured["config"]
        assert config.filename is None
        assert config.wasd is False
        assert config.log_level == "warning"

    def test_options(self, captured, tmp_path):
        log_file = str(tmp_path / "kilo.log")
        result = CliRunner().invoke(
            main, ["--wasd", "--log-level", "debug", "--log-file", log_file, "file.txt"]
        )
        assert result.exit_code == 0
        config = captured["config"]
        assert config.filename == "file.txt"
        assert config.wasd is True
        assert config.log_level == "debug"
        assert config.log_file == log_file

    def test_environment_defaults(self, captured, monkeypatch):
        monkeypatch.setenv("KILO_WASD", "1")
        monkeypatch.setenv("KILO_LOG_LEVEL", "info")
        CliRunner().invoke(main, [])
        config = captured["config"]
        assert config.wasd is True
        assert config.log_level == "info"

    def test_exit_status_propagates(self, monkeypatch):
        monkeypatch.setattr(kilo.cli, "run_editor", lambda config: 1)
        monkeypatch.setattr(kilo.cli, "configure_logging", lambda config: None)
        result = CliRunner().invoke(main, ["missing.txt"])
        assert result.exit_code == 1

    def test_invalid_log_level(self):
        result = CliRunner().invoke(main, ["--log-level", "loud"])
        assert result.exit_code == 2

    def test_invalid_log_level_from_environment(self, captured, monkeypatch):
        monkeypatch.setenv("KILO_LOG_LEVEL", "verbose")
        result = CliRunner().invoke(main, [])
        assert result.exit_code == 2
        assert "KILO_LOG_LEVEL" in result.output
        assert "'verbose' is not one of debug, info, warning, error" in result.output
        assert "config" not in captured

    def test_log_level_flag_overrides_bad_environment(self, captured, monkeypatch):
        monkeypatch.setenv("KILO_LOG_LEVEL", "verbose")
        result = CliRunner().invoke(main, ["--log-level", "error"])
        assert result.exit_code == 0
        assert captured["config"].log_level == "error"
