"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- format_command in plain, JSON, rich, and output-file modes
- Logging configuration for --verbose
- Global instance management
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from reqconv.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    configure_logging,
    get_output,
    reset_output,
    set_output,
)
from reqconv import output as output_module


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("reqconv.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("reqconv.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.RICH

    def test_no_color_flag_forces_plain(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO, no_color=True)
        assert mgr.format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, non_tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_data("hello world")
        captured = capfd.readouterr()
        assert captured.out == "hello world\n"
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["info", "success", "warning", "error"])
    def test_diagnostics_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("diagnostic text")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "diagnostic text" in captured.err

    def test_error_prefix_without_color(self, capfd, non_tty):
        OutputManager(no_color=True).error("boom")
        assert capfd.readouterr().err == "Error: boom\n"


class TestQuietAndVerbose:
    def test_quiet_suppresses_success(self, capfd, non_tty):
        OutputManager(no_color=True, quiet=True).success("done")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_errors(self, capfd, non_tty):
        OutputManager(no_color=True, quiet=True).error("boom")
        assert "boom" in capfd.readouterr().err

    def test_debug_hidden_by_default(self, capfd, non_tty):
        OutputManager(no_color=True).debug("details")
        assert capfd.readouterr().err == ""

    def test_debug_shown_with_verbose(self, capfd, non_tty):
        OutputManager(no_color=True, verbose=True).debug("details")
        assert capfd.readouterr().err == "[debug] details\n"


# ------------------------------------------------------------------ #
# format_command
# ------------------------------------------------------------------ #


class TestFormatCommand:
    def test_plain_writes_bare_command(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_command("HTTPie", "http GET x.test")
        captured = capfd.readouterr()
        assert captured.out == "http GET x.test\n"
        assert captured.err == "HTTPie format:\n"

    def test_quiet_drops_label_but_keeps_command(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.format_command("Curl", "curl x.test")
        captured = capfd.readouterr()
        assert captured.out == "curl x.test\n"
        assert captured.err == ""

    def test_json(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.format_command("HTTPie", "http GET x.test")
        data = json.loads(capfd.readouterr().out)
        assert data == {"format": "httpie", "command": "http GET x.test"}

    def test_rich_contains_command(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.RICH)
        mgr.format_command("Curl", "curl https://x.test -X POST")
        out = capfd.readouterr().out
        assert "curl" in out
        assert "POST" in out

    def test_output_file(self, capfd, non_tty, tmp_path: Path):
        target = tmp_path / "cmd.txt"
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, output_file=str(target))
        mgr.format_command("Curl", "curl x.test")
        assert target.read_text() == "curl x.test\n"
        assert capfd.readouterr().out == ""


class TestFormatResponse:
    def test_dict_is_json_in_plain_mode(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).format_response({"a": 1})
        assert json.loads(capfd.readouterr().out) == {"a": 1}


# ------------------------------------------------------------------ #
# Logging
# ------------------------------------------------------------------ #


class TestConfigureLogging:
    def test_verbose_installs_rich_handler(self, non_tty):
        configure_logging(OutputManager(verbose=True))
        logger = logging.getLogger("reqconv")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        configure_logging(OutputManager())

    def test_repeated_calls_do_not_stack_handlers(self, non_tty):
        configure_logging(OutputManager(verbose=True))
        configure_logging(OutputManager(verbose=True))
        assert len(logging.getLogger("reqconv").handlers) == 1
        configure_logging(OutputManager())

    def test_quiet_by_default(self, non_tty):
        configure_logging(OutputManager())
        logger = logging.getLogger("reqconv")
        assert logger.handlers == []
        assert logger.level == logging.WARNING


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self, non_tty):
        assert isinstance(get_output(), OutputManager)

    def test_set_output_is_used_by_helpers(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.format_command("Curl", "curl u")
        assert capfd.readouterr().out == "curl u\n"
