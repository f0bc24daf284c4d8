"""Shared test fixtures for reqconv.

Provides reusable fixtures for sample commands, isolated config
environments, output state, and running CLI commands. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from reqconv.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_logging_between_tests() -> None:
    """Detach handlers that ``--verbose`` runs bound to CliRunner streams."""
    yield
    logger = logging.getLogger("reqconv")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Sample commands
# ---------------------------------------------------------------------------


@pytest.fixture
def browser_curl() -> str:
    """A multi-line curl command as copied from a browser's network tab."""
    return (
        "curl 'https://api.example.com/users' \\\n"
        "  -X POST \\\n"
        "  -H 'accept: application/json' \\\n"
        "  -H 'Authorization: Bearer abc' \\\n"
        "  -H 'content-type: application/json' \\\n"
        "  --data-raw '{\"name\":\"Ann\",\"age\":30}' \\\n"
        "  --compressed\n"
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config, clears the REQCONV_*
    environment variables, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("reqconv.config._is_xdg_platform", lambda: True)

    for var in ["REQCONV_FROM", "REQCONV_TO"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
