"""Typer application and CLI entry point for reqconv.

This module wires together the top-level Typer application: the global
output options in :func:`main_callback`, the ``convert`` command that runs a
single conversion, and the ``config`` sub-command group.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`reqconv.config`: Default formats and converter settings.
    :mod:`reqconv.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from reqconv import __version__
from reqconv.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED
from reqconv.models import CommandFormat, FlattenMode


app = typer.Typer(
    name="reqconv",
    help="Convert HTTP request commands between curl and HTTPie syntax.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

from reqconv.commands.config import config_app  # noqa: E402

app.add_typer(config_app, name="config", help="Configuration management.")

_LABELS = {
    CommandFormat.CURL: "Curl",
    CommandFormat.HTTPIE: "HTTPie",
}


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"reqconv {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(
        False, "--force", help="Skip confirmations."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write the converted command to a file."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~reqconv.output.OutputManager` from
    CLI flags, routes engine logging to stderr in verbose mode, and stores
    shared options in the Typer context for sub-commands.
    """
    from reqconv.output import OutputFormat, OutputManager, configure_logging, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)
    configure_logging(output)

    ctx.ensure_object(dict)
    ctx.obj["force"] = force


@app.command("convert")
def convert_command(
    command: Optional[str] = typer.Argument(
        None,
        help="The command to convert, a file containing it, or '-' for stdin (default).",
    ),
    input_format: Optional[str] = typer.Option(
        None, "--from", "-f", help="Input format: curl or httpie."
    ),
    output_format: Optional[str] = typer.Option(
        None, "--to", "-t", help="Output format: curl or httpie."
    ),
    flatten_mode: Optional[FlattenMode] = typer.Option(
        None,
        "--flatten",
        case_sensitive=False,
        help="How nested JSON becomes HTTPie fields: recursive or inline.",
    ),
) -> None:
    """Convert one request command to curl or HTTPie syntax.

    Reads the command (multi-line input with ``\\`` continuations is fine),
    keeps the URL, method, whitelisted headers and JSON body, and prints
    the equivalent command in the requested format. Defaults for ``--from``
    and ``--to`` come from the configuration (curl to curl out of the box,
    which yields a cleaned-up curl command).

    Example::

        pbpaste | reqconv convert --to httpie
        reqconv convert -f httpie -t curl "http POST https://x.test a:=1"
    """
    from reqconv.config import resolve_config
    from reqconv.converter import convert, read_command, resolve_format
    from reqconv.exceptions import ReqconvError
    from reqconv.output import debug, error, format_command, info

    try:
        # Reject unknown selectors as usage errors before touching config.
        if input_format is not None:
            input_format = resolve_format(input_format).value
        if output_format is not None:
            output_format = resolve_format(output_format).value

        config = resolve_config(
            cli_input_format=input_format,
            cli_output_format=output_format,
            cli_flatten_mode=flatten_mode.value if flatten_mode is not None else None,
        )

        if command in (None, "-") and sys.stdin.isatty():
            info("Paste your command, then press Ctrl+D:")
        text = read_command(command)
        debug(f"Normalized input: {text}")
        _warn_on_format_mismatch(text, config.input_format)

        result = convert(text, config.input_format, config.output_format, config.converter)
    except ReqconvError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    format_command(_LABELS[config.output_format], result)


def _warn_on_format_mismatch(text: str, input_format: CommandFormat) -> None:
    """Warn when the program name in *text* belongs to the other format."""
    from reqconv.output import warning

    program = text.split(" ", 1)[0]
    if input_format == CommandFormat.CURL and program in ("http", "https"):
        warning("Input looks like an HTTPie command; did you mean --from httpie?")
    elif input_format == CommandFormat.HTTPIE and program == "curl":
        warning("Input looks like a curl command; did you mean --from curl?")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from reqconv.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``reqconv`` console script.

    Unhandled :class:`~reqconv.exceptions.ReqconvError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from reqconv.exceptions import ReqconvError
        from reqconv.output import error

        if isinstance(exc, ReqconvError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
