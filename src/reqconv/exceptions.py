"""Exception hierarchy for reqconv.

All exceptions inherit from :class:`ReqconvError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`reqconv.exit_codes`.
The top-level error handler in :func:`reqconv.app.main` catches
``ReqconvError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The conversion engine itself never raises for malformed command text; these
exceptions only surface at the CLI boundary (format selection, input
reading, configuration).

Subclass hierarchy::

    ReqconvError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- InputError          (exit 1)
    +-- ConfigError         (exit 1)
"""

from reqconv.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE


class ReqconvError(Exception):
    """Base exception for all reqconv errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`reqconv.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ReqconvError):
    """Raised for an unknown format selector or when no input was given."""

    exit_code = EXIT_INVALID_USAGE


class InputError(ReqconvError):
    """Raised when the input file cannot be found or read."""

    exit_code = EXIT_GENERIC_FAILURE


class ConfigError(ReqconvError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
