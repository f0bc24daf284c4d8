"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~reqconv.exceptions.ReqconvError` subclass.
Shell wrappers can inspect the exit code to tell a bad invocation apart
from any other failure without parsing stderr.

Example::

    $ reqconv convert --to wget < cmd.txt
    $ echo $?
    2   # EXIT_INVALID_USAGE -- unknown output format
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or no input."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
