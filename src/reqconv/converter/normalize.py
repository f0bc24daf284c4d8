"""Read pasted commands and normalize them to a single line.

Commands copied from documentation or a browser usually span several lines
joined with shell line continuations::

    curl 'https://api.example.com/users' \\
      -X POST \\
      -H 'Authorization: Bearer abc'

The parsers expect a single line with single spaces between words, which is
what :func:`normalize_command` produces. :func:`read_command` fetches the
raw text from stdin, a file, or a literal argument.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional, TextIO

from reqconv.exceptions import InputError, InvalidUsageError


def normalize_command(raw: str) -> str:
    """Collapse a possibly multi-line command into one line.

    Each line is stripped and loses a trailing ``\\`` continuation marker;
    the lines are then joined and every run of whitespace becomes a single
    space.
    """
    lines = []
    for line in raw.splitlines():
        line = line.strip()
        if line.endswith("\\"):
            line = line[:-1]
        lines.append(line)
    return " ".join(" ".join(lines).split())


def read_command(source: Optional[str] = None, stdin: Optional[TextIO] = None) -> str:
    """Read a raw command and return it normalized.

    Args:
        source: ``None`` or ``"-"`` to read *stdin*, the path of an existing
            file to read it, or otherwise the command text itself.
        stdin: Stream to read when *source* selects stdin. Defaults to
            :data:`sys.stdin`.

    Returns:
        The command as produced by :func:`normalize_command`.

    Raises:
        InvalidUsageError: If the input is empty.
        InputError: If the file exists but cannot be read.
    """
    if source is None or source == "-":
        stream = stdin if stdin is not None else sys.stdin
        try:
            content = stream.read()
        except OSError as exc:
            raise InputError(f"Failed to read from stdin: {exc}") from exc
        origin = "stdin"
    elif os.path.isfile(source):
        try:
            content = Path(source).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise InputError(f"Failed to read {source}: {exc}") from exc
        origin = source
    else:
        content = source
        origin = "argument"

    command = normalize_command(content)
    if not command:
        raise InvalidUsageError(f"No command received from {origin}")
    return command
