"""Parse and render ``curl`` commands.

The parser is deliberately regex based rather than a full shell tokenizer:
pasted commands come from browsers, docs and chat messages, and a forgiving
scan for a handful of flags survives far more of them than a strict grammar
would. Each extraction rule lives in its own function:

* :func:`extract_url` -- the token after ``curl``, or the first
  ``http(s)://`` substring.
* :func:`extract_method` -- the word after ``-X``.
* :func:`extract_headers` -- quoted ``-H`` values whose name is whitelisted.
* :func:`extract_body` -- the quoted value after ``--data-raw`` / ``--data``.

Every other flag (``-k``, ``--compressed``, cookies, ...) is dropped. No
rule raises: anything that cannot be found falls back to the
:class:`~reqconv.models.Request` default.

The input is expected to be a single line; see
:func:`~reqconv.converter.normalize.normalize_command`.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from reqconv.models import ConverterConfig, Request

logger = logging.getLogger(__name__)

# First http(s) URL, up to whitespace or a quote.
_URL_RE = re.compile(r"(https?://[^\s'\"]+)")

_METHOD_RE = re.compile(r"-X\s+(\w+)")

# -H followed by a single- or double-quoted header line.
_HEADER_RE = re.compile(r"-H\s+['\"]([^'\"]+)['\"]")

_QUOTES = "'\""


# ---------------------------------------------------------------------------
# Extraction rules
# ---------------------------------------------------------------------------


def extract_url(command: str) -> str:
    """Find the request URL in a curl command.

    The token immediately following a ``curl`` token wins, with surrounding
    quotes stripped. When there is no such token the first ``http://`` or
    ``https://`` substring is used instead.

    Args:
        command: Single-line curl command.

    Returns:
        The URL, or ``""`` when none can be found.
    """
    parts = command.split()
    for index, part in enumerate(parts):
        if part == "curl" and index + 1 < len(parts):
            return parts[index + 1].strip(_QUOTES)

    match = _URL_RE.search(command)
    if match:
        return match.group(1)
    return ""


def extract_method(command: str) -> str:
    """Return the uppercased verb after ``-X``, defaulting to ``GET``."""
    match = _METHOD_RE.search(command)
    if match:
        return match.group(1).upper()
    return "GET"


def extract_headers(command: str, whitelist: Iterable[str]) -> dict[str, str]:
    """Collect the whitelisted ``-H`` headers of a curl command.

    Each quoted header line is split on the first ``": "``. A header is kept
    only when its lowercased name appears in *whitelist*; the original
    spelling of the name is preserved. A later header with the same name
    replaces an earlier one.

    Args:
        command: Single-line curl command.
        whitelist: Lowercase header names to keep.

    Returns:
        Mapping of header name to value, in order of appearance.
    """
    allowed = {name.lower() for name in whitelist}
    headers: dict[str, str] = {}
    for line in _HEADER_RE.findall(command):
        name, sep, value = line.partition(": ")
        if not sep:
            logger.debug("Ignoring malformed header %r", line)
            continue
        if name.lower() not in allowed:
            logger.debug("Dropping header %r: not in whitelist", name)
            continue
        headers[name] = value
    return headers


def extract_body(command: str) -> str:
    """Return the quoted payload following ``--data-raw`` or ``--data``.

    ``--data-raw`` takes precedence when both appear. From the flag onwards
    the first quote character (``'`` or ``"``) opens the payload and the
    next quote of the same kind closes it. The payload is returned verbatim,
    without unescaping.

    Returns:
        The payload, or ``""`` when there is no data flag, no opening quote,
        or no matching closing quote.
    """
    start = command.find("--data-raw")
    if start == -1:
        start = command.find("--data")
    if start == -1:
        return ""

    remaining = command[start:]
    for index, char in enumerate(remaining):
        if char in _QUOTES:
            end = remaining.find(char, index + 1)
            if end == -1:
                logger.debug("Unterminated %s-quoted body, ignoring it", char)
                return ""
            return remaining[index + 1 : end]
    return ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_curl(command: str, config: Optional[ConverterConfig] = None) -> Request:
    """Parse a single-line curl command into a :class:`Request`.

    Args:
        command: Normalized curl command.
        config: Engine settings; only ``header_whitelist`` is used here.

    Returns:
        The extracted request. Never raises for malformed input.
    """
    config = config or ConverterConfig()
    return Request(
        url=extract_url(command),
        method=extract_method(command),
        headers=extract_headers(command, config.header_whitelist),
        body=extract_body(command),
    )


def build_curl(request: Request, config: Optional[ConverterConfig] = None) -> str:
    """Render *request* as a curl command.

    The method is omitted for ``GET``. Header values and the body are
    interpolated inside single quotes as-is; embedded single quotes are not
    escaped.

    Example::

        >>> build_curl(Request(url="https://x.test", method="POST", body='{"a":1}'))
        'curl https://x.test -X POST --data-raw \\'{"a":1}\\''
    """
    config = config or ConverterConfig()
    parts = ["curl", request.url]

    if request.method != "GET":
        parts.extend(["-X", request.method])

    for name, value in request.ordered_headers(config.sort_keys):
        parts.extend(["-H", f"'{name}: {value}'"])

    if request.body:
        parts.extend(["--data-raw", f"'{request.body}'"])

    return " ".join(parts)
