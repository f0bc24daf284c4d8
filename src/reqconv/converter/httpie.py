"""Parse and render HTTPie (``http ...``) commands.

An HTTPie command is positional::

    http [METHOD] URL [Header:value ...] [field=string ...] [field:=json ...]

Parsing collects headers and data fields and serialises the fields back into
a compact JSON object for :attr:`~reqconv.models.Request.body`. Field names
are kept literally: ``user[name]=Ann`` becomes the key ``"user[name]"``, not
a nested object. Rendering goes the other way and relies on
:func:`~reqconv.converter.flatten.flatten` to turn the JSON body into
request items.

Unlike the curl parser, headers are not filtered against the whitelist here.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from reqconv.converter.flatten import compact_json, flatten, loads_json
from reqconv.models import ConverterConfig, Request

logger = logging.getLogger(__name__)

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"})

_PROGRAM_NAMES = ("http", "https")

# A run of non-space characters where quoted sections may contain spaces.
# A lone quote without its partner is taken literally.
_TOKEN_RE = re.compile(r"""(?:[^\s'"]+|'[^']*'|"[^"]*"|['"])+""")


def tokenize(command: str) -> list[str]:
    """Split *command* on whitespace, keeping quoted sections together.

    Quote characters stay in the tokens, so ``Authorization:'Bearer abc'``
    is one token with its quotes intact.

    Example::

        >>> tokenize("http GET x.test Authorization:'Bearer abc' a=1")
        ['http', 'GET', 'x.test', "Authorization:'Bearer abc'", 'a=1']
    """
    return _TOKEN_RE.findall(command)


def _unquote(text: str) -> str:
    """Remove one pair of matching surrounding quotes, if present."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        return text[1:-1]
    return text


def _parse_typed_value(raw: str) -> Any:
    """Decode the right-hand side of a ``:=`` field, keeping *raw* if it is not JSON."""
    try:
        return loads_json(raw)
    except ValueError:
        logger.debug("Value %r is not valid JSON, keeping it as a string", raw)
        return raw


def parse_httpie(command: str, config: Optional[ConverterConfig] = None) -> Request:
    """Parse a single-line HTTPie command into a :class:`Request`.

    Args:
        command: Normalized HTTPie command, with or without the leading
            ``http`` program name.
        config: Engine settings; ``sort_keys`` controls the key order of the
            serialised body.

    Returns:
        The extracted request. Never raises for malformed input.
    """
    config = config or ConverterConfig()
    tokens = tokenize(command)
    pos = 0

    if tokens and tokens[0] in _PROGRAM_NAMES:
        pos += 1

    method = "GET"
    if pos < len(tokens) and tokens[pos].upper() in HTTP_METHODS:
        method = tokens[pos].upper()
        pos += 1

    url = ""
    if pos < len(tokens):
        url = _unquote(tokens[pos])
        pos += 1

    headers: dict[str, str] = {}
    fields: dict[str, Any] = {}
    for token in tokens[pos:]:
        if ":" in token and "=" not in token:
            name, _, value = token.partition(":")
            headers[name] = value.strip("'")
        elif ":=" in token:
            key, _, raw = token.partition(":=")
            fields[key] = _parse_typed_value(_unquote(raw))
        elif "=" in token:
            key, _, raw = token.partition("=")
            fields[key] = _unquote(raw)
        else:
            logger.debug("Ignoring unrecognised token %r", token)

    body = compact_json(fields, config.sort_keys) if fields else ""
    return Request(url=url, method=method, headers=headers, body=body)


def _format_header(name: str, value: str) -> str:
    # Values that look structured (spaces, dots) are single-quoted.
    if " " in value or "." in value:
        return f"{name}:'{value}'"
    return f"{name}:{value}"


def _body_items(body: str, config: ConverterConfig) -> list[str]:
    """Turn a raw JSON body into request items, or pass it through verbatim."""
    try:
        data = loads_json(body)
    except ValueError:
        logger.debug("Body is not valid JSON, appending it verbatim")
        return [body]
    if not isinstance(data, dict):
        logger.debug("Body is a JSON %s, not an object; appending it verbatim", type(data).__name__)
        return [body]
    return flatten(data, "", mode=config.flatten_mode, sort_keys=config.sort_keys)


def build_httpie(request: Request, config: Optional[ConverterConfig] = None) -> str:
    """Render *request* as an HTTPie command.

    The method is always written out, even for ``GET``. A JSON object body
    is flattened into request items according to ``config.flatten_mode``;
    any other body is appended as-is.

    Example::

        >>> build_httpie(Request(url="https://x.test", method="POST",
        ...                      headers={"Authorization": "Bearer abc"},
        ...                      body='{"name":"Ann","age":30}'))
        "http POST https://x.test Authorization:'Bearer abc' age:=30 name=Ann"
    """
    config = config or ConverterConfig()
    parts = ["http", request.method, request.url]

    for name, value in request.ordered_headers(config.sort_keys):
        parts.append(_format_header(name, value))

    if request.body:
        parts.extend(_body_items(request.body, config))

    return " ".join(parts)
