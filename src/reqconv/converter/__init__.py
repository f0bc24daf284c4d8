"""The conversion engine: parse a command into a Request, render it back out.

Typical usage::

    from reqconv.converter import convert

    convert("curl 'https://x.test' -X POST --data-raw '{\\"a\\":1}'", "curl", "httpie")
    # -> 'http POST https://x.test a:=1'

Sub-modules:

* :mod:`~reqconv.converter.normalize` -- read pasted input and collapse it
  to one line.
* :mod:`~reqconv.converter.curl` -- curl parser and builder.
* :mod:`~reqconv.converter.httpie` -- HTTPie parser and builder.
* :mod:`~reqconv.converter.flatten` -- JSON body to HTTPie request items.

Parsers and builders share nothing but :class:`~reqconv.models.Request`
and :class:`~reqconv.models.ConverterConfig`, so any parser can feed any
builder.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from reqconv.converter.curl import build_curl, parse_curl
from reqconv.converter.flatten import flatten
from reqconv.converter.httpie import build_httpie, parse_httpie
from reqconv.converter.normalize import normalize_command, read_command
from reqconv.exceptions import InvalidUsageError
from reqconv.models import CommandFormat, ConverterConfig, Request

logger = logging.getLogger(__name__)

Parser = Callable[[str, Optional[ConverterConfig]], Request]
Builder = Callable[[Request, Optional[ConverterConfig]], str]

_PARSERS: dict[CommandFormat, Parser] = {
    CommandFormat.CURL: parse_curl,
    CommandFormat.HTTPIE: parse_httpie,
}

_BUILDERS: dict[CommandFormat, Builder] = {
    CommandFormat.CURL: build_curl,
    CommandFormat.HTTPIE: build_httpie,
}


def resolve_format(name: Union[str, CommandFormat]) -> CommandFormat:
    """Validate a format selector.

    Args:
        name: ``"curl"`` or ``"httpie"`` (case-insensitive), or a
            :class:`CommandFormat` member.

    Returns:
        The matching :class:`CommandFormat`.

    Raises:
        InvalidUsageError: If *name* is not a recognised format.
    """
    if isinstance(name, CommandFormat):
        return name
    try:
        return CommandFormat(name.strip().lower())
    except ValueError:
        choices = ", ".join(f.value for f in CommandFormat)
        raise InvalidUsageError(
            f"Unknown format '{name}'. Choose one of: {choices}"
        ) from None


def parse(command: str, input_format: Union[str, CommandFormat], config: Optional[ConverterConfig] = None) -> Request:
    """Parse *command* with the parser registered for *input_format*."""
    return _PARSERS[resolve_format(input_format)](command, config)


def build(request: Request, output_format: Union[str, CommandFormat], config: Optional[ConverterConfig] = None) -> str:
    """Render *request* with the builder registered for *output_format*."""
    return _BUILDERS[resolve_format(output_format)](request, config)


def convert(
    command: str,
    input_format: Union[str, CommandFormat],
    output_format: Union[str, CommandFormat],
    config: Optional[ConverterConfig] = None,
) -> str:
    """Convert a single-line command from one format to another.

    Converting to the same format yields a normalized copy of the command
    with every non-essential flag removed.

    Args:
        command: Normalized command text.
        input_format: Format of *command*.
        output_format: Format to render.
        config: Engine settings shared by the parser and the builder.

    Returns:
        The rendered command.

    Raises:
        InvalidUsageError: If either format selector is not recognised.
    """
    source = resolve_format(input_format)
    target = resolve_format(output_format)
    request = parse(command, source, config)
    logger.debug(
        "Parsed %s command: method=%s url=%r headers=%d body=%d bytes",
        source.value,
        request.method,
        request.url,
        len(request.headers),
        len(request.body),
    )
    return build(request, target, config)


__all__ = [
    "build",
    "build_curl",
    "build_httpie",
    "convert",
    "flatten",
    "normalize_command",
    "parse",
    "parse_curl",
    "parse_httpie",
    "read_command",
    "resolve_format",
]
