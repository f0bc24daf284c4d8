"""Canonical Pydantic models shared across all reqconv modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into two groups:

**Conversion models** -- produced by the parsers and consumed by the builders:
    :class:`CommandFormat`, :class:`FlattenMode` and :class:`Request`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`ConverterConfig` and :class:`GlobalConfig`.

All models use Pydantic v2. :class:`Request` is frozen: a parser collects the
field values first and constructs the request once, and no builder can
modify it afterwards.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Formats ---


class CommandFormat(str, enum.Enum):
    """The two textual request formats reqconv reads and writes."""

    CURL = "curl"
    HTTPIE = "httpie"


class FlattenMode(str, enum.Enum):
    """How nested JSON bodies are rendered as HTTPie data fields.

    ``RECURSIVE`` walks the whole tree and emits bracket-notation fields
    (``user[address][city]=Oslo``). ``INLINE`` flattens only the first level
    and emits nested objects and arrays as a single raw JSON field
    (``user:='{"address":{"city":"Oslo"}}'``).
    """

    RECURSIVE = "recursive"
    INLINE = "inline"


# --- Request ---


class Request(BaseModel):
    """A single HTTP request invocation, independent of its textual format.

    Every field has a usable default so that a parser which cannot find a
    component simply leaves it out: an empty ``url`` or ``body`` is a valid
    (if useless) request, never an error.

    Example::

        Request(
            url="https://api.example.com/users",
            method="post",
            headers={"Authorization": "Bearer abc"},
            body='{"name":"Ann"}',
        )
    """

    model_config = ConfigDict(frozen=True)

    url: str = ""
    method: str = Field(default="GET", description="HTTP verb, always uppercase")
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = Field(default="", description="Raw JSON text; empty means no body")

    @field_validator("method")
    @classmethod
    def _uppercase_method(cls, value: str) -> str:
        return value.upper() if value else "GET"

    def ordered_headers(self, sort_keys: bool = True) -> list[tuple[str, str]]:
        """Return the headers in the order the builders render them.

        Args:
            sort_keys: Sort by case-insensitive header name. When ``False``
                the insertion order of :attr:`headers` is kept.

        Returns:
            A list of ``(name, value)`` pairs.
        """
        items = list(self.headers.items())
        if sort_keys:
            items.sort(key=lambda item: (item[0].lower(), item[0]))
        return items


# --- Configuration ---


class ConverterConfig(BaseModel):
    """Knobs of the conversion engine.

    A single engine covers the behaviour of both historical variants of the
    tool: the header whitelist and the flattening policy are the two places
    where they differed.
    """

    header_whitelist: list[str] = Field(
        default_factory=lambda: ["authorization", "content-type"],
        description="Header names kept by the curl parser (case-insensitive)",
    )
    flatten_mode: FlattenMode = Field(
        default=FlattenMode.RECURSIVE,
        description="HTTPie body rendering: recursive or inline",
    )
    sort_keys: bool = Field(
        default=True,
        description="Render headers and JSON keys in lexicographic order",
    )

    @field_validator("header_whitelist")
    @classmethod
    def _lowercase_names(cls, value: list[str]) -> list[str]:
        return [name.strip().lower() for name in value if name.strip()]


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/reqconv/config.json``.

    Loaded and saved by :func:`~reqconv.config.load_global_config` and
    :func:`~reqconv.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~reqconv.config.resolve_config`
    for the full precedence chain.
    """

    input_format: CommandFormat = CommandFormat.CURL
    output_format: CommandFormat = CommandFormat.CURL
    converter: ConverterConfig = Field(default_factory=ConverterConfig)
