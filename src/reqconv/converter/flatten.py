"""Flatten a JSON document into HTTPie request-item tokens.

HTTPie describes a JSON body as a list of request items on the command line:
``name=value`` assigns a string and ``name:=json`` assigns a raw JSON value.
Nesting is expressed with bracket notation, so the body::

    {"user": {"name": "Ann", "tags": ["a", "b"]}, "age": 30}

flattens (recursively, keys in lexicographic order) to::

    age:=30 user[name]=Ann user[tags][0]=a user[tags][1]=b

Two policies are available through :class:`~reqconv.models.FlattenMode`:

* ``RECURSIVE`` -- walk the whole tree, one token per leaf.
* ``INLINE`` -- walk only the first level and emit nested objects and arrays
  as a single ``name:='<compact json>'`` token.

This only runs in the build direction. The HTTPie parser does not rebuild
nested objects from bracket keys.
"""

from __future__ import annotations

import json
from typing import Any, Iterator, Union

from reqconv.models import FlattenMode

JSONValue = Union[None, bool, int, float, str, list[Any], dict[str, Any]]


def flatten(
    value: JSONValue,
    prefix: str = "",
    mode: FlattenMode = FlattenMode.RECURSIVE,
    sort_keys: bool = True,
) -> list[str]:
    """Render *value* as a list of HTTPie request-item tokens.

    Args:
        value: A decoded JSON value (as returned by :func:`json.loads`).
        prefix: Field name of *value*. Empty for the top-level body object.
        mode: Recursive flattening or one-level-then-inline.
        sort_keys: Visit object keys in lexicographic order. When ``False``
            the dict's insertion order is used.

    Returns:
        The tokens in traversal order. Calling this twice on the same value
        yields the same list.

    Example::

        >>> flatten({"items": [1, "x"]})
        ['items[0]:=1', 'items[1]=x']
        >>> flatten({"n": 3.0})
        ['n:=3']
    """
    return list(_walk(value, prefix, mode, sort_keys, depth=0))


def format_number(value: int | float) -> str:
    """Render a JSON number the way HTTPie expects it after ``:=``.

    Integral values drop the fractional part (``3.0`` becomes ``3``); all
    other values use Python's shortest round-tripping representation.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    return repr(value)


def compact_json(value: Any, sort_keys: bool = True) -> str:
    """Serialise *value* as JSON without insignificant whitespace."""
    return json.dumps(value, separators=(",", ":"), sort_keys=sort_keys, ensure_ascii=False)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def loads_json(text: str) -> Any:
    """Decode *text* as strict JSON.

    Unlike :func:`json.loads`, the non-standard constants ``NaN``,
    ``Infinity`` and ``-Infinity`` raise :class:`ValueError`, so they never
    reach :func:`flatten` or :func:`compact_json`.
    """
    return json.loads(text, parse_constant=_reject_constant)


def _child_prefix(prefix: str, key: Any) -> str:
    if not prefix:
        return str(key)
    return f"{prefix}[{key}]"


def _walk(
    value: JSONValue,
    prefix: str,
    mode: FlattenMode,
    sort_keys: bool,
    depth: int,
) -> Iterator[str]:
    # Containers below the first level are inlined in INLINE mode.
    if mode == FlattenMode.INLINE and depth == 1 and isinstance(value, (dict, list)):
        yield f"{prefix}:='{compact_json(value, sort_keys)}'"
        return

    if isinstance(value, dict):
        if not value:
            if prefix:
                yield f"{prefix}:='{{}}'"
            return
        keys = sorted(value) if sort_keys else list(value)
        for key in keys:
            yield from _walk(value[key], _child_prefix(prefix, key), mode, sort_keys, depth + 1)
    elif isinstance(value, list):
        if not value:
            if prefix:
                yield f"{prefix}:='[]'"
            return
        for index, item in enumerate(value):
            yield from _walk(item, f"{prefix}[{index}]", mode, sort_keys, depth + 1)
    elif isinstance(value, bool):
        # bool before numbers: True is an int in Python.
        yield f"{prefix}:={'true' if value else 'false'}"
    elif value is None:
        yield f"{prefix}:=null"
    elif isinstance(value, (int, float)):
        yield f"{prefix}:={format_number(value)}"
    elif isinstance(value, str):
        yield f"{prefix}={value}"
    else:
        yield f"{prefix}:={value}"
