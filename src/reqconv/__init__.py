"""reqconv -- Convert HTTP request commands between curl and HTTPie syntax.

Paste a ``curl ...`` command (for example one copied from a browser's
developer tools) and get back either a cleaned-up curl command or the
equivalent ``http ...`` HTTPie command, and vice versa.

Typical workflow::

    pbpaste | reqconv convert --to httpie
    reqconv convert --from httpie --to curl "http POST https://x.test a=1"

Only the URL, the method, a whitelist of headers (``Authorization`` and
``Content-Type`` by default) and a single JSON body survive a conversion;
everything else is dropped on purpose.

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    converter: The parsing and rendering engine.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
