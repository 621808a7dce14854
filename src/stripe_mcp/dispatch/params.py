"""Split the caller's parameter bag into path identifier and request body."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

DEFAULT_IDENTIFIER = "id"


def split_parameters(
    parameters: Mapping[str, Any] | None,
    identifier_name: str | None,
    aliases: tuple[str, ...] = (),
) -> tuple[str | None, dict[str, Any]]:
    """Remove the identifier from the parameters.

    Args:
        parameters: Caller-supplied parameters (not modified).
        identifier_name: Declared path parameter name, or None to use "id".
        aliases: Alternative keys accepted for the same identifier.

    Returns:
        (identifier or None, body without the identifier or any alias key).
    """
    name = identifier_name or DEFAULT_IDENTIFIER
    body = dict(parameters or {})

    identifier = None
    for key in (name, *aliases):
        value = body.pop(key, None)
        if identifier is None and value is not None:
            identifier = value

    return (str(identifier) if identifier is not None else None), body
