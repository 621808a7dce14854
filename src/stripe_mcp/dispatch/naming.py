"""Operation name parsing and the naming helpers built on it.

Stripe operationIds follow a fixed convention: an HTTP verb prefix followed by
the capitalized path segments, where a detail endpoint repeats the singular
resource name (``PostCustomersCustomer`` for ``POST /v1/customers/{customer}``).
The parser relies on that convention and nothing else. Irregular names are
corrected by the classifier's exception table, not here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from stripe_mcp.core.errors import UnsupportedVerbError

OPERATION_ID_PATTERN = re.compile(r"^(Get|Post|Put|Patch|Delete)([A-Z][A-Za-z0-9]*)$")

# Token boundary sits immediately before every capital letter
_TOKEN_SPLIT = re.compile(r"(?=[A-Z])")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


@dataclass(frozen=True)
class ParsedOperationName:
    """Result of splitting an operationId into verb and resource tokens."""

    verb: str
    tokens: tuple[str, ...]
    resource_candidate: str
    is_detail: bool


def split_tokens(remainder: str) -> list[str]:
    """Split at each upper-case letter, keeping the capital on each token."""
    return [t for t in _TOKEN_SPLIT.split(remainder) if t]


def parse_operation_id(operation_id: str) -> ParsedOperationName:
    """Derive the resource name candidate and detail flag from an operationId.

    Args:
        operation_id: e.g. "PostCustomersCustomer" or "GetSetupIntents".

    Returns:
        ParsedOperationName with the lower-cased verb, the tokens after the
        verb, the resource candidate and whether the id names a detail call.

    Raises:
        UnsupportedVerbError: If the id does not match Verb+Resource with a
            supported verb.
    """
    match = OPERATION_ID_PATTERN.match(operation_id)
    if not match:
        raise UnsupportedVerbError(
            (
                f"operationId '{operation_id}' does not match the Verb+Resource grammar: "
                "Get, Post, Put, Patch or Delete followed by a capitalized resource name"
            ),
            details={"operationId": operation_id},
            suggestion="Use list-api-endpoints to see valid operationIds",
        )

    verb, remainder = match.group(1), match.group(2)
    tokens = split_tokens(remainder)

    first_singular = tokens[0].lower()
    if first_singular.endswith("s"):
        first_singular = first_singular[:-1]
    second = tokens[1].lower() if len(tokens) > 1 else ""
    is_detail = len(tokens) > 1 and first_singular == second

    if is_detail:
        candidate = tokens[0].lower()
    else:
        candidate = tokens[0].lower() + "".join(tokens[1:])

    return ParsedOperationName(
        verb=verb.lower(),
        tokens=tuple(tokens),
        resource_candidate=candidate,
        is_detail=is_detail,
    )


def singularize(name: str) -> str:
    """Naive English singular used for SDK type names."""
    if not name.endswith("s"):
        return name
    if name.endswith("ies"):
        return name[:-3] + "y"
    if name.endswith(("ses", "xes")):
        return name[:-2]
    if name.endswith("ss"):
        return name
    return name[:-1]


def camel_to_snake(name: str) -> str:
    """setupIntents -> setup_intents."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def snake_to_camel(name: str) -> str:
    """setup_intents -> setupIntents."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def sdk_params_type_name(resource: str, action_name: str) -> str:
    """Name of the SDK params type for a resource/action pair.

    Each dotted segment is singularized and PascalCased, so
    ("accounts.externalAccounts", "Update") gives
    "AccountExternalAccountUpdateParams".
    """
    parts = []
    for segment in resource.split("."):
        singular = singularize(segment)
        parts.append(singular[:1].upper() + singular[1:])
    return f"{''.join(parts)}{action_name}Params"
