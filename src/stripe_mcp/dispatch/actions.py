"""Action selection: verb x shape x singleton -> generic CRUD action."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stripe_mcp.core.errors import UnsupportedVerbError
from stripe_mcp.dispatch.classifier import ResourceResolution

SUPPORTED_METHODS = ("get", "post", "put", "patch", "delete")


class ActionKind(str, Enum):
    """Generic actions every SDK resource service exposes a subset of."""

    LIST = "List"
    RETRIEVE = "Retrieve"
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"
    CANCEL = "Cancel"


# Resource-specific action renames, keyed by (canonical name, table action)
ACTION_RENAMES: dict[tuple[str, ActionKind], ActionKind] = {
    ("subscriptions", ActionKind.DELETE): ActionKind.CANCEL,
}

# SDK method overrides, keyed by (canonical name, action, singleton)
METHOD_RENAMES: dict[tuple[str, ActionKind, bool], str] = {
    ("accounts", ActionKind.RETRIEVE, True): "retrieve_current",
}


@dataclass(frozen=True)
class ActionDecision:
    """Output of action selection."""

    kind: ActionKind
    method_name: str

    @property
    def needs_identifier(self) -> bool:
        """Whether the action acts on one member (before singleton handling)."""
        return self.kind in (
            ActionKind.RETRIEVE,
            ActionKind.UPDATE,
            ActionKind.DELETE,
            ActionKind.CANCEL,
        )


def _table_action(method: str, resolution: ResourceResolution) -> ActionKind:
    if method == "get":
        if resolution.is_singleton or resolution.is_detail:
            return ActionKind.RETRIEVE
        return ActionKind.LIST
    if method == "post":
        return ActionKind.UPDATE if resolution.is_detail else ActionKind.CREATE
    if method in ("put", "patch"):
        return ActionKind.UPDATE
    if method == "delete":
        return ActionKind.DELETE
    raise UnsupportedVerbError(
        f"HTTP method '{method.upper()}' is not supported",
        details={"method": method, "resource": resolution.canonical_name},
        suggestion=f"Supported methods: {', '.join(m.upper() for m in SUPPORTED_METHODS)}",
    )


def select_action(method: str, resolution: ResourceResolution) -> ActionDecision:
    """Pick the generic action and SDK method name for an operation.

    Raises:
        UnsupportedVerbError: For verbs outside get/post/put/patch/delete.
    """
    method = method.lower()
    kind = _table_action(method, resolution)
    kind = ACTION_RENAMES.get((resolution.canonical_name, kind), kind)
    method_name = METHOD_RENAMES.get(
        (resolution.canonical_name, kind, resolution.is_singleton),
        kind.value.lower(),
    )
    return ActionDecision(kind=kind, method_name=method_name)
