"""Lookup of Stripe SDK services by canonical resource name."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from stripe_mcp.core.errors import ResourceNotFoundError
from stripe_mcp.dispatch.naming import camel_to_snake

if TYPE_CHECKING:
    import stripe

_SEGMENT = re.compile(r"^[a-z][A-Za-z0-9]*$")


class ResourceRegistry:
    """Maps dotted camelCase resource names to SDK service objects.

    "setupIntents" resolves to ``root.setup_intents`` and
    "accounts.externalAccounts" to ``root.accounts.external_accounts``.
    Resolved handles are cached; the root is never mutated.
    """

    def __init__(self, root: Any) -> None:
        self._root = root
        self._handles: dict[str, Any] = {}

    @classmethod
    def for_client(cls, client: stripe.StripeClient) -> ResourceRegistry:
        """Registry over the v1 services of a StripeClient."""
        return cls(client.v1)

    def lookup(self, name: str, operation_id: str | None = None) -> Any:
        """Resolve a resource name to its SDK service.

        Args:
            name: Canonical resource name, e.g. "customers" or
                "accounts.externalAccounts".
            operation_id: Originating operation, reported on failure.

        Raises:
            ResourceNotFoundError: If any segment has no matching service.
        """
        if name in self._handles:
            return self._handles[name]

        handle = self._root
        for segment in name.split("."):
            child = None
            if _SEGMENT.match(segment):
                child = getattr(handle, camel_to_snake(segment), None)
            if child is None:
                raise ResourceNotFoundError(
                    f"Stripe SDK resource not found for: {name}"
                    + (f" (from operationId: {operation_id})" if operation_id else ""),
                    details={"resource": name, "segment": segment, "operationId": operation_id},
                    suggestion="The operation is not reachable through the SDK's generic services",
                )
            handle = child

        self._handles[name] = handle
        return handle

    def contains(self, name: str) -> bool:
        """Check whether a resource name resolves."""
        try:
            self.lookup(name)
        except ResourceNotFoundError:
            return False
        return True
