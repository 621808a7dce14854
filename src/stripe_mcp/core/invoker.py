"""Runtime dispatch of operationIds to Stripe SDK calls."""

from __future__ import annotations

import logging
import traceback
from collections.abc import Mapping
from typing import Any

import stripe

from stripe_mcp.core.errors import BackendInvocationError, ResourceNotFoundError
from stripe_mcp.core.registry import ResourceRegistry
from stripe_mcp.dispatch.plan import CallPlan, build_plan
from stripe_mcp.schemas.index import SchemaIndex

logger = logging.getLogger(__name__)


class OperationInvoker:
    """Resolves an operationId and performs the matching SDK call.

    Everything up to the SDK call is pure; the call itself is the only
    suspension point. Calls are made once, never retried.
    """

    def __init__(self, index: SchemaIndex, registry: ResourceRegistry) -> None:
        self.index = index
        self.registry = registry

    def plan(self, operation_id: str) -> CallPlan:
        """Resolve an operationId to its call plan.

        Raises:
            OperationNotFoundError: If the operationId is not indexed.
            UnsupportedVerbError: If the operation's verb is unsupported.
        """
        record = self.index.find_operation(operation_id)
        return build_plan(record)

    async def invoke(
        self,
        operation_id: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> Any:
        """Invoke an API operation by operationId.

        Args:
            operation_id: e.g. "PostCustomers".
            parameters: Flat parameters; the path identifier is taken out
                and the rest is sent as the request params.

        Returns:
            The SDK response, unmodified.

        Raises:
            StripeMcpError: A subclass describing why the call could not be
                made or why Stripe rejected it.
        """
        plan = self.plan(operation_id)
        service = self.registry.lookup(plan.resource, operation_id)

        method = getattr(service, f"{plan.method_name}_async", None)
        if method is None:
            raise ResourceNotFoundError(
                f"Stripe SDK resource {plan.resource} has no '{plan.method_name}' method",
                details={
                    "resource": plan.resource,
                    "method": plan.method_name,
                    "operationId": operation_id,
                },
                suggestion="Use get-api-endpoint-schema to check the endpoint",
            )

        request = plan.bind(parameters)
        logger.debug(
            "Invoking %s -> %s.%s(%d identifiers)",
            operation_id,
            plan.resource,
            plan.method_name,
            len(request.identifiers),
        )

        try:
            return await method(*request.identifiers, params=request.body)
        except stripe.StripeError as e:
            logger.warning("Stripe call for %s failed: %s", operation_id, e)
            raise BackendInvocationError(
                f"Error calling Stripe API: {e.user_message or e}",
                details={
                    "operationId": operation_id,
                    "http_status": e.http_status,
                    "code": e.code,
                    "request_id": e.request_id,
                    "trace": traceback.format_exc(),
                },
                suggestion="Check the parameters with get-api-endpoint-schema",
            ) from e
