"""FastMCP server exposing the Stripe API through generic operations."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, TypeAlias

import stripe
from mcp.server.fastmcp import Context, FastMCP
from pydantic_core import to_jsonable_python

from stripe_mcp.config import load_config, load_instructions
from stripe_mcp.core import OperationNotFoundError, StripeMcpError
from stripe_mcp.core.invoker import OperationInvoker
from stripe_mcp.core.registry import ResourceRegistry
from stripe_mcp.models import EndpointList, OperationSchema
from stripe_mcp.schemas import SchemaIndex

# Context is generic over (Session, LifespanContext, Request) - use Any for all
Ctx: TypeAlias = Context[Any, Any, Any]

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration (loaded at module level)
# =============================================================================
config = load_config()


# =============================================================================
# Lifespan - manages shared resources
# =============================================================================
@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Initialize and cleanup shared resources."""
    # The description is read once and stays read-only for the process
    index = SchemaIndex.from_file(config.spec_path)

    if not config.api_key:
        logger.warning("STRIPE_API_KEY is not set; Stripe API calls will fail")

    # Async transport for the SDK; no timeout or retry policy is added here
    http_client = stripe.AIOHTTPClient()
    client = stripe.StripeClient(
        config.api_key,
        stripe_version=config.resolve_api_version(index.api_version),
        http_client=http_client,
    )

    registry = ResourceRegistry.for_client(client)
    invoker = OperationInvoker(index, registry)

    yield {
        "index": index,
        "client": client,
        "registry": registry,
        "invoker": invoker,
        "config": config,
    }

    # Shutdown
    await http_client.close_async()


mcp = FastMCP(
    "Stripe MCP",
    instructions=load_instructions(),
    lifespan=lifespan,
    log_level=config.log_level,
)


# =============================================================================
# Response conversion
# =============================================================================
def _unwrap_sdk_object(value: Any) -> Any:
    # StripeObject is not a dict subclass in every SDK release
    if isinstance(value, stripe.StripeObject):
        return value.to_dict()
    return str(value)


def to_payload(result: Any) -> Any:
    """Convert an SDK response, nested objects included, to plain JSON data."""
    if isinstance(result, stripe.StripeObject):
        result = result.to_dict()
    return to_jsonable_python(result, fallback=_unwrap_sdk_object)


# =============================================================================
# Tool 1: Echo
# =============================================================================
@mcp.tool()  # type: ignore[untyped-decorator]
async def echo(message: str) -> str:
    """Echoes back the input."""
    return f"Echo: {message}"


# =============================================================================
# Tool 2: List API Endpoints
# =============================================================================
@mcp.tool(name="list-api-endpoints")  # type: ignore[untyped-decorator]
async def list_api_endpoints(ctx: Ctx) -> EndpointList:
    """
    List all API endpoints.

    Next, use get-api-endpoint-schema to get the schema for a given API endpoint.
    """
    index: SchemaIndex = ctx.request_context.lifespan_context["index"]
    operation_ids = sorted(index.list_operation_ids())
    return EndpointList(total=len(operation_ids), operation_ids=operation_ids)


# =============================================================================
# Tool 3: Get API Endpoint Schema
# =============================================================================
@mcp.tool(name="get-api-endpoint-schema")  # type: ignore[untyped-decorator]
async def get_api_endpoint_schema(ctx: Ctx, operationId: str) -> dict[str, Any]:  # noqa: N803
    """
    Get the OpenAPI schema for a given API endpoint by operationId.

    Next, use invoke-api-endpoint to invoke the API endpoint with the
    appropriate parameters.

    Args:
        operationId: The operationId of the API endpoint to get the schema
            for (e.g., 'PostCustomers', 'GetCharges')
    """
    index: SchemaIndex = ctx.request_context.lifespan_context["index"]

    try:
        schema = index.get_operation_schema(operationId)
    except OperationNotFoundError as e:
        return e.to_dict()

    return OperationSchema.model_validate(schema).model_dump(by_alias=True)


# =============================================================================
# Tool 4: Invoke API Endpoint
# =============================================================================
@mcp.tool(name="invoke-api-endpoint")  # type: ignore[untyped-decorator]
async def invoke_api_endpoint(
    ctx: Ctx,
    operationId: str,  # noqa: N803
    parameters: dict[str, Any] | None = None,
) -> Any:
    """
    Invoke a given API endpoint with the appropriate parameters.

    Parameters are flat: include the path identifier (e.g. "customer" for
    PostCustomersCustomer) alongside the body fields.

    Args:
        operationId: The operationId of the API endpoint to invoke
        parameters: The parameters to pass to the API endpoint

    Returns:
        The Stripe API response, or an error with type, message, details
        and suggestion.
    """
    invoker: OperationInvoker = ctx.request_context.lifespan_context["invoker"]

    try:
        result = await invoker.invoke(operationId, parameters or {})
    except StripeMcpError as e:
        return e.to_dict()

    return to_payload(result)


# =============================================================================
# Entry Point
# =============================================================================
def main() -> None:
    """Run the MCP server."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
