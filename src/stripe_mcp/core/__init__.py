"""Core components: errors, SDK resource registry, runtime invocation.

Only the error types are re-exported here; the registry and invoker import
the dispatch package, which itself depends on these errors.
"""

from stripe_mcp.core.errors import (
    BackendInvocationError,
    MissingIdentifierError,
    OperationNotFoundError,
    ResourceNotFoundError,
    StripeMcpError,
    UnsupportedVerbError,
)

__all__ = [
    "BackendInvocationError",
    "MissingIdentifierError",
    "OperationNotFoundError",
    "ResourceNotFoundError",
    "StripeMcpError",
    "UnsupportedVerbError",
]
