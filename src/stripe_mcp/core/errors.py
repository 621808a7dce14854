"""Typed exceptions with structured info for AI consumption."""

from typing import Any


class StripeMcpError(Exception):
    """Base error with structured info for AI consumption.

    All errors include:
    - message: Human-readable error description
    - details: Dict with context (operationId, resource, etc.)
    - suggestion: Actionable fix suggestion for AI
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        suggestion: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.suggestion = suggestion

    def to_dict(self) -> dict[str, Any]:
        """Serialize error for tool response."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class OperationNotFoundError(StripeMcpError):
    """operationId is not part of the indexed API description."""

    pass


class ResourceNotFoundError(StripeMcpError):
    """Resolved resource name has no matching SDK service."""

    pass


class MissingIdentifierError(StripeMcpError):
    """Action needs a path identifier the parameters did not supply."""

    pass


class UnsupportedVerbError(StripeMcpError):
    """HTTP verb (or operationId prefix) outside get/post/put/patch/delete."""

    pass


class BackendInvocationError(StripeMcpError):
    """The Stripe API call itself failed."""

    pass
