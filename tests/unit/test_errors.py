"""Unit tests for error classes."""

import pytest

from stripe_mcp.core.errors import (
    BackendInvocationError,
    MissingIdentifierError,
    OperationNotFoundError,
    ResourceNotFoundError,
    StripeMcpError,
    UnsupportedVerbError,
)


class TestStripeMcpError:
    """Tests for base StripeMcpError class."""

    def test_basic_creation(self) -> None:
        """Error can be created with just a message."""
        err = StripeMcpError("Something went wrong")
        assert err.message == "Something went wrong"
        assert err.details == {}
        assert err.suggestion == ""
        assert str(err) == "Something went wrong"

    def test_with_details(self) -> None:
        """Error can include details dict."""
        err = StripeMcpError("Lookup failed", details={"operationId": "GetWidgets"})
        assert err.details == {"operationId": "GetWidgets"}

    def test_to_dict(self) -> None:
        """Serialization includes type, message, details and suggestion."""
        err = StripeMcpError(
            "Lookup failed",
            details={"operationId": "GetWidgets"},
            suggestion="Use list-api-endpoints",
        )
        assert err.to_dict() == {
            "type": "StripeMcpError",
            "message": "Lookup failed",
            "details": {"operationId": "GetWidgets"},
            "suggestion": "Use list-api-endpoints",
        }


class TestSubclasses:
    """Tests for the concrete error kinds."""

    @pytest.mark.parametrize(
        "error_class",
        [
            OperationNotFoundError,
            ResourceNotFoundError,
            MissingIdentifierError,
            UnsupportedVerbError,
            BackendInvocationError,
        ],
    )
    def test_inherits_base(self, error_class: type[StripeMcpError]) -> None:
        """Every kind is a StripeMcpError and reports its own type name."""
        err = error_class("boom")
        assert isinstance(err, StripeMcpError)
        assert err.to_dict()["type"] == error_class.__name__

    def test_catchable_as_base(self) -> None:
        """Callers can handle all kinds with one except clause."""
        with pytest.raises(StripeMcpError):
            raise MissingIdentifierError("PostCustomersCustomer requires the 'customer' parameter")
