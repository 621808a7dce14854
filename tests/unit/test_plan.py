"""Unit tests for call plans."""

from pathlib import Path

import pytest

from stripe_mcp.core.errors import MissingIdentifierError, StripeMcpError, UnsupportedVerbError
from stripe_mcp.dispatch.actions import ActionKind
from stripe_mcp.dispatch.plan import (
    OPERATION_OVERRIDES,
    CallPlan,
    IdentifierSlot,
    build_plan,
    requires_identifier,
)
from stripe_mcp.schemas.index import OperationRecord, SchemaIndex

FIXTURE_SPEC = Path(__file__).parent.parent / "fixtures" / "spec.json"


@pytest.fixture(scope="module")
def index() -> SchemaIndex:
    """Index over the fixture description."""
    return SchemaIndex.from_file(FIXTURE_SPEC)


def _plan(index: SchemaIndex, operation_id: str) -> CallPlan:
    return build_plan(index.find_operation(operation_id))


class TestBuildPlan:
    """Tests for build_plan() against the fixture operations."""

    @pytest.mark.parametrize(
        ("operation_id", "resource", "action", "method_name", "slots"),
        [
            ("GetCustomers", "customers", ActionKind.LIST, "list", ()),
            ("PostCustomers", "customers", ActionKind.CREATE, "create", ()),
            ("GetCustomersCustomer", "customers", ActionKind.RETRIEVE, "retrieve", ("customer",)),
            ("PostCustomersCustomer", "customers", ActionKind.UPDATE, "update", ("customer",)),
            ("DeleteCustomersCustomer", "customers", ActionKind.DELETE, "delete", ("customer",)),
            ("GetAccounts", "accounts", ActionKind.LIST, "list", ()),
            ("GetAccountsAccount", "accounts", ActionKind.RETRIEVE, "retrieve", ("account",)),
            ("GetInvoiceitems", "invoiceItems", ActionKind.LIST, "list", ()),
            ("PostInvoiceitems", "invoiceItems", ActionKind.CREATE, "create", ()),
            ("GetSetupIntents", "setupIntents", ActionKind.LIST, "list", ()),
            ("GetSetupIntentsIntent", "setupIntents", ActionKind.RETRIEVE, "retrieve", ("intent",)),
            ("GetSubscriptions", "subscriptions", ActionKind.LIST, "list", ()),
            ("GetProductsId", "products", ActionKind.RETRIEVE, "retrieve", ("id",)),
            ("PostProductsId", "products", ActionKind.UPDATE, "update", ("id",)),
            ("DeleteProductsId", "products", ActionKind.DELETE, "delete", ("id",)),
            ("GetEventsId", "events", ActionKind.RETRIEVE, "retrieve", ("id",)),
            (
                "GetWebhookEndpointsWebhookEndpoint",
                "webhookEndpoints",
                ActionKind.RETRIEVE,
                "retrieve",
                ("webhook_endpoint",),
            ),
        ],
    )
    def test_expected_plans(
        self,
        index: SchemaIndex,
        operation_id: str,
        resource: str,
        action: ActionKind,
        method_name: str,
        slots: tuple[str, ...],
    ) -> None:
        """Each operation maps to the expected resource, action and slots."""
        plan = _plan(index, operation_id)
        assert plan.resource == resource
        assert plan.action is action
        assert plan.method_name == method_name
        assert tuple(slot.name for slot in plan.identifiers) == slots

    def test_current_account(self, index: SchemaIndex) -> None:
        """GetAccount retrieves the current account without an identifier."""
        plan = _plan(index, "GetAccount")
        assert plan.resource == "accounts"
        assert plan.action is ActionKind.RETRIEVE
        assert plan.method_name == "retrieve_current"
        assert plan.is_singleton is True
        assert plan.identifiers == ()

    def test_balance_singleton(self, index: SchemaIndex) -> None:
        """GetBalance needs no identifier."""
        plan = _plan(index, "GetBalance")
        assert plan.resource == "balance"
        assert plan.action is ActionKind.RETRIEVE
        assert plan.identifiers == ()

    def test_subscription_delete_cancels(self, index: SchemaIndex) -> None:
        """Deleting a subscription is planned as cancel with the declared id name."""
        plan = _plan(index, "DeleteSubscriptionsSubscriptionExposedId")
        assert plan.action is ActionKind.CANCEL
        assert plan.method_name == "cancel"
        assert plan.identifiers == (IdentifierSlot("subscription_exposed_id"),)
        assert plan.sdk_params_type == "SubscriptionCancelParams"

    def test_identifier_defaults_to_id(self, index: SchemaIndex) -> None:
        """Without a declared path parameter the identifier is "id"."""
        plan = _plan(index, "DeleteCouponsCoupon")
        assert plan.identifiers == (IdentifierSlot("id"),)

    def test_override_takes_precedence(self, index: SchemaIndex) -> None:
        """Overridden operations skip the naming heuristics."""
        plan = _plan(index, "GetBalanceSettings")
        override = OPERATION_OVERRIDES["GetBalanceSettings"]
        assert plan.resource == override.resource
        assert plan.action is ActionKind.RETRIEVE
        assert plan.is_singleton is True
        assert plan.note == override.note

    def test_nested_override_has_two_slots(self, index: SchemaIndex) -> None:
        """External accounts need the parent account and their own id."""
        plan = _plan(index, "PostExternalAccountsId")
        assert plan.resource == "accounts.externalAccounts"
        assert plan.identifiers == (
            IdentifierSlot("account", ("accountId",)),
            IdentifierSlot("id"),
        )
        assert plan.is_detail is True

    def test_link_session_override(self, index: SchemaIndex) -> None:
        """Link account sessions resolve to Financial Connections."""
        plan = _plan(index, "GetLinkAccountSessionsSession")
        assert plan.resource == "financialConnections.sessions"
        assert plan.identifiers == (IdentifierSlot("session"),)

    def test_head_is_unsupported(self, index: SchemaIndex) -> None:
        """HEAD operations are indexed but cannot be planned."""
        with pytest.raises(UnsupportedVerbError):
            _plan(index, "HeadPing")

    def test_sdk_params_type(self, index: SchemaIndex) -> None:
        """Params type names follow the resource and action."""
        assert _plan(index, "PostCustomers").sdk_params_type == "CustomerCreateParams"
        assert _plan(index, "GetInvoiceitems").sdk_params_type == "InvoiceItemListParams"

    def test_every_operation_plans_or_fails_typed(self, index: SchemaIndex) -> None:
        """Resolution never fails with anything but a typed error."""
        for record in index.records():
            try:
                plan = build_plan(record)
            except StripeMcpError:
                continue
            assert plan.operation_id == record.operation_id
            assert plan.resource
            assert plan.method_name

    def test_plans_are_deterministic(self, index: SchemaIndex) -> None:
        """Planning the same record twice gives equal plans."""
        record = index.find_operation("PostCustomersCustomer")
        assert build_plan(record) == build_plan(record)

    @pytest.mark.parametrize(
        ("path", "operation_id", "resource", "slot"),
        [
            ("/v1/products/{id}", "GetProductsId", "products", "id"),
            ("/v1/events/{id}", "GetEventsId", "events", "id"),
            (
                "/v1/webhook_endpoints/{webhook_endpoint}",
                "GetWebhookEndpointsWebhookEndpoint",
                "webhookEndpoints",
                "webhook_endpoint",
            ),
            (
                "/v1/subscription_items/{item}",
                "GetSubscriptionItemsItem",
                "subscriptionItems",
                "item",
            ),
            (
                "/v1/subscription_schedules/{schedule}",
                "GetSubscriptionSchedulesSchedule",
                "subscriptionSchedules",
                "schedule",
            ),
            ("/v1/tax_ids/{id}", "GetTaxIdsId", "taxIds", "id"),
            ("/v1/tax_codes/{id}", "GetTaxCodesId", "taxCodes", "id"),
            ("/v1/file_links/{link}", "GetFileLinksLink", "fileLinks", "link"),
            ("/v1/country_specs/{country}", "GetCountrySpecsCountry", "countrySpecs", "country"),
            ("/v1/exchange_rates/{rate_id}", "GetExchangeRatesRateId", "exchangeRates", "rate_id"),
            (
                "/v1/payment_method_configurations/{configuration}",
                "GetPaymentMethodConfigurationsConfiguration",
                "paymentMethodConfigurations",
                "configuration",
            ),
            (
                "/v1/payment_method_domains/{payment_method_domain}",
                "GetPaymentMethodDomainsPaymentMethodDomain",
                "paymentMethodDomains",
                "payment_method_domain",
            ),
        ],
    )
    def test_compound_detail_retrieves(
        self, path: str, operation_id: str, resource: str, slot: str
    ) -> None:
        """Detail ids that do not repeat the first token still plan as retrieve."""
        record = OperationRecord.from_openapi(
            path,
            "get",
            {
                "operationId": operation_id,
                "parameters": [
                    {"name": slot, "in": "path", "required": True, "schema": {"type": "string"}}
                ],
            },
        )
        plan = build_plan(record)
        assert plan.resource == resource
        assert plan.action is ActionKind.RETRIEVE
        assert plan.method_name == "retrieve"
        assert plan.is_detail is True
        assert plan.identifiers == (IdentifierSlot(slot),)


class TestBind:
    """Tests for CallPlan.bind()."""

    def test_bind_splits_identifier(self, index: SchemaIndex) -> None:
        """The identifier goes positional, the rest into the body."""
        plan = _plan(index, "PostCustomersCustomer")
        request = plan.bind({"customer": "cus_123", "email": "new@example.com"})
        assert request.identifiers == ("cus_123",)
        assert request.body == {"email": "new@example.com"}

    def test_bind_without_slots(self, index: SchemaIndex) -> None:
        """Collection operations send everything as body."""
        plan = _plan(index, "PostCustomers")
        request = plan.bind({"email": "a@example.com", "name": "A"})
        assert request.identifiers == ()
        assert request.body == {"email": "a@example.com", "name": "A"}

    def test_bind_none(self, index: SchemaIndex) -> None:
        """None parameters bind to an empty body."""
        request = _plan(index, "GetCustomers").bind(None)
        assert request.identifiers == ()
        assert request.body == {}

    def test_missing_identifier(self, index: SchemaIndex) -> None:
        """A required identifier that is absent raises."""
        plan = _plan(index, "GetCustomersCustomer")
        with pytest.raises(MissingIdentifierError) as exc_info:
            plan.bind({"expand": ["default_source"]})
        assert "customer" in str(exc_info.value)
        assert exc_info.value.details["parameter"] == "customer"
        assert exc_info.value.details["operationId"] == "GetCustomersCustomer"

    def test_bind_parent_alias(self, index: SchemaIndex) -> None:
        """The parent id may be passed under its alias."""
        plan = _plan(index, "PostExternalAccountsId")
        request = plan.bind({"accountId": "acct_1", "id": "ba_1", "metadata": {"k": "v"}})
        assert request.identifiers == ("acct_1", "ba_1")
        assert request.body == {"metadata": {"k": "v"}}

    def test_bind_missing_parent(self, index: SchemaIndex) -> None:
        """The parent id is required too."""
        plan = _plan(index, "PostExternalAccountsId")
        with pytest.raises(MissingIdentifierError) as exc_info:
            plan.bind({"id": "ba_1"})
        assert exc_info.value.details["aliases"] == ["accountId"]


class TestRequiresIdentifier:
    """Tests for requires_identifier()."""

    @pytest.mark.parametrize(
        ("action", "singleton", "expected"),
        [
            (ActionKind.LIST, False, False),
            (ActionKind.CREATE, False, False),
            (ActionKind.RETRIEVE, False, True),
            (ActionKind.RETRIEVE, True, False),
            (ActionKind.UPDATE, False, True),
            (ActionKind.UPDATE, True, False),
            (ActionKind.DELETE, False, True),
            (ActionKind.CANCEL, False, True),
        ],
    )
    def test_matrix(self, action: ActionKind, singleton: bool, expected: bool) -> None:
        """Member actions need an id unless the resource is a singleton."""
        assert requires_identifier(action, singleton) is expected
