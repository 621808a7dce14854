"""Resource classification: candidate name -> canonical SDK resource name."""

from __future__ import annotations

from dataclasses import dataclass

from stripe_mcp.dispatch.naming import ParsedOperationName

# =============================================================================
# Exception Table
# =============================================================================
# Rows are checked in order and the first match wins. A row may restrict
# itself by HTTP method, by path shape or by operationId. Canonical names are
# camelCase and may be dotted to reach nested SDK services.


@dataclass(frozen=True)
class ResourceException:
    """One correction of a parsed resource candidate.

    Attributes:
        candidate: Resource candidate produced by the name parser.
        canonical: Corrected resource name (dotted for nested services).
        method: Only apply to this lower-case HTTP method.
        detail: Only apply when the parsed detail flag equals this value.
        operation_id: Only apply to this operationId.
        force_detail: Override the parsed detail flag.
        parent_keys: Parameter names (first is canonical, rest are aliases)
            that carry the parent id of a nested service.
    """

    candidate: str
    canonical: str
    method: str | None = None
    detail: bool | None = None
    operation_id: str | None = None
    force_detail: bool | None = None
    parent_keys: tuple[str, ...] = ()

    def matches(self, candidate: str, method: str, is_detail: bool, operation_id: str) -> bool:
        """Check whether this row applies."""
        if candidate != self.candidate:
            return False
        if self.method is not None and method != self.method:
            return False
        if self.detail is not None and is_detail != self.detail:
            return False
        return self.operation_id is None or operation_id == self.operation_id


RESOURCE_EXCEPTIONS: tuple[ResourceException, ...] = (
    ResourceException("invoiceitems", "invoiceItems"),
    # GET /v1/account is the current account; the SDK serves it from accounts
    ResourceException("account", "accounts", method="get", detail=False),
    # Legacy Link names of the Financial Connections resources
    ResourceException("linkAccountSessions", "financialConnections.sessions"),
    ResourceException("linkedAccounts", "financialConnections.accounts"),
    ResourceException("linkedAccountsAccount", "financialConnections.accounts", force_detail=True),
    ResourceException(
        "externalAccounts",
        "accounts.externalAccounts",
        parent_keys=("account", "accountId"),
    ),
    # Compound resources whose detail ids do not repeat the first token
    ResourceException("setupIntentsIntent", "setupIntents", force_detail=True),
    ResourceException("paymentIntentsIntent", "paymentIntents", force_detail=True),
    ResourceException("paymentMethodsPaymentMethod", "paymentMethods", force_detail=True),
    ResourceException("paymentLinksPaymentLink", "paymentLinks", force_detail=True),
    ResourceException("balanceTransactionsId", "balanceTransactions", force_detail=True),
    ResourceException("taxRatesTaxRate", "taxRates", force_detail=True),
    ResourceException("promotionCodesPromotionCode", "promotionCodes", force_detail=True),
    ResourceException("shippingRatesShippingRateToken", "shippingRates", force_detail=True),
    ResourceException("creditNotesId", "creditNotes", force_detail=True),
    ResourceException("applicationFeesId", "applicationFees", force_detail=True),
    ResourceException("productsId", "products", force_detail=True),
    ResourceException("eventsId", "events", force_detail=True),
    ResourceException("webhookEndpointsWebhookEndpoint", "webhookEndpoints", force_detail=True),
    ResourceException("subscriptionItemsItem", "subscriptionItems", force_detail=True),
    ResourceException("subscriptionSchedulesSchedule", "subscriptionSchedules", force_detail=True),
    ResourceException("taxIdsId", "taxIds", force_detail=True),
    ResourceException("taxCodesId", "taxCodes", force_detail=True),
    ResourceException("fileLinksLink", "fileLinks", force_detail=True),
    ResourceException("countrySpecsCountry", "countrySpecs", force_detail=True),
    ResourceException("exchangeRatesRateId", "exchangeRates", force_detail=True),
    ResourceException(
        "paymentMethodConfigurationsConfiguration",
        "paymentMethodConfigurations",
        force_detail=True,
    ),
    ResourceException(
        "paymentMethodDomainsPaymentMethodDomain",
        "paymentMethodDomains",
        force_detail=True,
    ),
)

# Resources with no collection semantics at all
SINGLETON_RESOURCES = frozenset({"balance", "account"})

# (canonical name, method, detail, operationId) combinations that address the
# singleton view of an otherwise-collection resource
SINGLETON_VIEWS = frozenset({("accounts", "get", False, "GetAccount")})


@dataclass(frozen=True)
class ResourceResolution:
    """Output of classification."""

    canonical_name: str
    is_singleton: bool
    is_detail: bool
    parent_keys: tuple[str, ...] = ()


def find_exception(
    candidate: str,
    method: str,
    is_detail: bool,
    operation_id: str,
) -> ResourceException | None:
    """Return the first exception row that applies, if any."""
    for row in RESOURCE_EXCEPTIONS:
        if row.matches(candidate, method, is_detail, operation_id):
            return row
    return None


def classify(parsed: ParsedOperationName, method: str, operation_id: str) -> ResourceResolution:
    """Map a parsed operation name to its canonical resource.

    Args:
        parsed: Output of parse_operation_id.
        method: Lower-case HTTP method of the operation.
        operation_id: The operationId being resolved.

    Returns:
        ResourceResolution. Existence of the resource in the SDK is checked
        later by the ResourceRegistry.
    """
    method = method.lower()
    name = parsed.resource_candidate
    is_detail = parsed.is_detail
    parent_keys: tuple[str, ...] = ()

    row = find_exception(name, method, is_detail, operation_id)
    if row is not None:
        name = row.canonical
        parent_keys = row.parent_keys
        if row.force_detail is not None:
            is_detail = row.force_detail

    is_singleton = (
        name in SINGLETON_RESOURCES or (name, method, is_detail, operation_id) in SINGLETON_VIEWS
    )

    return ResourceResolution(
        canonical_name=name,
        is_singleton=is_singleton,
        is_detail=is_detail,
        parent_keys=parent_keys,
    )
