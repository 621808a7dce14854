"""Call plans: the single dispatch decision shared by invocation and codegen."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from stripe_mcp.core.errors import MissingIdentifierError
from stripe_mcp.dispatch.actions import ActionKind, select_action
from stripe_mcp.dispatch.classifier import classify
from stripe_mcp.dispatch.naming import parse_operation_id, sdk_params_type_name
from stripe_mcp.dispatch.params import DEFAULT_IDENTIFIER, split_parameters

if TYPE_CHECKING:
    from stripe_mcp.schemas.index import OperationRecord


@dataclass(frozen=True)
class IdentifierSlot:
    """A positional identifier argument of an SDK method."""

    name: str
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True)
class InvocationRequest:
    """Identifiers and body for one SDK call."""

    identifiers: tuple[str, ...]
    body: dict[str, Any]


@dataclass(frozen=True)
class CallPlan:
    """How to call the SDK for one operation."""

    operation_id: str
    resource: str
    action: ActionKind
    method_name: str
    identifiers: tuple[IdentifierSlot, ...] = ()
    is_singleton: bool = False
    is_detail: bool = False
    note: str = ""

    @property
    def sdk_params_type(self) -> str:
        """SDK params type name, e.g. CustomerCreateParams."""
        return sdk_params_type_name(self.resource, self.action.value)

    def bind(self, parameters: Mapping[str, Any] | None) -> InvocationRequest:
        """Split caller parameters into positional identifiers and body.

        Raises:
            MissingIdentifierError: If a required identifier is absent.
        """
        body = dict(parameters or {})
        identifiers = []
        for slot in self.identifiers:
            identifier, body = split_parameters(body, slot.name, slot.aliases)
            if identifier is None:
                raise MissingIdentifierError(
                    f"{self.operation_id} requires the '{slot.name}' parameter",
                    details={
                        "operationId": self.operation_id,
                        "parameter": slot.name,
                        "aliases": list(slot.aliases),
                    },
                    suggestion=f"Pass {{'{slot.name}': '...'}} in parameters",
                )
            identifiers.append(identifier)
        return InvocationRequest(identifiers=tuple(identifiers), body=body)


@dataclass(frozen=True)
class OperationOverride:
    """Hand-written plan for an operation the table cannot express."""

    resource: str
    action: ActionKind
    method_name: str
    identifiers: tuple[IdentifierSlot, ...] = ()
    is_singleton: bool = False
    note: str = ""


OPERATION_OVERRIDES: dict[str, OperationOverride] = {
    "GetBalanceSettings": OperationOverride(
        "balanceSettings",
        ActionKind.RETRIEVE,
        "retrieve",
        is_singleton=True,
        note="Balance settings have no list method; this endpoint retrieves them.",
    ),
    "PostBalanceSettings": OperationOverride(
        "balanceSettings",
        ActionKind.UPDATE,
        "update",
        is_singleton=True,
        note="Balance settings have no create method; this endpoint updates them.",
    ),
    "GetLinkAccountSessionsSession": OperationOverride(
        "financialConnections.sessions",
        ActionKind.RETRIEVE,
        "retrieve",
        identifiers=(IdentifierSlot("session"),),
        note="Link account sessions are served by Financial Connections sessions.",
    ),
    "PostExternalAccountsId": OperationOverride(
        "accounts.externalAccounts",
        ActionKind.UPDATE,
        "update",
        identifiers=(IdentifierSlot("account", ("accountId",)), IdentifierSlot("id")),
        note="External accounts are nested under accounts.",
    ),
}


def requires_identifier(action: ActionKind, is_singleton: bool) -> bool:
    """Whether the action addresses a single member by identifier."""
    if action in (ActionKind.DELETE, ActionKind.CANCEL):
        return True
    return action in (ActionKind.RETRIEVE, ActionKind.UPDATE) and not is_singleton


def build_plan(record: OperationRecord) -> CallPlan:
    """Resolve an indexed operation to a call plan.

    Raises:
        UnsupportedVerbError: For verbs or operationId prefixes outside the
            supported five.
    """
    override = OPERATION_OVERRIDES.get(record.operation_id)
    if override is not None:
        return CallPlan(
            operation_id=record.operation_id,
            resource=override.resource,
            action=override.action,
            method_name=override.method_name,
            identifiers=override.identifiers,
            is_singleton=override.is_singleton,
            is_detail=record.is_detail_path,
            note=override.note,
        )

    parsed = parse_operation_id(record.operation_id)
    resolution = classify(parsed, record.method, record.operation_id)
    decision = select_action(record.method, resolution)

    slots: list[IdentifierSlot] = []
    if resolution.parent_keys:
        parent, *aliases = resolution.parent_keys
        slots.append(IdentifierSlot(parent, tuple(aliases)))
    if requires_identifier(decision.kind, resolution.is_singleton):
        slots.append(IdentifierSlot(record.path_parameter_name or DEFAULT_IDENTIFIER))

    return CallPlan(
        operation_id=record.operation_id,
        resource=resolution.canonical_name,
        action=decision.kind,
        method_name=decision.method_name,
        identifiers=tuple(slots),
        is_singleton=resolution.is_singleton,
        is_detail=resolution.is_detail,
    )
