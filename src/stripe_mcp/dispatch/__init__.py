"""Operation resolution: operationId -> resource, action and identifiers."""

from stripe_mcp.dispatch.actions import ActionDecision, ActionKind, select_action
from stripe_mcp.dispatch.classifier import ResourceResolution, classify
from stripe_mcp.dispatch.naming import ParsedOperationName, parse_operation_id
from stripe_mcp.dispatch.params import split_parameters
from stripe_mcp.dispatch.plan import CallPlan, IdentifierSlot, InvocationRequest, build_plan

__all__ = [
    "ActionDecision",
    "ActionKind",
    "CallPlan",
    "IdentifierSlot",
    "InvocationRequest",
    "ParsedOperationName",
    "ResourceResolution",
    "build_plan",
    "classify",
    "parse_operation_id",
    "select_action",
    "split_parameters",
]
