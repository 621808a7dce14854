"""Source generation of standalone Python wrappers, one per operation."""

from __future__ import annotations

import json
import keyword
import re
import textwrap
from dataclasses import dataclass
from typing import TYPE_CHECKING

from stripe_mcp.dispatch.naming import camel_to_snake

if TYPE_CHECKING:
    from stripe_mcp.dispatch.plan import CallPlan, IdentifierSlot
    from stripe_mcp.schemas.index import OperationRecord, ParameterDescriptor

# =============================================================================
# Type Mapping
# =============================================================================

KIND_TO_ANNOTATION = {
    "string": "str",
    "number": "float",
    "boolean": "bool",
    "array": "list[Any]",
    "object": "dict[str, Any]",
    "unknown": "Any",
}

# Local names used by the generated function body
_RESERVED_NAMES = frozenset({"client", "params", "options", "candidates", "value", "key", "Any"})

MAX_FIELD_COMMENT = 100


@dataclass(frozen=True)
class RenderedOperation:
    """Generated artifact for one operation."""

    name: str
    params_type_name: str
    sdk_params_type: str
    source: str


def _clean(text: str) -> str:
    """Collapse whitespace to single spaces."""
    return re.sub(r"\s+", " ", text).strip()


def _docstring_text(text: str) -> str:
    """Escape text for embedding in a triple-quoted docstring."""
    escaped = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if escaped.endswith('"'):
        escaped = escaped[:-1] + '\\"'
    return escaped


def _wrap(text: str, indent: str = "") -> list[str]:
    return textwrap.wrap(
        text,
        width=88 - len(indent),
        initial_indent=indent,
        subsequent_indent=indent,
        break_long_words=False,
        break_on_hyphens=False,
    ) or [indent.rstrip()]


def _variable_name(slot: IdentifierSlot, position: int) -> str:
    name = slot.name
    if name.isidentifier() and not keyword.iskeyword(name) and name not in _RESERVED_NAMES:
        return name
    return f"identifier_{position}"


def _service_expression(resource: str) -> str:
    """client.v1 attribute chain for a dotted resource name."""
    return ".".join(["client", "v1", *(camel_to_snake(s) for s in resource.split("."))])


def _collect_fields(record: OperationRecord, plan: CallPlan) -> list[tuple[str, str, bool, str]]:
    """(name, annotation, required, comment) for every input, first name wins."""
    fields: dict[str, tuple[str, str, bool, str]] = {}

    descriptors: list[ParameterDescriptor] = [*record.parameters, *record.body_fields]
    for desc in descriptors:
        if desc.name in fields:
            continue
        comment = _clean(desc.description)
        if len(comment) > MAX_FIELD_COMMENT:
            comment = comment[: MAX_FIELD_COMMENT - 3] + "..."
        fields[desc.name] = (desc.name, KIND_TO_ANNOTATION[desc.kind], desc.required, comment)

    # Identifiers are always passed through params, declared or not. A slot
    # with aliases can be satisfied by any of its keys, so none is Required.
    for slot in plan.identifiers:
        required = not slot.aliases
        if slot.name not in fields:
            fields[slot.name] = (slot.name, "str", required, "")
        else:
            name, _, _, comment = fields[slot.name]
            fields[slot.name] = (name, "str", required, comment)
        for alias in slot.aliases:
            fields.setdefault(alias, (alias, "str", False, ""))

    return list(fields.values())


def render_params_type(type_name: str, fields: list[tuple[str, str, bool, str]]) -> list[str]:
    """Render the TypedDict (functional syntax, so any key is allowed)."""
    if not fields:
        return [f"{type_name} = dict[str, Any]"]

    lines = [f"{type_name} = TypedDict(", f'    "{type_name}",', "    {"]
    for name, annotation, required, comment in fields:
        if comment:
            lines.append(f"        # {comment}")
        if required:
            annotation = f"Required[{annotation}]"
        lines.append(f"        {json.dumps(name)}: {annotation},")
    lines.extend(["    },", "    total=False,", ")"])
    return lines


def render_body(plan: CallPlan) -> list[str]:
    """Render the dispatch statements of the wrapper function."""
    lines = ["    options: dict[str, Any] = dict(params or {})"]
    if plan.note:
        lines.append(f"    # {plan.note}")

    arguments = []
    for position, slot in enumerate(plan.identifiers):
        var = _variable_name(slot, position)
        if slot.aliases:
            keys = ", ".join(json.dumps(k) for k in (slot.name, *slot.aliases))
            lines.append(f"    candidates = [options.pop(key, None) for key in ({keys})]")
            lines.append(
                f"    {var} = next((value for value in candidates if value is not None), None)"
            )
        else:
            lines.append(f"    {var} = options.pop({json.dumps(slot.name)}, None)")
        lines.append(f"    if {var} is None:")
        lines.append(
            f"        raise ValueError(\"{plan.operation_id} requires the '{slot.name}' parameter\")"
        )
        arguments.append(var)

    arguments.append("params=options")
    call = f"{_service_expression(plan.resource)}.{plan.method_name}_async"
    lines.append(f"    return await {call}({', '.join(arguments)})")
    return lines


def render_operation(record: OperationRecord, plan: CallPlan) -> RenderedOperation:
    """Render a self-contained module wrapping one operation.

    Args:
        record: Indexed operation (inputs and description).
        plan: Call plan built for the same record.

    Returns:
        RenderedOperation with the module source.
    """
    name = record.operation_id
    type_name = f"{name}Params"
    fields = _collect_fields(record, plan)
    description = _docstring_text(_clean(record.description)) or (
        f"{record.method.upper()} {record.path}"
    )
    has_required = any(required for _, _, required, _ in fields)

    typing_names = ["Any"]
    if fields:
        if has_required:
            typing_names.append("Required")
        typing_names.append("TypedDict")

    lines = ['"""' + f"{record.method.upper()} {record.path}", ""]
    lines.extend(_wrap(description))
    lines.extend(
        ["", "Generated by stripe-mcp from the Stripe OpenAPI description. Do not edit.", '"""']
    )
    lines.extend(
        [
            "",
            "from __future__ import annotations",
            "",
            f"from typing import {', '.join(typing_names)}",
            "",
            "import stripe",
            "",
            f"# Structural counterpart of the SDK's {plan.sdk_params_type}",
        ]
    )
    lines.extend(render_params_type(type_name, fields))
    lines.extend(
        [
            "",
            "",
            f"async def {name}(",
            "    client: stripe.StripeClient,",
            f"    params: {type_name} | None = None,",
            ") -> Any:",
        ]
    )
    doc_lines = _wrap(description, "    ")
    lines.append('    """' + doc_lines[0].strip())
    lines.extend(doc_lines[1:])
    lines.extend(
        [
            "",
            "    Args:",
            "        client: Stripe client instance.",
            "        params: Parameters for the operation.",
            "",
            "    Returns:",
            "        The API response.",
            '    """',
        ]
    )
    lines.extend(render_body(plan))

    return RenderedOperation(
        name=name,
        params_type_name=type_name,
        sdk_params_type=plan.sdk_params_type,
        source="\n".join(lines) + "\n",
    )


def render_index(names: list[str]) -> str:
    """Render the package __init__ re-exporting every wrapper alphabetically."""
    ordered = sorted(names)
    lines = [
        '"""Generated Stripe operation wrappers.',
        "",
        "Each module is self-contained with its own params type.",
        '"""',
        "",
    ]
    lines.extend(f"from .{name} import {name}" for name in ordered)
    lines.extend(["", "__all__ = ["])
    lines.extend(f'    "{name}",' for name in ordered)
    lines.append("]")
    return "\n".join(lines) + "\n"
