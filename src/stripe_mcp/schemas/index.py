"""Operation index over the Stripe OpenAPI description."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from rapidfuzz import fuzz

from stripe_mcp.core.errors import OperationNotFoundError

logger = logging.getLogger(__name__)

# Only top-level collection paths and one-level-deeper detail paths are indexed
COLLECTION_PATH = re.compile(r"^/v1/[^/]+$")
DETAIL_PATH = re.compile(r"^/v1/[^/]+/\{[^}]+\}$")

# Every operation key an OpenAPI path item may carry. Verbs the dispatcher
# cannot handle are still indexed so that resolving them fails loudly.
HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

ParameterLocation = Literal["path", "query", "body"]
ParameterKind = Literal["string", "number", "boolean", "array", "object", "unknown"]


def schema_kind(schema: dict[str, Any] | None) -> ParameterKind:
    """Reduce a JSON schema to its primitive kind."""
    schema_type = (schema or {}).get("type")
    if schema_type == "string":
        return "string"
    if schema_type in ("integer", "number"):
        return "number"
    if schema_type in ("boolean", "array", "object"):
        return schema_type  # type: ignore[no-any-return]
    return "unknown"


def is_indexed_path(path: str) -> bool:
    """Check whether a path has the collection or detail shape."""
    return bool(COLLECTION_PATH.match(path) or DETAIL_PATH.match(path))


@dataclass(frozen=True)
class ParameterDescriptor:
    """One declared input of an operation."""

    name: str
    location: ParameterLocation
    required: bool = False
    kind: ParameterKind = "unknown"
    description: str = ""
    schema: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class OperationRecord:
    """One endpoint definition, immutable once indexed."""

    operation_id: str
    path: str
    method: str
    description: str = ""
    parameters: tuple[ParameterDescriptor, ...] = ()
    body_fields: tuple[ParameterDescriptor, ...] = ()
    request_body: dict[str, Any] | None = field(default=None, compare=False)
    responses: dict[str, Any] = field(default_factory=dict, compare=False)
    raw_parameters: tuple[dict[str, Any], ...] = field(default=(), compare=False)

    @property
    def is_detail_path(self) -> bool:
        """True for /v1/{segment}/{identifier} paths."""
        return bool(DETAIL_PATH.match(self.path))

    @property
    def path_parameter_name(self) -> str | None:
        """Name of the declared path parameter, if the operation has one."""
        for param in self.parameters:
            if param.location == "path":
                return param.name
        return None

    @classmethod
    def from_openapi(cls, path: str, method: str, operation: dict[str, Any]) -> OperationRecord:
        """Build a record from one OpenAPI operation object."""
        raw_params = tuple(operation.get("parameters") or ())
        parameters = []
        for param in raw_params:
            location = param.get("in")
            if location not in ("path", "query"):
                continue
            schema = param.get("schema") or {}
            parameters.append(
                ParameterDescriptor(
                    name=param["name"],
                    location=location,
                    required=bool(param.get("required", False)),
                    kind=schema_kind(schema),
                    description=param.get("description") or "",
                    schema=schema,
                )
            )

        body_fields = []
        request_body = operation.get("requestBody")
        form_schema = _form_schema(request_body)
        required_fields = set(form_schema.get("required") or ())
        for name, prop in (form_schema.get("properties") or {}).items():
            body_fields.append(
                ParameterDescriptor(
                    name=name,
                    location="body",
                    required=name in required_fields,
                    kind=schema_kind(prop),
                    description=prop.get("description") or "",
                    schema=prop,
                )
            )

        return cls(
            operation_id=operation["operationId"],
            path=path,
            method=method,
            description=operation.get("description") or "",
            parameters=tuple(parameters),
            body_fields=tuple(body_fields),
            request_body=request_body,
            responses=operation.get("responses") or {},
            raw_parameters=raw_params,
        )


def _form_schema(request_body: dict[str, Any] | None) -> dict[str, Any]:
    """Form-encoded body schema of a request body, or empty."""
    if not request_body:
        return {}
    content = request_body.get("content") or {}
    form = content.get(FORM_CONTENT_TYPE) or {}
    schema: dict[str, Any] = form.get("schema") or {}
    return schema


def extract_input_schema(record: OperationRecord) -> dict[str, Any]:
    """Merge query/path parameters and body fields into one JSON schema.

    Args:
        record: Indexed operation.

    Returns:
        {"type": "object", "properties": {...}} with "required" when any
        input is required.
    """
    properties: dict[str, Any] = {}
    required: list[str] = []

    for param in record.parameters:
        if not param.schema:
            continue
        properties[param.name] = {**param.schema, "description": param.description}
        if param.required:
            required.append(param.name)

    for body_field in record.body_fields:
        properties[body_field.name] = body_field.schema
        if body_field.required:
            required.append(body_field.name)

    result: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        result["required"] = required
    return result


class SchemaIndex:
    """Loads the API description and looks up operations by operationId."""

    def __init__(self) -> None:
        self.operations: dict[str, OperationRecord] = {}
        self.info: dict[str, Any] = {}
        self._loaded = False

    @classmethod
    def from_file(cls, path: Path | str) -> SchemaIndex:
        """Create an index loaded from a JSON file."""
        index = cls()
        index.load(path)
        return index

    @property
    def api_version(self) -> str | None:
        """API version declared by the description (info.version)."""
        version = self.info.get("version")
        return str(version) if version else None

    def load(self, path: Path | str) -> None:
        """Load the OpenAPI JSON document at path."""
        if self._loaded:
            return
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
        self.load_document(document)
        logger.info("Indexed %d operations from %s", len(self.operations), path)

    def load_document(self, document: dict[str, Any]) -> None:
        """Index an already-parsed OpenAPI document."""
        if self._loaded:
            return

        self.info = document.get("info") or {}
        for path, path_item in (document.get("paths") or {}).items():
            if not is_indexed_path(path):
                continue
            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if not operation or not operation.get("operationId"):
                    continue
                record = OperationRecord.from_openapi(path, method, operation)
                if record.operation_id in self.operations:
                    logger.warning(
                        "Duplicate operationId %s at %s %s ignored",
                        record.operation_id,
                        method.upper(),
                        path,
                    )
                    continue
                self.operations[record.operation_id] = record

        self._loaded = True

    def get(self, operation_id: str) -> OperationRecord | None:
        """Look up an operation, returning None when absent."""
        return self.operations.get(operation_id)

    def find_operation(self, operation_id: str) -> OperationRecord:
        """Look up an operation.

        Raises:
            OperationNotFoundError: If operation_id is not indexed.
        """
        record = self.operations.get(operation_id)
        if record is None:
            similar = self.find_similar_operations(operation_id)
            raise OperationNotFoundError(
                f'Operation "{operation_id}" not found',
                details={"operationId": operation_id, "similar": similar},
                suggestion=(
                    f"Did you mean: {', '.join(similar)}?"
                    if similar
                    else "Use list-api-endpoints to see available operations"
                ),
            )
        return record

    def list_operation_ids(self) -> list[str]:
        """All indexed operationIds in document order."""
        return list(self.operations)

    def records(self) -> list[OperationRecord]:
        """All indexed operations in document order."""
        return list(self.operations.values())

    def get_operation_schema(self, operation_id: str) -> dict[str, Any]:
        """Tool-facing schema of one operation.

        Raises:
            OperationNotFoundError: If operation_id is not indexed.
        """
        record = self.find_operation(operation_id)
        return {
            "operationId": record.operation_id,
            "path": record.path,
            "method": record.method.upper(),
            "description": record.description,
            "parameters": list(record.raw_parameters),
            "requestBody": record.request_body,
            "responses": record.responses,
            "inputSchema": extract_input_schema(record),
        }

    def find_similar_operations(self, query: str, limit: int = 3) -> list[str]:
        """Find operationIds similar to query using fuzzy matching."""
        query_lower = query.lower()
        scored: list[tuple[str, float]] = []

        for name in self.operations:
            ratio = fuzz.ratio(query_lower, name.lower())
            if ratio >= 60:
                scored.append((name, ratio))

        scored.sort(key=lambda x: -x[1])
        return [name for name, _ in scored[:limit]]
