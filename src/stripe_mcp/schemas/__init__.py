"""OpenAPI description loading and lookup."""

from stripe_mcp.schemas.index import (
    OperationRecord,
    ParameterDescriptor,
    SchemaIndex,
    extract_input_schema,
)
from stripe_mcp.schemas.sanitize import sanitize_descriptions, sanitize_spec_file

__all__ = [
    "OperationRecord",
    "ParameterDescriptor",
    "SchemaIndex",
    "extract_input_schema",
    "sanitize_descriptions",
    "sanitize_spec_file",
]
