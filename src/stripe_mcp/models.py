"""Pydantic models for MCP tool inputs/outputs."""

from typing import Any

from pydantic import BaseModel, Field


class EndpointList(BaseModel):
    """Available operationIds."""

    total: int
    operation_ids: list[str]
    tip: str = "Use get-api-endpoint-schema to get the schema for a given API endpoint"


class OperationSchema(BaseModel):
    """OpenAPI details of one operation."""

    operation_id: str = Field(alias="operationId")
    path: str
    method: str
    description: str
    parameters: list[dict[str, Any]] = []
    request_body: dict[str, Any] | None = Field(default=None, alias="requestBody")
    responses: dict[str, Any] = {}
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")

    model_config = {"populate_by_name": True}


class GenerationReport(BaseModel):
    """Result of generating operation wrappers."""

    count: int
    skipped: list[str] = []
    output_dir: str
