"""Writes generated operation wrappers to disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from stripe_mcp.codegen.renderer import render_index, render_operation
from stripe_mcp.core.errors import StripeMcpError
from stripe_mcp.dispatch.plan import build_plan
from stripe_mcp.models import GenerationReport

if TYPE_CHECKING:
    from stripe_mcp.core.registry import ResourceRegistry
    from stripe_mcp.schemas.index import SchemaIndex

logger = logging.getLogger(__name__)

INDEX_FILE = "__init__.py"


def emit(
    index: SchemaIndex,
    output_dir: Path | str,
    registry: ResourceRegistry | None = None,
) -> GenerationReport:
    """Generate one module per indexed operation plus an aggregating index.

    Args:
        index: Loaded schema index.
        output_dir: Target package directory (created if missing).
        registry: When given, operations whose resource the SDK does not
            expose are skipped instead of generated.

    Returns:
        GenerationReport with the number of modules written and the
        operationIds that were skipped.
    """
    target = Path(output_dir)
    target.mkdir(parents=True, exist_ok=True)

    written: list[str] = []
    skipped: list[str] = []

    for record in index.records():
        try:
            plan = build_plan(record)
            if registry is not None:
                registry.lookup(plan.resource, record.operation_id)
        except StripeMcpError as e:
            logger.warning("Skipping %s: %s", record.operation_id, e.message)
            skipped.append(record.operation_id)
            continue

        rendered = render_operation(record, plan)
        (target / f"{rendered.name}.py").write_text(rendered.source, encoding="utf-8")
        written.append(rendered.name)

    (target / INDEX_FILE).write_text(render_index(written), encoding="utf-8")

    logger.info("Generated %d operation wrappers in %s", len(written), target)
    if skipped:
        logger.info("Skipped %d operations", len(skipped))

    return GenerationReport(count=len(written), skipped=sorted(skipped), output_dir=str(target))
