"""Generation of standalone wrapper modules for every operation."""

from stripe_mcp.codegen.emitter import emit
from stripe_mcp.codegen.renderer import RenderedOperation, render_index, render_operation

__all__ = ["RenderedOperation", "emit", "render_index", "render_operation"]
