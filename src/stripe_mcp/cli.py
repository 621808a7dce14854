"""CLI entry point for stripe-mcp."""

import logging
from pathlib import Path

import click
import stripe

from stripe_mcp.codegen import emit
from stripe_mcp.config import load_config
from stripe_mcp.core.registry import ResourceRegistry
from stripe_mcp.schemas import SchemaIndex, sanitize_spec_file

# Placeholder key for building an offline client; no request is ever sent with it
CODEGEN_API_KEY = "sk_test_codegen"


@click.group()
def main() -> None:
    """Stripe MCP: serve the Stripe API over MCP or generate wrappers for it."""
    config = load_config()
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")


@main.command()
def serve() -> None:
    """Run the MCP server over stdio."""
    from stripe_mcp.server import main as run_server

    run_server()


@main.command()
@click.option(
    "--spec",
    "spec_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="OpenAPI JSON (default: STRIPE_MCP_SPEC_PATH or data/spec3.clean.json).",
)
@click.option(
    "-o",
    "--output",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory (default: STRIPE_MCP_CODEGEN_DIR or generated/code_tools).",
)
@click.option(
    "--verify/--no-verify",
    default=False,
    help="Skip operations whose resource the installed Stripe SDK does not expose.",
)
def generate(spec_path: Path | None, output: Path | None, verify: bool) -> None:
    """Generate one wrapper module per operation plus an index."""
    config = load_config()
    spec_path = spec_path or config.spec_path
    output = output or config.codegen_dir

    if not spec_path.exists():
        raise click.ClickException(f"Spec not found: {spec_path}")

    click.echo("Generating code tools...")
    index = SchemaIndex.from_file(spec_path)
    click.echo(f"Found {len(index.operations)} operations")

    registry = None
    if verify:
        client = stripe.StripeClient(config.api_key or CODEGEN_API_KEY)
        registry = ResourceRegistry.for_client(client)

    report = emit(index, output, registry)

    click.echo(f"Generated {report.count} self-contained operation wrappers")
    if report.skipped:
        click.echo(f"Skipped {len(report.skipped)}: {', '.join(report.skipped)}")
    click.echo(f"Code tools available in {report.output_dir}")


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("destination", type=click.Path(dir_okay=False, path_type=Path))
def sanitize(source: Path, destination: Path) -> None:
    """Strip HTML from every description in SOURCE and write DESTINATION."""
    click.echo(f"Reading {source}...")
    sanitize_spec_file(source, destination)
    click.echo(f"Done! Created {destination}")
