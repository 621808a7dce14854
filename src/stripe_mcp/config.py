"""Server configuration loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_LEVELS: tuple[LogLevel, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# =============================================================================
# Defaults
# =============================================================================
# Relative paths resolve against the working directory.

DEFAULT_SPEC_PATH = Path("data") / "spec3.clean.json"
DEFAULT_CODEGEN_DIR = Path("generated") / "code_tools"

INSTRUCTIONS_PATH = Path(__file__).parent / "instructions.txt"


@dataclass
class ServerConfig:
    """Configuration for the MCP server and the code generator.

    Attributes:
        api_key: Stripe secret key used by the SDK client.
        spec_path: OpenAPI description (sanitized Stripe spec3 JSON).
        api_version: Stripe API version; None means use the spec's info.version.
        codegen_dir: Output directory for generated wrappers.
        log_level: Log level handed to FastMCP.
    """

    api_key: str = ""
    spec_path: Path = DEFAULT_SPEC_PATH
    api_version: str | None = None
    codegen_dir: Path = DEFAULT_CODEGEN_DIR
    log_level: LogLevel = "INFO"

    def resolve_api_version(self, spec_version: str | None) -> str | None:
        """Explicit version wins over the one declared by the spec."""
        return self.api_version or spec_version


def _parse_log_level(value: str) -> LogLevel:
    upper = value.strip().upper()
    for level in LOG_LEVELS:
        if upper == level:
            return level
    return "INFO"


def load_config() -> ServerConfig:
    """Load configuration from environment variables (and a .env file).

    Environment variables:
        STRIPE_API_KEY: Stripe secret key (default: empty)
        STRIPE_MCP_SPEC_PATH: OpenAPI JSON path (default: data/spec3.clean.json)
        STRIPE_API_VERSION: Overrides the spec's info.version
        STRIPE_MCP_CODEGEN_DIR: Generated wrappers directory
            (default: generated/code_tools)
        STRIPE_MCP_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
            (default: INFO, also used for unknown values)

    Returns:
        ServerConfig instance.
    """
    load_dotenv()

    spec_path = os.environ.get("STRIPE_MCP_SPEC_PATH", "").strip()
    codegen_dir = os.environ.get("STRIPE_MCP_CODEGEN_DIR", "").strip()

    return ServerConfig(
        api_key=os.environ.get("STRIPE_API_KEY", ""),
        spec_path=Path(spec_path) if spec_path else DEFAULT_SPEC_PATH,
        api_version=os.environ.get("STRIPE_API_VERSION", "").strip() or None,
        codegen_dir=Path(codegen_dir) if codegen_dir else DEFAULT_CODEGEN_DIR,
        log_level=_parse_log_level(os.environ.get("STRIPE_MCP_LOG_LEVEL", "INFO")),
    )


def load_instructions() -> str:
    """Server instructions shipped with the package."""
    return INSTRUCTIONS_PATH.read_text(encoding="utf-8")
