"""Clean HTML out of description fields of a raw Stripe OpenAPI spec."""

from __future__ import annotations

import html
import json
import logging
import re
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


def sanitize_text(text: str) -> str:
    """Strip tags, decode entities and collapse whitespace to single spaces."""
    cleaned = _TAG.sub("", text)
    cleaned = html.unescape(cleaned)
    return _WHITESPACE.sub(" ", cleaned).strip()


def sanitize_descriptions(obj: Any) -> Any:
    """Return a copy of obj with every string "description" value sanitized."""
    if isinstance(obj, list):
        return [sanitize_descriptions(item) for item in obj]
    if isinstance(obj, dict):
        return {
            key: (
                sanitize_text(value)
                if key == "description" and isinstance(value, str)
                else sanitize_descriptions(value)
            )
            for key, value in obj.items()
        }
    return obj


def sanitize_spec_file(source: Path, destination: Path) -> None:
    """Read source spec, sanitize its descriptions and write destination."""
    with open(source, encoding="utf-8") as f:
        spec = json.load(f)

    cleaned = sanitize_descriptions(spec)

    destination.parent.mkdir(parents=True, exist_ok=True)
    with open(destination, "w", encoding="utf-8") as f:
        json.dump(cleaned, f, indent=2)

    logger.info("Wrote sanitized spec to %s", destination)
