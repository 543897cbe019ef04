"""Shared prompt construction utilities for analysis engines.

Every engine asks for one JSON object with a fixed structure. These
helpers render that structure and the common guidance blocks so the
engines only describe what is specific to their category.
"""

import json
from typing import Any, Dict, Iterable, Optional

DEFAULT_MAX_CONTENT_CHARS = 12000

PESSIMISM_RULE = (
    "If the evidence is inconclusive, lean toward the suspicious end of the "
    "scale. Uncertainty must never be reported as safety."
)


def schema_block(structure: Dict[str, Any]) -> str:
    """Render the response structure the engine must follow."""
    return (
        "You MUST respond with a valid JSON object with this exact structure:\n"
        + json.dumps(structure, indent=2)
    )


def guidelines_block(lines: Iterable[str]) -> str:
    """Render a bullet list of guidelines."""
    return "Guidelines:\n" + "\n".join(f"- {line}" for line in lines)


def content_block(
    content: str,
    max_chars: int = DEFAULT_MAX_CONTENT_CHARS,
) -> str:
    """Content for insertion into a user prompt (truncation guard)."""
    text = content.strip()
    if len(text) > max_chars:
        return text[:max_chars] + "\n[... truncated]"
    return text


def build_system_prompt(
    role: str,
    structure: Dict[str, Any],
    guidelines: Optional[Iterable[str]] = None,
) -> str:
    """Join role, schema and guidelines into one system prompt."""
    parts = [role.strip(), PESSIMISM_RULE, schema_block(structure)]
    if guidelines:
        parts.append(guidelines_block(guidelines))
    return "\n\n".join(parts)
