"""
Report writers for saving analysis outcomes to files.

Strategy pattern: the CLI picks a writer by output format and hands it
the request together with the result (or the denial) it produced.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Union

from contentintel.core.models import AccessDenial, AnalysisRequest, AnalysisResult
from contentintel.core.schemas import get_schema

Outcome = Union[AnalysisResult, AccessDenial]


def build_report(request: AnalysisRequest, outcome: Outcome) -> Dict[str, Any]:
    """JSON-serializable report for one request."""
    report: Dict[str, Any] = {
        "generated": datetime.now(timezone.utc).isoformat(),
        "content": request.content,
        "caller": request.caller_identity or "anonymous",
    }
    if isinstance(outcome, AccessDenial):
        report["category"] = outcome.category.value
        report["denial"] = outcome.to_dict()
    else:
        report["category"] = outcome.category.value
        report["result"] = outcome.to_dict()
    return report


class ResultWriter(ABC):
    """Abstract base class for report writers (Strategy Pattern)."""

    @abstractmethod
    def write(self, request: AnalysisRequest, outcome: Outcome, output_path: Path) -> None:
        """Write the report to the specified path."""
        pass


class TextResultWriter(ResultWriter):
    """Writes a human-readable report."""

    def __init__(self, include_timestamp: bool = True):
        self.include_timestamp = include_timestamp
        self.logger = logging.getLogger("result_writer.text")

    def write(self, request: AnalysisRequest, outcome: Outcome, output_path: Path) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(render_text(request, outcome, self.include_timestamp))

        self.logger.info(f"Report written to: {output_path}")


class JSONResultWriter(ResultWriter):
    """Writes the report as JSON."""

    def __init__(self, indent: int = 2):
        self.indent = indent
        self.logger = logging.getLogger("result_writer.json")

    def write(self, request: AnalysisRequest, outcome: Outcome, output_path: Path) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(build_report(request, outcome), f, indent=self.indent, default=str)

        self.logger.info(f"Report written to: {output_path}")


def _render_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def render_text(request: AnalysisRequest, outcome: Outcome, include_timestamp: bool = True) -> str:
    """Plain-text rendering shared by the text writer and the console."""
    lines = ["=" * 70, "CONTENT INTELLIGENCE REPORT", "=" * 70]
    if include_timestamp:
        lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    excerpt = request.content if len(request.content) <= 200 else request.content[:200] + "..."
    lines.append(f"Content: {excerpt}")
    lines.append(f"Category: {outcome.category.value}")
    lines.append("-" * 70)

    if isinstance(outcome, AccessDenial):
        lines.append(f"DENIED ({outcome.status_code}): {outcome.message}")
        if outcome.required_plan:
            lines.append(f"Required Plan: {outcome.required_plan.upper()}")
            lines.append(f"Current Tier: {outcome.current_tier}")
    else:
        lines.append(f"Origin: {outcome.result_origin.value}")
        verdict = outcome.data.get(get_schema(outcome.category).verdict_field)
        if verdict is not None:
            lines.append(f"VERDICT: {verdict}")
            lines.append("-" * 70)
        for key, value in outcome.data.items():
            if isinstance(value, list):
                lines.append(f"{key}:")
                lines.extend(f"  - {_render_value(item)}" for item in value)
            else:
                lines.append(f"{key}: {_render_value(value)}")

    lines.extend(["=" * 70, ""])
    return "\n".join(lines)


def create_result_writer(format: str = "json", **kwargs) -> ResultWriter:
    """
    Factory function to create appropriate report writer.

    Args:
        format: Output format ("text" or "json")
        **kwargs: Additional arguments for the writer

    Returns:
        Appropriate ResultWriter instance
    """
    writers = {
        "text": TextResultWriter,
        "txt": TextResultWriter,
        "json": JSONResultWriter,
    }

    writer_class = writers.get(format.lower())
    if writer_class is None:
        raise ValueError(f"Unknown format: {format}. Supported: {list(writers.keys())}")

    return writer_class(**kwargs)
