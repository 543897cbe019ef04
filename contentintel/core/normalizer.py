"""
Result normalizer.

Turns collaborator output into a schema-valid AnalysisResult. Anything
that cannot be trusted (errors, timeouts, non-JSON text, missing or
out-of-scale fields) is replaced by the category's fallback report,
which sits on the pessimistic end of the verdict scale: uncertainty is
never reported as safety.
"""

import copy
import json
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Union

from contentintel.core.models import (
    AnalysisResult,
    ContentCategory,
    EngineError,
    RawEngineOutput,
    ResultOrigin,
)
from contentintel.core.schemas import CategorySchema, ScoreField, get_schema

_NUMERIC_STRING = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*%?\s*$")


class MalformedOutputError(ValueError):
    """Engine output is not a valid instance of the category schema."""


def parse_json_response(raw: str) -> Dict[str, Any]:
    """
    Parse an LLM response that should be a JSON object.

    Handles common LLM quirks: markdown code fences, leading or trailing prose.

    Raises:
        MalformedOutputError: If no JSON object can be recovered.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise MalformedOutputError("empty response")

    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        if lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines).strip()

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise MalformedOutputError("response is not JSON")
        try:
            data = json.loads(cleaned[start:end + 1])
        except json.JSONDecodeError as e:
            raise MalformedOutputError(f"response is not JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise MalformedOutputError(f"expected a JSON object, got {type(data).__name__}")
    return data


def coerce_score(value: Any) -> Optional[float]:
    """Read a number from an int, float, or numeric string such as "85" or "15%"."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMERIC_STRING.match(value)
        if not match:
            return None
        number = float(match.group(1))
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def clamp_score(number: float, low: float, high: float) -> Union[int, float]:
    clamped = min(max(number, low), high)
    return int(clamped) if float(clamped).is_integer() else round(clamped, 2)


def _get_path(data: Dict[str, Any], path: str) -> Any:
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def _set_path(data: Dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    current = data
    for part in parts[:-1]:
        current = current[part]
    current[parts[-1]] = value


class ResultNormalizer:
    """
    Validates engine output against its category schema.

    Usage:
        normalizer = ResultNormalizer()
        result = normalizer.normalize(category, engine_output_or_error, content)
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logging.getLogger("normalizer")

    def normalize(
        self,
        category: ContentCategory,
        outcome: Union[RawEngineOutput, EngineError],
        content: str = "",
        hint: Optional[str] = None,
    ) -> AnalysisResult:
        """
        Produce the AnalysisResult for one dispatch outcome.

        Args:
            category: Category the request was routed to.
            outcome: Raw engine text, or the error the dispatcher captured.
            content: Submitted content (used to label fallback reports).
            hint: Category hint forwarded to the engine (media kind, platform).

        Returns:
            AnalysisResult tagged "engine" or "fallback". Never raises for
            bad engine output.
        """
        schema = get_schema(category)

        if isinstance(outcome, EngineError):
            return self.fallback(category, content, hint, reason=outcome.reason)

        try:
            data = self.validate(schema, parse_json_response(outcome.text))
        except MalformedOutputError as e:
            return self.fallback(category, content, hint, reason=f"malformed output: {e}")

        return AnalysisResult(
            category=category,
            data=data,
            result_origin=ResultOrigin.ENGINE,
            received_at=self._clock(),
        )

    def fallback(
        self,
        category: ContentCategory,
        content: str,
        hint: Optional[str] = None,
        reason: str = "engine failure",
    ) -> AnalysisResult:
        """Build the deterministic pessimistic result for a category."""
        self.logger.warning(
            f"Substituting fallback {category.value} result: {reason}",
            extra={"category": category.value, "result_origin": "fallback"},
        )
        schema = get_schema(category)
        return AnalysisResult(
            category=category,
            data=schema.fallback(content, hint),
            result_origin=ResultOrigin.FALLBACK,
            received_at=self._clock(),
            fallback_reason=reason,
        )

    def validate(self, schema: CategorySchema, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Check required fields, canonicalize ordinal values and clamp scores.

        Raises:
            MalformedOutputError: If a required field is missing or unusable.
        """
        data = copy.deepcopy(data)
        if schema.prepare is not None:
            data = schema.prepare(data)

        for name in schema.text_fields:
            value = data.get(name)
            if not isinstance(value, str) or not value.strip():
                raise MalformedOutputError(f"missing or empty '{name}'")
            data[name] = value.strip()

        for choice_field in schema.choice_fields:
            canonical = choice_field.canonical(data.get(choice_field.name))
            if canonical is None:
                if choice_field.required:
                    raise MalformedOutputError(
                        f"'{choice_field.name}' must be one of {', '.join(choice_field.choices)}"
                    )
                continue
            data[choice_field.name] = canonical

        for score in schema.score_fields:
            self._apply_score(data, score)

        for score in schema.optional_scores:
            self._apply_score(data, score)

        return data

    def _apply_score(self, data: Dict[str, Any], score: ScoreField) -> None:
        raw = _get_path(data, score.name)
        number = coerce_score(raw)
        if number is None:
            if score.required:
                raise MalformedOutputError(f"'{score.name}' must be a number")
            if raw is not None:
                self.logger.debug(f"Ignoring non-numeric optional field '{score.name}'")
            return

        clamped = clamp_score(number, score.low, score.high)
        if clamped != number:
            self.logger.info(f"Clamped '{score.name}' from {number} to {clamped}")
        _set_path(data, score.name, clamped)
