"""Validates the model's analysis JSON before it reaches the UI."""

from typing import Any

from doctranslator.llm.exceptions import LlmValidationError
from doctranslator.llm.models import AnalysisResult

_MAX_KEY_POINTS = 20


def validate_analysis(data: dict[str, Any]) -> AnalysisResult:
    """Build an AnalysisResult from parsed JSON.

    Raises:
        LlmValidationError: on any validation failure.
    """
    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        raise LlmValidationError("'summary' must be a non-empty string")
    return AnalysisResult(
        summary=summary.strip(),
        document_type=_build_document_type(data.get("document_type")),
        key_points=_build_key_points(data.get("key_points")),
        language=_build_language(data.get("language")),
    )


def _build_document_type(raw: Any) -> str:
    if raw is None:
        return ""
    if not isinstance(raw, str):
        raise LlmValidationError("'document_type' must be a string")
    return raw.strip()


def _build_key_points(raw: Any) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise LlmValidationError("'key_points' must be a list")
    if len(raw) > _MAX_KEY_POINTS:
        raise LlmValidationError(
            f"Too many key points: {len(raw)} (max {_MAX_KEY_POINTS})"
        )
    points: list[str] = []
    for i, item in enumerate(raw):
        if not isinstance(item, str):
            raise LlmValidationError(f"Key point at index {i} must be a string")
        if item.strip():
            points.append(item.strip())
    return points


def _build_language(raw: Any) -> str | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise LlmValidationError("'language' must be a string or null")
    return raw.strip().lower() or None
