from dataclasses import dataclass, field


@dataclass(frozen=True)
class AnalysisResult:
    """Output of the document analysis step."""

    summary: str
    document_type: str = ""
    key_points: list[str] = field(default_factory=list)
    language: str | None = None


@dataclass(frozen=True)
class TranslationRequest:
    """Text to translate plus the analysis summary used as context."""

    text: str
    source_language: str
    target_language: str
    context: str = ""
