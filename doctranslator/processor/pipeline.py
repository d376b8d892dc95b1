from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from doctranslator.extraction.models import UploadedFile
from doctranslator.llm.models import AnalysisResult, TranslationRequest
from doctranslator.processor.models import ProcessingStatus


@dataclass(slots=True)
class PipelineContext:
    file: UploadedFile
    source_language: str
    target_language: str
    extracted_text: str = ""
    content_hash: str = ""
    analysis: AnalysisResult | None = None
    translation_request: TranslationRequest | None = None
    translated_text: str = ""
    document_id: str = ""


class PipelineStep(ABC):
    """One phase of the upload pipeline.

    ``status`` and ``progress`` are what the orchestrator reports while the
    step runs.
    """

    status: ClassVar[ProcessingStatus] = ProcessingStatus.PROCESSING
    progress: ClassVar[int] = 50

    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
