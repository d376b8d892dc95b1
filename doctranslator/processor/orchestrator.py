import asyncio
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timezone

from doctranslator.api.client import BackendClient
from doctranslator.config.settings import Settings
from doctranslator.documents.models import Document
from doctranslator.extraction.base import BaseTextExtractor
from doctranslator.extraction.factory import ExtractorFactory
from doctranslator.extraction.models import UploadedFile
from doctranslator.llm.analyzer import DocumentAnalyzer
from doctranslator.llm.exceptions import LlmError
from doctranslator.llm.factory import LlmFactory
from doctranslator.llm.models import AnalysisResult
from doctranslator.llm.translator import Translator
from doctranslator.logging.logger import Log
from doctranslator.processor.models import ProcessingState, ProcessingStatus
from doctranslator.processor.pipeline import PipelineContext, PipelineStep
from doctranslator.processor.steps import (
    AnalyzeStep,
    ExtractTextStep,
    HashContentStep,
    PersistDocumentStep,
    TranslateStep,
)

DEFAULT_ERROR_MESSAGE = "Failed to process file"


class FileProcessingOrchestrator:
    """Runs one uploaded file through the pipeline and tracks its progress.

    Pipeline: extract -> hash -> analyze -> translate -> persist, strictly in
    order. Only one file is processed at a time: a call made while another
    is uploading or processing returns None and changes nothing. A failing
    step moves the state to error with the exception message and nothing is
    retried.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        analyzer: DocumentAnalyzer,
        *,
        source_language: str = "en",
        target_language: str = "es",
    ) -> None:
        self._steps = list(steps)
        self._analyzer = analyzer
        self._source_language = source_language
        self._target_language = target_language
        self._state = ProcessingState()

    @property
    def state(self) -> ProcessingState:
        return self._state

    @property
    def languages(self) -> tuple[str, str]:
        return self._source_language, self._target_language

    def set_languages(self, source_language: str, target_language: str) -> None:
        self._source_language = source_language
        self._target_language = target_language

    async def process(self, file: UploadedFile) -> Document | None:
        """Extract, analyze, translate and save one file.

        Returns:
            The saved Document, or None if the call was rejected or failed
            (the reason is in ``state``).
        """
        if self._state.is_processing:
            Log.warning(f"Rejected {file.name}: another file is being processed")
            return None

        Log.info(
            f"Processing {file.name} ({file.size} bytes, {file.mime_type}) "
            f"{self._source_language}->{self._target_language}"
        )
        context = PipelineContext(
            file=file,
            source_language=self._source_language,
            target_language=self._target_language,
        )
        self._state = ProcessingState(status=ProcessingStatus.UPLOADING, progress=0)
        try:
            for step in self._steps:
                self._enter_phase(step)
                context = await step.run(context)
        except asyncio.CancelledError:
            self._fail(file, "Processing cancelled")
            raise
        except Exception as exc:
            self._fail(file, str(exc) or DEFAULT_ERROR_MESSAGE)
            return None

        self._state = ProcessingState(
            status=ProcessingStatus.COMPLETED,
            progress=100,
            analysis=context.analysis,
        )
        Log.info(f"Completed {file.name} as document {context.document_id}")
        return Document(
            id=context.document_id,
            name=file.name,
            upload_date=datetime.now(timezone.utc),
            size=file.size,
            mime_type=file.mime_type,
            original_text=context.extracted_text,
            translated_text=context.translated_text,
            content_hash=context.content_hash or None,
        )

    async def preview_analyze(self, text: str) -> AnalysisResult | None:
        """Re-run analysis for a stored document being previewed.

        Failures are logged; the previous analysis and the status are kept.
        """
        try:
            analysis = await self._analyzer.analyze(text)
        except LlmError as exc:
            Log.error(f"Preview analysis failed: {exc}")
            return None
        self._state = replace(self._state, analysis=analysis)
        return analysis

    def clear_analysis(self) -> None:
        self._state = replace(self._state, analysis=None)

    def _enter_phase(self, step: PipelineStep) -> None:
        if step.status is self._state.status and step.progress == self._state.progress:
            return
        Log.info(f"Processing status -> {step.status.value} ({step.progress}%)")
        self._state = ProcessingState(status=step.status, progress=step.progress)

    def _fail(self, file: UploadedFile, message: str) -> None:
        Log.error(f"Processing {file.name} failed: {message}")
        self._state = ProcessingState(status=ProcessingStatus.ERROR, progress=0, error=message)


def build_orchestrator(
    settings: Settings,
    client: BackendClient,
    extractor: BaseTextExtractor | None = None,
    analyzer: DocumentAnalyzer | None = None,
    translator: Translator | None = None,
) -> FileProcessingOrchestrator:
    """Build a FileProcessingOrchestrator with the configured adapters."""
    extractor = extractor or ExtractorFactory.create(settings)
    if analyzer is None or translator is None:
        llm_client = LlmFactory.create_client(settings)
        analyzer = analyzer or LlmFactory.create_analyzer(settings, llm_client)
        translator = translator or LlmFactory.create_translator(settings, llm_client)
    steps: list[PipelineStep] = [
        ExtractTextStep(extractor),
        HashContentStep(),
        AnalyzeStep(analyzer),
        TranslateStep(translator),
        PersistDocumentStep(client),
    ]
    return FileProcessingOrchestrator(
        steps,
        analyzer,
        source_language=settings.source_language,
        target_language=settings.target_language,
    )
