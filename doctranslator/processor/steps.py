import asyncio

from doctranslator.api.client import BackendClient
from doctranslator.extraction.base import BaseTextExtractor
from doctranslator.llm.analyzer import DocumentAnalyzer
from doctranslator.llm.models import TranslationRequest
from doctranslator.llm.translator import Translator
from doctranslator.logging.logger import Log
from doctranslator.processor.exceptions import EmptyDocumentError
from doctranslator.processor.hashing import content_hash
from doctranslator.processor.models import ProcessingStatus
from doctranslator.processor.pipeline import PipelineContext, PipelineStep


class ExtractTextStep(PipelineStep):
    status = ProcessingStatus.UPLOADING
    progress = 0

    def __init__(self, extractor: BaseTextExtractor) -> None:
        self._extractor = extractor

    async def run(self, context: PipelineContext) -> PipelineContext:
        text = await asyncio.to_thread(self._extractor.extract, context.file)
        if not text.strip():
            raise EmptyDocumentError(f"No text could be extracted from {context.file.name}")
        context.extracted_text = text
        Log.info(f"Extracted {len(text)} chars from {context.file.name}")
        return context


class HashContentStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        context.content_hash = content_hash(context.extracted_text)
        Log.debug(f"Content hash of {context.file.name}: {context.content_hash}")
        return context


class AnalyzeStep(PipelineStep):
    def __init__(self, analyzer: DocumentAnalyzer) -> None:
        self._analyzer = analyzer

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.analysis = await self._analyzer.analyze(context.extracted_text)
        return context


class TranslateStep(PipelineStep):
    def __init__(self, translator: Translator) -> None:
        self._translator = translator

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.analysis is None:
            raise ValueError("PipelineContext.analysis must be set before translation")
        context.translation_request = TranslationRequest(
            text=context.extracted_text,
            source_language=context.source_language,
            target_language=context.target_language,
            context=context.analysis.summary,
        )
        context.translated_text = await self._translator.translate(
            context.translation_request
        )
        return context


class PersistDocumentStep(PipelineStep):
    """Saves the result as a new document. No lookup by hash happens first."""

    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def run(self, context: PipelineContext) -> PipelineContext:
        if not context.translated_text:
            raise ValueError("PipelineContext.translated_text must be set before persist")
        context.document_id = await self._client.save_document(
            {
                "name": context.file.name,
                "size": context.file.size,
                "type": context.file.mime_type,
                "original_text": context.extracted_text,
                "translated_text": context.translated_text,
                "image_url": "",
                "text_hash": context.content_hash,
            }
        )
        Log.info(f"Saved {context.file.name} as document {context.document_id}")
        return context
