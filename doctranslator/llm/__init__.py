from doctranslator.llm.analyzer import DocumentAnalyzer
from doctranslator.llm.factory import LlmFactory
from doctranslator.llm.models import AnalysisResult, TranslationRequest
from doctranslator.llm.translator import Translator

__all__ = [
    "AnalysisResult",
    "DocumentAnalyzer",
    "LlmFactory",
    "TranslationRequest",
    "Translator",
]
