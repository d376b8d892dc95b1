from doctranslator.config.settings import Settings
from doctranslator.llm.analyzer import DocumentAnalyzer
from doctranslator.llm.client_base import BaseChatClient
from doctranslator.llm.example_client_adapter import ExampleClientAdapter
from doctranslator.llm.openai_client_adapter import OpenAIClientAdapter
from doctranslator.llm.translator import Translator


class LlmFactory:
    """Creates the configured analysis and translation collaborators."""

    PROVIDERS = ("example", "openai")

    @classmethod
    def create_client(cls, settings: Settings) -> BaseChatClient:
        provider = settings.llm_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        if provider == "openai":
            return OpenAIClientAdapter(
                api_key=settings.openai_api_key,
                timeout_seconds=settings.openai_timeout_seconds,
                base_url=settings.openai_base_url or None,
            )
        raise ValueError(
            f"Unknown LLM provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )

    @classmethod
    def create_analyzer(
        cls, settings: Settings, client: BaseChatClient | None = None
    ) -> DocumentAnalyzer:
        return DocumentAnalyzer(
            client=client or cls.create_client(settings),
            model=cls._model_name(settings),
        )

    @classmethod
    def create_translator(
        cls, settings: Settings, client: BaseChatClient | None = None
    ) -> Translator:
        return Translator(
            client=client or cls.create_client(settings),
            model=cls._model_name(settings),
            temperature=settings.translation_temperature,
        )

    @staticmethod
    def _model_name(settings: Settings) -> str:
        if settings.llm_provider.lower() == "example":
            return "example"
        return settings.openai_model_name
