from pathlib import Path

from doctranslator.llm.client_base import BaseChatClient
from doctranslator.llm.exceptions import LlmError
from doctranslator.llm.models import TranslationRequest
from doctranslator.llm.prompt_loader import load_prompt_template
from doctranslator.logging.logger import Log

_NO_CONTEXT = "(none)"


class Translator:
    """Translates text with an LLM, using the document summary as context."""

    def __init__(
        self,
        *,
        client: BaseChatClient,
        model: str,
        temperature: float = 0.3,
        prompt_template_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._prompt_template = load_prompt_template(
            "translation_prompt.txt", prompt_template_path
        )

    def build_prompt(self, request: TranslationRequest) -> str:
        return self._prompt_template.format(
            context=request.context.strip() or _NO_CONTEXT,
            text=request.text,
            source_language=request.source_language,
            target_language=request.target_language,
        )

    async def translate(self, request: TranslationRequest) -> str:
        """Return the translated text.

        Raises:
            LlmError: if the provider fails or answers with nothing.
        """
        system_prompt = (
            "You are a professional translator. Translate from "
            f"{request.source_language} to {request.target_language}. "
            "Reply with the translation only, preserving line breaks."
        )
        translated = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=system_prompt,
            user_prompt=self.build_prompt(request),
        )
        translated = translated.strip()
        if not translated:
            raise LlmError("AI returned an empty translation")
        Log.info(
            f"Translated {len(request.text)} chars "
            f"{request.source_language}->{request.target_language}"
        )
        return translated
