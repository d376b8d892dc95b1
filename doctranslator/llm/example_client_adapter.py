"""Offline chat client for local development and tests.

Also serves as the template for new provider adapters: implement
BaseChatClient and register the provider in LlmFactory.
"""

import json
from typing import ClassVar

from doctranslator.llm.client_base import BaseChatClient


class ExampleClientAdapter(BaseChatClient):
    """Returns a fixed analysis for JSON requests and echoes text otherwise."""

    DEFAULT_ANALYSIS: ClassVar[dict[str, object]] = {
        "summary": "Example summary",
        "document_type": "unknown",
        "key_points": [],
        "language": None,
    }
    TEXT_MARKER: ClassVar[str] = "Original text to translate:"

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object] | None = None,
    ) -> str:
        _ = model, temperature, system_prompt
        if json_schema is not None:
            return json.dumps(self.DEFAULT_ANALYSIS)
        _, marker, rest = user_prompt.partition(self.TEXT_MARKER)
        if not marker:
            return user_prompt.strip()
        return rest.rsplit("\n\n", 1)[0].strip()
