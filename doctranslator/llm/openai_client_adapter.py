from typing import Any

import httpx
import openai

from doctranslator.llm.client_base import BaseChatClient
from doctranslator.llm.exceptions import LlmError, LlmNetworkError


class OpenAIClientAdapter(BaseChatClient):
    """Chat client built on the OpenAI-compatible async chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object] | None = None,
    ) -> str:
        kwargs: dict[str, Any] = {}
        if json_schema is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": "document_analysis",
                    "strict": True,
                    "schema": json_schema,
                },
            }
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                **kwargs,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise LlmNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise LlmNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise LlmError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise LlmError("AI returned empty response")
        return content
