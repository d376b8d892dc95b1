"""AI-powered document analysis (summary, type, key points)."""

import json
from pathlib import Path

from doctranslator.llm.client_base import BaseChatClient
from doctranslator.llm.exceptions import LlmError
from doctranslator.llm.models import AnalysisResult
from doctranslator.llm.prompt_loader import load_json_schema, load_prompt_template
from doctranslator.llm.validator import validate_analysis
from doctranslator.logging.logger import Log

ANALYSIS_SYSTEM_PROMPT = (
    "You are a document analyst. You read documents extracted from scans "
    "and uploads and describe them accurately and concisely."
)


class DocumentAnalyzer:
    """Summarizes a document so the translation step has context."""

    def __init__(
        self,
        *,
        client: BaseChatClient,
        model: str,
        temperature: float = 0.0,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._prompt_template = load_prompt_template(
            "analysis_prompt.txt", prompt_template_path
        )
        self._json_schema = load_json_schema(json_schema_path)
        self._json_schema_dict = json.loads(self._json_schema)

    async def analyze(self, text: str) -> AnalysisResult:
        prompt = self._prompt_template.format(text=text, json_schema=self._json_schema)
        Log.debug(f"Analysis prompt:\n{prompt}")

        raw_response = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=ANALYSIS_SYSTEM_PROMPT,
            user_prompt=prompt,
            json_schema=self._json_schema_dict,
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        result = validate_analysis(self._parse_json(raw_response))
        Log.info(
            f"Analysis complete: type={result.document_type or '?'}, "
            f"{len(result.key_points)} key points"
        )
        return result

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise LlmError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise LlmError("JSON response must be an object")
        return parsed
