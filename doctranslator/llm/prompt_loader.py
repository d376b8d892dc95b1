from pathlib import Path

from doctranslator.llm.exceptions import LlmError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, path: Path | None = None) -> str:
    """Load a prompt template.

    Args:
        name: Bundled template file name under ``prompts/``, used when
              ``path`` is not given.
        path: Explicit template file.

    Raises:
        LlmError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / name
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LlmError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(path: Path | None = None) -> str:
    """Load the analysis JSON schema (bundled analysis_schema.json by default).

    Raises:
        LlmError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "analysis_schema.json"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LlmError(f"Failed to load JSON schema: {exc}") from exc
