class LlmError(Exception):
    """Raised when an analysis or translation call fails."""


class LlmValidationError(LlmError):
    """Raised when the model's answer does not match the expected structure."""


class LlmNetworkError(LlmError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
