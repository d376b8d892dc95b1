from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    log_file: str | None = None

    api_base_url: str = "http://localhost:5000"
    api_timeout_seconds: int = 30

    session_store_path: str = "~/.doctranslator/session.json"

    documents_per_page: int = 5

    max_failed_sign_in_attempts: int = 4
    sign_in_lockout_seconds: int = 300

    source_language: str = "en"
    target_language: str = "es"

    extraction_pdf_engine: str = "pdfplumber"
    ocr_language: str = "eng"

    llm_provider: str = "openai"
    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_timeout_seconds: int = 30
    openai_base_url: str | None = None
    translation_temperature: float = 0.3

    payment_purpose: str = "file-translation"
