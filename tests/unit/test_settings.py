import pytest
from pydantic import ValidationError

from doctranslator.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_page_size(self) -> None:
        s = Settings()
        assert s.documents_per_page == 5

    def test_default_lockout_policy(self) -> None:
        s = Settings()
        assert s.max_failed_sign_in_attempts == 4
        assert s.sign_in_lockout_seconds == 300

    def test_default_languages(self) -> None:
        s = Settings()
        assert s.source_language == "en"
        assert s.target_language == "es"

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.extraction_pdf_engine == "pdfplumber"

    def test_default_payment_purpose(self) -> None:
        s = Settings()
        assert s.payment_purpose == "file-translation"


class TestSettingsFromEnvironment:
    def test_reads_api_base_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_BASE_URL", "https://api.example.com")
        assert Settings().api_base_url == "https://api.example.com"

    def test_reads_llm_provider(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_PROVIDER", "example")
        assert Settings().llm_provider == "example"

    def test_coerces_integers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOCUMENTS_PER_PAGE", "20")
        assert Settings().documents_per_page == 20

    def test_rejects_non_numeric_page_size(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOCUMENTS_PER_PAGE", "many")
        with pytest.raises(ValidationError):
            Settings()

    def test_reads_optional_log_file(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_FILE", "/tmp/doctranslator.log")
        assert Settings().log_file == "/tmp/doctranslator.log"
