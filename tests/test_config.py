"""Tests for settings loaded from the environment."""
import pytest
from pydantic import ValidationError

from insolvex.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    for name in ("GEMINI_API_KEY", "GOOGLE_GENAI_USE_VERTEXAI", "GOOGLE_CLOUD_PROJECT",
                 "GOOGLE_CLOUD_LOCATION", "EXTRACTION_MODEL", "QUOTA_LIMIT", "DEBUG_RESPONSES"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "key-123")
        settings = Settings.from_env()
        assert settings.gemini_api_key == "key-123"
        assert settings.use_vertex_ai is False
        assert settings.extraction_model == "gemini-2.5-pro"
        assert settings.quota_limit == 5
        assert settings.max_images_per_document == 20
        assert settings.retry_max_attempts == 3
        assert settings.debug_responses is False
        assert settings.responses_directory is None

    @pytest.mark.parametrize("value", ["", "   "])
    def test_api_key_required(self, monkeypatch, value):
        monkeypatch.setenv("GEMINI_API_KEY", value)
        with pytest.raises(ValidationError, match="GEMINI_API_KEY must be provided"):
            Settings.from_env()

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        monkeypatch.setenv("EXTRACTION_MODEL", "gemini-2.5-flash")
        monkeypatch.setenv("QUOTA_LIMIT", "2")
        monkeypatch.setenv("DEBUG_RESPONSES", "1")
        settings = Settings.from_env()
        assert settings.extraction_model == "gemini-2.5-flash"
        assert settings.quota_limit == 2
        assert settings.debug_responses is True

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("GEMINI_API_KEY=from-file\nQUOTA_LIMIT=9\n", encoding="utf-8")
        settings = Settings()
        assert settings.gemini_api_key == "from-file"
        assert settings.quota_limit == 9

    @pytest.mark.parametrize("flag,expected", [("true", True), ("TRUE", True), ("1", True), ("false", False), ("0", False)])
    def test_vertex_flag(self, monkeypatch, flag, expected):
        monkeypatch.setenv("GOOGLE_GENAI_USE_VERTEXAI", flag)
        assert Settings(gemini_api_key="k").use_vertex_ai is expected

    def test_client_kwargs(self, monkeypatch):
        assert Settings(gemini_api_key="k").api_client_kwargs == {"api_key": "k"}

        monkeypatch.setenv("GOOGLE_GENAI_USE_VERTEXAI", "true")
        monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "insolvex-prod")
        monkeypatch.setenv("GOOGLE_CLOUD_LOCATION", "europe-west4")
        assert Settings(gemini_api_key="k").api_client_kwargs == {
            "vertexai": True,
            "project": "insolvex-prod",
            "location": "europe-west4",
        }
