"""Shared fixtures for the insolvex test suite."""
import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from insolvex.config import Settings
from insolvex.core.aggregation import InsolvencyDocument
from insolvex.core.models import Company

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def legacy_raw():
    """Model output using the older key layout (type, fileNumber, appointedLiquidator...)."""
    return json.loads((FIXTURES_DIR / "legacy_court_decision.json").read_text(encoding="utf-8"))


@pytest.fixture
def fenced_response_text():
    """Model reply wrapped in prose and a markdown fence, with a trailing comma."""
    return (FIXTURES_DIR / "fenced_response.txt").read_text(encoding="utf-8")


@pytest.fixture
def companies():
    raw = json.loads((FIXTURES_DIR / "companies.json").read_text(encoding="utf-8"))
    return [Company.model_validate(item) for item in raw]


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings with retry delays disabled and responses saved under tmp_path."""
    monkeypatch.chdir(tmp_path)
    return Settings(
        gemini_api_key="test-key",
        retry_max_attempts=3,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter_range=0.0,
        responses_directory=tmp_path / "responses",
    )


@pytest.fixture
def make_document():
    """Build an InsolvencyDocument from a raw extraction dict."""
    def _make(doc_id, stage=None, deadlines=None, next_hearing=None, **extra):
        raw = dict(extra)
        if stage is not None:
            raw.setdefault("case", {}).setdefault("procedure", {})["stage"] = stage
        if next_hearing is not None:
            raw.setdefault("case", {}).setdefault("importantDates", {})["nextHearingDateTime"] = next_hearing
        if deadlines is not None:
            raw["deadlines"] = deadlines
        return InsolvencyDocument(id=doc_id, case_id="case-1", file_name=f"{doc_id}.png", extraction=raw)
    return _make


@pytest.fixture
def mock_genai_client():
    """genai.Client stand-in whose generate_content returns a canned reply."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()

    def set_reply(text):
        response = MagicMock()
        response.text = text
        client.aio.models.generate_content.return_value = response
        return response

    client.set_reply = set_reply
    return client
