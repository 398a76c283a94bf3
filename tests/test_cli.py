"""Tests for the insolvex command line."""
import json
from unittest.mock import patch

import pytest

from insolvex import cli


@pytest.fixture
def logs_dir(tmp_path):
    return str(tmp_path / "logs")


class TestNormalizeCommand:

    def test_normalizes_saved_responses(self, tmp_path, fixtures_dir, logs_dir):
        out_dir = tmp_path / "normalized"
        broken = tmp_path / "broken.txt"
        broken.write_text("model refused", encoding="utf-8")

        code = cli.main([
            "normalize",
            str(fixtures_dir / "fenced_response.txt"),
            str(fixtures_dir / "legacy_court_decision.json"),
            str(broken),
            "--output-dir", str(out_dir),
            "--logs", logs_dir,
        ])

        assert code == 0
        fenced = json.loads((out_dir / "fenced_response.json").read_text(encoding="utf-8"))
        assert fenced["document"]["docType"] == "report_art_97"
        assert fenced["document"]["documentNumber"] == "97/2024"

        legacy = json.loads((out_dir / "legacy_court_decision.json").read_text(encoding="utf-8"))
        assert legacy["case"]["caseNumber"] == "1234/117/2024"
        assert legacy["parties"]["practitioner"]["role"] == "lichidator_judiciar"

        degraded = json.loads((out_dir / "broken.json").read_text(encoding="utf-8"))
        assert degraded["document"]["docType"] == "other"
        assert degraded["rawJson"] == "model refused"

    def test_missing_file_exits_1(self, tmp_path, logs_dir):
        code = cli.main(["normalize", str(tmp_path / "absent.txt"), "--output-dir", str(tmp_path), "--logs", logs_dir])
        assert code == 1


class TestMatchCommand:

    def test_prints_company_id(self, fixtures_dir, logs_dir, capsys):
        code = cli.main([
            "match", str(fixtures_dir / "legacy_court_decision.json"),
            "--companies", str(fixtures_dir / "companies.json"),
            "--logs", logs_dir,
        ])
        assert code == 0
        assert capsys.readouterr().out.strip() == "c-alfa"

    def test_no_match(self, tmp_path, fixtures_dir, logs_dir, capsys):
        extraction = tmp_path / "extraction.json"
        extraction.write_text(json.dumps({"parties": {"debtor": {"name": "Omega Holding SA"}}}), encoding="utf-8")
        code = cli.main(["match", str(extraction), "--companies", str(fixtures_dir / "companies.json"),
                         "--logs", logs_dir])
        assert code == 0
        assert capsys.readouterr().out.strip() == "no match"

    def test_bad_companies_file(self, tmp_path, fixtures_dir, logs_dir):
        companies = tmp_path / "companies.json"
        companies.write_text('{"id": "x"}', encoding="utf-8")
        code = cli.main(["match", str(fixtures_dir / "legacy_court_decision.json"),
                         "--companies", str(companies), "--logs", logs_dir])
        assert code == 1


class TestExtractCommand:

    def test_missing_api_key_exits_1(self, tmp_path, monkeypatch, logs_dir):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        image = tmp_path / "page.png"
        image.write_bytes(b"\x89PNG")
        assert cli.main(["extract", str(image), "--logs", logs_dir]) == 1

    def test_extract_writes_output(self, tmp_path, monkeypatch, logs_dir, mock_genai_client, fenced_response_text):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        image = tmp_path / "dosar_555.png"
        image.write_bytes(b"\x89PNG\r\n\x1a\n")
        output = tmp_path / "out" / "dosar_555.json"
        mock_genai_client.set_reply(fenced_response_text)

        with patch("insolvex.cli.create_client", return_value=mock_genai_client):
            code = cli.main(["extract", str(image), "--output", str(output), "--logs", logs_dir])

        assert code == 0
        written = json.loads(output.read_text(encoding="utf-8"))
        assert written["parties"]["debtor"]["name"] == "BETA TRANS SRL"
        assert written["rawJson"] == fenced_response_text

    def test_unsupported_image_exits_1(self, tmp_path, monkeypatch, logs_dir):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        scan = tmp_path / "scan.pdf"
        scan.write_bytes(b"%PDF-1.7")
        assert cli.main(["extract", str(scan), "--logs", logs_dir]) == 1


class TestUsage:

    def test_no_command_exits_2(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 2

    def test_normalize_requires_output_dir(self, fixtures_dir):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["normalize", str(fixtures_dir / "fenced_response.txt")])
        assert exc_info.value.code == 2
