"""Tests for CLI commands."""

import json
from unittest.mock import patch

import fitz
import pytest
import structlog
from typer.testing import CliRunner

from resume_extractor.cli import app
from resume_extractor.observability import bind_context, get_correlation_id
from resume_extractor.utils.exceptions import ConfigValidationError

runner = CliRunner()

RESUME_LINES = [
    "Jane Doe - jane.doe@example.com - (555) 123-4567",
    "Experience",
    "Senior Software Engineer at Acme Corp, 2018 to present.",
    "Led the migration of the billing platform to Kubernetes.",
    "Education",
    "BS Computer Science, State University, 2014.",
    "Skills: Python, PostgreSQL, Kafka, distributed systems.",
]


@pytest.fixture
def resume_pdf(tmp_path):
    doc = fitz.open()
    page = doc.new_page()
    y = 72
    for line in RESUME_LINES:
        page.insert_text((72, y), line, fontsize=11)
        y += 16
    path = tmp_path / "jane_doe.pdf"
    doc.save(str(path))
    doc.close()
    return path


def test_formats():
    result = runner.invoke(app, ["formats"])

    assert result.exit_code == 0
    assert "pdf   PDF Document (.pdf), max 50.0 MB" in result.stdout
    assert "docx  Word Document (2007+) (.docx), max 100.0 MB" in result.stdout
    assert "doc" in result.stdout


def test_validate_success(tmp_path):
    config_file = tmp_path / "extraction.yaml"
    config_file.write_text(
        "pdf:\n  backend: pdfplumber\ntext_processing:\n  min_text_length: 80\n"
    )

    result = runner.invoke(app, ["validate", str(config_file)])

    assert result.exit_code == 0
    assert "Configuration is valid!" in result.stdout
    assert "PDF backend: pdfplumber" in result.stdout
    assert "Minimum text length: 80" in result.stdout


def test_validate_failure(tmp_path):
    config_file = tmp_path / "extraction.yaml"
    config_file.write_text("pdf:\n  backend: ghostscript\n")

    result = runner.invoke(app, ["validate", str(config_file)])

    assert result.exit_code == 1
    assert "Validation failed" in result.stdout


def test_validate_missing_file():
    with patch("resume_extractor.cli.validate.ConfigManager") as mock_cm:
        mock_cm.return_value.load_config.side_effect = FileNotFoundError(
            "Configuration file not found: missing.yaml"
        )
        result = runner.invoke(app, ["validate", "missing.yaml"])

    assert result.exit_code == 1
    assert "Configuration file not found" in result.stdout


def test_extract_pdf_summary(resume_pdf):
    result = runner.invoke(app, ["extract", str(resume_pdf)])

    assert result.exit_code == 0
    assert "jane_doe.pdf:" in result.stdout
    assert " words in " in result.stdout


def test_extract_with_quality(resume_pdf):
    result = runner.invoke(app, ["extract", str(resume_pdf), "--quality"])

    assert result.exit_code == 0
    assert "quality: " in result.stdout
    assert "/100)" in result.stdout


def test_extract_json(resume_pdf):
    result = runner.invoke(app, ["extract", str(resume_pdf), "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert len(payload) == 1
    assert payload[0]["success"] is True
    assert payload[0]["file_type"] == "pdf"
    assert payload[0]["metadata"]["file_name"] == "jane_doe.pdf"
    assert payload[0]["metadata"]["page_count"] == 1
    assert "experience" in payload[0]["metadata"]["detected_sections"]
    assert "Acme Corp" in payload[0]["extracted_text"]


def test_extract_min_length_override(resume_pdf):
    result = runner.invoke(
        app, ["extract", str(resume_pdf), "--min-length", "100000"]
    )

    assert result.exit_code == 1
    assert "failed after" in result.stdout
    assert "too short" in result.stdout


def test_extract_unsupported_file(tmp_path):
    image = tmp_path / "photo.png"
    image.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 64)

    result = runner.invoke(app, ["extract", str(image)])

    assert result.exit_code == 1
    assert "photo.png failed after" in result.stdout
    assert "Unsupported file type" in result.stdout


def test_extract_batch_continues_after_failure(tmp_path, resume_pdf):
    image = tmp_path / "photo.png"
    image.write_bytes(b"\x89PNG" * 16)

    result = runner.invoke(app, ["extract", str(image), str(resume_pdf), "--json"])

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert [item["success"] for item in payload] == [False, True]
    assert payload[0]["error"]["code"] == "UNSUPPORTED_FORMAT"


def test_extract_missing_path():
    result = runner.invoke(app, ["extract", "does_not_exist.pdf"])

    assert result.exit_code != 0


def test_extract_with_config(tmp_path, resume_pdf):
    config_file = tmp_path / "extraction.yaml"
    config_file.write_text("pdf:\n  backend: pdfplumber\n")

    result = runner.invoke(
        app, ["extract", str(resume_pdf), "--config", str(config_file), "--json"]
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout)[0]["metadata"]["backend"] == "pdfplumber"


def test_extract_config_error(resume_pdf):
    with patch("resume_extractor.cli.utils.ConfigManager") as mock_cm:
        mock_cm.return_value.load_config.side_effect = ConfigValidationError(
            "Invalid configuration: bad"
        )
        result = runner.invoke(
            app, ["extract", str(resume_pdf), "--config", "bad.yaml"]
        )

    assert result.exit_code == 1
    assert "Configuration Error" in result.stdout


def test_extract_scopes_run_context(resume_pdf):
    with patch(
        "resume_extractor.cli.extract.bind_context", wraps=bind_context
    ) as mock_bind:
        result = runner.invoke(app, ["extract", str(resume_pdf)])

    assert result.exit_code == 0
    kwargs = mock_bind.call_args.kwargs
    assert kwargs["command"] == "extract"
    assert kwargs["file_count"] == 1
    assert kwargs["run_id"]
    # Run context does not leak past the command
    assert get_correlation_id() is None
    assert structlog.contextvars.get_contextvars() == {}
