"""
Tests for the PDF I/O module.
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from uncontrib.config import Config, ExtractionConfig
from uncontrib.model import ExtractionFailure
from uncontrib.pdfio import (
    build_pdftotext_command,
    extract_first_page,
    extract_pdf_text,
    inspect_pdf_raw,
)


@pytest.fixture
def pdf_file(tmp_path):
    """Create a placeholder PDF file."""
    path = tmp_path / "UN_country_contributions_2020_01.pdf"
    path.write_bytes(b"%PDF-1.4")
    return str(path)


def fake_pdftotext(text, returncode=0):
    """Return a subprocess.run replacement writing text to the output file."""
    def run(cmd, **kwargs):
        if text is not None:
            with open(cmd[-1], "w", encoding="utf-8") as f:
                f.write(text)
        return subprocess.CompletedProcess(cmd, returncode, stdout="", stderr="failure" if returncode else "")
    return run


def test_build_pdftotext_command():
    """Test building the pdftotext command."""
    cfg = Config(extraction=ExtractionConfig(pdftotext_path="/opt/bin/pdftotext"))

    assert build_pdftotext_command("in.pdf", "out.txt", cfg) == [
        "/opt/bin/pdftotext", "-layout", "in.pdf", "out.txt"
    ]

    cfg.extraction.layout = False
    assert build_pdftotext_command("in.pdf", "out.txt", cfg) == ["/opt/bin/pdftotext", "in.pdf", "out.txt"]


@patch("uncontrib.pdfio.subprocess.run")
def test_extract_pdf_text(mock_run, pdf_file):
    """Test extracting layout-preserving lines."""
    mock_run.side_effect = fake_pdftotext("Title\n    Bangladesh\n  UNMISS   1   2   3\n")

    lines = extract_pdf_text(pdf_file, Config())

    assert lines == ["Title", "    Bangladesh", "  UNMISS   1   2   3"]
    cmd = mock_run.call_args[0][0]
    assert cmd[:3] == ["pdftotext", "-layout", pdf_file]
    assert mock_run.call_args[1]["timeout"] == 60.0


@patch("uncontrib.pdfio.subprocess.run")
def test_extract_pdf_text_page_breaks(mock_run, pdf_file):
    """Test that form feeds between pages become line breaks."""
    mock_run.side_effect = fake_pdftotext("Page one\n\fPage two\n")

    lines = extract_pdf_text(pdf_file, Config())

    assert "Page one" in lines
    assert "Page two" in lines


def test_extract_pdf_text_missing_file(tmp_path):
    """Test extracting from a file that does not exist."""
    with pytest.raises(ExtractionFailure) as excinfo:
        extract_pdf_text(str(tmp_path / "missing.pdf"), Config())

    assert "not found" in str(excinfo.value)


@patch("uncontrib.pdfio.subprocess.run", side_effect=FileNotFoundError("pdftotext"))
def test_extract_pdf_text_tool_missing(mock_run, pdf_file):
    """Test that a missing pdftotext binary is an extraction failure."""
    with pytest.raises(ExtractionFailure) as excinfo:
        extract_pdf_text(pdf_file, Config())

    assert "pdftotext binary not found" in str(excinfo.value)


@patch("uncontrib.pdfio.subprocess.run", side_effect=subprocess.TimeoutExpired("pdftotext", 60))
def test_extract_pdf_text_timeout(mock_run, pdf_file):
    """Test that a timeout is an extraction failure."""
    with pytest.raises(ExtractionFailure) as excinfo:
        extract_pdf_text(pdf_file, Config())

    assert "timed out" in str(excinfo.value)


@patch("uncontrib.pdfio.subprocess.run")
def test_extract_pdf_text_nonzero_exit(mock_run, pdf_file):
    """Test that a non-zero exit code is an extraction failure."""
    mock_run.side_effect = fake_pdftotext(None, returncode=1)

    with pytest.raises(ExtractionFailure) as excinfo:
        extract_pdf_text(pdf_file, Config())

    assert "exited with code 1" in str(excinfo.value)


@patch("uncontrib.pdfio.subprocess.run")
def test_extract_pdf_text_no_output(mock_run, pdf_file):
    """Test that a missing output file is an extraction failure."""
    mock_run.side_effect = fake_pdftotext(None)

    with pytest.raises(ExtractionFailure) as excinfo:
        extract_pdf_text(pdf_file, Config())

    assert "no output" in str(excinfo.value)


@patch("uncontrib.pdfio.pdfplumber")
def test_extract_first_page(mock_pdfplumber):
    """Test extracting first page text and word positions."""
    mock_page = MagicMock()
    mock_page.extract_text.return_value = "Country UN Mission"
    mock_page.extract_words.return_value = [
        {"text": "Country", "x0": 10, "top": 50.5},
        {"text": "Mission", "x0": 120.25, "top": 50.5},
    ]
    mock_pdf = MagicMock()
    mock_pdf.pages = [mock_page, MagicMock()]
    mock_pdfplumber.open.return_value.__enter__.return_value = mock_pdf

    text, tokens = extract_first_page("test.pdf")

    assert text == "Country UN Mission"
    assert tokens == [
        {"text": "Country", "x": 10.0, "top": 50.5},
        {"text": "Mission", "x": 120.25, "top": 50.5},
    ]
    mock_pdfplumber.open.assert_called_once_with("test.pdf")


@patch("uncontrib.pdfio.pdfplumber")
def test_extract_first_page_no_pages(mock_pdfplumber):
    """Test a PDF without pages."""
    mock_pdf = MagicMock()
    mock_pdf.pages = []
    mock_pdfplumber.open.return_value.__enter__.return_value = mock_pdf

    with pytest.raises(ExtractionFailure):
        extract_first_page("test.pdf")


@patch("uncontrib.pdfio.pdfplumber")
def test_extract_first_page_open_error(mock_pdfplumber):
    """Test that pdfplumber errors become extraction failures."""
    mock_pdfplumber.open.side_effect = ValueError("not a PDF")

    with pytest.raises(ExtractionFailure) as excinfo:
        extract_first_page("test.pdf")

    assert "not a PDF" in str(excinfo.value)


@patch("uncontrib.pdfio.extract_pdf_text")
def test_inspect_pdf_raw(mock_extract, pdf_file):
    """Test inspecting a PDF."""
    mock_extract.return_value = ["line 1", "line 2"]

    assert inspect_pdf_raw(pdf_file, Config(), lines_to_show=1) == ["line 1", "line 2"]


@patch("uncontrib.pdfio.extract_pdf_text", side_effect=ExtractionFailure("failed"))
def test_inspect_pdf_raw_failure(mock_extract, pdf_file):
    """Test inspecting a PDF that cannot be converted."""
    assert inspect_pdf_raw(pdf_file, Config()) is None
