"""
Tests for the CLI module.
"""

from unittest.mock import patch

import pytest

from uncontrib import __version__
from uncontrib.batch import BatchResult, FileOutcome
from uncontrib.cli import apply_overrides, build_parser, main
from uncontrib.config import Config


@pytest.fixture
def batch_result(sample_records):
    """Return a batch result with one processed file."""
    return BatchResult(
        sample_records,
        [FileOutcome("UN_country_contributions_2020_01.pdf", sample_records, "ok")],
    )


@patch("uncontrib.cli.export_to_csv")
@patch("uncontrib.cli.parse_all_pdfs")
def test_main_process(mock_parse_all_pdfs, mock_export_to_csv, batch_result, capsys):
    """Test the process command."""
    mock_parse_all_pdfs.return_value = batch_result
    mock_export_to_csv.return_value = "out.csv"

    exit_code = main(["process", "--input-dir", "reports", "--limit", "3", "-o", "out.csv"])

    assert exit_code == 0
    cfg = mock_parse_all_pdfs.call_args[0][0]
    assert cfg.input.pdf_dir == "reports"
    assert mock_parse_all_pdfs.call_args[1]["max_files"] == 3
    assert mock_parse_all_pdfs.call_args[1]["pdf_files"] is None
    mock_export_to_csv.assert_called_once()
    assert mock_export_to_csv.call_args[0][0] == batch_result.records
    assert mock_export_to_csv.call_args[0][1] == "out.csv"
    assert "Results saved to: out.csv" in capsys.readouterr().out


@patch("uncontrib.cli.export_to_csv")
@patch("uncontrib.cli.parse_all_pdfs")
def test_main_without_command(mock_parse_all_pdfs, mock_export_to_csv, batch_result):
    """Test that running without a command processes everything."""
    mock_parse_all_pdfs.return_value = batch_result
    mock_export_to_csv.return_value = "out.csv"

    assert main([]) == 0

    mock_parse_all_pdfs.assert_called_once()
    assert mock_parse_all_pdfs.call_args[1]["max_files"] is None


@patch("uncontrib.cli.export_to_csv")
@patch("uncontrib.cli.parse_all_pdfs")
def test_main_explicit_inputs(mock_parse_all_pdfs, mock_export_to_csv, batch_result):
    """Test processing explicit input files sequentially."""
    mock_parse_all_pdfs.return_value = batch_result
    mock_export_to_csv.return_value = "out.csv"

    main(["process", "--in", "a.pdf", "b.pdf", "--sequential"])

    cfg = mock_parse_all_pdfs.call_args[0][0]
    assert cfg.performance.parallel_files is False
    assert mock_parse_all_pdfs.call_args[1]["pdf_files"] == ["a.pdf", "b.pdf"]


@patch("uncontrib.cli.generate_sample_output")
@patch("uncontrib.cli.export_to_csv")
@patch("uncontrib.cli.parse_all_pdfs")
def test_main_verbose_sample(mock_parse_all_pdfs, mock_export_to_csv, mock_sample, batch_result):
    """Test that verbose mode prints a data sample."""
    mock_parse_all_pdfs.return_value = batch_result
    mock_export_to_csv.return_value = "out.csv"

    assert main(["process", "--verbose"]) == 0

    mock_sample.assert_called_once_with(batch_result.records, 20)


@patch("uncontrib.cli.export_to_csv")
@patch("uncontrib.cli.parse_all_pdfs")
def test_main_no_records(mock_parse_all_pdfs, mock_export_to_csv, capsys):
    """Test a batch that yields no records."""
    mock_parse_all_pdfs.return_value = BatchResult(
        [], [FileOutcome("UN_country_contributions_2020_01.pdf", [], "error", "failed")]
    )

    assert main(["process"]) == 0

    mock_export_to_csv.assert_not_called()
    assert "No data was extracted" in capsys.readouterr().out


def test_main_no_inputs(tmp_path, monkeypatch, capsys):
    """Test that an empty input directory exits with an error."""
    monkeypatch.chdir(tmp_path)

    assert main(["process"]) == 1

    assert "Error:" in capsys.readouterr().out


@patch("uncontrib.cli.parse_all_pdfs", side_effect=RuntimeError("Test error"))
def test_main_unexpected_error(mock_parse_all_pdfs):
    """Test that unexpected errors exit with an error code."""
    assert main(["process"]) == 1


@patch("uncontrib.cli.classify_all_pdfs")
def test_main_classify(mock_classify_all_pdfs, capsys):
    """Test the classify command."""
    mock_classify_all_pdfs.return_value = [
        {"filename": "UN_country_contributions_2016_01.pdf", "layout": "A_mission_country",
         "report_date": "2016-01", "sample_header_line": "", "notes": "Fallback: year <= 2018"},
        {"filename": "UN_country_contributions_2020_01.pdf", "layout": "B_country_post",
         "report_date": "2020-01", "sample_header_line": "", "notes": ""},
        {"filename": "UN_country_contributions_2021_01.pdf", "layout": "B_country_post",
         "report_date": "2021-01", "sample_header_line": "", "notes": ""},
    ]

    exit_code = main(["classify", "--output", "layouts.csv", "--limit", "3"])

    assert exit_code == 0
    cfg = mock_classify_all_pdfs.call_args[0][0]
    assert cfg.output.classification_path == "layouts.csv"
    assert mock_classify_all_pdfs.call_args[1]["max_files"] == 3
    out = capsys.readouterr().out
    assert "UN_country_contributions_2016_01.pdf: A_mission_country" in out
    assert "B_country_post      : 2 files" in out


@patch("uncontrib.cli.classify_all_pdfs", side_effect=FileNotFoundError("No PDF files found"))
def test_main_classify_no_files(mock_classify_all_pdfs, capsys):
    """Test classifying an empty directory."""
    assert main(["classify"]) == 1
    assert "Error: No PDF files found" in capsys.readouterr().out


@patch("uncontrib.cli.inspect_pdf_raw")
def test_main_inspect(mock_inspect_pdf_raw, lines_2019_2022, capsys):
    """Test the inspect command."""
    mock_inspect_pdf_raw.return_value = lines_2019_2022

    exit_code = main(["inspect", "UN_country_contributions_2020_04.pdf", "--lines", "2"])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "  1: " in out
    assert "  3: " not in out
    assert "Format: format_2019_2022" in out


@patch("uncontrib.cli.inspect_pdf_raw", return_value=None)
def test_main_inspect_failure(mock_inspect_pdf_raw, capsys):
    """Test inspecting a report that cannot be converted."""
    assert main(["inspect", "missing.pdf"]) == 1
    assert "could not extract text" in capsys.readouterr().out


def test_main_version(capsys):
    """Test the version option."""
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])

    assert excinfo.value.code == 0
    assert f"uncontrib version {__version__}" in capsys.readouterr().out


def test_apply_overrides():
    """Test applying command-line overrides."""
    config = Config()
    args = build_parser().parse_args(
        ["--pdftotext", "/opt/pdftotext", "process", "--input-dir", "pdfs", "--workers", "8"]
    )

    apply_overrides(config, args)

    assert config.input.pdf_dir == "pdfs"
    assert config.extraction.pdftotext_path == "/opt/pdftotext"
    assert config.performance.max_workers == 8
    assert config.performance.parallel_files is True
