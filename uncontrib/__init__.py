"""
UN Contributions Extract - UN Peacekeeping Contribution Record Extraction.

A system for extracting structured personnel contribution records from the
monthly "UN country contributions" PDF reports.
"""

__version__ = "0.1.0"

from uncontrib.model import (
    ContributionRecord,
    LayoutClassification,
    Layout,
    PersonnelType,
    ReportFormat,
    ExtractionFailure,
    FilenameFormatError,
    UnknownLayoutError,
)
from uncontrib.config import Config, load_config
from uncontrib.parser import identify_pdf_format, parse_lines, parse_single_pdf
from uncontrib.validate import validate_and_clean_data
from uncontrib.classifier import classify_layout, classify_pdf_layout, classify_all_pdfs
from uncontrib.batch import parse_all_pdfs
from uncontrib.writers import export_to_csv, write_classification_csv

__all__ = [
    "ContributionRecord",
    "LayoutClassification",
    "Layout",
    "PersonnelType",
    "ReportFormat",
    "ExtractionFailure",
    "FilenameFormatError",
    "UnknownLayoutError",
    "Config",
    "load_config",
    "identify_pdf_format",
    "parse_lines",
    "parse_single_pdf",
    "validate_and_clean_data",
    "classify_layout",
    "classify_pdf_layout",
    "classify_all_pdfs",
    "parse_all_pdfs",
    "export_to_csv",
    "write_classification_csv",
]
