"""
Layout classifier for UN country contribution reports.

The classifier inspects the first page of a report and assigns one of the
known column layouts. It is a cataloguing tool: the main extraction
pipeline selects its parser with ``parser.identify_pdf_format`` instead.
"""

import os
import re
from collections import Counter
from pathlib import Path
from typing import List, Optional, Tuple

from uncontrib.config import Config
from uncontrib.log import get_logger
from uncontrib.model import Layout, LayoutClassification, PositionedToken
from uncontrib.pdfio import extract_first_page
from uncontrib.validate import normalize_whitespace
from uncontrib.writers import write_classification_csv

logger = get_logger(__name__)

HEADER_KEYWORDS = ["country", "mission", "description", "personnel", "post", "male", "female", "total"]
HEADER_MIN_KEYWORDS = 3
HEADER_SEARCH_LINES = 15
SAMPLE_HEADER_SEARCH_LINES = 20
SAMPLE_FALLBACK_LINES = 10
NO_HEADER = "Header not detected"
CLASSIFY_FILE_REGEX = re.compile(r"^UN_country_contributions_.*\.pdf$")

# Literal header patterns, checked in order against the lower-cased header line
HEADER_PATTERNS: List[Tuple[re.Pattern, Layout, str]] = [
    (re.compile(r"^\s*country.*mission.*description"), Layout.A_MISSION_COUNTRY,
     "Header pattern: Country appears first, then Mission"),
    (re.compile(r"^\s*mission.*country"), Layout.B_COUNTRY_POST,
     "Header pattern: Mission appears first, then Country"),
    (re.compile(r"country.*\|.*un mission.*\|.*description"), Layout.C_COUNTRY_UNMISSION,
     "Header pattern: Country | UN Mission | Description with separators"),
]

FILENAME_DATE_REGEX = re.compile(r"(\d{4})_(\d{2})")
TEXT_DATE_PATTERNS = [
    re.compile(r"\d{2}/\d{2}/\d{4}"),  # DD/MM/YYYY
    re.compile(r"\d{2}-\w{3}-\d{2}"),  # DD-MMM-YY
    re.compile(r"As of: \d{2}/\d{2}/\d{4}"),
    re.compile(r"Month of Report.*?:\s*(\d{2}-\w{3}-\d{2})"),
]
FILENAME_YEAR_REGEX = re.compile(r"\d{4}")
LAST_LAYOUT_A_YEAR = 2018


def count_header_keywords(line: str) -> int:
    """
    Count the header keywords contained in a line (case-insensitive).
    """
    line_lower = line.lower()
    return sum(1 for keyword in HEADER_KEYWORDS if keyword in line_lower)


def find_header_line(text: str, max_lines: int = HEADER_SEARCH_LINES) -> str:
    """
    Find the column header line among the first non-blank lines of a page.

    Args:
        text: First page text
        max_lines: Number of non-blank lines to search

    Returns:
        The lower-cased header line, or an empty string if none is found
    """
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]
    for line in lines[:max_lines]:
        if count_header_keywords(line) >= HEADER_MIN_KEYWORDS:
            return line.lower()
    return ""


def get_sample_header(text: str) -> str:
    """
    Get a representative header line for the classification report.

    Args:
        text: First page text

    Returns:
        Whitespace-normalized header line, a fallback line, or "Header not detected"
    """
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if len(line) > 10]

    for line in lines[:SAMPLE_HEADER_SEARCH_LINES]:
        if count_header_keywords(line) >= HEADER_MIN_KEYWORDS:
            return normalize_whitespace(line)

    for line in lines[:SAMPLE_FALLBACK_LINES]:
        if 20 < len(line) < 200:
            return normalize_whitespace(line)

    return NO_HEADER


def extract_report_date(filename: str, text: str) -> Optional[str]:
    """
    Extract the report date from a filename or the report text.

    Args:
        filename: PDF filename
        text: First page text

    Returns:
        "YYYY-MM" from the filename, else the first date found in the
        text, else None
    """
    match = FILENAME_DATE_REGEX.search(filename)
    if match:
        return f"{match.group(1)}-{match.group(2)}"

    for pattern in TEXT_DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)

    return None


def classify_header(header_line: str) -> Tuple[Layout, Optional[str]]:
    """
    Classify a lower-cased header line.

    Literal patterns are tried first, then the relative position of
    "country" and "mission".

    Args:
        header_line: Lower-cased header line

    Returns:
        Tuple of (layout, note); (Layout.UNKNOWN, None) if undecided
    """
    if not header_line:
        return Layout.UNKNOWN, None

    for pattern, layout, note in HEADER_PATTERNS:
        if pattern.search(header_line):
            return layout, note

    if "mission" in header_line and "country" in header_line:
        mission_pos = header_line.index("mission")
        country_pos = header_line.index("country")
        if country_pos < mission_pos:
            return Layout.A_MISSION_COUNTRY, (
                f"Position analysis: Country (pos={country_pos}) before Mission (pos={mission_pos})"
            )
        return Layout.B_COUNTRY_POST, (
            f"Position analysis: Mission (pos={mission_pos}) before Country (pos={country_pos})"
        )

    return Layout.UNKNOWN, None


def classify_tokens(tokens: List[PositionedToken]) -> Tuple[Layout, Optional[str]]:
    """
    Classify a page from the x positions of its "mission" and "country" words.

    Args:
        tokens: Positioned words of the first page

    Returns:
        Tuple of (layout, note); (Layout.UNKNOWN, None) if either word is missing
    """
    mission_token = next((t for t in tokens if "mission" in t["text"].lower()), None)
    country_token = next((t for t in tokens if "country" in t["text"].lower()), None)
    if mission_token is None or country_token is None:
        return Layout.UNKNOWN, None

    mission_x = mission_token["x"]
    country_x = country_token["x"]
    if mission_x < country_x:
        return Layout.A_MISSION_COUNTRY, (
            f"Token position analysis: mission (x={mission_x:g}) before country (x={country_x:g})"
        )
    return Layout.C_COUNTRY_UNMISSION, (
        f"Token position analysis: country (x={country_x:g}) before mission (x={mission_x:g})"
    )


def classify_by_year(filename: str) -> Tuple[Layout, Optional[str]]:
    """
    Fall back on the report year in the filename.
    """
    match = FILENAME_YEAR_REGEX.search(filename)
    if not match:
        return Layout.UNKNOWN, None

    year = int(match.group(0))
    if year <= LAST_LAYOUT_A_YEAR:
        return Layout.A_MISSION_COUNTRY, (
            f"Fallback: files from {year} typically use Country-first layout (A)"
        )
    return Layout.B_COUNTRY_POST, (
        f"Fallback: files from {year} typically use Mission-first layout (B)"
    )


def classify_layout(
    filename: str, text: str, tokens: Optional[List[PositionedToken]] = None
) -> LayoutClassification:
    """
    Classify the layout of a report from its first page.

    Rules, first decision wins: literal header patterns, header word
    positions, token x positions, then the filename year.

    Args:
        filename: PDF filename
        text: First page text
        tokens: Positioned words of the first page, if available

    Returns:
        Layout classification
    """
    notes: List[str] = []

    header_line = find_header_line(text)
    logger.debug(f"  - Header line: {normalize_whitespace(header_line)}")

    layout, note = classify_header(header_line)

    if layout is Layout.UNKNOWN and tokens:
        logger.debug("  - Trying token position analysis...")
        layout, note = classify_tokens(tokens)

    if layout is Layout.UNKNOWN:
        layout, note = classify_by_year(filename)

    if note:
        notes.append(note)

    logger.debug(f"  - Final classification: {layout.value}")

    return {
        "filename": filename,
        "layout": layout.value,
        "report_date": extract_report_date(filename, text),
        "sample_header_line": get_sample_header(text),
        "notes": "; ".join(notes),
    }


def error_classification(filename: str, message: str) -> LayoutClassification:
    """
    Build the classification of a report that could not be read.
    """
    return {
        "filename": filename,
        "layout": Layout.ERROR.value,
        "report_date": None,
        "sample_header_line": "Error reading PDF",
        "notes": f"Error: {message}",
    }


def classify_pdf_layout(path: str) -> LayoutClassification:
    """
    Classify the layout of a PDF file.

    Args:
        path: Path to the PDF file

    Returns:
        Layout classification; layout "error" if the PDF cannot be read
    """
    filename = os.path.basename(path)
    logger.info(f"Classifying: {filename}")

    try:
        text, tokens = extract_first_page(path)
        return classify_layout(filename, text, tokens)
    except Exception as e:
        logger.error(f"  - Error processing file: {e}")
        return error_classification(filename, str(e))


def find_classifiable_pdfs(pdf_dir: str) -> List[str]:
    """
    Find report files to classify.

    Raises:
        FileNotFoundError: If no report is found
    """
    pdf_files: List[str] = []
    if os.path.isdir(pdf_dir):
        pdf_files = sorted(
            str(path) for path in Path(pdf_dir).iterdir()
            if path.is_file() and CLASSIFY_FILE_REGEX.match(path.name)
        )

    if not pdf_files:
        raise FileNotFoundError(f"No PDF files matching pattern found in: {pdf_dir}")
    return pdf_files


def classify_all_pdfs(cfg: Config, max_files: Optional[int] = None) -> List[LayoutClassification]:
    """
    Classify every report in the input directory and write the report.

    Args:
        cfg: Application configuration
        max_files: Maximum number of files to classify

    Returns:
        One classification per file

    Raises:
        FileNotFoundError: If no report is found
    """
    pdf_files = find_classifiable_pdfs(cfg.input.pdf_dir)
    if max_files is not None:
        pdf_files = pdf_files[:max_files]

    logger.info(f"Found {len(pdf_files)} PDF files to classify")

    results = [classify_pdf_layout(path) for path in pdf_files]

    write_classification_csv(results, cfg.output.classification_path)

    layout_counts = Counter(result["layout"] for result in results)
    for layout, count in sorted(layout_counts.items()):
        logger.info(f"{layout:<20}: {count} files")

    for layout in (Layout.UNKNOWN, Layout.ERROR):
        files = [r["filename"] for r in results if r["layout"] == layout.value]
        if files:
            logger.warning(f"Files labeled as {layout.value} ({len(files)}): {', '.join(files)}")

    return results
