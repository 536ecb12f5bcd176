"""
Parser module for UN Contributions Extract.

Each report format has its own single-pass line scanner. The scanners share
one signature, ``parse(lines, year, month) -> List[ContributionRecord]``, and
are selected through ``PARSERS`` by ``ReportFormat``.

All three rely on the same convention: the last three integers on a data
line are the male, female and total counts. Any other trailing number on a
line breaks that assumption; the validator drops the records where the
counts do not add up.
"""

import os
import re
from typing import Callable, Dict, List, Optional, Pattern, Sequence, Tuple

from uncontrib.config import Config
from uncontrib.log import get_logger
from uncontrib.model import (
    ContributionRecord,
    FilenameFormatError,
    PersonnelType,
    ReportFormat,
    UnknownLayoutError,
)
from uncontrib.pdfio import extract_pdf_text
from uncontrib.validate import validate_and_clean_data

logger = get_logger(__name__)

# Regex patterns
FILENAME_REGEX = re.compile(r"UN_country_contributions_(\d{4})_(\d{2})\.pdf")
MISSION_REGEX = re.compile(r"(UN[A-Z]+|MIN[A-Z]+|MON[A-Z]+)")
NUMBER_REGEX = re.compile(r"\d+")
DIGIT_REGEX = re.compile(r"\d")

MISSION_SENTINEL = "Various"

# Markers used by identify_pdf_format, checked in order
FORMAT_MARKERS: List[Tuple[str, ReportFormat]] = [
    ("UN Mission's Summary", ReportFormat.FORMAT_2015_2018),
    ("Summary of Contributions to UN Peacekeeping", ReportFormat.FORMAT_2019_2022),
    ("Contribution of Uniformed Personnel to UN", ReportFormat.FORMAT_2023_PLUS),
]

# 2015-2018: country on its own line, then one line per mission/personnel type
BOILERPLATE_2015_2018 = re.compile(r"UN Mission|Country|Description|Totals|Page \d+ of \d+")
COUNTRY_REGEX_2015_2018 = re.compile(r"^[A-Z][a-zA-Z]+$")
PERSONNEL_RULES_2015_2018: List[Tuple[str, PersonnelType]] = [
    ("Individual Police", PersonnelType.INDIVIDUAL_POLICE),
    ("Contingent Troop", PersonnelType.CONTINGENT_TROOPS),
    ("Experts on Mission", PersonnelType.EXPERTS_ON_MISSION),
]

# 2019-2022: numbered country list, mission codes on following lines
BOILERPLATE_2019_2022 = re.compile(
    r"Country Name|POST|MALE|FEMALE|TOTAL|Summary of Contributions|Page \d+"
)
COUNTRY_REGEX_2019_2022 = re.compile(r"^(\d+)\s+([A-Za-z].*?)$")
PERSONNEL_RULES_2019_2022: List[Tuple[str, PersonnelType]] = [
    ("Contingent Troops", PersonnelType.CONTINGENT_TROOPS),
    ("Individual Police", PersonnelType.INDIVIDUAL_POLICE),
    ("Experts on Mission", PersonnelType.EXPERTS_ON_MISSION),
]
PERSONNEL_REGEX_2019_2022 = re.compile(r"(Contingent Troops|Individual Police|Experts on Mission)")

# 2023+: mission code on its own line, indented countries below it.
# "Mission" is only boilerplate at the start of a line so that
# "Experts on Mission" rows survive.
BOILERPLATE_2023_PLUS = re.compile(
    r"^Mission\b|Personnel Type|\bMale\b|\bFemale\b|Total|Contribution of Uniformed"
    r"|Page \d+|Report Generated|Grand Total"
)
MISSION_LINE_REGEX_2023_PLUS = re.compile(r"^[A-Z]{3,8}$")
COUNTRY_REGEX_2023_PLUS = re.compile(r"^\s+[A-Z][a-zA-Z\s]+$")
PERSONNEL_RULES_2023_PLUS: List[Tuple[str, PersonnelType]] = [
    ("Individual Police", PersonnelType.INDIVIDUAL_POLICE),
    ("Experts on Mission", PersonnelType.EXPERTS_ON_MISSION),
    ("Staff Officer", PersonnelType.STAFF_OFFICER),
    ("Troops", PersonnelType.TROOPS),
    ("Formed Police Units", PersonnelType.FORMED_POLICE_UNITS),
]
PERSONNEL_ALTERNATION_2023_PLUS = "|".join(re.escape(p) for p, _ in PERSONNEL_RULES_2023_PLUS)
PERSONNEL_REGEX_2023_PLUS = re.compile(rf"({PERSONNEL_ALTERNATION_2023_PLUS})")
INLINE_COUNTRY_REGEX_2023_PLUS = re.compile(
    rf"^\s*([A-Za-z\s]+?)\s+({PERSONNEL_ALTERNATION_2023_PLUS})"
)

# Diagnostics
HEADER_WORDS_REGEX = re.compile(r"UN Mission|Country|POST|Mission|Male|Female|Total")
POTENTIAL_COUNTRY_REGEX = re.compile(r"^[A-Z][a-zA-Z]")


def is_boilerplate(line: str, pattern: Pattern) -> bool:
    """
    Check if a trimmed line is empty or a known header/footer.

    Args:
        line: Trimmed line
        pattern: Boilerplate pattern of the report format

    Returns:
        True if the line must be skipped
    """
    return not line or bool(pattern.search(line))


def extract_numbers(line: str) -> List[int]:
    """
    Extract all integers from a line, in order.
    """
    return [int(n) for n in NUMBER_REGEX.findall(line)]


def trailing_triplet(numbers: Sequence[int]) -> Optional[Tuple[int, int, int]]:
    """
    Take the last three numbers as (male, female, total).

    Args:
        numbers: Integers found on a line

    Returns:
        (male, female, total), or None if there are fewer than three numbers
    """
    if len(numbers) < 3:
        return None
    male, female, total = numbers[-3:]
    return male, female, total


def classify_personnel_type(line: str, rules: List[Tuple[str, PersonnelType]]) -> PersonnelType:
    """
    Classify the personnel type of a line.

    Rules are evaluated in order and the first phrase found wins, so
    overlapping phrases must be ordered from most to least specific.

    Args:
        line: Line to classify
        rules: Ordered (phrase, personnel type) pairs

    Returns:
        Personnel type, PersonnelType.OTHER if no phrase matches
    """
    for phrase, personnel_type in rules:
        if phrase in line:
            return personnel_type
    return PersonnelType.OTHER


def make_record(
    year: int,
    month: int,
    mission: str,
    country: str,
    personnel_type: PersonnelType,
    counts: Tuple[int, int, int],
) -> ContributionRecord:
    """
    Create a contribution record.
    """
    male, female, total = counts
    return {
        "year": year,
        "month": month,
        "mission": mission,
        "country": country,
        "personnel_type": personnel_type.value,
        "male": male,
        "female": female,
        "total": total,
    }


def parse_format_2015_2018(lines: List[str], year: int, month: int) -> List[ContributionRecord]:
    """
    Parse a report in the 2015-2018 (country-indexed) format.

    Country names stand alone at the left margin; the lines below carry a
    mission code, a personnel description and the counts.

    Args:
        lines: Extracted text lines
        year: Report year
        month: Report month

    Returns:
        Candidate records
    """
    records: List[ContributionRecord] = []
    current_country = ""

    for raw_line in lines:
        untrimmed = raw_line.rstrip()
        line = untrimmed.strip()

        if is_boilerplate(line, BOILERPLATE_2015_2018):
            continue

        # Country names start at the left margin; indented words are wrapped cells
        if COUNTRY_REGEX_2015_2018.match(untrimmed):
            current_country = line
            continue

        if not current_country or not DIGIT_REGEX.search(line):
            continue

        mission_match = MISSION_REGEX.search(line)
        if not mission_match:
            continue

        counts = trailing_triplet(extract_numbers(line))
        if counts is None:
            continue

        personnel_type = classify_personnel_type(line, PERSONNEL_RULES_2015_2018)
        records.append(
            make_record(year, month, mission_match.group(1), current_country, personnel_type, counts)
        )

    return records


def parse_format_2019_2022(lines: List[str], year: int, month: int) -> List[ContributionRecord]:
    """
    Parse a report in the 2019-2022 (numbered country list) format.

    Args:
        lines: Extracted text lines
        year: Report year
        month: Report month

    Returns:
        Candidate records
    """
    records: List[ContributionRecord] = []
    current_country = ""
    current_mission = ""

    for raw_line in lines:
        line = raw_line.strip()

        if is_boilerplate(line, BOILERPLATE_2019_2022):
            continue

        # Country numbering is discarded
        country_match = COUNTRY_REGEX_2019_2022.match(line)
        if country_match:
            current_country = country_match.group(2).strip()
            continue

        mission_match = MISSION_REGEX.search(line)
        if mission_match:
            current_mission = mission_match.group(1)

        if not current_country or not DIGIT_REGEX.search(line):
            continue

        if not PERSONNEL_REGEX_2019_2022.search(line):
            continue

        counts = trailing_triplet(extract_numbers(line))
        if counts is None:
            continue

        personnel_type = classify_personnel_type(line, PERSONNEL_RULES_2019_2022)
        records.append(
            make_record(
                year,
                month,
                current_mission or MISSION_SENTINEL,
                current_country,
                personnel_type,
                counts,
            )
        )

    return records


def parse_format_2023_plus(lines: List[str], year: int, month: int) -> List[ContributionRecord]:
    """
    Parse a report in the 2023+ (mission-indexed) format.

    Mission codes stand alone on a line and reset the current country.
    Countries are indented below their mission, but may also appear in
    front of the personnel type on the data line itself.

    Args:
        lines: Extracted text lines
        year: Report year
        month: Report month

    Returns:
        Candidate records
    """
    records: List[ContributionRecord] = []
    current_mission = ""
    current_country = ""

    for raw_line in lines:
        untrimmed = raw_line.rstrip()
        line = untrimmed.strip()

        if is_boilerplate(line, BOILERPLATE_2023_PLUS):
            continue

        if MISSION_LINE_REGEX_2023_PLUS.match(line):
            current_mission = line
            current_country = ""
            continue

        # Indentation only survives on the untrimmed line
        if COUNTRY_REGEX_2023_PLUS.match(untrimmed) and "Total" not in untrimmed:
            current_country = line
            continue

        if not current_mission or not DIGIT_REGEX.search(line):
            continue

        if not PERSONNEL_REGEX_2023_PLUS.search(line):
            continue

        counts = trailing_triplet(extract_numbers(line))
        if counts is None:
            continue

        personnel_type = classify_personnel_type(line, PERSONNEL_RULES_2023_PLUS)

        inline_match = INLINE_COUNTRY_REGEX_2023_PLUS.match(line)
        country = inline_match.group(1).strip() if inline_match else current_country

        if not country or "Total" in country:
            continue

        records.append(make_record(year, month, current_mission, country, personnel_type, counts))

    return records


PARSERS: Dict[ReportFormat, Callable[[List[str], int, int], List[ContributionRecord]]] = {
    ReportFormat.FORMAT_2015_2018: parse_format_2015_2018,
    ReportFormat.FORMAT_2019_2022: parse_format_2019_2022,
    ReportFormat.FORMAT_2023_PLUS: parse_format_2023_plus,
}


def identify_pdf_format(lines: Optional[List[str]]) -> ReportFormat:
    """
    Identify the report format from its title text.

    This is independent of the layout classifier and the two may disagree
    on some documents.

    Args:
        lines: Extracted text lines

    Returns:
        Report format, ReportFormat.UNKNOWN if no marker is found
    """
    if not lines:
        return ReportFormat.UNKNOWN

    text_content = " ".join(lines)
    for marker, report_format in FORMAT_MARKERS:
        if marker in text_content:
            return report_format
    return ReportFormat.UNKNOWN


def parse_lines(lines: List[str], year: int, month: int, report_format: ReportFormat) -> List[ContributionRecord]:
    """
    Parse extracted lines with the parser of the given format.

    Args:
        lines: Extracted text lines
        year: Report year
        month: Report month
        report_format: Format selecting the parser

    Returns:
        Candidate records

    Raises:
        UnknownLayoutError: If no parser exists for the format
    """
    parser = PARSERS.get(report_format)
    if parser is None:
        raise UnknownLayoutError(f"No parser for report format: {report_format.value}")
    return parser(lines, year, month)


def parse_report_filename(filename: str) -> Tuple[int, int]:
    """
    Read the report year and month from a filename.

    Args:
        filename: File name, e.g. UN_country_contributions_2020_03.pdf

    Returns:
        Tuple of (year, month)

    Raises:
        FilenameFormatError: If the filename does not follow the pattern
    """
    match = FILENAME_REGEX.search(os.path.basename(filename))
    if not match:
        raise FilenameFormatError(f"Could not extract date from filename: {os.path.basename(filename)}")
    return int(match.group(1)), int(match.group(2))


def parse_single_pdf(path: str, cfg: Config) -> List[ContributionRecord]:
    """
    Parse a single report into validated records.

    Args:
        path: Path to the PDF file
        cfg: Application configuration

    Returns:
        Validated records

    Raises:
        FilenameFormatError: If the filename carries no report date
        ExtractionFailure: If pdftotext fails
        UnknownLayoutError: If the report format is not recognised
    """
    filename = os.path.basename(path)
    year, month = parse_report_filename(filename)
    logger.info(f"Processing: {filename} ({year}-{month:02d})")

    lines = extract_pdf_text(path, cfg)

    report_format = identify_pdf_format(lines)
    logger.info(f"  Format: {report_format.value}")
    if report_format is ReportFormat.UNKNOWN:
        raise UnknownLayoutError(f"Unknown format for file: {filename}")

    records = parse_lines(lines, year, month, report_format)
    logger.info(f"  Extracted {len(records)} records")

    records = validate_and_clean_data(records)
    logger.info(f"  Final valid records: {len(records)}")

    return records


def analyze_table_structure(lines: Optional[List[str]]) -> Dict:
    """
    Summarise the table structure of extracted text.

    Args:
        lines: Extracted text lines

    Returns:
        Dictionary with the detected format and line counts
    """
    if not lines:
        return {"format": ReportFormat.UNKNOWN.value, "total_lines": 0, "data_lines": 0,
                "potential_countries": 0, "sample_countries": []}

    potential_countries = [
        line for line in lines
        if POTENTIAL_COUNTRY_REGEX.match(line) and not HEADER_WORDS_REGEX.search(line)
    ]

    return {
        "format": identify_pdf_format(lines).value,
        "total_lines": len(lines),
        "data_lines": sum(1 for line in lines if DIGIT_REGEX.search(line)),
        "potential_countries": len(potential_countries),
        "sample_countries": potential_countries[:5],
    }
