"""
Data models for UN Contributions Extract.
"""

from enum import Enum
from typing import Optional, TypedDict


class ContributionRecord(TypedDict):
    """
    Represents one personnel contribution row.
    """

    year: int  # Report year, from the filename
    month: int  # Report month, from the filename
    mission: str  # Mission code (e.g. "UNMISS") or "Various"
    country: str  # Contributing country
    personnel_type: str  # One of the PersonnelType values
    male: int
    female: int
    total: int


class LayoutClassification(TypedDict):
    """
    Represents the layout classification of one report.
    """

    filename: str
    layout: str  # One of the Layout values
    report_date: Optional[str]  # "YYYY-MM" or a date string found in the text
    sample_header_line: str
    notes: str  # Decisions taken, joined with "; "


class PositionedToken(TypedDict):
    """
    A word from the first page together with its position.
    """

    text: str
    x: float
    top: float


class PersonnelType(Enum):
    """
    Categories of deployed uniformed personnel.
    """

    INDIVIDUAL_POLICE = "Individual Police"
    EXPERTS_ON_MISSION = "Experts on Mission"
    CONTINGENT_TROOPS = "Contingent Troops"
    STAFF_OFFICER = "Staff Officer"
    TROOPS = "Troops"
    FORMED_POLICE_UNITS = "Formed Police Units"
    OTHER = "Other"


class ReportFormat(Enum):
    """
    Report formats recognised by the main extraction pipeline.
    """

    FORMAT_2015_2018 = "format_2015_2018"
    FORMAT_2019_2022 = "format_2019_2022"
    FORMAT_2023_PLUS = "format_2023_plus"
    UNKNOWN = "unknown"


class Layout(Enum):
    """
    Layouts assigned by the layout classifier.
    """

    A_MISSION_COUNTRY = "A_mission_country"
    B_COUNTRY_POST = "B_country_post"
    C_COUNTRY_UNMISSION = "C_country_unmission"
    UNKNOWN = "unknown"
    ERROR = "error"


class UNContribError(Exception):
    """Base class for all uncontrib exceptions."""

    pass


class ExtractionFailure(UNContribError):
    """Exception raised when text cannot be extracted from a PDF."""

    pass


class FilenameFormatError(UNContribError):
    """Exception raised when the report date cannot be read from a filename."""

    pass


class UnknownLayoutError(UNContribError):
    """Exception raised when no known report format matches a document."""

    pass


class ConfigError(UNContribError):
    """Exception raised for configuration errors."""

    pass


class OutputError(UNContribError):
    """Exception raised for output errors."""

    pass
