"""
Validation and cleaning of extracted contribution records.
"""

import re
from typing import List

from uncontrib.log import get_logger
from uncontrib.model import ContributionRecord, PersonnelType

logger = get_logger(__name__)

NUMERIC_REGEX = re.compile(r"^\d+$")
COUNTRY_BOILERPLATE_REGEX = re.compile(r"Page|Report|Total|Mission|Country|Personnel")
TOTAL_TOLERANCE = 1  # Allowed difference between total and male + female
MIN_COUNTRY_LENGTH = 3


def normalize_whitespace(text: str) -> str:
    """
    Trim a string and collapse internal whitespace.
    """
    return " ".join(text.split())


def totals_consistent(record: ContributionRecord) -> bool:
    """
    Check that a record's total matches male + female within tolerance.
    """
    return abs(record["total"] - (record["male"] + record["female"])) <= TOTAL_TOLERANCE


def validate_and_clean_data(records: List[ContributionRecord]) -> List[ContributionRecord]:
    """
    Filter out records that are inconsistent or parsed from boilerplate.

    Stages run in order:

    1. numeric personnel types become "Other"
    2. numeric country names are dropped
    3. records whose total differs from male + female by more than one are dropped
    4. country whitespace is normalised
    5. country names shorter than three characters are dropped
    6. country names containing header/footer words are dropped

    Records are never repaired, only dropped or normalised. The input list
    is not modified.

    Args:
        records: Candidate records

    Returns:
        Cleaned records
    """
    if not records:
        return []

    logger.debug("Validating and cleaning data...")
    original_count = len(records)

    cleaned: List[ContributionRecord] = []
    for record in records:
        record = dict(record)

        if NUMERIC_REGEX.match(record["personnel_type"]):
            record["personnel_type"] = PersonnelType.OTHER.value

        if NUMERIC_REGEX.match(record["country"].strip()):
            continue

        if not totals_consistent(record):
            continue

        record["country"] = normalize_whitespace(record["country"])

        if len(record["country"]) < MIN_COUNTRY_LENGTH:
            continue

        if COUNTRY_BOILERPLATE_REGEX.search(record["country"]):
            continue

        cleaned.append(record)

    removed_count = original_count - len(cleaned)
    logger.info(f"Removed {removed_count} invalid records")
    logger.info(f"Retained {len(cleaned)} valid records")

    return cleaned
