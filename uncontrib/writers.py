"""
Output writers for UN Contributions Extract.
"""

import csv
import os
from datetime import datetime
from typing import List, Optional

import pandas as pd

from uncontrib.config import Config
from uncontrib.log import get_logger
from uncontrib.model import ContributionRecord, LayoutClassification, OutputError

logger = get_logger(__name__)

# Record key -> CSV column
CSV_COLUMNS = {
    "year": "Year",
    "month": "Month",
    "mission": "Mission",
    "country": "Country",
    "personnel_type": "Personnel_Type",
    "male": "Male",
    "female": "Female",
    "total": "Total",
}
SORT_COLUMNS = ["Year", "Month", "Mission", "Country"]
CLASSIFICATION_COLUMNS = ["filename", "layout", "report_date", "sample_header_line", "notes"]


def sort_key(record: ContributionRecord):
    return (record["year"], record["month"], record["mission"], record["country"])


def sort_records(records: List[ContributionRecord]) -> List[ContributionRecord]:
    """
    Sort records by year, month, mission and country.
    """
    return sorted(records, key=sort_key)


def records_to_frame(records: List[ContributionRecord]) -> pd.DataFrame:
    """
    Convert records to a DataFrame with the output column names, sorted.

    Args:
        records: Records to convert

    Returns:
        DataFrame with one row per record
    """
    frame = pd.DataFrame(list(records), columns=list(CSV_COLUMNS))
    frame = frame.rename(columns=CSV_COLUMNS)
    return frame.sort_values(SORT_COLUMNS, kind="mergesort").reset_index(drop=True)


def default_csv_filename(now: Optional[datetime] = None) -> str:
    """
    Build the timestamped default output filename.
    """
    now = now or datetime.now()
    return f"un_contributions_{now.strftime('%Y%m%d_%H%M%S')}.csv"


def resolve_csv_path(path: Optional[str], cfg: Optional[Config]) -> str:
    """
    Resolve the output CSV path from an explicit path or the configuration.
    """
    if path:
        return path
    if cfg is not None and cfg.output.csv_path:
        return cfg.output.csv_path
    output_dir = cfg.output.output_dir if cfg is not None else "."
    return os.path.join(output_dir, default_csv_filename())


def export_to_csv(
    records: List[ContributionRecord], path: Optional[str] = None, cfg: Optional[Config] = None
) -> Optional[str]:
    """
    Write records to a CSV file, sorted by year, month, mission and country.

    Args:
        records: Records to write
        path: Output file path; defaults to a timestamped name
        cfg: Application configuration

    Returns:
        Path of the written file, or None if there was nothing to write
    """
    if not records:
        logger.warning("No data to export")
        return None

    path = resolve_csv_path(path, cfg)
    logger.info(f"Writing CSV to {path}")

    try:
        # Create output directory if it doesn't exist
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)

        frame = records_to_frame(records)
        frame.to_csv(path, index=False)

        logger.info(f"Wrote {len(frame)} rows to {path} ({os.path.getsize(path)} bytes)")
    except Exception as e:
        logger.error(f"Error writing CSV to {path}: {e}")
        raise OutputError(f"Error writing CSV to {path}: {e}") from e

    return path


def write_classification_csv(results: List[LayoutClassification], path: str) -> None:
    """
    Write layout classifications to a CSV file.

    Args:
        results: Classifications to write
        path: Output file path
    """
    logger.info(f"Writing classification report to {path}")

    try:
        # Create output directory if it doesn't exist
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)

        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CLASSIFICATION_COLUMNS)
            writer.writeheader()
            for result in results:
                row = {column: result.get(column) for column in CLASSIFICATION_COLUMNS}
                if row["report_date"] is None:
                    row["report_date"] = "NA"
                writer.writerow(row)

        logger.info(f"Wrote {len(results)} rows to {path}")
    except Exception as e:
        logger.error(f"Error writing classification report to {path}: {e}")
        raise OutputError(f"Error writing classification report to {path}: {e}") from e


def generate_sample_output(records: List[ContributionRecord], n_samples: int = 20) -> None:
    """
    Print a summary and a sample of the extracted data.

    Args:
        records: Extracted records
        n_samples: Number of rows to show
    """
    if not records:
        print("No data available for sampling")
        return

    frame = records_to_frame(records)

    print("SAMPLE DATA EXTRACTION:")
    print("=" * 60)
    print("DATA SUMMARY:")
    print(f"Total records: {len(frame)}")
    print(f"Year range: {frame['Year'].min()} - {frame['Year'].max()}")
    print(f"Unique countries: {frame['Country'].nunique()}")
    print(f"Unique missions: {frame['Mission'].nunique()}")
    print(f"Personnel types: {', '.join(frame['Personnel_Type'].unique())}")

    print("\nSAMPLE RECORDS:")
    print(frame.head(n_samples).to_string(index=False))

    print("\nRECORDS BY YEAR:")
    print(frame["Year"].value_counts().sort_index().to_string())

    print("\nTOP 10 COUNTRIES BY TOTAL PERSONNEL:")
    country_totals = frame.groupby("Country")["Total"].sum().sort_values(ascending=False)
    print(country_totals.head(10).to_string())


def print_batch_summary(result) -> None:
    """
    Print the processing summary of a batch.

    Args:
        result: BatchResult of the processed batch
    """
    print("")
    print("=" * 50)
    print("PROCESSING SUMMARY:")
    print(f"Total files processed: {result.processed_count}")
    print(f"Files with errors: {result.error_count}")
    if result.skipped_count:
        print(f"Files skipped: {result.skipped_count}")
    print(f"Total records extracted: {len(result.records)}")

    if result.records:
        years = [record["year"] for record in result.records]
        print(f"Date range: {min(years)} - {max(years)}")
        print(f"Countries found: {len({record['country'] for record in result.records})}")
        print(f"Missions found: {len({record['mission'] for record in result.records})}")

    for outcome in result.errors:
        print(f"ERROR {outcome.filename}: {outcome.error}")
