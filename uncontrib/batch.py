"""
Batch processing of UN country contribution reports.
"""

import concurrent.futures
import os
import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from uncontrib.config import Config
from uncontrib.log import get_logger
from uncontrib.model import (
    ContributionRecord,
    ExtractionFailure,
    FilenameFormatError,
    UnknownLayoutError,
)
from uncontrib.parser import parse_single_pdf
from uncontrib.writers import sort_records

logger = get_logger(__name__)

STATUS_OK = "ok"
STATUS_SKIPPED = "skipped"
STATUS_ERROR = "error"
PROGRESS_EVERY = 10


class FileOutcome:
    """Outcome of processing one report."""

    def __init__(self, path: str, records: List[ContributionRecord], status: str,
                 error: Optional[str] = None):
        self.path = path
        self.filename = os.path.basename(path)
        self.records = records
        self.status = status
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        """Convert outcome to dictionary."""
        return {
            "filename": self.filename,
            "status": self.status,
            "record_count": len(self.records),
            "error": self.error,
        }


class BatchResult:
    """Result of processing a batch of reports."""

    def __init__(self, records: List[ContributionRecord], outcomes: List[FileOutcome]):
        self.records = records
        self.outcomes = outcomes

    @property
    def files_found(self) -> int:
        return len(self.outcomes)

    @property
    def processed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_OK)

    @property
    def error_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_ERROR)

    @property
    def skipped_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == STATUS_SKIPPED)

    @property
    def errors(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status == STATUS_ERROR]

    def to_dict(self) -> Dict[str, Any]:
        """Convert batch result to dictionary."""
        return {
            "files_found": self.files_found,
            "processed_count": self.processed_count,
            "error_count": self.error_count,
            "skipped_count": self.skipped_count,
            "record_count": len(self.records),
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


def find_pdf_files(cfg: Config, max_files: Optional[int] = None) -> List[str]:
    """
    Find the reports to process, in chronological (sorted) order.

    Args:
        cfg: Application configuration
        max_files: Maximum number of files to return

    Returns:
        Paths of the matching reports

    Raises:
        FileNotFoundError: If no report matches
    """
    pdf_dir = cfg.input.pdf_dir
    pattern = re.compile(cfg.input.pattern)

    pdf_files: List[str] = []
    if os.path.isdir(pdf_dir):
        pdf_files = sorted(
            str(path) for path in Path(pdf_dir).iterdir()
            if path.is_file() and pattern.fullmatch(path.name)
        )

    if not pdf_files:
        raise FileNotFoundError(f"No PDF files found matching pattern in directory: {pdf_dir}")

    if max_files is not None:
        pdf_files = pdf_files[:max_files]

    return pdf_files


def process_file(path: str, cfg: Config) -> FileOutcome:
    """
    Process one report, turning every failure into an outcome.

    Args:
        path: Path to the PDF file
        cfg: Application configuration

    Returns:
        Outcome with the file's records, or an empty list on failure
    """
    filename = os.path.basename(path)
    try:
        records = parse_single_pdf(path, cfg)
    except FilenameFormatError as e:
        logger.warning(f"Skipping {filename}: {e}")
        return FileOutcome(path, [], STATUS_SKIPPED, str(e))
    except (ExtractionFailure, UnknownLayoutError) as e:
        logger.warning(f"No records from {filename}: {e}")
        return FileOutcome(path, [], STATUS_ERROR, str(e))
    except Exception as e:
        logger.error(f"ERROR processing {filename}: {e}")
        return FileOutcome(path, [], STATUS_ERROR, str(e))

    return FileOutcome(path, records, STATUS_OK)


def parse_all_pdfs(
    cfg: Config,
    max_files: Optional[int] = None,
    pdf_files: Optional[List[str]] = None,
    on_file_done: Optional[Callable[[int, int, FileOutcome], None]] = None,
) -> BatchResult:
    """
    Parse a batch of reports.

    Documents are independent and may be processed concurrently. Each
    worker returns its own records; they are merged here and sorted by
    year, month, mission and country. A failing document contributes no
    records and does not stop the batch.

    Args:
        cfg: Application configuration
        max_files: Maximum number of files to process
        pdf_files: Explicit files to process instead of searching the input directory
        on_file_done: Called with (done, total, outcome) after each document

    Returns:
        Batch result with the sorted records and per-file outcomes

    Raises:
        FileNotFoundError: If there is no document to process
    """
    if pdf_files is None:
        pdf_files = find_pdf_files(cfg, max_files)
    else:
        if not pdf_files:
            raise FileNotFoundError("No input files found")
        if max_files is not None:
            pdf_files = pdf_files[:max_files]

    total = len(pdf_files)
    logger.info(f"Found {total} PDF files to process")

    outcomes: List[FileOutcome] = []

    def collect(outcome: FileOutcome) -> None:
        outcomes.append(outcome)
        done = len(outcomes)
        if on_file_done is not None:
            on_file_done(done, total, outcome)
        if done % PROGRESS_EVERY == 0:
            logger.info(f"Progress: {done} / {total} files processed")

    if cfg.performance.parallel_files and total > 1:
        max_workers = max(1, min(cfg.performance.max_workers, total))
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(process_file, path, cfg) for path in pdf_files]
            for future in concurrent.futures.as_completed(futures):
                collect(future.result())
    else:
        for path in pdf_files:
            collect(process_file(path, cfg))

    # Fan-in: per-file record lists are merged once all workers are done
    all_records: List[ContributionRecord] = []
    for outcome in sorted(outcomes, key=lambda o: o.path):
        all_records.extend(outcome.records)

    result = BatchResult(sort_records(all_records), sorted(outcomes, key=lambda o: o.path))
    logger.info(
        f"Processed {result.processed_count} files, {result.error_count} errors, "
        f"{len(result.records)} records"
    )
    return result
