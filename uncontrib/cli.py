"""
Command-line interface for UN Contributions Extract.
"""

import argparse
import logging
import sys
from typing import List, Optional

from uncontrib import __version__
from uncontrib.batch import FileOutcome, parse_all_pdfs
from uncontrib.classifier import classify_all_pdfs
from uncontrib.config import Config, load_config
from uncontrib.log import configure_logging
from uncontrib.parser import analyze_table_structure
from uncontrib.pdfio import inspect_pdf_raw
from uncontrib.writers import export_to_csv, generate_sample_output, print_batch_summary

logger = logging.getLogger(__name__)


def apply_overrides(config: Config, args: argparse.Namespace) -> None:
    """
    Apply command-line overrides to the configuration.

    Args:
        config: Configuration to update
        args: Command-line arguments
    """
    if getattr(args, "input_dir", None):
        config.input.pdf_dir = args.input_dir
    if getattr(args, "pdftotext", None):
        config.extraction.pdftotext_path = args.pdftotext
    if getattr(args, "workers", None):
        config.performance.max_workers = args.workers
    if getattr(args, "sequential", False):
        config.performance.parallel_files = False


def print_file_status(done: int, total: int, outcome: FileOutcome) -> None:
    """
    Print a one-line status for a processed document.
    """
    if outcome.status == "ok":
        status = f"{len(outcome.records)} records"
    else:
        status = f"{outcome.status.upper()}: {outcome.error}"
    print(f"[{done}/{total}] {outcome.filename}: {status}")


def process_reports(args: argparse.Namespace, config: Config) -> int:
    """
    Parse all reports and export the records.

    Args:
        args: Command-line arguments
        config: Configuration

    Returns:
        Exit code
    """
    try:
        result = parse_all_pdfs(
            config,
            max_files=args.limit,
            pdf_files=args.input,
            on_file_done=print_file_status,
        )
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1

    print_batch_summary(result)

    if not result.records:
        print("No data was extracted. Please check the PDF files and try again.")
        return 0

    csv_file = export_to_csv(result.records, args.output, config)
    if args.verbose:
        generate_sample_output(result.records, config.output.sample_rows)

    print(f"\nResults saved to: {csv_file}")
    return 0


def classify_reports(args: argparse.Namespace, config: Config) -> int:
    """
    Classify the layout of all reports.

    Args:
        args: Command-line arguments
        config: Configuration

    Returns:
        Exit code
    """
    if args.output:
        config.output.classification_path = args.output

    try:
        results = classify_all_pdfs(config, max_files=args.limit)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1

    for result in results:
        line = f"{result['filename']}: {result['layout']}"
        if args.verbose and result["notes"]:
            line += f" ({result['notes']})"
        print(line)

    print("\nSUMMARY")
    print("=======")
    layouts = sorted({result["layout"] for result in results})
    for layout in layouts:
        count = sum(1 for result in results if result["layout"] == layout)
        print(f"{layout:<20}: {count} files")

    print(f"\nClassification complete! Check {config.output.classification_path} for detailed results.")
    return 0


def inspect_report(args: argparse.Namespace, config: Config) -> int:
    """
    Show the extracted text and table structure of one report.

    Args:
        args: Command-line arguments
        config: Configuration

    Returns:
        Exit code
    """
    lines = inspect_pdf_raw(args.file, config, args.lines)
    if lines is None:
        print(f"Error: could not extract text from {args.file}")
        return 1

    for i, line in enumerate(lines[:args.lines], 1):
        print(f"{i:3d}: {line}")

    structure = analyze_table_structure(lines)
    print("")
    print(f"Format: {structure['format']}")
    print(f"Total lines: {structure['total_lines']}")
    print(f"Data lines: {structure['data_lines']}")
    print(f"Potential countries: {structure['potential_countries']}")
    for country in structure["sample_countries"]:
        print(f"  - {country}")
    return 0


def process_command(args: argparse.Namespace) -> int:
    """
    Process command-line arguments.

    Args:
        args: Command-line arguments

    Returns:
        Exit code
    """
    # Load configuration
    config = load_config(args.config)
    apply_overrides(config, args)

    # Set up logging
    level = args.log_level or ("DEBUG" if getattr(args, "verbose", False) else None)
    configure_logging(config, level)

    if args.command == "classify":
        return classify_reports(args, config)
    elif args.command == "inspect":
        return inspect_report(args, config)
    else:
        return process_reports(args, config)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser.
    """
    parser = argparse.ArgumentParser(description="UN Contributions Extract")
    parser.add_argument("--version", action="version", version=f"uncontrib version {__version__}")
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Logging level")
    parser.add_argument("--pdftotext", help="Path to the pdftotext binary")

    # Options shared by the batch commands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--input-dir", help="Directory containing the reports")
    common.add_argument("--limit", type=int, help="Maximum number of files to process")
    common.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    common.add_argument("--output", "-o", help="Output CSV file")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Process command (default)
    process_parser = subparsers.add_parser("process", parents=[common], help="Extract records from all reports")
    process_parser.add_argument("--in", dest="input", nargs="+", help="Explicit input files")
    process_parser.add_argument("--workers", type=int, help="Number of parallel workers")
    process_parser.add_argument("--sequential", action="store_true", help="Process files one at a time")

    # Classify command
    subparsers.add_parser("classify", parents=[common], help="Classify the layout of all reports")

    # Inspect command
    inspect_parser = subparsers.add_parser("inspect", help="Show the extracted text of one report")
    inspect_parser.add_argument("file", help="PDF file to inspect")
    inspect_parser.add_argument("--lines", type=int, default=50, help="Number of lines to show")

    # Running without a command processes everything
    parser.set_defaults(input=None, input_dir=None, limit=None, verbose=False, output=None,
                        workers=None, sequential=False)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments, defaults to sys.argv

    Returns:
        Exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        return process_command(args)
    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
