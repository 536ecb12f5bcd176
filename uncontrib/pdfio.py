"""
PDF I/O utilities for UN Contributions Extract.
"""

import os
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Tuple

import pdfplumber

from uncontrib.config import Config
from uncontrib.log import get_logger
from uncontrib.model import ExtractionFailure, PositionedToken

logger = get_logger(__name__)


def build_pdftotext_command(path: str, output_path: str, cfg: Config) -> List[str]:
    """
    Build the pdftotext command line for one document.

    Args:
        path: Path to the PDF file
        output_path: Path of the text file pdftotext should write
        cfg: Application configuration

    Returns:
        Command as a list of arguments
    """
    cmd = [cfg.extraction.pdftotext_path]
    if cfg.extraction.layout:
        cmd.append("-layout")
    cmd.extend([path, output_path])
    return cmd


def extract_pdf_text(path: str, cfg: Config) -> List[str]:
    """
    Extract layout-preserving text lines from a PDF with pdftotext.

    Column alignment is kept: lines are returned with their leading
    whitespace, only the line terminators are removed.

    Args:
        path: Path to the PDF file
        cfg: Application configuration

    Returns:
        Ordered list of text lines

    Raises:
        ExtractionFailure: If the file is missing, pdftotext is not
            installed, times out, fails, or writes no output
    """
    if not os.path.exists(path):
        logger.warning(f"PDF file not found: {path}")
        raise ExtractionFailure(f"PDF file not found: {path}")

    logger.debug(f"Extracting text from {path}")

    with tempfile.TemporaryDirectory() as temp_dir:
        output_path = str(Path(temp_dir) / (Path(path).stem + ".txt"))
        cmd = build_pdftotext_command(path, output_path, cfg)

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=cfg.extraction.timeout_s,
            )
        except FileNotFoundError as e:
            logger.error(f"pdftotext not found ({cfg.extraction.pdftotext_path}): {e}")
            raise ExtractionFailure(
                f"pdftotext binary not found: {cfg.extraction.pdftotext_path}"
            ) from e
        except subprocess.TimeoutExpired as e:
            logger.error(f"pdftotext timed out after {cfg.extraction.timeout_s}s on {path}")
            raise ExtractionFailure(
                f"pdftotext timed out after {cfg.extraction.timeout_s}s: {path}"
            ) from e

        if result.returncode != 0:
            logger.error(f"pdftotext failed on {path}: {result.stderr.strip()}")
            raise ExtractionFailure(
                f"pdftotext exited with code {result.returncode}: {path}"
            )

        if not os.path.exists(output_path):
            logger.error(f"pdftotext produced no output for {path}")
            raise ExtractionFailure(f"Text extraction produced no output file: {path}")

        with open(output_path, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()

    # splitlines also breaks on the form feeds pdftotext puts between pages
    return text.splitlines()


def extract_first_page(path: str) -> Tuple[str, List[PositionedToken]]:
    """
    Extract the text and word positions of the first page.

    Args:
        path: Path to the PDF file

    Returns:
        Tuple of (first page text, positioned words)

    Raises:
        ExtractionFailure: If the PDF cannot be opened or has no pages
    """
    try:
        with pdfplumber.open(path) as pdf:
            if not pdf.pages:
                raise ExtractionFailure(f"PDF has no pages: {path}")

            page = pdf.pages[0]
            text = page.extract_text() or ""
            tokens: List[PositionedToken] = [
                {"text": word["text"], "x": float(word["x0"]), "top": float(word["top"])}
                for word in page.extract_words()
            ]
    except ExtractionFailure:
        raise
    except Exception as e:
        logger.error(f"Error reading first page of {path}: {e}")
        raise ExtractionFailure(f"Error reading first page of {path}: {e}") from e

    return text, tokens


def inspect_pdf_raw(path: str, cfg: Config, lines_to_show: int = 50) -> Optional[List[str]]:
    """
    Log the first lines of a PDF's extracted text.

    Args:
        path: Path to the PDF file
        cfg: Application configuration
        lines_to_show: Number of lines to show

    Returns:
        All extracted lines, or None if extraction failed
    """
    logger.info(f"Inspecting PDF: {os.path.basename(path)}")
    if os.path.exists(path):
        logger.info(f"File size: {os.path.getsize(path)} bytes")

    try:
        lines = extract_pdf_text(path, cfg)
    except ExtractionFailure as e:
        logger.error(f"Error extracting PDF text: {e}")
        return None

    shown = min(lines_to_show, len(lines))
    logger.info(f"Total lines extracted: {len(lines)}")
    logger.info(f"Showing first {shown} lines:")
    for i, line in enumerate(lines[:shown], 1):
        logger.debug(f"{i:3d}: {line}")

    return lines
