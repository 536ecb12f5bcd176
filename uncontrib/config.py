"""
Configuration module for UN Contributions Extract.
"""

import json
import os
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from uncontrib.model import ConfigError


class InputConfig(BaseModel):
    """
    Configuration for input.
    """

    pdf_dir: str = "."  # Directory holding the monthly reports
    pattern: str = r"UN_country_contributions_\d{4}_\d{2}\.pdf"  # Report filename regex


class ExtractionConfig(BaseModel):
    """
    Configuration for the external text extraction tool.
    """

    pdftotext_path: str = "pdftotext"  # Path or name of the pdftotext binary
    layout: bool = True  # Pass -layout to keep column alignment
    timeout_s: float = 60.0  # Per-document timeout for the conversion


class OutputConfig(BaseModel):
    """
    Configuration for output.
    """

    output_dir: str = "."  # Directory for timestamped CSV exports
    csv_path: Optional[str] = None  # Fixed CSV path (overrides the timestamped name)
    classification_path: str = "outputs/pdf_layouts.csv"  # Layout classification report
    sample_rows: int = 20  # Rows shown in the sample output


class LoggingConfig(BaseModel):
    """
    Configuration for logging.
    """

    level: str = "INFO"  # Logging level (DEBUG/INFO/WARN/ERROR)


class PerformanceConfig(BaseModel):
    """
    Configuration for performance.
    """

    parallel_files: bool = True  # Process documents in parallel
    max_workers: int = 4  # Concurrent pdftotext invocations


class Config(BaseModel):
    """
    Main configuration.
    """

    input: InputConfig = Field(default_factory=InputConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)


def load_config(path: Optional[str] = None) -> Config:
    """
    Load configuration from a file.

    Args:
        path: Path to the configuration file

    Returns:
        Configuration object
    """
    if path:
        # Load configuration from file
        with open(path, "r") as f:
            if path.endswith(".yaml") or path.endswith(".yml"):
                config_dict = yaml.safe_load(f)
            elif path.endswith(".json"):
                config_dict = json.load(f)
            else:
                raise ConfigError(f"Unsupported configuration file format: {path}")

        # Create configuration object
        return Config(**(config_dict or {}))
    else:
        # Try to load from default locations
        default_locations = [
            "./config.yaml",
            "./config.yml",
            "./config.json",
            os.path.expanduser("~/.config/uncontrib/config.yaml"),
        ]

        for loc in default_locations:
            if os.path.exists(loc):
                return load_config(loc)

        # Return default configuration
        return Config()
