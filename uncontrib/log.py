"""
Logging for UN Contributions Extract.

Every module logs through ``get_logger(__name__)``, so records from the
batch workers, the parsers and the classifier all land under the
``uncontrib.*`` hierarchy. The CLI configures the root logger once, before
the batch starts; worker threads share that configuration.
"""

import logging
from typing import Optional

from uncontrib.config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(config: Optional[Config] = None, level: Optional[str] = None) -> None:
    """
    Configure logging for a run.

    The level comes from ``level`` when given (``--log-level``, or DEBUG
    for ``--verbose``), otherwise from ``config.logging.level``.

    Args:
        config: Configuration object
        level: Explicit level overriding the configured one

    Raises:
        ValueError: If the level is not a logging level name
    """
    if level is None:
        level = config.logging.level if config is not None else "INFO"

    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger, e.g. ``get_logger(__name__)``.
    """
    return logging.getLogger(name)
