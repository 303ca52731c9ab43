"""
Logging for Sheets Map Creator.

Every module logs under the ``sheets_map`` logger. A run writes its progress
(seed loading, sheet refresh per layer kind, output files) to the console, and
row-level detail to a timestamped file under logs/: skipped trailing rows, excluded
rows, ambiguous coordinate nesting and detached layer generations.

Functions:
    setup_logging: Attach console and file handlers for one run
    get_logger: Module logger nested under ``sheets_map``

Example:
    >>> from utils.logger import setup_logging, get_logger
    >>> log_file = setup_logging()
    >>> get_logger(__name__).info("Refreshing points layer")
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional

ROOT_LOGGER_NAME = 'sheets_map'
LOG_DIR = Path(__file__).parent.parent / 'logs'


def setup_logging(log_dir: Optional[Path] = None, console_level: int = logging.INFO) -> Path:
    """
    Attach console and file handlers to the ``sheets_map`` logger.

    Handlers from a previous run in the same process are closed first, so calling
    this once per map build never duplicates output.

    Parameters:
    -----------
    log_dir : Optional[Path]
        Directory for run logs (default: logs/ next to the packages)
    console_level : int
        Console threshold; the file always receives DEBUG

    Returns:
    --------
    Path
        Path of this run's log file (sheets_map_<timestamp>.log)
    """
    log_dir = Path(log_dir) if log_dir is not None else LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f'sheets_map_{timestamp}.log'

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter('%(message)s'))

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    logger.addHandler(console)
    logger.addHandler(file_handler)

    logger.debug(f"Run log: {log_file}")

    return log_file


def get_logger(name: str) -> logging.Logger:
    """Return the logger for module ``name`` (e.g. ``sheets_map.core.refresh``)."""
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')
