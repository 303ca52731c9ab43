"""
Sheet reading module for Sheets Map Creator.

This module reads tabular data from a local CSV file (seed data shipped with the
map) or from a sheet published as CSV (e.g. Google Sheets "Publish to the web"
with output=csv). Rows are returned as dicts keyed by the header row.

Functions:
    parse_csv_text: Parse CSV text into rows
    read_rows: Read rows from a local CSV file
    fetch_rows: Download a published sheet and parse its rows
"""

import csv
import io
from pathlib import Path
from typing import List, Union

import requests

from core.collection_builder import Row
from core.errors import SheetFetchError
from utils.logger import get_logger

logger = get_logger(__name__)


def parse_csv_text(text: str) -> List[Row]:
    """
    Parse CSV text with a header row into a list of rows.

    Cells missing from short rows are None; blank lines are skipped.

    Example:
        >>> parse_csv_text("include,name\\ny,A\\n")
        [{'include': 'y', 'name': 'A'}]
    """
    # Sheets exports may start with a UTF-8 byte order mark
    text = text.lstrip('\ufeff')
    return list(csv.DictReader(io.StringIO(text)))


def read_rows(file_path: Union[str, Path]) -> List[Row]:
    """
    Read rows from a local CSV file.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Sheet file not found: {file_path}")

    rows = parse_csv_text(file_path.read_text(encoding='utf-8'))
    logger.debug(f"Read {len(rows)} row(s) from {file_path}")
    return rows


def fetch_rows(url: str, timeout: int = 30) -> List[Row]:
    """
    Download a published sheet as CSV and parse its rows.

    Parameters:
    -----------
    url : str
        CSV export URL of the published sheet
    timeout : int
        Request timeout in seconds (default: 30)

    Returns:
    --------
    List[Row]
        Rows in sheet order

    Raises:
    -------
    SheetFetchError
        If the request times out, fails, or returns an error status. The request is
        not retried.
    """
    logger.debug(f"Fetching sheet: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        raise SheetFetchError(f"Sheet request timed out after {timeout}s", url) from e
    except requests.exceptions.RequestException as e:
        raise SheetFetchError(f"Sheet request failed: {e}", url) from e

    # Published CSV is UTF-8 even when the server omits the charset
    response.encoding = 'utf-8'
    rows = parse_csv_text(response.text)

    logger.debug(f"Fetched {len(rows)} row(s) from {url}")
    return rows
