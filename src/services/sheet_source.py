"""
Google Sheets CSV Source

Derives the CSV export URL from a published spreadsheet URL and
downloads it. Supported URL shapes:

    https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit
    https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit#gid=0
"""

import logging
import re
from typing import Optional

import requests

from src.common.error_handling import InvalidSheetUrlError, SheetFetchError

logger = logging.getLogger(__name__)

SHEET_ID_PATTERN = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")
GID_PATTERN = re.compile(r"[#&?]gid=(\d+)")
EXPORT_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv"


def extract_sheet_id(sheet_url: str) -> str:
    """
    Pull the spreadsheet ID out of a sheet URL.

    Raises:
        InvalidSheetUrlError: If the URL does not contain /spreadsheets/d/<id>
    """
    match = SHEET_ID_PATTERN.search(sheet_url or "")
    if not match:
        raise InvalidSheetUrlError("Invalid Google Sheets URL format")
    return match.group(1)


def extract_gid(sheet_url: str) -> Optional[str]:
    """Return the tab id (gid) if the URL points at a specific tab."""
    match = GID_PATTERN.search(sheet_url or "")
    return match.group(1) if match else None


def build_export_url(sheet_id: str, gid: Optional[str] = None) -> str:
    """Build the CSV export URL for a sheet (and optionally one tab)."""
    url = EXPORT_URL_TEMPLATE.format(sheet_id=sheet_id)
    if gid:
        url += f"&gid={gid}"
    return url


def export_url_for(sheet_url: str) -> str:
    """Derive the CSV export URL straight from a sheet URL."""
    return build_export_url(extract_sheet_id(sheet_url), extract_gid(sheet_url))


class SheetSource:
    """Downloads a sheet's CSV export."""

    TIMEOUT = 30  # seconds

    def __init__(self, timeout: Optional[int] = None, session: Optional[requests.Session] = None):
        self.timeout = timeout or self.TIMEOUT
        self._session = session or requests.Session()

    def fetch_csv(self, sheet_url: str) -> str:
        """
        Fetch the CSV text behind a sheet URL.

        Args:
            sheet_url: Published spreadsheet URL

        Returns:
            CSV body decoded as UTF-8

        Raises:
            InvalidSheetUrlError: If the URL is not a spreadsheet URL
            SheetFetchError: On timeouts, transport errors, or non-2xx responses
        """
        csv_url = export_url_for(sheet_url)
        logger.info(f"Fetching sheet export: {csv_url}")

        try:
            response = self._session.get(csv_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            logger.error(f"Sheet export request timed out after {self.timeout}s")
            raise SheetFetchError(f"Failed to fetch sheet: timed out after {self.timeout}s") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            reason = e.response.reason if e.response is not None else str(e)
            logger.error(f"Sheet export returned HTTP {status}")
            raise SheetFetchError(f"Failed to fetch sheet: {reason}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching sheet export: {e}")
            raise SheetFetchError(f"Failed to fetch sheet: {e}") from e

        # Private sheets redirect to a sign-in page instead of returning CSV
        content_type = response.headers.get("Content-Type", "")
        if "text/html" in content_type:
            raise SheetFetchError(
                "Failed to fetch sheet: received an HTML page instead of CSV. "
                "Make sure the sheet is shared as 'Anyone with the link can view'."
            )

        response.encoding = "utf-8"
        text = response.text
        logger.info(f"Fetched {len(text)} characters from sheet export")
        return text
