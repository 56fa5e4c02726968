"""Grid data sources for the diff engine.

Defines the GridDataSource interface and implementations:
- GoogleSheetsDataSource: Production source using the Google Sheets API
- LocalFileDataSource: Test source reading from local golden files

Per the interface contract, implementations never let a failed read escape:
they log it and return an empty result.
"""

from __future__ import annotations

import json
import logging
import ssl
import urllib.parse
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import TYPE_CHECKING, Any

import certifi
import httpx

from sheetdiff.utils import row_range_to_a1

if TYPE_CHECKING:
    from sheetdiff.api_types import Spreadsheet
    from sheetdiff.values import CellValue

logger = logging.getLogger(__name__)

# API constants
API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"
DEFAULT_TIMEOUT = 60
SHEET_LIST_FIELDS = "spreadsheetId,sheets.properties"


class TransportError(Exception):
    """Base exception for transport errors."""


class AuthenticationError(TransportError):
    """Raised when authentication fails (401/403)."""


class NotFoundError(TransportError):
    """Raised when spreadsheet is not found (404)."""


class APIError(TransportError):
    """Raised when the API returns an error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class SheetInfo:
    """Information about a single sheet within a spreadsheet."""

    sheet_id: int
    title: str
    row_count: int
    column_count: int


class GridDataSource(ABC):
    """Abstract base class for the data the diff engine reads.

    Implementations must provide sheet metadata and row ranges of raw
    (unformatted) cell values. Failed reads return empty results instead
    of raising.
    """

    @abstractmethod
    async def get_sheet_list(self, document_id: str) -> list[SheetInfo]:
        """Fetch the sheets of a document without cell data.

        Args:
            document_id: The spreadsheet identifier

        Returns:
            SheetInfo for each sheet in document order, or an empty list
            if the read failed
        """
        ...

    @abstractmethod
    async def get_range_values(
        self,
        document_id: str,
        sheet_title: str,
        row_start: int,
        row_end: int,
    ) -> list[list[CellValue]]:
        """Fetch raw cell values for zero-based rows ``[row_start, row_end)``.

        Args:
            document_id: The spreadsheet identifier
            sheet_title: Title of the sheet to read
            row_start: First row (inclusive)
            row_end: Last row (exclusive)

        Returns:
            Rows of values with trailing empty cells trimmed, or an empty
            list if the read failed
        """
        ...

    async def close(self) -> None:
        """Close any open connections."""
        return None


def sheet_infos_from_spreadsheet(response: Spreadsheet) -> list[SheetInfo]:
    """Extract SheetInfo entries from a spreadsheets.get response."""
    sheets: list[SheetInfo] = []
    for sheet in response.get("sheets", []):
        props = sheet.get("properties")
        if not props:
            continue
        grid_props = props.get("gridProperties", {})
        sheets.append(
            SheetInfo(
                sheet_id=props.get("sheetId", 0),
                title=props.get("title", ""),
                row_count=grid_props.get("rowCount", 0),
                column_count=grid_props.get("columnCount", 0),
            )
        )
    return sheets


class GoogleSheetsDataSource(GridDataSource):
    """Production data source that reads from the Google Sheets API.

    Handles authentication, SSL, and HTTP communication.
    """

    def __init__(
        self,
        access_token: str,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the data source.

        Args:
            access_token: OAuth2 access token with sheets.readonly scope
            timeout: Request timeout in seconds
        """
        self._access_token = access_token
        self._timeout = timeout
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        self._client = httpx.AsyncClient(
            timeout=timeout,
            verify=ssl_context,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )

    async def get_sheet_list(self, document_id: str) -> list[SheetInfo]:
        """Fetch sheet properties from the Google Sheets API."""
        url = f"{API_BASE}/{document_id}"
        params = {"includeGridData": "false", "fields": SHEET_LIST_FIELDS}
        try:
            response = await self._request(url, params)
        except TransportError as e:
            logger.error(
                "Failed to fetch sheet list for %s: %s", document_id, e, exc_info=True
            )
            return []
        return sheet_infos_from_spreadsheet(response)  # type: ignore[arg-type]

    async def get_range_values(
        self,
        document_id: str,
        sheet_title: str,
        row_start: int,
        row_end: int,
    ) -> list[list[CellValue]]:
        """Fetch unformatted values for a row range from the Google Sheets API."""
        if row_end <= row_start:
            return []
        a1_range = row_range_to_a1(sheet_title, row_start, row_end)
        url = f"{API_BASE}/{document_id}/values/{urllib.parse.quote(a1_range, safe='')}"
        params = {"valueRenderOption": "UNFORMATTED_VALUE", "majorDimension": "ROWS"}
        try:
            response = await self._request(url, params)
        except TransportError as e:
            logger.error(
                "Failed to fetch range values for diff (%s, %s): %s",
                document_id,
                a1_range,
                e,
            )
            return []
        values: list[list[CellValue]] = response.get("values", [])
        return values

    async def _request(self, url: str, params: dict[str, str]) -> dict[str, Any]:
        """Make an authenticated GET request."""
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 401:
                raise AuthenticationError("Invalid or expired access token") from e
            if status == 403:
                raise AuthenticationError(
                    "Access denied. Check your scopes and permissions."
                ) from e
            if status == 404:
                raise NotFoundError(
                    "Spreadsheet not found. Check the ID and sharing permissions."
                ) from e
            body = e.response.text
            raise APIError(f"API error ({status}): {body}", status_code=status) from e
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}") from e
        except ValueError as e:
            raise TransportError(f"Invalid JSON in response: {e}") from e
        if not isinstance(result, dict):
            raise TransportError(
                f"Unexpected response body: {type(result).__name__}"
            )
        return result

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


class LocalFileDataSource(GridDataSource):
    """Data source that reads from local golden files.

    Expected directory structure:
        golden_dir/
            <document_id>/
                metadata.json          # spreadsheets.get response
                values/
                    <sheet title>.json # values.get response for the whole sheet
    """

    def __init__(self, golden_dir: Path) -> None:
        """Initialize the data source.

        Args:
            golden_dir: Directory containing golden files
        """
        self._golden_dir = golden_dir

    async def get_sheet_list(self, document_id: str) -> list[SheetInfo]:
        """Read sheet properties from the local metadata file."""
        path = self._golden_dir / document_id / "metadata.json"
        try:
            response = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read sheet list from %s: %s", path, e)
            return []
        return sheet_infos_from_spreadsheet(response)

    async def get_range_values(
        self,
        document_id: str,
        sheet_title: str,
        row_start: int,
        row_end: int,
    ) -> list[list[CellValue]]:
        """Read a row slice of a sheet's local values file."""
        path = self._golden_dir / document_id / "values" / f"{sheet_title}.json"
        try:
            response = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read range values from %s: %s", path, e)
            return []
        values: list[list[CellValue]] = response.get("values", [])
        return values[row_start:row_end]
