"""Google Sheets row source."""

import logging
from typing import Any

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from warag.constants import DEFAULT_SHEET_RANGE, GOOGLE_SHEETS_SCOPES
from warag.errors import SourceFetchError
from warag.service.sources.common import translate_http_error
from warag.service.sources.config import GoogleConfig

logger = logging.getLogger(__name__)


class GoogleSheetsSource:
    """Reads cell values of a Google Sheet via the Sheets API v4."""

    def __init__(self, service: Any = None) -> None:
        """Initialize the source.

        Args:
            service: Prebuilt Sheets API resource. If None, one is built lazily
                from the service-account settings in GoogleConfig.
        """
        self._service = service

    @property
    def service(self) -> Any:
        if self._service is None:
            credentials = GoogleConfig.build_credentials(GOOGLE_SHEETS_SCOPES)
            self._service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        return self._service

    def fetch_sheet_rows(self, sheet_id: str, range_: str = DEFAULT_SHEET_RANGE) -> list[list[str]]:
        """Fetch the rows of a sheet range, header row included.

        Args:
            sheet_id: Google Sheet ID
            range_: A1 range to read (default: A1:Z10000)

        Returns:
            list[list[str]]: Rows in sheet order, empty if the range has no values

        Raises:
            SourceFetchError: If the sheet is missing, not shared or unreadable
        """
        logger.info(f"📊 Reading Google Sheet: {sheet_id} ({range_})")
        try:
            response = (
                self.service.spreadsheets()
                .values()
                .get(spreadsheetId=sheet_id, range=range_)
                .execute()
            )
        except HttpError as e:
            logger.error(f"❌ Google Sheets API error for {sheet_id}: {e}")
            raise translate_http_error(e, "Google Sheet") from e
        except Exception as e:
            logger.error(f"❌ Failed to read Google Sheet {sheet_id}: {e}", exc_info=True)
            raise SourceFetchError(f"Failed to read Google Sheet: {e}") from e

        rows = response.get("values", [])
        logger.info(f"  Read {len(rows)} rows")
        return rows
