"""
Google Sheets API Service

This service handles all interactions with the Google Sheets mirror of the
schedule: access tokens, locating the spreadsheet, reading and writing a
week's tab, and the cosmetic formatting applied after a write.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

import gspread
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from team_scheduler.models import AvailabilityOption, Role
from team_scheduler.core.config import (
    SPREADSHEET_ID, SPREADSHEET_TITLE, SPREADSHEET_SETTING_KEY, SPREADSHEET_URL_TEMPLATE,
    SHEET_READ_RANGE, SHEET_CLEAR_RANGE, SHEET_HEADER_ROWS, DAYS_OF_WEEK,
    get_google_credentials
)
from team_scheduler.core.errors import ExternalServiceError
from team_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)

TokenFetch = Callable[[], Tuple[str, Optional[datetime]]]


class AccessTokenCache:
    """
    Holds one access token and its expiry.

    The token is reused until `expires_at`; a token with no stated expiry
    stays valid until replaced.
    """

    def __init__(self, token: Optional[str] = None, expires_at: Optional[datetime] = None):
        self.token = token
        self.expires_at = expires_at

    def is_valid(self, now: datetime) -> bool:
        if not self.token:
            return False
        return self.expires_at is None or self.expires_at > now

    def get(self, fetch: TokenFetch, now: Optional[datetime] = None) -> str:
        """
        Return the cached token, fetching a new one when it is missing or expired.

        Args:
            fetch: Called with no arguments, returns (token, expires_at)
            now: Current time (UTC); defaults to the clock
        """
        now = now or datetime.now(timezone.utc)
        if not self.is_valid(now):
            self.token, self.expires_at = fetch()
            logger.debug(f"Fetched new Google access token, expires at {self.expires_at}")
        return self.token


def fetch_access_token(credentials_factory=get_google_credentials) -> Tuple[str, Optional[datetime]]:
    """Refresh configured Google credentials and return (token, expiry in UTC)."""
    creds = credentials_factory()
    creds.refresh(Request())
    expiry = creds.expiry
    if expiry is not None and expiry.tzinfo is None:
        # google-auth reports naive UTC datetimes
        expiry = expiry.replace(tzinfo=timezone.utc)
    return creds.token, expiry


def _grid_range(sheet_id: int, start_row: int, end_row: int, start_col: int, end_col: int) -> Dict[str, int]:
    return {
        "sheetId": sheet_id,
        "startRowIndex": start_row,
        "endRowIndex": end_row,
        "startColumnIndex": start_col,
        "endColumnIndex": end_col
    }


def _one_of_list(sheet_id: int, start_row: int, end_row: int, start_col: int, end_col: int,
                 values: List[str]) -> Dict[str, Any]:
    return {
        "setDataValidation": {
            "range": _grid_range(sheet_id, start_row, end_row, start_col, end_col),
            "rule": {
                "condition": {
                    "type": "ONE_OF_LIST",
                    "values": [{"userEnteredValue": v} for v in values]
                },
                "showCustomUi": True,
                "strict": True
            }
        }
    }


def formatting_requests(sheet_id: int, row_count: int) -> List[Dict[str, Any]]:
    """
    batchUpdate requests decorating a schedule tab.

    Merged bold title row, coloured header row, frozen header rows and dropdowns
    on the role and day columns of the player rows.
    """
    width = 2 + len(DAYS_OF_WEEK)
    last_row = max(row_count, SHEET_HEADER_ROWS + 1)

    return [
        {
            "mergeCells": {
                "range": _grid_range(sheet_id, 0, 1, 0, width),
                "mergeType": "MERGE_ALL"
            }
        },
        {
            "repeatCell": {
                "range": _grid_range(sheet_id, 0, 1, 0, width),
                "cell": {"userEnteredFormat": {
                    "textFormat": {"bold": True, "fontSize": 14},
                    "horizontalAlignment": "CENTER"
                }},
                "fields": "userEnteredFormat(textFormat,horizontalAlignment)"
            }
        },
        {
            "repeatCell": {
                "range": _grid_range(sheet_id, 2, 3, 0, width),
                "cell": {"userEnteredFormat": {
                    "backgroundColor": {"red": 0.2, "green": 0.2, "blue": 0.4},
                    "textFormat": {"bold": True, "foregroundColor": {"red": 1, "green": 1, "blue": 1}}
                }},
                "fields": "userEnteredFormat(backgroundColor,textFormat)"
            }
        },
        {
            "updateSheetProperties": {
                "properties": {"sheetId": sheet_id, "gridProperties": {"frozenRowCount": SHEET_HEADER_ROWS}},
                "fields": "gridProperties.frozenRowCount"
            }
        },
        _one_of_list(sheet_id, SHEET_HEADER_ROWS, last_row, 0, 1, [role.value for role in Role]),
        _one_of_list(sheet_id, SHEET_HEADER_ROWS, last_row, 2, width,
                     [option.value for option in AvailabilityOption]),
    ]


class GoogleSheetsGateway:
    """Reads and writes schedule tabs of the team spreadsheet."""

    def __init__(
        self,
        storage,
        token_cache: Optional[AccessTokenCache] = None,
        credentials_factory=get_google_credentials,
        spreadsheet_id: str = SPREADSHEET_ID
    ):
        """
        Initialize the gateway.

        Args:
            storage: Storage used to remember the spreadsheet id between runs
            token_cache: Shared access token cache; a private one if omitted
            credentials_factory: Returns refreshable google-auth credentials
            spreadsheet_id: Fixed spreadsheet id; empty to use the stored or a new one
        """
        self.storage = storage
        self.token_cache = token_cache or AccessTokenCache()
        self.credentials_factory = credentials_factory
        self.configured_spreadsheet_id = spreadsheet_id

    def _client(self) -> gspread.Client:
        token = self.token_cache.get(lambda: fetch_access_token(self.credentials_factory))
        return gspread.authorize(Credentials(token=token))

    def _call(self, action: str, func, *args):
        try:
            return func(*args)
        except ExternalServiceError:
            raise
        except Exception as error:
            logger.error(f"Google Sheets {action} failed: {error}")
            raise ExternalServiceError("google_sheets", f"Failed to {action} Google Sheets: {error}")

    def get_spreadsheet_id(self) -> str:
        """
        Resolve the spreadsheet id: configured, then stored setting, then a newly created sheet.

        Raises:
            ExternalServiceError: If a new spreadsheet cannot be created
        """
        if self.configured_spreadsheet_id:
            if self.storage.get_setting(SPREADSHEET_SETTING_KEY) != self.configured_spreadsheet_id:
                self.storage.set_setting(SPREADSHEET_SETTING_KEY, self.configured_spreadsheet_id)
            return self.configured_spreadsheet_id

        existing_id = self.storage.get_setting(SPREADSHEET_SETTING_KEY)
        if existing_id:
            return existing_id

        spreadsheet = self._call("create spreadsheet in", lambda: self._client().create(SPREADSHEET_TITLE))
        logger.info(f"Created spreadsheet '{SPREADSHEET_TITLE}' ({spreadsheet.id})")
        self.storage.set_setting(SPREADSHEET_SETTING_KEY, spreadsheet.id)
        return spreadsheet.id

    def _open(self) -> gspread.Spreadsheet:
        spreadsheet_id = self.get_spreadsheet_id()
        return self._call("open", lambda: self._client().open_by_key(spreadsheet_id))

    def read_rows(self, sheet_name: str) -> List[List[str]]:
        """
        Read a schedule tab.

        Args:
            sheet_name: Tab title, e.g. "Week_permanent-schedule"

        Returns:
            List of rows, where each row is a list of cell values

        Raises:
            ExternalServiceError: If the tab or spreadsheet cannot be read
        """
        def read():
            spreadsheet = self._open()
            result = spreadsheet.values_get(f"'{sheet_name}'!{SHEET_READ_RANGE}")
            return result.get('values', [])

        return self._call("read from", read)

    def write_rows(self, sheet_name: str, rows: List[List[str]]) -> None:
        """
        Replace a schedule tab's contents, creating the tab if needed.

        Raises:
            ExternalServiceError: If any step of the write fails
        """
        def write():
            spreadsheet = self._open()
            try:
                worksheet = spreadsheet.worksheet(sheet_name)
            except gspread.exceptions.WorksheetNotFound:
                worksheet = spreadsheet.add_worksheet(title=sheet_name, rows=100, cols=26)
                logger.info(f"Added sheet tab '{sheet_name}'")

            worksheet.batch_clear([SHEET_CLEAR_RANGE])
            worksheet.update(range_name="A1", values=rows, raw=True)
            logger.info(f"Wrote {len(rows)} rows to '{sheet_name}'")

        self._call("write to", write)

    def apply_formatting(self, sheet_name: str, row_count: int) -> None:
        """Decorate a tab after a write. Best-effort: failures are logged, not raised."""
        try:
            spreadsheet = self._open()
            worksheet = spreadsheet.worksheet(sheet_name)
            spreadsheet.batch_update({"requests": formatting_requests(worksheet.id, row_count)})
        except Exception as e:
            logger.warning(f"Could not format sheet '{sheet_name}': {e}")

    def spreadsheet_url(self, spreadsheet_id: str) -> str:
        return SPREADSHEET_URL_TEMPLATE.format(spreadsheet_id=spreadsheet_id)
