"""
Tests for the Google Sheets gateway pieces that need no network:
token caching, spreadsheet id resolution and formatting requests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from team_scheduler.core.config import SPREADSHEET_SETTING_KEY
from team_scheduler.core.errors import ExternalServiceError
from team_scheduler.services.google_sheets import (
    AccessTokenCache, GoogleSheetsGateway, fetch_access_token, formatting_requests
)

NOW = datetime(2025, 10, 6, 12, 0, tzinfo=timezone.utc)


class FakeCredentials:
    def __init__(self, token="fresh-token", expiry=None):
        self.token = None
        self._token = token
        self.expiry = expiry
        self.refreshed = 0

    def refresh(self, request):
        self.refreshed += 1
        self.token = self._token


def test_empty_cache_is_invalid():
    assert not AccessTokenCache().is_valid(NOW)


def test_token_valid_until_expiry():
    cache = AccessTokenCache("tok", NOW + timedelta(minutes=5))

    assert cache.is_valid(NOW)
    assert not cache.is_valid(NOW + timedelta(minutes=5))


def test_token_without_expiry_stays_valid():
    assert AccessTokenCache("tok", None).is_valid(NOW + timedelta(days=365))


def test_get_reuses_valid_token():
    cache = AccessTokenCache("cached", NOW + timedelta(hours=1))
    calls = []

    def fetch():
        calls.append(1)
        return "new", NOW + timedelta(hours=2)

    assert cache.get(fetch, now=NOW) == "cached"
    assert calls == []


def test_get_refreshes_expired_token():
    cache = AccessTokenCache("stale", NOW - timedelta(seconds=1))

    token = cache.get(lambda: ("new", NOW + timedelta(hours=1)), now=NOW)

    assert token == "new"
    assert cache.expires_at == NOW + timedelta(hours=1)
    assert cache.is_valid(NOW)


def test_fetch_access_token_makes_expiry_aware():
    creds = FakeCredentials(expiry=datetime(2025, 10, 6, 13, 0))

    token, expiry = fetch_access_token(lambda: creds)

    assert creds.refreshed == 1
    assert token == "fresh-token"
    assert expiry == datetime(2025, 10, 6, 13, 0, tzinfo=timezone.utc)


def test_configured_spreadsheet_id_is_remembered(storage):
    gateway = GoogleSheetsGateway(storage, spreadsheet_id="configured-id")

    assert gateway.get_spreadsheet_id() == "configured-id"
    assert storage.get_setting(SPREADSHEET_SETTING_KEY) == "configured-id"


def test_stored_spreadsheet_id_is_used(storage):
    storage.set_setting(SPREADSHEET_SETTING_KEY, "stored-id")
    gateway = GoogleSheetsGateway(storage, spreadsheet_id="")

    assert gateway.get_spreadsheet_id() == "stored-id"


def _no_credentials():
    raise ValueError("No Google credentials configured")


def test_credential_failure_surfaces_as_external_error(storage):
    gateway = GoogleSheetsGateway(storage, credentials_factory=_no_credentials, spreadsheet_id="sheet")

    with pytest.raises(ExternalServiceError) as exc_info:
        gateway.read_rows("Week_2025-10-06")
    assert exc_info.value.service == "google_sheets"

    with pytest.raises(ExternalServiceError):
        gateway.write_rows("Week_2025-10-06", [["title"]])


def test_formatting_failure_is_swallowed(storage):
    gateway = GoogleSheetsGateway(storage, credentials_factory=_no_credentials, spreadsheet_id="sheet")

    gateway.apply_formatting("Week_2025-10-06", 5)


def test_spreadsheet_url(storage):
    gateway = GoogleSheetsGateway(storage, spreadsheet_id="abc")
    assert gateway.spreadsheet_url("abc") == "https://docs.google.com/spreadsheets/d/abc/edit"


def test_formatting_requests_cover_title_header_and_dropdowns():
    requests = formatting_requests(sheet_id=42, row_count=8)
    kinds = [next(iter(request)) for request in requests]

    assert kinds == [
        "mergeCells", "repeatCell", "repeatCell", "updateSheetProperties",
        "setDataValidation", "setDataValidation"
    ]
    assert requests[3]["updateSheetProperties"]["properties"]["gridProperties"]["frozenRowCount"] == 3

    role_rule = requests[4]["setDataValidation"]
    assert role_rule["range"] == {
        "sheetId": 42, "startRowIndex": 3, "endRowIndex": 8, "startColumnIndex": 0, "endColumnIndex": 1
    }
    roles = [v["userEnteredValue"] for v in role_rule["rule"]["condition"]["values"]]
    assert roles == ["Tank", "DPS", "Support", "Sub", "Coach"]

    day_rule = requests[5]["setDataValidation"]
    assert day_rule["range"]["startColumnIndex"] == 2
    assert day_rule["range"]["endColumnIndex"] == 9
    assert "All blocks" in [v["userEnteredValue"] for v in day_rule["rule"]["condition"]["values"]]
