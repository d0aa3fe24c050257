"""
Shared fixtures: in-memory storage, a fake spreadsheet gateway and an API client.
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

os.environ.setdefault("STORAGE_BACKEND", "memory")

import pytest
from fastapi.testclient import TestClient

from team_scheduler.models import AvailabilityOption, PlayerAvailability, Role
from team_scheduler.core.errors import ExternalServiceError
from team_scheduler.services.storage import Storage, MemoryBackend
from team_scheduler.services.schedule_sync import ScheduleSynchronizer
from team_scheduler.services.object_storage import MemoryObjectStorage


class FakeSheetsGateway:
    """Stands in for GoogleSheetsGateway, keeping tabs in a dict."""

    def __init__(self, spreadsheet_id="sheet-123"):
        self.spreadsheet_id = spreadsheet_id
        self.tabs = {}
        self.fail_reads = False
        self.fail_writes = False
        self.reads = []
        self.formatted = []

    def get_spreadsheet_id(self):
        return self.spreadsheet_id

    def spreadsheet_url(self, spreadsheet_id):
        return f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit"

    def read_rows(self, sheet_name):
        self.reads.append(sheet_name)
        if self.fail_reads:
            raise ExternalServiceError("google_sheets", "Failed to read from Google Sheets: boom")
        return self.tabs.get(sheet_name, [])

    def write_rows(self, sheet_name, rows):
        if self.fail_writes:
            raise ExternalServiceError("google_sheets", "Failed to write to Google Sheets: boom")
        self.tabs[sheet_name] = [list(row) for row in rows]

    def apply_formatting(self, sheet_name, row_count):
        self.formatted.append((sheet_name, row_count))


def make_player(player_id, name, role=Role.DPS, **days):
    """Availability record with the given day answers, e.g. Monday="All blocks"."""
    return PlayerAvailability(
        player_id=player_id,
        player_name=name,
        role=role,
        availability={day: AvailabilityOption(value) for day, value in days.items()}
    )


@pytest.fixture
def storage():
    return Storage(MemoryBackend())


@pytest.fixture
def gateway():
    return FakeSheetsGateway()


@pytest.fixture
def synchronizer(storage, gateway):
    return ScheduleSynchronizer(storage, gateway)


@pytest.fixture
def object_storage():
    return MemoryObjectStorage()


@pytest.fixture
def client(storage, gateway, object_storage):
    from team_scheduler.main import app
    from team_scheduler.api.dependencies import get_storage, get_sheets_gateway, get_object_storage

    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_sheets_gateway] = lambda: gateway
    app.dependency_overrides[get_object_storage] = lambda: object_storage

    yield TestClient(app)

    app.dependency_overrides.clear()
