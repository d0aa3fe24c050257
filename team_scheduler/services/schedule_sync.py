"""
Keeps the stored weekly schedule and its Google Sheets tab in step.

Reads prefer the local copy and fall back to the sheet; writes go to the
sheet first and are only stored locally once the sheet accepted them.
"""

from typing import Any, Dict

from team_scheduler.models import Schedule, ScheduleData
from team_scheduler.core.config import SHEET_NAME_PREFIX, SHEET_HEADER_ROWS
from team_scheduler.core.logging_config import get_logger
from team_scheduler.services.sheet_conversion import from_sheet_rows, to_sheet_rows

logger = get_logger(__name__)


def sheet_name_for(week_start: str) -> str:
    return f"{SHEET_NAME_PREFIX}{week_start}"


class ScheduleSynchronizer:
    """Orchestrates schedule reads and writes across storage and the spreadsheet."""

    def __init__(self, storage, gateway):
        self.storage = storage
        self.gateway = gateway

    def load_schedule(self, week_start: str, week_end: str) -> Schedule:
        """
        Get the schedule for a week key, creating it if needed.

        1. A stored schedule wins, with no merge against the sheet.
        2. Otherwise the week's tab is pulled; if it holds player rows they are
           imported and stored.
        3. If the pull fails or the tab is empty, an empty schedule is stored.

        Sheet errors never reach the caller here.
        """
        schedule = self.storage.get_schedule(week_start, week_end)
        if schedule:
            return schedule

        sheet_name = sheet_name_for(week_start)
        try:
            rows = self.gateway.read_rows(sheet_name)
            if rows and len(rows) > SHEET_HEADER_ROWS:
                schedule_data = from_sheet_rows(rows)
                logger.info(f"Imported {len(schedule_data.players)} players from '{sheet_name}'")
                return self.storage.save_schedule(week_start, week_end, schedule_data, sheet_name)
        except Exception as e:
            logger.warning(f"Error reading '{sheet_name}' from Google Sheets, returning empty schedule: {e}")

        return self.storage.save_schedule(week_start, week_end, ScheduleData(players=[]), sheet_name)

    def save_schedule(self, week_start: str, week_end: str, schedule_data: ScheduleData) -> Schedule:
        """
        Push a schedule to its sheet tab, then store it.

        Raises:
            ExternalServiceError: If the sheet write fails; nothing is stored then
        """
        sheet_name = sheet_name_for(week_start)
        rows = to_sheet_rows(schedule_data, week_start, week_end)

        self.gateway.write_rows(sheet_name, rows)
        self.gateway.apply_formatting(sheet_name, len(rows))

        schedule = self.storage.save_schedule(week_start, week_end, schedule_data, sheet_name)
        logger.info(f"Saved schedule {week_start} - {week_end} with {len(schedule_data.players)} players")
        return schedule

    def spreadsheet_info(self) -> Dict[str, Any]:
        spreadsheet_id = self.gateway.get_spreadsheet_id()
        return {
            "spreadsheetId": spreadsheet_id,
            "url": self.gateway.spreadsheet_url(spreadsheet_id)
        }
