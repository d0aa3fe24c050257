"""
Conversion between a week's availability grid and spreadsheet rows.

Layout:
    row 1   "Team Schedule {weekStart} - {weekEnd}"
    row 2   blank
    row 3   Role | Players | Monday ... Sunday
    row 4+  one player per row, grouped by role priority
"""

from typing import Any, List, Sequence

from team_scheduler.models import (
    AvailabilityOption, ImportedRowId, PlayerAvailability, ROLE_PRIORITY,
    Role, ScheduleData, parse_enum
)
from team_scheduler.core.config import DAYS_OF_WEEK, FALLBACK_ROLE, SHEET_HEADER_ROWS, UNKNOWN
from team_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)

HEADER_ROW = ["Role", "Players"] + DAYS_OF_WEEK


def sheet_title(week_start: str, week_end: str) -> str:
    return f"Team Schedule {week_start} - {week_end}"


def group_by_role(players: Sequence[PlayerAvailability]) -> List[PlayerAvailability]:
    """Order players by role priority, keeping input order within a role."""
    grouped = []
    for role in ROLE_PRIORITY:
        grouped.extend(player for player in players if player.role == role)
    return grouped


def to_sheet_rows(schedule_data: ScheduleData, week_start: str, week_end: str) -> List[List[str]]:
    """
    Format a schedule as a rectangular-ish grid of strings for the sheet.

    Args:
        schedule_data: Players and their availability
        week_start: Week key start, used in the title
        week_end: Week key end, used in the title

    Returns:
        Title row, blank row, header row, then one row per player
    """
    rows: List[List[str]] = [
        [sheet_title(week_start, week_end)],
        [],
        list(HEADER_ROW)
    ]

    for player in group_by_role(schedule_data.players):
        row = [player.role.value, player.player_name]
        row.extend(player.availability.get(day, AvailabilityOption.UNKNOWN).value for day in DAYS_OF_WEEK)
        rows.append(row)

    return rows


def _cell(row: Sequence[Any], index: int) -> str:
    if index >= len(row) or row[index] is None:
        return ""
    return str(row[index])


def from_sheet_rows(rows: Sequence[Sequence[Any]]) -> ScheduleData:
    """
    Rebuild schedule data from sheet rows.

    Players get positional ImportedRowId identifiers, so ids do not survive a
    round trip. Blank role, name or day cells fall back to defaults, and so do
    hand-edited cells holding values outside the enumerations.
    """
    if not rows or len(rows) <= SHEET_HEADER_ROWS:
        return ScheduleData(players=[])

    players = []

    for i in range(SHEET_HEADER_ROWS, len(rows)):
        row = rows[i]
        if not row or len(row) < 2:
            continue

        role_value = _cell(row, 0) or FALLBACK_ROLE
        role = parse_enum(role_value, Role)
        if role is None:
            logger.warning(f"Row {i + 1}: unknown role '{role_value}', using {FALLBACK_ROLE}")
            role = Role(FALLBACK_ROLE)

        availability = {}
        for offset, day in enumerate(DAYS_OF_WEEK):
            value = _cell(row, 2 + offset) or UNKNOWN
            option = parse_enum(value, AvailabilityOption)
            if option is None:
                logger.warning(f"Row {i + 1}: unknown availability '{value}' on {day}, using {UNKNOWN}")
                option = AvailabilityOption.UNKNOWN
            availability[day] = option

        players.append(PlayerAvailability(
            player_id=ImportedRowId(i),
            player_name=_cell(row, 1) or f"Player {i}",
            role=role,
            availability=availability
        ))

    logger.debug(f"Imported {len(players)} players from sheet rows")
    return ScheduleData(players=players)
