"""
Tests for converting schedules to and from spreadsheet rows.
"""

import pytest

from team_scheduler.models import AvailabilityOption, ImportedRowId, Role, ScheduleData
from team_scheduler.models.schemas import ScheduleDataIn, validate_input
from team_scheduler.core.errors import ValidationError
from team_scheduler.core.config import DAYS_OF_WEEK, TIME_BLOCKS
from team_scheduler.services.sheet_conversion import HEADER_ROW, from_sheet_rows, group_by_role, to_sheet_rows

from conftest import make_player


def _schedule():
    return ScheduleData(players=[
        make_player("p-support", "Mender", Role.SUPPORT, Monday=TIME_BLOCKS[0]),
        make_player("p-tank", "Wall", Role.TANK, Tuesday="All blocks", Sunday="cannot"),
        make_player("p-coach", "Sensei", Role.COACH),
        make_player("p-dps", "Sniper", Role.DPS, Friday=TIME_BLOCKS[1]),
        make_player("p-tank2", "Shield", Role.TANK),
    ])


def test_layout_has_title_blank_and_header_rows():
    rows = to_sheet_rows(_schedule(), "2025-10-06", "2025-10-12")

    assert rows[0] == ["Team Schedule 2025-10-06 - 2025-10-12"]
    assert rows[1] == []
    assert rows[2] == HEADER_ROW
    assert rows[2] == ["Role", "Players"] + DAYS_OF_WEEK
    assert len(rows) == 3 + 5


def test_players_are_grouped_by_role_priority():
    rows = to_sheet_rows(_schedule(), "a", "b")

    assert [row[1] for row in rows[3:]] == ["Wall", "Shield", "Sniper", "Mender", "Sensei"]
    assert [row[0] for row in rows[3:]] == ["Tank", "Tank", "DPS", "Support", "Coach"]


def test_player_rows_spell_out_every_day():
    rows = to_sheet_rows(_schedule(), "a", "b")
    wall = rows[3]

    assert len(wall) == 2 + len(DAYS_OF_WEEK)
    assert wall[2:] == ["unknown", "All blocks", "unknown", "unknown", "unknown", "unknown", "cannot"]


def test_round_trip_keeps_everything_but_ids():
    schedule = _schedule()
    imported = from_sheet_rows(to_sheet_rows(schedule, "a", "b"))

    def content(players):
        return [(p.player_name, p.role, p.availability) for p in players]

    assert content(imported.players) == content(group_by_role(schedule.players))


def test_round_trip_keeps_names_verbatim():
    schedule = ScheduleData(players=[
        make_player("p1", " Wall ", Role.TANK, Monday="All blocks"),
        make_player("p2", "Sniper\tX", Role.DPS),
    ])
    imported = from_sheet_rows(to_sheet_rows(schedule, "a", "b"))

    assert [p.player_name for p in imported.players] == [" Wall ", "Sniper\tX"]


def test_blank_names_cannot_enter_a_schedule():
    """A blank name would come back from the sheet as "Player N", so it is refused on input."""
    with pytest.raises(ValidationError) as exc_info:
        validate_input(ScheduleDataIn, {"players": [
            {"playerId": "p1", "playerName": "Wall", "role": "Tank"},
            {"playerId": "p2", "playerName": "  ", "role": "DPS"},
        ]}, prefix="scheduleData")

    assert exc_info.value.fields == ["scheduleData.players[1].playerName"]

    blank = ScheduleData(players=[make_player("p2", "", Role.DPS)])
    assert from_sheet_rows(to_sheet_rows(blank, "a", "b")).players[0].player_name == "Player 3"


def test_imported_players_get_positional_ids():
    imported = from_sheet_rows(to_sheet_rows(_schedule(), "a", "b"))

    assert [p.player_id for p in imported.players] == [ImportedRowId(i) for i in range(3, 8)]
    assert str(imported.players[0].player_id) == "player-3"


def test_short_inputs_give_empty_schedule():
    assert from_sheet_rows([]).players == []
    assert from_sheet_rows([["Team Schedule"]]).players == []
    assert from_sheet_rows([["Team Schedule"], [], HEADER_ROW]).players == []


def test_blank_cells_fall_back_to_defaults():
    rows = [["title"], [], HEADER_ROW, ["", "", "All blocks"], ["Support", "Mender"]]
    players = from_sheet_rows(rows).players

    assert len(players) == 2
    assert players[0].role == Role.TANK
    assert players[0].player_name == "Player 3"
    assert players[0].on("Monday") == AvailabilityOption.ALL_BLOCKS
    assert players[1].role == Role.SUPPORT
    assert all(players[1].on(day) == AvailabilityOption.UNKNOWN for day in DAYS_OF_WEEK)


def test_rows_with_fewer_than_two_cells_are_skipped():
    rows = [["title"], [], HEADER_ROW, ["Tank"], [], ["DPS", "Sniper"]]
    players = from_sheet_rows(rows).players

    assert [p.player_name for p in players] == ["Sniper"]
    assert players[0].player_id == ImportedRowId(5)


def test_hand_edited_values_are_coerced():
    rows = [["title"], [], HEADER_ROW, ["Healer", "Mender", "maybe", "cannot"]]
    player = from_sheet_rows(rows).players[0]

    assert player.role == Role.TANK
    assert player.on("Monday") == AvailabilityOption.UNKNOWN
    assert player.on("Tuesday") == AvailabilityOption.CANNOT
