"""
Persistence gateway for the Team Scheduler.

Storage turns entity operations (create, list, get, partial update, delete,
schedule and setting upserts) into primitive table calls on a TableBackend.
Relationship and cascade rules live in RELATIONSHIPS rather than in the
individual delete calls.
"""

import copy
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type, Union

from pydantic.alias_generators import to_camel

from team_scheduler.models import (
    Attendance, Event, Game, Player, Record, Schedule, ScheduleData, Setting, TeamNote
)
from team_scheduler.models.schemas import (
    ApiModel, AttendanceCreate, AttendanceUpdate, EventCreate, EventUpdate, GameCreate, GameUpdate,
    PlayerCreate, PlayerUpdate, SettingUpdate, TeamNoteCreate, validate_input
)
from team_scheduler.core.config import STORAGE_BACKEND
from team_scheduler.core.errors import NotFoundError, ValidationError
from team_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)

# A schema instance, or a dict in either snake_case or camelCase
Payload = Union[Dict[str, Any], ApiModel]


class TableBackend(ABC):
    """Primitive row operations against a relational store."""

    @abstractmethod
    def select(self, table: str, **filters) -> List[Dict[str, Any]]:
        """Rows whose columns equal every filter value, in insertion order."""

    @abstractmethod
    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row and return it as stored."""

    @abstractmethod
    def update(self, table: str, row_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply changes to one row; None if the id does not exist."""

    @abstractmethod
    def delete(self, table: str, row_id: str) -> bool:
        """Delete one row; False if the id does not exist."""

    @abstractmethod
    def delete_where(self, table: str, column: str, value: Any) -> int:
        """Delete every row whose column equals value; returns the count."""


class MemoryBackend(TableBackend):
    """Process-local tables for development and tests."""

    def __init__(self):
        self._tables: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def _table(self, table: str) -> Dict[str, Dict[str, Any]]:
        return self._tables.setdefault(table, {})

    def select(self, table, **filters):
        return [
            copy.deepcopy(row) for row in self._table(table).values()
            if all(row.get(column) == value for column, value in filters.items())
        ]

    def insert(self, table, row):
        stored = copy.deepcopy(row)
        self._table(table)[stored["id"]] = stored
        return copy.deepcopy(stored)

    def update(self, table, row_id, changes):
        row = self._table(table).get(row_id)
        if row is None:
            return None
        row.update(copy.deepcopy(changes))
        return copy.deepcopy(row)

    def delete(self, table, row_id):
        return self._table(table).pop(row_id, None) is not None

    def delete_where(self, table, column, value):
        rows = self._table(table)
        doomed = [row_id for row_id, row in rows.items() if row.get(column) == value]
        for row_id in doomed:
            del rows[row_id]
        return len(doomed)


CASCADE = "cascade"


@dataclass(frozen=True)
class Relationship:
    parent: Type[Record]
    child: Type[Record]
    foreign_key: str
    on_delete: str  # CASCADE removes children with the parent


RELATIONSHIPS = [
    Relationship(parent=Event, child=Game, foreign_key="event_id", on_delete=CASCADE),
    Relationship(parent=Player, child=Attendance, foreign_key="player_id", on_delete=CASCADE),
]


def _new_id() -> str:
    return str(uuid.uuid4())


class Storage:
    """CRUD for every entity, plus the schedule and setting upserts."""

    def __init__(self, backend: TableBackend):
        self.backend = backend

    # Generic record operations

    def _list(self, record_cls, **filters) -> List:
        return [record_cls.from_row(row) for row in self.backend.select(record_cls.TABLE, **filters)]

    def _get(self, record_cls, record_id: str):
        rows = self.backend.select(record_cls.TABLE, id=record_id)
        if not rows:
            raise NotFoundError(record_cls.__name__, record_id)
        return record_cls.from_row(rows[0])

    def _check_parents(self, record_cls, values: Dict[str, Any]) -> None:
        for rel in RELATIONSHIPS:
            if rel.child is not record_cls or rel.foreign_key not in values:
                continue
            if not self.backend.select(rel.parent.TABLE, id=values[rel.foreign_key]):
                raise ValidationError.single(
                    to_camel(rel.foreign_key),
                    f"Unknown {rel.parent.__name__.lower()}: {values[rel.foreign_key]}"
                )

    def _create(self, record_cls, schema: Type[ApiModel], data: Payload, **defaults):
        values = validate_input(schema, data).values()
        for column, default in defaults.items():
            if values.get(column) is None:
                values[column] = default
        self._check_parents(record_cls, values)
        row = self.backend.insert(record_cls.TABLE, {"id": _new_id(), **values})
        record = record_cls.from_row(row)
        logger.info(f"Created {record_cls.__name__} {record.id}")
        return record

    def _update(self, record_cls, schema: Type[ApiModel], record_id: str, changes: Payload):
        values = validate_input(schema, changes).changes()
        if not values:
            return self._get(record_cls, record_id)
        self._check_parents(record_cls, values)
        row = self.backend.update(record_cls.TABLE, record_id, values)
        if row is None:
            raise NotFoundError(record_cls.__name__, record_id)
        return record_cls.from_row(row)

    def _delete(self, record_cls, record_id: str) -> None:
        self._get(record_cls, record_id)

        for rel in RELATIONSHIPS:
            if rel.parent is record_cls and rel.on_delete == CASCADE:
                removed = self.backend.delete_where(rel.child.TABLE, rel.foreign_key, record_id)
                if removed:
                    logger.info(f"Cascaded delete of {removed} {rel.child.__name__} rows for {record_cls.__name__} {record_id}")

        if not self.backend.delete(record_cls.TABLE, record_id):
            raise NotFoundError(record_cls.__name__, record_id)
        logger.info(f"Deleted {record_cls.__name__} {record_id}")

    # Players

    def list_players(self) -> List[Player]:
        return self._list(Player)

    def get_player(self, player_id: str) -> Player:
        return self._get(Player, player_id)

    def create_player(self, data: Payload) -> Player:
        return self._create(Player, PlayerCreate, data)

    def update_player(self, player_id: str, changes: Payload) -> Player:
        return self._update(Player, PlayerUpdate, player_id, changes)

    def delete_player(self, player_id: str) -> None:
        self._delete(Player, player_id)

    # Attendance

    def list_attendance(self, player_id: Optional[str] = None) -> List[Attendance]:
        if player_id is not None:
            records = self._list(Attendance, player_id=player_id)
        else:
            records = self._list(Attendance)
        return sorted(records, key=lambda a: a.date, reverse=True)

    def get_attendance(self, attendance_id: str) -> Attendance:
        return self._get(Attendance, attendance_id)

    def create_attendance(self, data: Payload) -> Attendance:
        return self._create(Attendance, AttendanceCreate, data)

    def update_attendance(self, attendance_id: str, changes: Payload) -> Attendance:
        return self._update(Attendance, AttendanceUpdate, attendance_id, changes)

    def delete_attendance(self, attendance_id: str) -> None:
        self._delete(Attendance, attendance_id)

    # Team notes (append-only, individually deletable)

    def list_team_notes(self) -> List[TeamNote]:
        return sorted(self._list(TeamNote), key=lambda note: note.timestamp)

    def get_team_note(self, note_id: str) -> TeamNote:
        return self._get(TeamNote, note_id)

    def create_team_note(self, data: Payload) -> TeamNote:
        return self._create(TeamNote, TeamNoteCreate, data, timestamp=TeamNote.now())

    def delete_team_note(self, note_id: str) -> None:
        self._delete(TeamNote, note_id)

    # Events and their games

    def list_events(self) -> List[Event]:
        return sorted(self._list(Event), key=lambda event: event.date, reverse=True)

    def get_event(self, event_id: str) -> Event:
        return self._get(Event, event_id)

    def create_event(self, data: Payload) -> Event:
        return self._create(Event, EventCreate, data)

    def update_event(self, event_id: str, changes: Payload) -> Event:
        return self._update(Event, EventUpdate, event_id, changes)

    def delete_event(self, event_id: str) -> None:
        self._delete(Event, event_id)

    def list_games(self, event_id: Optional[str] = None) -> List[Game]:
        if event_id is not None:
            return self._list(Game, event_id=event_id)
        return self._list(Game)

    def get_game(self, game_id: str) -> Game:
        return self._get(Game, game_id)

    def create_game(self, data: Payload) -> Game:
        return self._create(Game, GameCreate, data)

    def update_game(self, game_id: str, changes: Payload) -> Game:
        return self._update(Game, GameUpdate, game_id, changes)

    def delete_game(self, game_id: str) -> None:
        self._delete(Game, game_id)

    # Schedules, upserted by week key

    def get_schedule(self, week_start_date: str, week_end_date: str) -> Optional[Schedule]:
        rows = self.backend.select(
            Schedule.TABLE,
            week_start_date=week_start_date,
            week_end_date=week_end_date
        )
        return Schedule.from_row(rows[0]) if rows else None

    def save_schedule(
        self,
        week_start_date: str,
        week_end_date: str,
        schedule_data: ScheduleData,
        google_sheet_id: Optional[str] = None
    ) -> Schedule:
        existing = self.get_schedule(week_start_date, week_end_date)
        if existing:
            row = self.backend.update(Schedule.TABLE, existing.id, {
                "schedule_data": schedule_data.to_dict(),
                "google_sheet_id": google_sheet_id
            })
            if row is None:
                raise NotFoundError("Schedule", existing.id)
            return Schedule.from_row(row)

        schedule = Schedule(
            id=_new_id(),
            week_start_date=week_start_date,
            week_end_date=week_end_date,
            schedule_data=schedule_data,
            google_sheet_id=google_sheet_id
        )
        row = self.backend.insert(Schedule.TABLE, schedule.to_row())
        logger.info(f"Created schedule for {week_start_date} - {week_end_date}")
        return Schedule.from_row(row)

    # Settings, upserted by key

    def get_setting(self, key: str) -> Optional[str]:
        rows = self.backend.select(Setting.TABLE, key=key)
        return rows[0]["value"] if rows else None

    def set_setting(self, key: str, value: str) -> Setting:
        values = validate_input(SettingUpdate, {"key": key, "value": value}).values()
        rows = self.backend.select(Setting.TABLE, key=key)
        if rows:
            row = self.backend.update(Setting.TABLE, rows[0]["id"], {"value": values["value"]})
        else:
            row = self.backend.insert(Setting.TABLE, {"id": _new_id(), **values})
        return Setting.from_row(row)


def create_storage(backend_name: str = STORAGE_BACKEND) -> Storage:
    """Build Storage on the configured backend ("supabase" or "memory")."""
    if backend_name == "memory":
        logger.info("Using in-memory storage backend")
        return Storage(MemoryBackend())

    if backend_name == "supabase":
        from team_scheduler.services.supabase_backend import SupabaseBackend
        return Storage(SupabaseBackend())

    raise ValueError(f"Unknown STORAGE_BACKEND: {backend_name}")
