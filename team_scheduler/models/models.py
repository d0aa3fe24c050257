"""
Data models for the Team Scheduler.
Defines the closed enumerations, the availability grid and the managed entities.
Inbound payloads are validated by the pydantic models in schemas.py; the
dataclasses here are built from already-validated input or from stored rows.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Type, Union

from pydantic.alias_generators import to_camel

from team_scheduler.core.config import DAYS_OF_WEEK, FALLBACK_ROLE


class Role(Enum):
    # Declaration order is the role priority used when grouping players
    TANK = "Tank"
    DPS = "DPS"
    SUPPORT = "Support"
    SUB = "Sub"
    COACH = "Coach"

class AvailabilityOption(Enum):
    UNKNOWN = "unknown"
    EARLY_BLOCK = "18:00-20:00 CEST"
    LATE_BLOCK = "20:00-22:00 CEST"
    ALL_BLOCKS = "All blocks"
    CANNOT = "cannot"

class EventType(Enum):
    TOURNAMENT = "Tournament"
    SCRIM = "Scrim"
    VOD_REVIEW = "VOD Review"

class EventResult(Enum):
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"
    PENDING = "pending"

class AttendanceStatus(Enum):
    ATTENDED = "attended"
    LATE = "late"
    ABSENT = "absent"


ROLE_PRIORITY: List[Role] = list(Role)


def parse_enum(value, enum_class):
    """Parse a string value to an enum member, or None if it is not one."""
    if isinstance(value, enum_class):
        return value
    if not isinstance(value, str):
        return None
    for enum_item in enum_class:
        if enum_item.value == value:
            return enum_item
    return None


class Record:
    """Mixin giving entity dataclasses row (snake_case) and wire (camelCase) conversions."""

    TABLE: ClassVar[str] = ""
    # Columns stored as enum values
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {}

    @classmethod
    def from_row(cls, row: Dict[str, Any]):
        values = {}
        for f in fields(cls):
            value = row.get(f.name)
            if f.name in cls.ENUMS and value is not None:
                value = parse_enum(value, cls.ENUMS[f.name])
            values[f.name] = value
        values["id"] = str(row["id"])
        return cls(**values)

    def to_row(self) -> Dict[str, Any]:
        row = {}
        for f in fields(self):
            value = getattr(self, f.name)
            row[f.name] = value.value if isinstance(value, Enum) else value
        return row

    def to_dict(self) -> Dict[str, Any]:
        return {to_camel(key): value for key, value in self.to_row().items()}


@dataclass
class Player(Record):
    """A managed roster member."""
    TABLE: ClassVar[str] = "players"
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {"role": Role}

    id: str
    name: str
    role: Role
    full_name: Optional[str] = None
    phone: Optional[str] = None
    handle: Optional[str] = None


@dataclass
class Attendance(Record):
    TABLE: ClassVar[str] = "attendance"
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {"status": AttendanceStatus}

    id: str
    player_id: str
    date: str
    status: AttendanceStatus
    notes: Optional[str] = None
    ringer: Optional[str] = None  # substitute who played instead


@dataclass
class TeamNote(Record):
    TABLE: ClassVar[str] = "team_notes"

    id: str
    sender_name: str
    message: str
    timestamp: str

    @staticmethod
    def now() -> str:
        return datetime.now(timezone.utc).isoformat()


@dataclass
class Event(Record):
    """A tournament, scrim or VOD review."""
    TABLE: ClassVar[str] = "events"
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {"event_type": EventType, "result": EventResult}

    id: str
    title: str
    event_type: EventType
    date: str
    time: Optional[str] = None
    description: Optional[str] = None
    result: Optional[EventResult] = None
    opponent_name: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class Game(Record):
    """One map/game played within an event."""
    TABLE: ClassVar[str] = "games"

    id: str
    event_id: str
    game_code: str
    score: str
    scoreboard_image: Optional[str] = None


@dataclass
class Setting(Record):
    TABLE: ClassVar[str] = "settings"

    id: str
    key: str
    value: str


@dataclass(frozen=True)
class ImportedRowId:
    """
    Identifier synthesized for a player read back from a sheet.

    It only names a row position within one import, so it never compares
    equal to a persisted player id.
    """
    row: int

    def __str__(self):
        return f"player-{self.row}"


PlayerId = Union[str, ImportedRowId]


@dataclass
class PlayerAvailability:
    """One player's availability for every day of the tracked week."""
    player_id: PlayerId
    player_name: str
    role: Role
    availability: Dict[str, AvailabilityOption] = field(default_factory=dict)

    def __post_init__(self):
        # Every day is always present
        for day in DAYS_OF_WEEK:
            if day not in self.availability:
                self.availability[day] = AvailabilityOption.UNKNOWN

    def on(self, day: str) -> AvailabilityOption:
        return self.availability.get(day, AvailabilityOption.UNKNOWN)

    @classmethod
    def from_stored(cls, data: Dict[str, Any]) -> "PlayerAvailability":
        """Rebuild a record from the camelCase dict kept in a schedule row."""
        availability = {}
        for day, value in (data.get("availability") or {}).items():
            option = parse_enum(value, AvailabilityOption)
            if day in DAYS_OF_WEEK and option is not None:
                availability[day] = option

        return cls(
            player_id=str(data.get("playerId", "")),
            player_name=data.get("playerName") or "",
            role=parse_enum(data.get("role"), Role) or Role(FALLBACK_ROLE),
            availability=availability
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "playerId": str(self.player_id),
            "playerName": self.player_name,
            "role": self.role.value,
            "availability": {day: self.on(day).value for day in DAYS_OF_WEEK}
        }


@dataclass
class ScheduleData:
    players: List[PlayerAvailability] = field(default_factory=list)

    @classmethod
    def from_stored(cls, data: Optional[Dict[str, Any]]) -> "ScheduleData":
        players = (data or {}).get("players") or []
        return cls(players=[PlayerAvailability.from_stored(p) for p in players if isinstance(p, dict)])

    def to_dict(self) -> Dict[str, Any]:
        return {"players": [player.to_dict() for player in self.players]}


@dataclass
class Schedule:
    """The availability grid stored for one week key."""
    TABLE: ClassVar[str] = "schedules"

    id: str
    week_start_date: str
    week_end_date: str
    schedule_data: ScheduleData = field(default_factory=ScheduleData)
    google_sheet_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Schedule":
        return cls(
            id=str(row["id"]),
            week_start_date=row["week_start_date"],
            week_end_date=row["week_end_date"],
            schedule_data=ScheduleData.from_stored(row.get("schedule_data")),
            google_sheet_id=row.get("google_sheet_id")
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "week_start_date": self.week_start_date,
            "week_end_date": self.week_end_date,
            "schedule_data": self.schedule_data.to_dict(),
            "google_sheet_id": self.google_sheet_id
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "weekStartDate": self.week_start_date,
            "weekEndDate": self.week_end_date,
            "scheduleData": self.schedule_data.to_dict(),
            "googleSheetId": self.google_sheet_id
        }


@dataclass
class TimeSlotAnalysis:
    day: str
    time_slot: str
    available_count: int
    available_players: List[str] = field(default_factory=list)
    percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "timeSlot": self.time_slot,
            "availableCount": self.available_count,
            "availablePlayers": list(self.available_players),
            "percentage": self.percentage
        }
