"""
Data models for the Team Scheduler.
"""

from .models import (
    Role,
    AvailabilityOption,
    EventType,
    EventResult,
    AttendanceStatus,
    ROLE_PRIORITY,
    Record,
    Player,
    Attendance,
    TeamNote,
    Event,
    Game,
    Setting,
    ImportedRowId,
    PlayerAvailability,
    ScheduleData,
    Schedule,
    TimeSlotAnalysis,
    parse_enum
)

__all__ = [
    "Role",
    "AvailabilityOption",
    "EventType",
    "EventResult",
    "AttendanceStatus",
    "ROLE_PRIORITY",
    "Record",
    "Player",
    "Attendance",
    "TeamNote",
    "Event",
    "Game",
    "Setting",
    "ImportedRowId",
    "PlayerAvailability",
    "ScheduleData",
    "Schedule",
    "TimeSlotAnalysis",
    "parse_enum"
]
