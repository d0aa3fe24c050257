"""
Pydantic models for inbound payloads.

Request bodies are camelCase on the wire; the same models validate the
snake_case dicts handed to Storage directly, so every create and update
goes through one set of rules.
"""

from datetime import date
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, TypeVar

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from team_scheduler.models.models import (
    AttendanceStatus, AvailabilityOption, EventResult, EventType, PlayerAvailability,
    Role, ScheduleData
)
from team_scheduler.core.config import UNKNOWN
from team_scheduler.core.errors import ValidationError


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("Required")
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


RequiredText = Annotated[str, AfterValidator(_not_blank)]
OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]
TimeOfDay = Annotated[str, StringConstraints(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]
OptionalTime = Annotated[Optional[TimeOfDay], BeforeValidator(_blank_to_none)]
OptionalResult = Annotated[Optional[EventResult], BeforeValidator(_blank_to_none)]
CalendarDate = date

DayName = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
# A blank cell or null means the player has not answered yet
AvailabilityValue = Annotated[AvailabilityOption, BeforeValidator(lambda value: value or UNKNOWN)]


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python; either is accepted on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def values(self) -> Dict[str, Any]:
        """Every field as storable values (enum values, ISO dates)."""
        return self.model_dump(mode="json")

    def changes(self) -> Dict[str, Any]:
        """Only the fields the caller supplied, as storable values."""
        return self.model_dump(mode="json", exclude_unset=True)


# Update models leave required fields typed as non-optional with a None
# default: omitting them means "unchanged", sending null is rejected.

class PlayerCreate(ApiModel):
    name: RequiredText
    role: Role
    full_name: OptionalText = None
    phone: OptionalText = None
    handle: OptionalText = None


class PlayerUpdate(ApiModel):
    name: RequiredText = None
    role: Role = None
    full_name: OptionalText = None
    phone: OptionalText = None
    handle: OptionalText = None


class EventCreate(ApiModel):
    title: RequiredText
    event_type: EventType
    date: CalendarDate
    time: OptionalTime = None
    description: OptionalText = None
    result: OptionalResult = None
    opponent_name: OptionalText = None
    notes: OptionalText = None


class EventUpdate(ApiModel):
    title: RequiredText = None
    event_type: EventType = None
    date: CalendarDate = None
    time: OptionalTime = None
    description: OptionalText = None
    result: OptionalResult = None
    opponent_name: OptionalText = None
    notes: OptionalText = None


class GameCreate(ApiModel):
    event_id: RequiredText
    game_code: RequiredText
    score: RequiredText
    scoreboard_image: OptionalText = None


class GameUpdate(ApiModel):
    game_code: RequiredText = None
    score: RequiredText = None
    scoreboard_image: OptionalText = None


class AttendanceCreate(ApiModel):
    player_id: RequiredText
    date: CalendarDate
    status: AttendanceStatus
    notes: OptionalText = None
    ringer: OptionalText = None


class AttendanceUpdate(ApiModel):
    player_id: RequiredText = None
    date: CalendarDate = None
    status: AttendanceStatus = None
    notes: OptionalText = None
    ringer: OptionalText = None


class TeamNoteCreate(ApiModel):
    sender_name: RequiredText
    message: RequiredText
    timestamp: OptionalText = None


class SettingUpdate(ApiModel):
    key: RequiredText
    value: RequiredText


class PlayerAvailabilityIn(ApiModel):
    player_id: RequiredText
    player_name: RequiredText
    role: Role
    availability: Dict[DayName, AvailabilityValue] = Field(default_factory=dict)

    def to_record(self) -> PlayerAvailability:
        return PlayerAvailability(
            player_id=self.player_id,
            player_name=self.player_name,
            role=self.role,
            availability=dict(self.availability)
        )


class ScheduleDataIn(ApiModel):
    players: List[PlayerAvailabilityIn] = Field(default_factory=list)

    def to_schedule_data(self) -> ScheduleData:
        return ScheduleData(players=[player.to_record() for player in self.players])


class ScheduleRequest(ApiModel):
    """Request model for saving a week's availability."""
    week_start_date: RequiredText
    week_end_date: RequiredText
    schedule_data: ScheduleDataIn


ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_input(model: Type[ModelT], data: Any, prefix: str = "") -> ModelT:
    """
    Validate a payload against a model, accepting an already-built instance as is.

    Raises:
        ValidationError: Naming every offending field by its camelCase path
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e.errors(), prefix=prefix)
