"""
Error types shared by every layer of the Team Scheduler.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

# Leading loc entries FastAPI adds to say where a request value came from
REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


@dataclass
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class SchedulerError(Exception):
    """Base class for application errors."""


class ValidationError(SchedulerError):
    """Input is missing a required field or uses a value outside its enumeration."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        super().__init__("Invalid fields: " + ", ".join(self.fields))

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([FieldError(field, message)])

    @classmethod
    def from_pydantic(cls, errors: Iterable[Dict[str, Any]], prefix: str = "") -> "ValidationError":
        """
        Build from pydantic error dicts (ValidationError.errors() or RequestValidationError.errors()).

        Locations become dotted camelCase paths with list indexes in brackets,
        e.g. ("body", "scheduleData", "players", 0, "role") -> "scheduleData.players[0].role".
        """
        return cls([FieldError(_field_path(err.get("loc", ()), prefix), _field_message(err)) for err in errors])

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]


class NotFoundError(SchedulerError):
    """No record matches the requested id or key."""

    def __init__(self, entity: str, key: Optional[str] = None):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found" + (f": {key}" if key else ""))


class ExternalServiceError(SchedulerError):
    """A call to the spreadsheet service, object storage or database failed."""

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(message)


def _field_path(loc, prefix: str = "") -> str:
    path = prefix
    for i, part in enumerate(loc):
        if i == 0 and part in REQUEST_LOCATIONS:
            continue
        if part == "[key]":
            continue
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path or "body"


def _field_message(err: Dict[str, Any]) -> str:
    if err.get("type") == "missing":
        return "Required"
    if err.get("type") == "value_error" and err.get("ctx", {}).get("error"):
        return str(err["ctx"]["error"])
    return err.get("msg", "Invalid")
