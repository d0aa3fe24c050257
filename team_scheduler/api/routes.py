"""
API routes for schedules, roster, events, attendance and team notes.

Handlers that reach Supabase, Google Sheets or object storage are plain
functions so FastAPI runs their blocking calls in its threadpool.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from team_scheduler.models.schemas import (
    AttendanceCreate, AttendanceUpdate, EventCreate, EventUpdate, GameCreate, GameUpdate,
    PlayerCreate, PlayerUpdate, ScheduleRequest, TeamNoteCreate
)
from team_scheduler.core.logging_config import get_logger
from team_scheduler.services.availability import rank_time_slots, most_available_day
from team_scheduler.services.storage import Storage
from team_scheduler.services.schedule_sync import ScheduleSynchronizer
from team_scheduler.services.object_storage import ObjectStorage
from team_scheduler.api.dependencies import get_storage, get_synchronizer, get_object_storage

logger = get_logger(__name__)

router = APIRouter(prefix="/api")
objects_router = APIRouter(tags=["objects"])


def _week_param(alias: str):
    return Query(..., alias=alias, min_length=1)


@router.get("/health", tags=["system"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


# Schedule

@router.get("/schedule", tags=["schedule"])
def get_schedule(
    week_start_date: str = _week_param("weekStartDate"),
    week_end_date: str = _week_param("weekEndDate"),
    synchronizer: ScheduleSynchronizer = Depends(get_synchronizer)
):
    """
    Get a week's schedule.

    Falls back to the week's Google Sheets tab when nothing is stored yet,
    and to an empty schedule when the sheet cannot be read.
    """
    schedule = synchronizer.load_schedule(week_start_date, week_end_date)
    return schedule.to_dict()


@router.post("/schedule", tags=["schedule"])
def save_schedule(
    request: ScheduleRequest,
    synchronizer: ScheduleSynchronizer = Depends(get_synchronizer)
):
    """
    Save a week's schedule.

    The Google Sheets tab is written first; the schedule is only stored once
    the sheet write succeeded.
    """
    schedule = synchronizer.save_schedule(
        request.week_start_date,
        request.week_end_date,
        request.schedule_data.to_schedule_data()
    )
    return schedule.to_dict()


@router.get("/schedule/analytics", tags=["schedule"])
def get_schedule_analytics(
    week_start_date: str = _week_param("weekStartDate"),
    week_end_date: str = _week_param("weekEndDate"),
    synchronizer: ScheduleSynchronizer = Depends(get_synchronizer)
):
    """Best training times and the most available day for a week."""
    players = synchronizer.load_schedule(week_start_date, week_end_date).schedule_data.players

    best_day = most_available_day(players)
    return {
        "bestTimes": [slot.to_dict() for slot in rank_time_slots(players)],
        "mostAvailableDay": {"day": best_day[0], "count": best_day[1]} if best_day else None
    }


@router.get("/spreadsheet-info", tags=["schedule"])
def get_spreadsheet_info(synchronizer: ScheduleSynchronizer = Depends(get_synchronizer)):
    """Spreadsheet id and URL of the Google Sheets mirror."""
    return synchronizer.spreadsheet_info()


# Players

@router.get("/players", tags=["players"])
def list_players(storage: Storage = Depends(get_storage)):
    return [player.to_dict() for player in storage.list_players()]


@router.get("/players/{player_id}", tags=["players"])
def get_player(player_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_player(player_id).to_dict()


@router.post("/players", status_code=201, tags=["players"])
def create_player(payload: PlayerCreate, storage: Storage = Depends(get_storage)):
    return storage.create_player(payload).to_dict()


@router.put("/players/{player_id}", tags=["players"])
def update_player(player_id: str, payload: PlayerUpdate, storage: Storage = Depends(get_storage)):
    return storage.update_player(player_id, payload).to_dict()


@router.delete("/players/{player_id}", status_code=204, tags=["players"])
def delete_player(player_id: str, storage: Storage = Depends(get_storage)):
    """Delete a player along with their attendance records."""
    storage.delete_player(player_id)
    return Response(status_code=204)


@router.get("/players/{player_id}/attendance", tags=["players"])
def list_player_attendance(player_id: str, storage: Storage = Depends(get_storage)):
    storage.get_player(player_id)
    return [record.to_dict() for record in storage.list_attendance(player_id=player_id)]


# Events

@router.get("/events", tags=["events"])
def list_events(storage: Storage = Depends(get_storage)):
    """All events, most recent first."""
    return [event.to_dict() for event in storage.list_events()]


@router.get("/events/{event_id}", tags=["events"])
def get_event(event_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_event(event_id).to_dict()


@router.post("/events", status_code=201, tags=["events"])
def create_event(payload: EventCreate, storage: Storage = Depends(get_storage)):
    return storage.create_event(payload).to_dict()


@router.put("/events/{event_id}", tags=["events"])
def update_event(event_id: str, payload: EventUpdate, storage: Storage = Depends(get_storage)):
    return storage.update_event(event_id, payload).to_dict()


@router.delete("/events/{event_id}", status_code=204, tags=["events"])
def delete_event(event_id: str, storage: Storage = Depends(get_storage)):
    """Delete an event and all of its games."""
    storage.delete_event(event_id)
    return Response(status_code=204)


@router.get("/events/{event_id}/games", tags=["events"])
def list_event_games(event_id: str, storage: Storage = Depends(get_storage)):
    storage.get_event(event_id)
    return [game.to_dict() for game in storage.list_games(event_id=event_id)]


# Games

@router.get("/games", tags=["games"])
def list_games(storage: Storage = Depends(get_storage)):
    return [game.to_dict() for game in storage.list_games()]


@router.get("/games/{game_id}", tags=["games"])
def get_game(game_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_game(game_id).to_dict()


@router.post("/games", status_code=201, tags=["games"])
def create_game(payload: GameCreate, storage: Storage = Depends(get_storage)):
    return storage.create_game(payload).to_dict()


@router.put("/games/{game_id}", tags=["games"])
def update_game(game_id: str, payload: GameUpdate, storage: Storage = Depends(get_storage)):
    return storage.update_game(game_id, payload).to_dict()


@router.delete("/games/{game_id}", status_code=204, tags=["games"])
def delete_game(game_id: str, storage: Storage = Depends(get_storage)):
    storage.delete_game(game_id)
    return Response(status_code=204)


# Attendance

@router.get("/attendance", tags=["attendance"])
def list_attendance(
    player_id: Optional[str] = Query(None, alias="playerId"),
    storage: Storage = Depends(get_storage)
):
    return [record.to_dict() for record in storage.list_attendance(player_id=player_id)]


@router.get("/attendance/{attendance_id}", tags=["attendance"])
def get_attendance(attendance_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_attendance(attendance_id).to_dict()


@router.post("/attendance", status_code=201, tags=["attendance"])
def create_attendance(payload: AttendanceCreate, storage: Storage = Depends(get_storage)):
    return storage.create_attendance(payload).to_dict()


@router.put("/attendance/{attendance_id}", tags=["attendance"])
def update_attendance(
    attendance_id: str,
    payload: AttendanceUpdate,
    storage: Storage = Depends(get_storage)
):
    return storage.update_attendance(attendance_id, payload).to_dict()


@router.delete("/attendance/{attendance_id}", status_code=204, tags=["attendance"])
def delete_attendance(attendance_id: str, storage: Storage = Depends(get_storage)):
    storage.delete_attendance(attendance_id)
    return Response(status_code=204)


# Team notes

@router.get("/team-notes", tags=["team-notes"])
def list_team_notes(storage: Storage = Depends(get_storage)):
    """Team notes, oldest first."""
    return [note.to_dict() for note in storage.list_team_notes()]


@router.get("/team-notes/{note_id}", tags=["team-notes"])
def get_team_note(note_id: str, storage: Storage = Depends(get_storage)):
    return storage.get_team_note(note_id).to_dict()


@router.post("/team-notes", status_code=201, tags=["team-notes"])
def create_team_note(payload: TeamNoteCreate, storage: Storage = Depends(get_storage)):
    return storage.create_team_note(payload).to_dict()


@router.delete("/team-notes/{note_id}", status_code=204, tags=["team-notes"])
def delete_team_note(note_id: str, storage: Storage = Depends(get_storage)):
    storage.delete_team_note(note_id)
    return Response(status_code=204)


# Scoreboard images

@router.post("/objects/upload", tags=["objects"])
def request_upload_url(object_storage: ObjectStorage = Depends(get_object_storage)):
    """Signed URL the client uploads a scoreboard image to, plus the path to store on the game."""
    upload_url, path = object_storage.create_upload_url()
    return {"uploadURL": upload_url, "objectPath": f"/objects/{path}"}


@objects_router.get("/objects/{object_path:path}")
def get_object(object_path: str, object_storage: ObjectStorage = Depends(get_object_storage)):
    data, content_type = object_storage.fetch(object_path)
    return Response(content=data, media_type=content_type)
