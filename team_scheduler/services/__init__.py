"""
Services for availability analytics, persistence and Google Sheets sync.
"""

from .availability import rank_time_slots, most_available_day
from .sheet_conversion import to_sheet_rows, from_sheet_rows
from .storage import Storage, MemoryBackend, create_storage
from .google_sheets import AccessTokenCache, GoogleSheetsGateway
from .schedule_sync import ScheduleSynchronizer
from .object_storage import ObjectStorage, MemoryObjectStorage, create_object_storage

__all__ = [
    "rank_time_slots",
    "most_available_day",
    "to_sheet_rows",
    "from_sheet_rows",
    "Storage",
    "MemoryBackend",
    "create_storage",
    "AccessTokenCache",
    "GoogleSheetsGateway",
    "ScheduleSynchronizer",
    "ObjectStorage",
    "MemoryObjectStorage",
    "create_object_storage"
]
