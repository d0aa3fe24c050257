"""
Service wiring for the API routes. Tests swap these out through
app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends

from team_scheduler.core.config import STORAGE_BACKEND
from team_scheduler.services.storage import Storage, create_storage
from team_scheduler.services.google_sheets import AccessTokenCache, GoogleSheetsGateway
from team_scheduler.services.schedule_sync import ScheduleSynchronizer
from team_scheduler.services.object_storage import ObjectStorage, create_object_storage


@lru_cache()
def get_storage() -> Storage:
    return create_storage(STORAGE_BACKEND)


@lru_cache()
def get_token_cache() -> AccessTokenCache:
    # One token per process, shared by every request
    return AccessTokenCache()


def get_sheets_gateway(storage: Storage = Depends(get_storage)) -> GoogleSheetsGateway:
    return GoogleSheetsGateway(storage, token_cache=get_token_cache())


def get_synchronizer(
    storage: Storage = Depends(get_storage),
    gateway: GoogleSheetsGateway = Depends(get_sheets_gateway)
) -> ScheduleSynchronizer:
    return ScheduleSynchronizer(storage, gateway)


@lru_cache()
def get_object_storage() -> ObjectStorage:
    return create_object_storage(STORAGE_BACKEND)
