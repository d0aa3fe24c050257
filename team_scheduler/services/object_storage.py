"""
Object storage for scoreboard images.

Clients ask for a signed upload URL, upload the image straight to storage,
then save the returned object path on the game. Images are served back
through the API by path.
"""

import mimetypes
import posixpath
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from team_scheduler.core.config import OBJECT_STORAGE_BUCKET, OBJECT_UPLOAD_PREFIX
from team_scheduler.core.errors import ExternalServiceError, NotFoundError
from team_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)

# Leading bytes of the image formats scoreboards are uploaded in
IMAGE_SIGNATURES = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
]


def guess_content_type(path: str, data: bytes) -> str:
    for signature, content_type in IMAGE_SIGNATURES:
        if data.startswith(signature):
            return content_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return mimetypes.guess_type(path)[0] or "application/octet-stream"


def new_object_path(prefix: str = OBJECT_UPLOAD_PREFIX) -> str:
    return f"{prefix}/{uuid.uuid4()}"


def normalize_path(path: str) -> str:
    """Strip the /objects/ URL prefix and reject paths escaping the bucket."""
    path = path.strip("/")
    if path == "objects" or path.startswith("objects/"):
        path = path[len("objects"):].strip("/")
    normalized = posixpath.normpath(path) if path else ""
    if not normalized or normalized.startswith("..") or normalized == ".":
        raise NotFoundError("Object", path)
    return normalized


class ObjectStorage(ABC):
    @abstractmethod
    def create_upload_url(self) -> Tuple[str, str]:
        """Return (signed upload URL, object path) for a new object."""

    @abstractmethod
    def fetch(self, path: str) -> Tuple[bytes, str]:
        """
        Return (data, content type) for a stored object.

        Raises:
            NotFoundError: If nothing is stored at path
        """


class MemoryObjectStorage(ObjectStorage):
    """Keeps objects in a dict; uploads go through put()."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}

    def create_upload_url(self):
        path = new_object_path()
        return f"memory://{path}", path

    def put(self, path: str, data: bytes) -> None:
        self.objects[normalize_path(path)] = data

    def fetch(self, path):
        key = normalize_path(path)
        if key not in self.objects:
            raise NotFoundError("Object", key)
        data = self.objects[key]
        return data, guess_content_type(key, data)


class SupabaseObjectStorage(ObjectStorage):
    """Objects in a Supabase Storage bucket."""

    def __init__(self, client=None, bucket: str = OBJECT_STORAGE_BUCKET):
        if client is None:
            from team_scheduler.services.supabase_backend import get_supabase_client
            client = get_supabase_client()
        self.client = client
        self.bucket_name = bucket

    def _bucket(self):
        return self.client.storage.from_(self.bucket_name)

    def create_upload_url(self):
        path = new_object_path()
        try:
            result = self._bucket().create_signed_upload_url(path)
        except Exception as e:
            logger.error(f"Could not create upload URL for '{path}': {e}")
            raise ExternalServiceError("object_storage", f"Failed to create upload URL: {e}")

        upload_url: Optional[str] = result.get("signed_url") or result.get("signedUrl")
        if not upload_url:
            raise ExternalServiceError("object_storage", "Storage returned no upload URL")
        return upload_url, path

    def _exists(self, key: str) -> bool:
        folder, name = posixpath.split(key)
        entries = self._bucket().list(folder, {"search": name})
        return any(entry.get("name") == name for entry in entries or [])

    def fetch(self, path):
        key = normalize_path(path)
        try:
            if not self._exists(key):
                raise NotFoundError("Object", key)
            data = self._bucket().download(key)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error(f"Could not download '{key}': {e}")
            raise ExternalServiceError("object_storage", f"Failed to fetch object: {e}")
        return data, guess_content_type(key, data)


def create_object_storage(backend_name: str) -> ObjectStorage:
    if backend_name == "memory":
        return MemoryObjectStorage()
    return SupabaseObjectStorage()
