import logging
import os
import uuid
from typing import Protocol

from app.core.config import settings

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    def store(self, data: bytes, suggested_name: str) -> str: ...

    def delete(self, handle: str) -> None: ...

    def path_for(self, handle: str) -> str: ...


class LocalBlobStore:
    """Files on local disk; handles are generated names relative to root."""

    def __init__(self, root: str):
        self.root = root

    def store(self, data: bytes, suggested_name: str) -> str:
        os.makedirs(self.root, exist_ok=True)
        ext = os.path.splitext(suggested_name or "")[1].lower()
        handle = f"{uuid.uuid4().hex}{ext}"
        with open(self.path_for(handle), "wb") as f:
            f.write(data)
        return handle

    def delete(self, handle: str) -> None:
        path = self.path_for(handle)
        if os.path.exists(path):
            os.remove(path)

    def path_for(self, handle: str) -> str:
        # handles never carry directories
        return os.path.join(self.root, os.path.basename(handle))


def get_blob_store() -> BlobStore:
    return LocalBlobStore(settings.UPLOAD_DIR)
