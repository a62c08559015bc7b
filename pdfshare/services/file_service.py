"""
File storage backends for uploaded PDFs.

Both backends expose the same three operations (save, get, delete) so the
document service never needs to know where the bytes live.
"""
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from google.api_core.exceptions import NotFound
from google.cloud import storage
from google.cloud.exceptions import GoogleCloudError

from pdfshare.core.config import settings
from pdfshare.core.exceptions import StoredFileNotFoundError


logger = logging.getLogger(__name__)


class FileStorage(ABC):
    """Contract shared by every storage backend."""

    name: str = "abstract"

    @abstractmethod
    def save(self, data: bytes, key: str, content_type: str = "application/pdf") -> str:
        """Store bytes under ``key`` and return the path to persist on the document."""

    @abstractmethod
    def get(self, path: str) -> bytes:
        """Return stored bytes. Raises StoredFileNotFoundError if absent."""

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Remove stored bytes. Missing files count as deleted."""


class LocalFileStorage(FileStorage):
    """Stores files in a directory on local disk."""

    name = "local"

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir).resolve()
        os.makedirs(self.base_dir, exist_ok=True)

    def _resolve(self, path: str) -> Path:
        full_path = (self.base_dir / path).resolve()
        if self.base_dir not in full_path.parents:
            raise StoredFileNotFoundError(path)
        return full_path

    def save(self, data: bytes, key: str, content_type: str = "application/pdf") -> str:
        full_path = self._resolve(key)
        with open(full_path, "wb") as f:
            f.write(data)
        logger.info(f"File '{key}' saved to local storage ({len(data)} bytes).")
        return key

    def get(self, path: str) -> bytes:
        full_path = self._resolve(path)
        if not full_path.is_file():
            raise StoredFileNotFoundError(path)
        with open(full_path, "rb") as f:
            return f.read()

    def delete(self, path: str) -> bool:
        try:
            full_path = self._resolve(path)
            if full_path.exists():
                full_path.unlink()
            logger.info(f"File '{path}' deleted from local storage.")
            return True
        except (OSError, StoredFileNotFoundError) as e:
            logger.error(f"Failed to delete file '{path}': {e}")
            return False


class GCSFileStorage(FileStorage):
    """Google Cloud Storage backend."""

    name = "gcs"

    def __init__(self, bucket_name: str, project_id: str = "", prefix: str = "documents"):
        try:
            self.client = storage.Client(project=project_id or None)
            self.bucket = self.client.bucket(bucket_name)
            self.prefix = prefix
        except GoogleCloudError as e:
            logger.error(f"Failed to initialize Google Cloud Storage client: {e}")
            raise

    def save(self, data: bytes, key: str, content_type: str = "application/pdf") -> str:
        gcs_path = f"{self.prefix}/{key}"
        try:
            blob = self.bucket.blob(gcs_path)
            blob.upload_from_string(data, content_type=content_type, timeout=120)
            logger.info(f"File '{key}' uploaded successfully as '{gcs_path}'.")
            return gcs_path
        except GoogleCloudError as e:
            logger.error(f"Failed to upload file '{key}': {e}")
            raise

    def get(self, path: str) -> bytes:
        try:
            blob = self.bucket.blob(path)
            content = blob.download_as_bytes()
            logger.info(f"Retrieved content for file '{path}'.")
            return content
        except NotFound:
            raise StoredFileNotFoundError(path)
        except GoogleCloudError as e:
            logger.error(f"Failed to retrieve content for file '{path}': {e}")
            raise

    def delete(self, path: str) -> bool:
        try:
            self.bucket.blob(path).delete()
            logger.info(f"File '{path}' deleted successfully.")
            return True
        except NotFound:
            return True
        except GoogleCloudError as e:
            logger.error(f"Failed to delete file '{path}': {e}")
            return False


_storage: FileStorage = None


def get_file_storage() -> FileStorage:
    """Return the storage backend selected by FILE_STORAGE_PROVIDER."""
    global _storage
    if _storage is None:
        provider = settings.FILE_STORAGE_PROVIDER.lower()
        if provider == "gcs":
            _storage = GCSFileStorage(settings.GCS_BUCKET_NAME, settings.GCS_PROJECT_ID)
        elif provider == "local":
            _storage = LocalFileStorage(settings.UPLOAD_DIR)
        else:
            raise ValueError(f"Unknown FILE_STORAGE_PROVIDER '{settings.FILE_STORAGE_PROVIDER}'")
        logger.info(f"Using '{_storage.name}' file storage")
    return _storage
