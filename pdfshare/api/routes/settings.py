"""
Read-only view of runtime settings relevant to clients.
"""
from typing import Any

from fastapi import APIRouter, Depends

from pdfshare.core.config import settings
from pdfshare.core.dependencies import get_current_active_user
from pdfshare.models.user import User
from pdfshare.schemas.settings import StorageSettings
from pdfshare.services.file_service import FileStorage, GCSFileStorage, LocalFileStorage, get_file_storage

router = APIRouter()


@router.get("/storage", response_model=StorageSettings)
def read_storage_settings(
    current_user: User = Depends(get_current_active_user),
    storage: FileStorage = Depends(get_file_storage),
) -> Any:
    """Report which storage backend holds uploaded files, plus upload limits."""
    location = None
    if isinstance(storage, LocalFileStorage):
        location = str(storage.base_dir)
    elif isinstance(storage, GCSFileStorage):
        location = f"gs://{storage.bucket.name}/{storage.prefix}"

    return StorageSettings(
        provider=storage.name,
        location=location,
        max_upload_size=settings.MAX_UPLOAD_SIZE,
        allowed_content_types=settings.ALLOWED_CONTENT_TYPES,
    )
