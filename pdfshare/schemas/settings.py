"""
Schemas for the settings endpoints.
"""
from typing import List, Optional

from pydantic import BaseModel


class StorageSettings(BaseModel):
    """Active file storage backend and upload limits."""

    provider: str
    location: Optional[str] = None
    max_upload_size: int
    allowed_content_types: List[str]
