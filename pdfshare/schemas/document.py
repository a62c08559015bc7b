"""
Pydantic schemas for documents, share tokens and access logs.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Document(BaseModel):
    """Schema for document response."""

    id: int
    filename: str
    file_size: int
    content_type: str
    owner_id: int
    uploaded_at: datetime
    download_url: Optional[str] = None
    view_url: Optional[str] = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class ShareDocumentRequest(BaseModel):
    """Optional expiry for a new share link. Missing or past values fall back to the default lifetime."""

    expires_at: Optional[datetime] = Field(None, description="When the link stops working (UTC)")


class ShareDocumentResponse(BaseModel):
    token: str
    expires_at: datetime
    url: str


class JwtShareResponse(BaseModel):
    token: str
    expires_at: datetime
    share_url: str


class AccessToken(BaseModel):
    """Share token as listed to the document owner."""

    token: str
    document_id: int
    created_at: datetime
    expires_at: datetime
    is_revoked: bool

    class Config:
        from_attributes = True


class AccessLog(BaseModel):
    id: int
    document_id: int
    accessed_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    class Config:
        from_attributes = True
