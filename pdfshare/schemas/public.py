"""
Schemas for the anonymous share-link endpoints.
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel

from pdfshare.schemas.comment import Comment


class PublicDocumentInfo(BaseModel):
    id: int
    filename: str
    uploaded_at: datetime

    class Config:
        from_attributes = True


class PublicDocumentView(BaseModel):
    document: PublicDocumentInfo
    comments: List[Comment]
    download_url: str


class PublicCommentResponse(BaseModel):
    success: bool
    message: str
    comment: Comment
    all_comments: List[Comment]
