"""
Pydantic schemas for comments and replies.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from pdfshare.schemas.user import UserSummary


class CommentCreate(BaseModel):
    """Schema for adding a comment or a reply."""

    content: str = Field(..., min_length=1, description="Comment text")
    page_number: int = Field(..., ge=1, description="1-based page the comment refers to")
    parent_comment_id: Optional[int] = Field(None, description="Top-level comment being replied to")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment content is required")
        return v.strip()


class PublicCommentCreate(CommentCreate):
    """Anonymous comment, identified only by a self-reported name."""

    commenter_name: Optional[str] = Field(None, max_length=100)


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment content is required")
        return v.strip()


class Comment(BaseModel):
    """Schema for comment response. Top-level comments carry their replies."""

    id: int
    document_id: int
    content: str
    page_number: int
    commenter_id: Optional[int] = None
    commenter_name: Optional[str] = None
    commenter: Optional[UserSummary] = None
    user_type: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    parent_comment_id: Optional[int] = None
    replies: List["Comment"] = []

    class Config:
        """Pydantic config."""

        from_attributes = True


Comment.model_rebuild()
