"""Schemas module - Import all schemas."""
from pdfshare.schemas.comment import Comment, CommentCreate, CommentUpdate, PublicCommentCreate
from pdfshare.schemas.common import ErrorResponse, HealthStatus
from pdfshare.schemas.document import (
    AccessLog,
    AccessToken,
    Document,
    JwtShareResponse,
    ShareDocumentRequest,
    ShareDocumentResponse,
)
from pdfshare.schemas.public import PublicCommentResponse, PublicDocumentInfo, PublicDocumentView
from pdfshare.schemas.settings import StorageSettings
from pdfshare.schemas.user import Token, User, UserCreate, UserSummary

__all__ = [
    "Comment",
    "CommentCreate",
    "CommentUpdate",
    "PublicCommentCreate",
    "ErrorResponse",
    "HealthStatus",
    "AccessLog",
    "AccessToken",
    "Document",
    "JwtShareResponse",
    "ShareDocumentRequest",
    "ShareDocumentResponse",
    "PublicCommentResponse",
    "PublicDocumentInfo",
    "PublicDocumentView",
    "StorageSettings",
    "Token",
    "User",
    "UserCreate",
    "UserSummary",
]
