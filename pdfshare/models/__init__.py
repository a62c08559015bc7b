"""Models module - Import all models here for Alembic."""
from pdfshare.db.base import Base
from pdfshare.models.user import User
from pdfshare.models.document import Document, AccessToken, AccessLog
from pdfshare.models.comment import Comment

__all__ = ["Base", "User", "Document", "AccessToken", "AccessLog", "Comment"]
