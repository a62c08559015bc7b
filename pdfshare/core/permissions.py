"""
Document ownership checks.

A document that exists but belongs to someone else is reported exactly like
a missing one, so callers can never discover other users' document ids.
"""
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pdfshare.models.comment import Comment
from pdfshare.models.document import Document
from pdfshare.models.user import User


def get_owned_document_or_404(document_id: int, user: User, db: Session) -> Document:
    """
    Return the document if ``user`` uploaded it.

    Raises:
        HTTPException 404: Document missing or owned by another user
    """
    document = db.query(Document).filter(
        Document.id == document_id,
        Document.owner_id == user.id
    ).first()
    if not document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )
    return document


def is_document_owner(document_id: int, user_id: int, db: Session) -> bool:
    """Check ownership without raising."""
    document = db.query(Document).filter(
        Document.id == document_id,
        Document.owner_id == user_id
    ).first()
    return document is not None


def get_comment_on_owned_document_or_404(comment_id: int, user: User, db: Session) -> Comment:
    """Comment lookup for owner-only views such as the reply list."""
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment or not is_document_owner(comment.document_id, user.id, db):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found"
        )
    return comment
