"""
Comment endpoints for document owners.
"""
import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from pdfshare.core.dependencies import get_comment_service, get_current_active_user, get_db
from pdfshare.core.exceptions import PdfShareError
from pdfshare.core.permissions import get_comment_on_owned_document_or_404, get_owned_document_or_404
from pdfshare.models.user import User
from pdfshare.schemas.comment import Comment as CommentSchema, CommentCreate, CommentUpdate
from pdfshare.services.comment_service import USER_TYPE_OWNER, CommentService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/document/{document_id}", response_model=List[CommentSchema])
def list_document_comments(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Any:
    """
    List all comments on an owned document.

    Top-level comments come newest first, replies oldest first. Comments
    on every page are returned.

    Raises:
        HTTPException: 404 if the document is missing or not owned
    """
    document = get_owned_document_or_404(document_id, current_user, db)
    return [CommentSchema.model_validate(c) for c in comment_service.list_comments(document.id)]


@router.post("/document/{document_id}", response_model=CommentSchema, status_code=status.HTTP_201_CREATED)
def add_document_comment(
    document_id: int,
    comment_in: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Any:
    """
    Comment on (or reply within) an owned document.

    Args:
        document_id: Document being commented on
        comment_in: Content, page number and optional parent comment

    Returns:
        Created comment

    Raises:
        HTTPException: 404 if the document is not owned, 400 on reply rule violations
    """
    document = get_owned_document_or_404(document_id, current_user, db)
    try:
        comment = comment_service.add_comment(
            document_id=document.id,
            content=comment_in.content,
            page_number=comment_in.page_number,
            commenter_id=current_user.id,
            user_type=USER_TYPE_OWNER,
            parent_comment_id=comment_in.parent_comment_id,
            commenter_name=current_user.full_name or current_user.username,
        )
    except PdfShareError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return CommentSchema.model_validate(comment)


@router.get("/replies/{comment_id}", response_model=List[CommentSchema])
def list_comment_replies(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Any:
    """Replies to a comment on an owned document, oldest first."""
    comment = get_comment_on_owned_document_or_404(comment_id, current_user, db)
    return [CommentSchema.model_validate(r) for r in comment_service.list_replies(comment.id)]


@router.put("/{comment_id}", response_model=CommentSchema)
def update_comment(
    comment_id: int,
    comment_in: CommentUpdate,
    current_user: User = Depends(get_current_active_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Any:
    """
    Edit a comment. Only its author may do so.

    Raises:
        HTTPException: 404 if the comment is missing or written by someone else
    """
    comment = comment_service.update_comment(comment_id, comment_in.content, current_user.id)
    if not comment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found or you don't have permission to update it",
        )
    return CommentSchema.model_validate(comment)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: int,
    current_user: User = Depends(get_current_active_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Response:
    """
    Delete a comment and its replies.

    Allowed for the comment's author and for the document owner.

    Raises:
        HTTPException: 404 if the comment is missing or the caller may not delete it
    """
    if not comment_service.delete_comment_and_replies(comment_id, current_user.id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comment not found or you don't have permission to delete it",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
