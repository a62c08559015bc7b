"""
Comment threads on documents.

Comments nest one level deep: a reply must point at a top-level comment on
the same document.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session, selectinload

from pdfshare.core.exceptions import (
    CrossDocumentReplyError,
    DocumentNotFoundError,
    NestedReplyNotAllowedError,
    ParentNotFoundError,
)
from pdfshare.db.base import utcnow
from pdfshare.models.comment import Comment
from pdfshare.models.document import Document
from pdfshare.models.user import User

logger = logging.getLogger(__name__)

USER_TYPE_OWNER = "owner"
USER_TYPE_INVITED = "invited"


class CommentService:
    """Adds, lists, edits and deletes comments."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    def add_comment(
        self,
        document_id: int,
        content: str,
        page_number: int,
        commenter_id: Optional[int] = None,
        user_type: str = USER_TYPE_OWNER,
        parent_comment_id: Optional[int] = None,
        commenter_name: Optional[str] = None,
    ) -> Comment:
        """
        Attach a comment (or a reply) to a document page.

        Raises:
            DocumentNotFoundError: Document does not exist
            ParentNotFoundError: parent_comment_id does not resolve
            CrossDocumentReplyError: Parent belongs to another document
            NestedReplyNotAllowedError: Parent is itself a reply
        """
        document = self.db.query(Document).filter(Document.id == document_id).first()
        if not document:
            raise DocumentNotFoundError()

        if parent_comment_id is not None:
            parent = self.db.query(Comment).filter(Comment.id == parent_comment_id).first()
            if not parent:
                raise ParentNotFoundError()
            if parent.document_id != document_id:
                raise CrossDocumentReplyError()
            if parent.parent_comment_id is not None:
                raise NestedReplyNotAllowedError()

        if commenter_id is not None and not self.db.query(User).filter(User.id == commenter_id).first():
            # Author account is gone; keep the comment as anonymous
            logger.warning(f"Unknown commenter {commenter_id} on document {document_id}, storing as anonymous")
            commenter_id = None

        comment = Comment(
            document_id=document_id,
            content=content,
            page_number=page_number,
            commenter_id=commenter_id,
            commenter_name=commenter_name,
            user_type=user_type,
            created_at=self.clock(),
            parent_comment_id=parent_comment_id,
        )
        self.db.add(comment)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Failed to add comment to document {document_id}")
            raise
        self.db.refresh(comment)

        kind = "Reply" if parent_comment_id else "Comment"
        logger.info(f"{kind} {comment.id} added to document {document_id} page {page_number} ({user_type})")
        return comment

    def get_comment(self, comment_id: int) -> Optional[Comment]:
        return self.db.query(Comment).filter(Comment.id == comment_id).first()

    def list_comments(self, document_id: int) -> List[Comment]:
        """
        Top-level comments newest first, each with its replies oldest first.

        Every page is returned; filtering by page is left to the client.
        """
        return (
            self.db.query(Comment)
            .options(selectinload(Comment.replies).selectinload(Comment.commenter), selectinload(Comment.commenter))
            .filter(Comment.document_id == document_id, Comment.parent_comment_id.is_(None))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .all()
        )

    def list_replies(self, comment_id: int) -> List[Comment]:
        return (
            self.db.query(Comment)
            .filter(Comment.parent_comment_id == comment_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .all()
        )

    def delete_comment_and_replies(self, comment_id: int, requesting_user_id: int) -> bool:
        """
        Delete a comment together with its direct replies.

        Allowed for the comment's author and for the owner of the document.
        Replies and parent go in one transaction; on failure nothing is
        removed and False is returned.
        """
        comment = self.get_comment(comment_id)
        if not comment:
            return False

        if comment.commenter_id != requesting_user_id and comment.document.owner_id != requesting_user_id:
            logger.warning(f"User {requesting_user_id} may not delete comment {comment_id}")
            return False

        try:
            replies = self.list_replies(comment_id)
            for reply in replies:
                self.db.delete(reply)
            self.db.delete(comment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Failed to delete comment {comment_id}, rolled back")
            return False

        logger.info(f"Comment {comment_id} and {len(replies)} replies deleted by user {requesting_user_id}")
        return True

    def update_comment(self, comment_id: int, new_content: str, requesting_user_id: int) -> Optional[Comment]:
        """Edit a comment. Only its author may; the document owner has no override."""
        comment = self.get_comment(comment_id)
        if not comment or comment.commenter_id is None or comment.commenter_id != requesting_user_id:
            return None

        comment.content = new_content
        comment.updated_at = self.clock()
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Failed to update comment {comment_id}")
            raise
        self.db.refresh(comment)

        logger.info(f"Comment {comment_id} updated by user {requesting_user_id}")
        return comment
