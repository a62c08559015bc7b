"""
Anonymous access to shared documents.

Every entry point takes a share token (opaque value or signed JWT) instead
of a user. An unknown, expired or revoked token resolves to None; callers
turn that into a 404 without saying which of the three it was.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from pdfshare.core.exceptions import CommentValidationError
from pdfshare.models.comment import Comment
from pdfshare.models.document import AccessLog, Document
from pdfshare.services.comment_service import USER_TYPE_INVITED, CommentService
from pdfshare.services.token_service import TokenService

logger = logging.getLogger(__name__)


class PublicAccessService:
    def __init__(self, db: Session, token_service: TokenService, comment_service: CommentService):
        self.db = db
        self.tokens = token_service
        self.comments = comment_service

    def _document_for_token(self, token_value: str) -> Optional[Document]:
        access_token = self.tokens.get_token(token_value)
        if not self.tokens.is_valid(access_token):
            logger.warning(f"Rejected share token {token_value[:8]}...")
            return None
        return access_token.document

    def _record_access(self, document: Document, ip_address: Optional[str], user_agent: Optional[str]) -> None:
        log = AccessLog(
            document_id=document.id,
            accessed_at=self.tokens.clock(),
            ip_address=ip_address,
            user_agent=user_agent,
        )
        try:
            self.db.add(log)
            self.db.commit()
        except Exception:
            # The audit row must never block the visitor
            self.db.rollback()
            logger.exception(f"Failed to record access log for document {document.id}")

    def resolve_document(
        self,
        token_value: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[Document]:
        """
        Resolve a share token to its document and record the access.

        One AccessLog row is appended per successful call; repeated calls
        with the same token produce repeated rows.
        """
        document = self._document_for_token(token_value)
        if document is None:
            return None

        self._record_access(document, ip_address, user_agent)
        logger.info(f"Document {document.id} accessed via token {token_value[:8]}... from {ip_address}")
        return document

    def list_comments(self, token_value: str) -> Optional[List[Comment]]:
        document = self._document_for_token(token_value)
        if document is None:
            return None
        return self.comments.list_comments(document.id)

    def add_comment(
        self,
        token_value: str,
        content: str,
        page_number: int,
        parent_comment_id: Optional[int] = None,
        commenter_name: Optional[str] = None,
    ) -> Optional[Comment]:
        """
        Add an anonymous comment through a share token.

        Returns None for an invalid token.

        Raises:
            CommentValidationError: Blank content or page number below 1
            ParentNotFoundError, CrossDocumentReplyError, NestedReplyNotAllowedError:
                Reply rules, propagated from the comment service
        """
        if content is None or not content.strip():
            raise CommentValidationError("Comment content is required.")
        if page_number is None or page_number < 1:
            raise CommentValidationError("Page number must be a positive integer.")

        document = self._document_for_token(token_value)
        if document is None:
            return None

        return self.comments.add_comment(
            document_id=document.id,
            content=content.strip(),
            page_number=page_number,
            commenter_id=None,
            user_type=USER_TYPE_INVITED,
            parent_comment_id=parent_comment_id,
            commenter_name=(commenter_name or "").strip() or None,
        )

    # Signed JWT links

    def _token_value_for_jwt(self, jwt_token: str) -> Optional[str]:
        """
        Decode a share JWT and confirm its document claim matches the token row.

        Raises InvalidShareTokenError / ShareTokenExpiredError on a bad JWT.
        """
        document_id, token_value = self.tokens.decode_share_jwt(jwt_token)
        access_token = self.tokens.get_token(token_value)
        if access_token is None or access_token.document_id != document_id:
            logger.warning(f"Share JWT for document {document_id} does not match its token")
            return None
        return token_value

    def resolve_jwt(
        self,
        jwt_token: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[Document]:
        token_value = self._token_value_for_jwt(jwt_token)
        if token_value is None:
            return None
        return self.resolve_document(token_value, ip_address, user_agent)

    def list_comments_jwt(self, jwt_token: str) -> Optional[List[Comment]]:
        token_value = self._token_value_for_jwt(jwt_token)
        if token_value is None:
            return None
        return self.list_comments(token_value)

    def add_comment_jwt(
        self,
        jwt_token: str,
        content: str,
        page_number: int,
        parent_comment_id: Optional[int] = None,
        commenter_name: Optional[str] = None,
    ) -> Optional[Comment]:
        token_value = self._token_value_for_jwt(jwt_token)
        if token_value is None:
            return None
        return self.add_comment(token_value, content, page_number, parent_comment_id, commenter_name)
