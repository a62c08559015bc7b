"""
Access token issuer for share links.

An access token is an opaque random value bound to one document, an expiry
and a revoked flag. The signed-JWT share links produced by
``encode_share_jwt`` wrap the same opaque value, so revoking the row
invalidates both forms of the link.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from sqlalchemy.orm import Session

from pdfshare.core.config import settings
from pdfshare.core.exceptions import DocumentNotFoundError
from pdfshare.core.security import create_share_jwt, decode_share_jwt
from pdfshare.db.base import utcnow
from pdfshare.models.document import AccessToken, Document

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TokenService:
    """Issues, validates and revokes document access tokens."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    def issue_token(
        self,
        document_id: int,
        requesting_user_id: int,
        expires_at: Optional[datetime] = None,
    ) -> AccessToken:
        """
        Create a new access token for an owned document.

        A missing expiry, or one that is not strictly in the future, falls
        back to ``now + SHARE_TOKEN_DEFAULT_DAYS``.

        Raises:
            DocumentNotFoundError: Document missing or not owned by the requester
        """
        document = (
            self.db.query(Document)
            .filter(Document.id == document_id, Document.owner_id == requesting_user_id)
            .first()
        )
        if not document:
            raise DocumentNotFoundError()

        now = self.clock()
        if expires_at is None or _as_utc(expires_at) <= now:
            expires_at = now + timedelta(days=settings.SHARE_TOKEN_DEFAULT_DAYS)

        # 32 bytes of entropy, URL-safe so the value can sit in a path segment
        access_token = AccessToken(
            document_id=document_id,
            token=secrets.token_urlsafe(32),
            created_at=now,
            expires_at=_as_utc(expires_at),
            is_revoked=False,
        )
        self.db.add(access_token)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Failed to create access token for document {document_id}")
            raise
        self.db.refresh(access_token)

        logger.info(
            f"User {requesting_user_id} created access token {access_token.token[:8]}... "
            f"for document {document_id}, expires {access_token.expires_at.isoformat()}"
        )
        return access_token

    def get_token(self, token_value: str) -> Optional[AccessToken]:
        return self.db.query(AccessToken).filter(AccessToken.token == token_value).first()

    def is_valid(self, access_token: Optional[AccessToken]) -> bool:
        return (
            access_token is not None
            and not access_token.is_revoked
            and access_token.expires_at > self.clock()
        )

    def validate_token(self, token_value: str) -> bool:
        """True iff the token exists, has not expired and is not revoked."""
        return self.is_valid(self.get_token(token_value))

    def revoke_token(self, token_value: str, requesting_user_id: int) -> bool:
        """Revoke a token. Only the owner of the token's document may do so."""
        access_token = self.get_token(token_value)
        if access_token is None or access_token.document.owner_id != requesting_user_id:
            logger.warning(f"Revoke denied for token {token_value[:8]}... by user {requesting_user_id}")
            return False

        access_token.is_revoked = True
        self.db.commit()
        logger.info(f"User {requesting_user_id} revoked access token {token_value[:8]}...")
        return True

    def list_tokens(self, document_id: int, requesting_user_id: int) -> List[AccessToken]:
        """
        All tokens ever issued for an owned document, newest first.

        Raises:
            DocumentNotFoundError: Document missing or not owned by the requester
        """
        document = (
            self.db.query(Document)
            .filter(Document.id == document_id, Document.owner_id == requesting_user_id)
            .first()
        )
        if not document:
            raise DocumentNotFoundError()
        return (
            self.db.query(AccessToken)
            .filter(AccessToken.document_id == document_id)
            .order_by(AccessToken.created_at.desc(), AccessToken.id.desc())
            .all()
        )

    def encode_share_jwt(self, access_token: AccessToken) -> str:
        return create_share_jwt(access_token.document_id, access_token.token, access_token.expires_at)

    def decode_share_jwt(self, jwt_token: str) -> Tuple[int, str]:
        return decode_share_jwt(jwt_token)
