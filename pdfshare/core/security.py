"""
Security utilities for JWT and password hashing.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext

from pdfshare.core.config import settings
from pdfshare.core.exceptions import InvalidShareTokenError, ShareTokenExpiredError
from pdfshare.db.base import utcnow

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _create_token(
    subject: str,
    token_type: str,
    expires_delta: timedelta,
    extra_claims: Optional[Dict[str, Any]] = None
) -> str:
    """Internal function to create JWT tokens."""
    now = utcnow()

    payload = {
        "sub": subject,
        "iat": now,
        "exp": now + expires_delta,
        "type": token_type,
        **(extra_claims or {})
    }

    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None
) -> str:
    """Create JWT access token."""
    delta = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _create_token(str(subject), "access", delta, extra_claims)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate JWT token."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def create_share_jwt(document_id: int, token_value: str, expires_at: datetime) -> str:
    """
    Wrap an opaque share token in a signed JWT.

    The JWT carries the document id and the opaque token so the public
    endpoints can cross-check both; its lifetime equals the token's.
    """
    payload = {
        "documentId": str(document_id),
        "tokenId": token_value,
        "iss": settings.SHARE_JWT_ISSUER,
        "aud": settings.SHARE_JWT_AUDIENCE,
        "iat": utcnow(),
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.SHARE_JWT_KEY, algorithm="HS256")


def decode_share_jwt(token: str) -> Tuple[int, str]:
    """
    Validate a share JWT and return ``(document_id, token_value)``.

    Raises:
        ShareTokenExpiredError: If the JWT lifetime has passed
        InvalidShareTokenError: On bad signature, issuer, audience or claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.SHARE_JWT_KEY,
            algorithms=["HS256"],
            audience=settings.SHARE_JWT_AUDIENCE,
            issuer=settings.SHARE_JWT_ISSUER,
        )
    except ExpiredSignatureError:
        raise ShareTokenExpiredError()
    except JWTError as e:
        raise InvalidShareTokenError(f"Invalid token: {e}")

    token_value = payload.get("tokenId")
    if not token_value:
        raise InvalidShareTokenError("Invalid token: missing or invalid token ID")
    try:
        document_id = int(payload.get("documentId"))
    except (TypeError, ValueError):
        raise InvalidShareTokenError("Invalid token: missing or invalid document ID")

    return document_id, token_value


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)
