"""
Dependency injection for FastAPI endpoints.
"""
from typing import Generator, Optional, cast

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from pdfshare.core.config import settings
from pdfshare.core.rate_limit import InMemoryRateLimitStore, RateLimiter
from pdfshare.core.security import decode_token
from pdfshare.db.base import SessionLocal
from pdfshare.models.user import User
from pdfshare.services.comment_service import CommentService
from pdfshare.services.document_service import DocumentService
from pdfshare.services.file_service import FileStorage, get_file_storage
from pdfshare.services.public_access import PublicAccessService
from pdfshare.services.token_service import TokenService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login")

public_comment_rate_limiter = RateLimiter(
    InMemoryRateLimitStore(),
    name="PublicComment",
    limit=settings.PUBLIC_COMMENT_RATE_LIMIT,
    window_seconds=settings.PUBLIC_COMMENT_RATE_WINDOW_SECONDS,
)


def get_db() -> Generator:
    """
    Dependency for database session.

    Yields:
        Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)
) -> User:
    """
    Get current authenticated user from JWT token.

    Args:
        db: Database session
        token: JWT token

    Returns:
        Current user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(token)
    if payload is None or payload.get("type") != "access":
        raise credentials_exception
    user_id: Optional[str] = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise credentials_exception

    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """
    Get current active user.

    Raises:
        HTTPException: If user is inactive
    """
    if not cast(bool, current_user.is_active):
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user


def get_client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def get_user_agent(request: Request) -> Optional[str]:
    return request.headers.get("user-agent")


def get_document_service(
    db: Session = Depends(get_db), storage: FileStorage = Depends(get_file_storage)
) -> DocumentService:
    return DocumentService(db, storage)


def get_token_service(db: Session = Depends(get_db)) -> TokenService:
    return TokenService(db)


def get_comment_service(db: Session = Depends(get_db)) -> CommentService:
    return CommentService(db)


def get_public_access_service(
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
    comment_service: CommentService = Depends(get_comment_service),
) -> PublicAccessService:
    return PublicAccessService(db, token_service, comment_service)


def get_public_comment_rate_limiter() -> RateLimiter:
    """Limiter guarding anonymous comment posting."""
    return public_comment_rate_limiter


def public_comment_rate_limit(
    request: Request,
    response: Response,
    limiter: RateLimiter = Depends(get_public_comment_rate_limiter),
) -> None:
    limiter(request, response)
