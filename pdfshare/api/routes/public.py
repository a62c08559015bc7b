"""
Anonymous endpoints reached through share links.

Unknown, expired and revoked tokens all produce the same 404 so a visitor
cannot tell which one they hit.
"""
import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from pdfshare.core.dependencies import (
    get_client_ip,
    get_document_service,
    get_public_access_service,
    get_user_agent,
    public_comment_rate_limit,
)
from pdfshare.core.exceptions import InvalidShareTokenError, PdfShareError, StoredFileNotFoundError
from pdfshare.models.comment import Comment
from pdfshare.models.document import Document
from pdfshare.schemas.comment import Comment as CommentSchema, PublicCommentCreate
from pdfshare.schemas.public import PublicCommentResponse, PublicDocumentInfo, PublicDocumentView
from pdfshare.services.document_service import DocumentService
from pdfshare.services.public_access import PublicAccessService
from pdfshare.utils.file_response import pdf_response

router = APIRouter()
logger = logging.getLogger(__name__)

INVALID_TOKEN_DETAIL = "Invalid or expired token"


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=INVALID_TOKEN_DETAIL)


def _read_file(documents: DocumentService, document: Document) -> bytes:
    try:
        return documents.get_file(document)
    except StoredFileNotFoundError as e:
        logger.warning(f"File not found for shared document {document.id} at '{e.path}'")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")


def _comment_response(comment: Comment, all_comments: List[Comment]) -> PublicCommentResponse:
    message = "Reply added successfully" if comment.parent_comment_id else "Comment added successfully"
    return PublicCommentResponse(
        success=True,
        message=message,
        comment=CommentSchema.model_validate(comment),
        all_comments=[CommentSchema.model_validate(c) for c in all_comments],
    )


@router.get("/view/{token}", response_model=PublicDocumentView)
def view_shared_document(
    token: str,
    request: Request,
    ip_address: Optional[str] = Depends(get_client_ip),
    user_agent: Optional[str] = Depends(get_user_agent),
    public_access: PublicAccessService = Depends(get_public_access_service),
) -> Any:
    """
    Resolve a share token to document info, its comments and a download link.

    Each successful call is recorded in the document's access log.
    """
    document = public_access.resolve_document(token, ip_address, user_agent)
    if document is None:
        raise _not_found()

    comments = public_access.list_comments(token) or []
    return PublicDocumentView(
        document=PublicDocumentInfo.model_validate(document),
        comments=[CommentSchema.model_validate(c) for c in comments],
        download_url=str(request.url_for("public_download", token=token)),
    )


@router.get("/download/{token}", name="public_download")
def download_shared_document(
    token: str,
    ip_address: Optional[str] = Depends(get_client_ip),
    user_agent: Optional[str] = Depends(get_user_agent),
    public_access: PublicAccessService = Depends(get_public_access_service),
    documents: DocumentService = Depends(get_document_service),
) -> Response:
    """Download a shared PDF as an attachment."""
    document = public_access.resolve_document(token, ip_address, user_agent)
    if document is None:
        raise _not_found()
    return pdf_response(_read_file(documents, document), document.filename, inline=False)


@router.get("/view-jwt/{token}")
def view_shared_document_jwt(
    token: str,
    ip_address: Optional[str] = Depends(get_client_ip),
    user_agent: Optional[str] = Depends(get_user_agent),
    public_access: PublicAccessService = Depends(get_public_access_service),
    documents: DocumentService = Depends(get_document_service),
) -> Response:
    """
    Stream a PDF shared through a signed JWT link for inline display.

    Raises:
        HTTPException: 400 for a malformed, forged or expired JWT,
            404 when the wrapped token is revoked or does not match
    """
    try:
        document = public_access.resolve_jwt(token, ip_address, user_agent)
    except InvalidShareTokenError as e:
        logger.warning(f"Rejected share JWT: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    if document is None:
        raise _not_found()
    return pdf_response(_read_file(documents, document), document.filename, inline=True)


@router.post(
    "/comment/{token}",
    response_model=PublicCommentResponse,
    dependencies=[Depends(public_comment_rate_limit)],
)
def add_shared_comment(
    token: str,
    comment_in: PublicCommentCreate,
    public_access: PublicAccessService = Depends(get_public_access_service),
) -> Any:
    """
    Add an anonymous comment or reply through a share token.

    Rate limited per client IP.

    Returns:
        The new comment plus the refreshed comment list
    """
    try:
        comment = public_access.add_comment(
            token,
            comment_in.content,
            comment_in.page_number,
            parent_comment_id=comment_in.parent_comment_id,
            commenter_name=comment_in.commenter_name,
        )
    except PdfShareError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if comment is None:
        raise _not_found()

    return _comment_response(comment, public_access.list_comments(token) or [])


@router.post("/comment-jwt/{token}", response_model=PublicCommentResponse)
def add_shared_comment_jwt(
    token: str,
    comment_in: PublicCommentCreate,
    public_access: PublicAccessService = Depends(get_public_access_service),
) -> Any:
    """Add an anonymous comment through a signed JWT share link."""
    try:
        comment = public_access.add_comment_jwt(
            token,
            comment_in.content,
            comment_in.page_number,
            parent_comment_id=comment_in.parent_comment_id,
            commenter_name=comment_in.commenter_name,
        )
    except PdfShareError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if comment is None:
        raise _not_found()

    return _comment_response(comment, public_access.list_comments_jwt(token) or [])
