"""
Document management endpoints: upload, download, delete and sharing.
"""
import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile, status

from pdfshare.core.config import settings
from pdfshare.core.dependencies import (
    get_current_active_user,
    get_document_service,
    get_token_service,
)
from pdfshare.core.exceptions import DocumentNotFoundError, DocumentValidationError, StoredFileNotFoundError
from pdfshare.models.document import Document
from pdfshare.models.user import User
from pdfshare.schemas.document import (
    AccessLog as AccessLogSchema,
    AccessToken as AccessTokenSchema,
    Document as DocumentSchema,
    JwtShareResponse,
    ShareDocumentRequest,
    ShareDocumentResponse,
)
from pdfshare.services.document_service import DocumentService
from pdfshare.services.token_service import TokenService
from pdfshare.utils.file_response import pdf_response, share_url
from pdfshare.utils.file_upload import read_upload

router = APIRouter()
logger = logging.getLogger(__name__)


def _to_schema(request: Request, document: Document) -> DocumentSchema:
    out = DocumentSchema.model_validate(document)
    out.download_url = str(request.url_for("download_document", document_id=document.id))
    out.view_url = str(request.url_for("view_document", document_id=document.id))
    return out


def _owned_or_404(service: DocumentService, document_id: int, user: User) -> Document:
    document = service.get_owned(document_id, user.id)
    if not document:
        logger.warning(f"Document {document_id} not found for user {user.id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return document


def _read_file(service: DocumentService, document: Document) -> bytes:
    try:
        return service.get_file(document)
    except StoredFileNotFoundError as e:
        logger.warning(f"File not found for document {document.id} at '{e.path}'")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")


@router.get("", response_model=List[DocumentSchema])
def list_documents(
    request: Request,
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(get_current_active_user),
    service: DocumentService = Depends(get_document_service),
) -> Any:
    """
    Get list of the caller's documents, newest first.

    Args:
        skip: Number of records to skip
        limit: Maximum number of records to return
        current_user: Current authenticated user
        service: Document service

    Returns:
        List of documents
    """
    documents = service.list_for_owner(current_user.id, skip=skip, limit=limit)
    return [_to_schema(request, d) for d in documents]


@router.post("", response_model=DocumentSchema, status_code=status.HTTP_201_CREATED)
def upload_document(
    request: Request,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_active_user),
    service: DocumentService = Depends(get_document_service),
) -> Any:
    """
    Upload a PDF.

    Args:
        file: Uploaded file (multipart field ``file``)
        current_user: Current authenticated user
        service: Document service

    Returns:
        Created document

    Raises:
        HTTPException: 400 if the file is empty, not a PDF or too large
    """
    try:
        data = read_upload(file, settings.MAX_UPLOAD_SIZE)
        document = service.upload(data, file.filename, file.content_type, current_user.id)
    except DocumentValidationError as e:
        logger.warning(f"Upload rejected for user {current_user.id}: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return _to_schema(request, document)


@router.get("/download/{document_id}", name="download_document")
def download_document(
    document_id: int,
    current_user: User = Depends(get_current_active_user),
    service: DocumentService = Depends(get_document_service),
) -> Response:
    """Stream an owned PDF as an attachment."""
    document = _owned_or_404(service, document_id, current_user)
    return pdf_response(_read_file(service, document), document.filename, inline=False)


@router.get("/view/{document_id}", name="view_document")
def view_document(
    document_id: int,
    current_user: User = Depends(get_current_active_user),
    service: DocumentService = Depends(get_document_service),
) -> Response:
    """Stream an owned PDF for display in the browser."""
    document = _owned_or_404(service, document_id, current_user)
    return pdf_response(_read_file(service, document), document.filename, inline=True)


@router.get("/{document_id}", response_model=DocumentSchema)
def get_document(
    request: Request,
    document_id: int,
    current_user: User = Depends(get_current_active_user),
    service: DocumentService = Depends(get_document_service),
) -> Any:
    """
    Get document metadata.

    Raises:
        HTTPException: 404 if the document is missing or owned by someone else
    """
    return _to_schema(request, _owned_or_404(service, document_id, current_user))


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: int,
    current_user: User = Depends(get_current_active_user),
    service: DocumentService = Depends(get_document_service),
) -> Response:
    """
    Delete a document, its share tokens, comments and access logs, then its file.

    Raises:
        HTTPException: 404 if the document is missing or owned by someone else
    """
    if not service.delete(document_id, current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{document_id}/share", response_model=ShareDocumentResponse)
def share_document(
    document_id: int,
    share_in: Optional[ShareDocumentRequest] = None,
    current_user: User = Depends(get_current_active_user),
    token_service: TokenService = Depends(get_token_service),
) -> Any:
    """
    Create an opaque share link for a document.

    Args:
        document_id: Document to share
        share_in: Optional expiry; defaults to the configured lifetime

    Returns:
        Token, its expiry and the frontend link
    """
    expires_at = share_in.expires_at if share_in else None
    try:
        access_token = token_service.issue_token(document_id, current_user.id, expires_at)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return {
        "token": access_token.token,
        "expires_at": access_token.expires_at,
        "url": share_url(settings.share_base_url, access_token.token),
    }


@router.post("/{document_id}/share-jwt", response_model=JwtShareResponse)
def share_document_jwt(
    document_id: int,
    share_in: Optional[ShareDocumentRequest] = None,
    current_user: User = Depends(get_current_active_user),
    token_service: TokenService = Depends(get_token_service),
) -> Any:
    """
    Create a signed-JWT share link for a document.

    The JWT wraps a regular access token, so revoking that token through
    ``DELETE /{document_id}/shares/{token}`` also kills the JWT link.
    """
    expires_at = share_in.expires_at if share_in else None
    try:
        access_token = token_service.issue_token(document_id, current_user.id, expires_at)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    jwt_token = token_service.encode_share_jwt(access_token)
    return {
        "token": jwt_token,
        "expires_at": access_token.expires_at,
        "share_url": share_url(settings.share_base_url, jwt_token),
    }


@router.get("/{document_id}/shares", response_model=List[AccessTokenSchema])
def list_shares(
    document_id: int,
    current_user: User = Depends(get_current_active_user),
    token_service: TokenService = Depends(get_token_service),
) -> Any:
    """List every share token issued for an owned document, newest first."""
    try:
        return token_service.list_tokens(document_id, current_user.id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.delete("/{document_id}/shares/{token}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_share(
    document_id: int,
    token: str,
    current_user: User = Depends(get_current_active_user),
    token_service: TokenService = Depends(get_token_service),
) -> Response:
    """
    Revoke a share token.

    Raises:
        HTTPException: 404 if the token is unknown, belongs to another
            document, or the caller does not own the document
    """
    access_token = token_service.get_token(token)
    if access_token is None or access_token.document_id != document_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Share token not found")
    if not token_service.revoke_token(token, current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Share token not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{document_id}/access-logs", response_model=List[AccessLogSchema])
def list_access_logs(
    document_id: int,
    current_user: User = Depends(get_current_active_user),
    service: DocumentService = Depends(get_document_service),
) -> Any:
    """Who opened the shared document and when, newest first."""
    logs = service.list_access_logs(document_id, current_user.id)
    if logs is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return logs
