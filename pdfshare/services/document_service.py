"""
Document store: upload, lookup, download and delete of owned PDFs.
"""
import logging
import os
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from pdfshare.core.config import settings
from pdfshare.core.exceptions import DocumentValidationError
from pdfshare.db.base import utcnow
from pdfshare.models.document import AccessLog, Document
from pdfshare.services.file_service import FileStorage

logger = logging.getLogger(__name__)


class DocumentService:
    """Owner-facing document operations backed by a file storage backend."""

    def __init__(self, db: Session, storage: FileStorage):
        self.db = db
        self.storage = storage

    def upload(self, data: bytes, filename: str, content_type: Optional[str], owner_id: int) -> Document:
        """
        Validate and store an uploaded PDF.

        The bytes are written first; if the metadata row cannot be committed
        the stored file is removed again so no orphan is left behind.

        Raises:
            DocumentValidationError: Empty file, non-PDF content type or oversize file
        """
        if not data:
            raise DocumentValidationError("No file uploaded.")
        if content_type not in settings.ALLOWED_CONTENT_TYPES:
            raise DocumentValidationError("Only PDF files are allowed.")
        if len(data) > settings.MAX_UPLOAD_SIZE:
            raise DocumentValidationError(
                f"File size exceeds maximum allowed size of {settings.MAX_UPLOAD_SIZE} bytes"
            )

        safe_name = os.path.basename(filename or "") or "document.pdf"
        file_path = self.storage.save(data, f"{uuid.uuid4()}_{safe_name}", content_type)

        document = Document(
            filename=safe_name,
            file_path=file_path,
            file_size=len(data),
            content_type=content_type,
            owner_id=owner_id,
            uploaded_at=utcnow(),
        )
        self.db.add(document)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Failed to save metadata for '{safe_name}', removing stored file")
            self.storage.delete(file_path)
            raise
        self.db.refresh(document)

        logger.info(f"Document {document.id} ('{safe_name}', {len(data)} bytes) uploaded by user {owner_id}")
        return document

    def get(self, document_id: int) -> Optional[Document]:
        return self.db.query(Document).filter(Document.id == document_id).first()

    def get_owned(self, document_id: int, owner_id: int) -> Optional[Document]:
        """Return the document only if ``owner_id`` uploaded it."""
        return (
            self.db.query(Document)
            .filter(Document.id == document_id, Document.owner_id == owner_id)
            .first()
        )

    def list_for_owner(self, owner_id: int, skip: int = 0, limit: int = 100) -> List[Document]:
        return (
            self.db.query(Document)
            .filter(Document.owner_id == owner_id)
            .order_by(Document.uploaded_at.desc(), Document.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_file(self, document: Document) -> bytes:
        """Raw bytes of a document. Raises StoredFileNotFoundError when storage lacks them."""
        return self.storage.get(document.file_path)

    def delete(self, document_id: int, owner_id: int) -> bool:
        """
        Delete an owned document.

        The row (and, by cascade, its tokens, comments and access logs) is
        removed in one transaction first. The stored file is deleted
        afterwards on a best-effort basis: a failure there is logged and the
        call still succeeds.
        """
        document = self.get_owned(document_id, owner_id)
        if not document:
            return False

        file_path = document.file_path
        try:
            self.db.delete(document)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Failed to delete document {document_id}")
            raise

        if not self.storage.delete(file_path):
            logger.warning(f"Document {document_id} deleted but file '{file_path}' could not be removed")

        logger.info(f"Document {document_id} deleted by user {owner_id}")
        return True

    def list_access_logs(self, document_id: int, owner_id: int) -> Optional[List[AccessLog]]:
        """Access audit for an owned document, newest first. None if not owned."""
        if not self.get_owned(document_id, owner_id):
            return None
        return (
            self.db.query(AccessLog)
            .filter(AccessLog.document_id == document_id)
            .order_by(AccessLog.accessed_at.desc(), AccessLog.id.desc())
            .all()
        )
