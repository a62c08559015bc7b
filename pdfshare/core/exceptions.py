"""
Typed service-layer errors.

Services raise these; routers and the app-level handler in ``main.py`` turn
them into HTTP responses using ``status_code`` and ``error_code``.
"""
from typing import Optional


class PdfShareError(Exception):
    """Base exception for service errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code


class DocumentValidationError(PdfShareError):
    """Rejected upload (empty file, wrong content type, too large)."""

    status_code = 400
    error_code = "DOCUMENT_VALIDATION_ERROR"


class DocumentNotFoundError(PdfShareError):
    """Document missing, or not owned by the caller. The two are never distinguished."""

    status_code = 404
    error_code = "DOCUMENT_NOT_FOUND"

    def __init__(self, message: str = "Document not found"):
        super().__init__(message)


class StoredFileNotFoundError(PdfShareError):
    """Document row exists but the storage backend has no bytes for it."""

    status_code = 404
    error_code = "FILE_NOT_FOUND"

    def __init__(self, path: str):
        super().__init__("File not found")
        self.path = path


class CommentValidationError(PdfShareError):
    """Empty content or non-positive page number."""

    status_code = 400
    error_code = "COMMENT_VALIDATION_ERROR"


class ParentNotFoundError(PdfShareError):
    status_code = 400
    error_code = "PARENT_NOT_FOUND"

    def __init__(self, message: str = "Parent comment not found."):
        super().__init__(message)


class CrossDocumentReplyError(PdfShareError):
    status_code = 400
    error_code = "CROSS_DOCUMENT_REPLY"

    def __init__(self, message: str = "Parent comment does not belong to the specified document."):
        super().__init__(message)


class NestedReplyNotAllowedError(PdfShareError):
    status_code = 400
    error_code = "NESTED_REPLY_NOT_ALLOWED"

    def __init__(
        self,
        message: str = "Nested replies are not allowed. You can only reply to top-level comments.",
    ):
        super().__init__(message)


class InvalidShareTokenError(PdfShareError):
    """Signed share link failed signature, issuer, audience or claim checks."""

    status_code = 400
    error_code = "INVALID_SHARE_TOKEN"


class ShareTokenExpiredError(InvalidShareTokenError):
    error_code = "SHARE_TOKEN_EXPIRED"

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)
