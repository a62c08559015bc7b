"""
Upload helpers.
"""
from fastapi import UploadFile

from pdfshare.core.exceptions import DocumentValidationError


def read_upload(file: UploadFile, max_size: int) -> bytes:
    """
    Read an uploaded file, rejecting it before loading when it is too large.

    Args:
        file: Uploaded file
        max_size: Largest accepted size in bytes

    Returns:
        File contents

    Raises:
        DocumentValidationError: If the file exceeds ``max_size``
    """
    message = f"File size exceeds maximum allowed size of {max_size} bytes"

    file.file.seek(0, 2)
    file_size = file.file.tell()
    file.file.seek(0)
    if file_size > max_size:
        raise DocumentValidationError(message)

    # Never pull more than one byte past the limit into memory
    data = file.file.read(max_size + 1)
    if len(data) > max_size:
        raise DocumentValidationError(message)
    return data
