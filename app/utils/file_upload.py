"""
File Upload Utility - validate resume uploads before storing them.

Supported formats:
- PDF (.pdf)
- Word (.doc, .docx)

Max file size: 5MB
"""

from typing import Tuple
from fastapi import UploadFile

from app.core.errors import PayloadTooLarge, ValidationError


MAX_FILE_SIZE_MB = 5
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
ALLOWED_EXTENSIONS = {'.pdf', '.doc', '.docx'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def read_resume_file(file: UploadFile) -> Tuple[bytes, str]:
    """
    Read and validate an uploaded resume.

    Args:
        file: FastAPI UploadFile

    Returns:
        Tuple of (file_bytes, original_filename)

    Raises:
        ValidationError on missing/unsupported/empty files
        PayloadTooLarge when the file is over MAX_FILE_SIZE_MB
    """
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(f"Unsupported file type '{ext}'. Allowed: PDF, DOC, DOCX")

    # Read one byte past the limit so oversize files are detected without
    # loading all of them
    content = file.file.read(MAX_FILE_SIZE_BYTES + 1)

    if len(content) > MAX_FILE_SIZE_BYTES:
        raise PayloadTooLarge(f"File too large. Maximum size: {MAX_FILE_SIZE_MB}MB")
    if not content:
        raise ValidationError("Uploaded file is empty")

    return content, file.filename
