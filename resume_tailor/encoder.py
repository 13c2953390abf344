"""
Validation and base64 encoding of uploaded resume documents.
"""

import base64
import binascii
import logging
from pathlib import PurePath
from typing import Optional

from .config import DEFAULT_MAX_UPLOAD_BYTES
from .errors import InvalidFile
from .models import EncodedDocument, UploadedDocument

logger = logging.getLogger(__name__)

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC = "application/msword"
TEXT = "text/plain"

ALLOWED_MIME_TYPES = frozenset({PDF, DOCX, DOC, TEXT})

EXTENSION_MIME_TYPES = {
    ".pdf": PDF,
    ".docx": DOCX,
    ".doc": DOC,
    ".txt": TEXT,
}

# Declared types that carry no information and fall back to the extension.
GENERIC_MIME_TYPES = frozenset({"", "application/octet-stream"})


def resolve_mime_type(content_type: Optional[str], filename: Optional[str]) -> str:
    """
    Work out the effective MIME type of an upload.

    Parameters such as ``; charset=utf-8`` are dropped. When the browser sent
    no useful type, the filename extension decides.
    """
    declared = (content_type or "").split(";", 1)[0].strip().lower()
    if declared not in GENERIC_MIME_TYPES:
        return declared

    if filename:
        return EXTENSION_MIME_TYPES.get(PurePath(filename).suffix.lower(), declared)
    return declared


def validate_document(
    document: UploadedDocument, max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
) -> str:
    """
    Check an upload against the type allow-list and size limit.

    Returns:
        The resolved MIME type

    Raises:
        InvalidFile: If the file is empty, too large, or of a disallowed type
    """
    mime_type = resolve_mime_type(document.content_type, document.filename)

    if mime_type not in ALLOWED_MIME_TYPES:
        raise InvalidFile(
            "Unsupported file type. Please upload a PDF, DOCX, DOC or TXT file.",
            details={"content_type": mime_type or None, "filename": document.filename},
        )

    if document.size == 0:
        raise InvalidFile("The uploaded file is empty.")

    if document.size > max_bytes:
        raise InvalidFile(
            f"File is too large. Maximum size is {max_bytes // (1024 * 1024)} MB.",
            details={"size": document.size, "max_size": max_bytes},
        )

    return mime_type


def encode_document(
    document: UploadedDocument, max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
) -> EncodedDocument:
    """
    Validate an upload and base64-encode it for inline submission.

    Args:
        document: The raw upload
        max_bytes: Upper bound on the file size

    Returns:
        EncodedDocument holding the base64 text and resolved MIME type
    """
    mime_type = validate_document(document, max_bytes)
    data = base64.b64encode(document.content).decode("ascii")

    logger.debug(f"Encoded {document.size} bytes of {mime_type}")
    return EncodedDocument(data=data, mime_type=mime_type, size=document.size)


def decode_document(data: str) -> bytes:
    """Inverse of :func:`encode_document`'s payload encoding."""
    try:
        return base64.b64decode(data, validate=True)
    except binascii.Error as e:
        raise InvalidFile(f"Invalid base64 payload: {e}") from e
