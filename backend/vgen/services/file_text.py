# vgen/services/file_text.py
"""
Plain text extraction for uploaded resumes (txt, pdf, docx).
"""
import io
import os
import logging

import PyPDF2
from docx import Document

from vgen.core.errors import FileProcessingError, FileTooLargeError, UnsupportedFileTypeError

logger = logging.getLogger("uvicorn.error")

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
INVALID_TYPE_MESSAGE = "Invalid file type. Only PDF, TXT, DOC, and DOCX files are allowed."

MIME_PDF = "application/pdf"
MIME_TXT = "text/plain"
MIME_DOC = "application/msword"
MIME_DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_EXTENSION_KINDS = {".pdf": "pdf", ".txt": "txt", ".docx": "docx", ".doc": "doc"}
_MIME_KINDS = {MIME_PDF: "pdf", MIME_TXT: "txt", MIME_DOCX: "docx", MIME_DOC: "doc"}
SUPPORTED_KINDS = ["pdf", "txt", "docx"]


def detect_kind(filename: str | None, content_type: str | None) -> str:
    """
    Resolve the upload kind from its MIME type, falling back to the extension.

    Raises:
        UnsupportedFileTypeError: Neither identifies an accepted type
    """
    kind = _MIME_KINDS.get((content_type or "").split(";")[0].strip().lower())
    if kind is None:
        ext = os.path.splitext(filename or "")[1].lower()
        kind = _EXTENSION_KINDS.get(ext)
    if kind is None:
        raise UnsupportedFileTypeError(content_type or filename or "unknown", SUPPORTED_KINDS)
    return kind


def pdf_text(data: bytes) -> str:
    reader = PyPDF2.PdfReader(io.BytesIO(data))
    return "\n".join((page.extract_text() or "") for page in reader.pages)


def docx_text(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in doc.paragraphs)


async def read_limited(upload, limit: int = MAX_UPLOAD_BYTES) -> bytes:
    """
    Read an UploadFile without pulling more than `limit` + 1 bytes into memory.

    Raises:
        FileTooLargeError: Declared or actual size exceeds `limit`
    """
    if upload.size is not None and upload.size > limit:
        raise FileTooLargeError(upload.size, limit)
    data = await upload.read(limit + 1)
    if len(data) > limit:
        raise FileTooLargeError(len(data), limit)
    return data


def extract_text(data: bytes, filename: str | None = None, content_type: str | None = None) -> str:
    """
    Turn an uploaded resume into plain text.

    Args:
        data: Raw upload bytes
        filename: Original file name (used when the MIME type is generic)
        content_type: MIME type reported by the client

    Returns:
        Extracted text, stripped

    Raises:
        FileTooLargeError: Upload exceeds MAX_UPLOAD_BYTES
        UnsupportedFileTypeError: Not txt, pdf or docx (legacy .doc included)
        FileProcessingError: The file could not be parsed or holds no text
    """
    if len(data) > MAX_UPLOAD_BYTES:
        raise FileTooLargeError(len(data), MAX_UPLOAD_BYTES)

    kind = detect_kind(filename, content_type)
    if kind == "doc":
        raise UnsupportedFileTypeError("application/msword", SUPPORTED_KINDS)

    try:
        if kind == "pdf":
            text = pdf_text(data)
        elif kind == "docx":
            text = docx_text(data)
        else:
            text = data.decode("utf-8", errors="replace")
    except Exception as e:
        logger.warning("[Upload] Failed to read %s (%s): %s", filename, kind, e)
        raise FileProcessingError(f"Could not read {kind} file") from e

    text = text.strip()
    if not text:
        raise FileProcessingError("No text could be extracted from the file")
    return text
