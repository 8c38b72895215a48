"""
Resume document text extraction.
"""
import io
import logging
import mimetypes
import os
from typing import Optional

import docx2txt
import pdfplumber
from django.conf import settings

from analysis.exceptions import ExtractionFailed, InvalidRequest, UnsupportedFormat

logger = logging.getLogger(__name__)


PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
# Legacy .doc uploads are accepted but docx2txt only reads OOXML, so they
# end in ExtractionFailed rather than UnsupportedFormat
DOC_MIME_TYPE = "application/msword"

SUPPORTED_MIME_TYPES = (PDF_MIME_TYPE, DOCX_MIME_TYPE, DOC_MIME_TYPE)

# Content types browsers send when they don't know better
GENERIC_MIME_TYPES = ("", "application/octet-stream", "binary/octet-stream")

EXTENSION_MIME_TYPES = {
    ".pdf": PDF_MIME_TYPE,
    ".docx": DOCX_MIME_TYPE,
    ".doc": DOC_MIME_TYPE,
}


def min_resume_chars() -> int:
    return int(getattr(settings, "RESUME_MIN_CHARS", 100))


def resolve_mime_type(content_type: Optional[str], filename: Optional[str] = None) -> str:
    """
    Return the effective MIME type for an upload.

    Falls back to the filename extension when the client sent a generic
    content type.
    """
    mime_type = (content_type or "").split(";")[0].strip().lower()
    if mime_type not in GENERIC_MIME_TYPES:
        return mime_type

    extension = os.path.splitext(filename or "")[1].lower()
    if extension in EXTENSION_MIME_TYPES:
        return EXTENSION_MIME_TYPES[extension]
    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or mime_type


def _pdf_text(file_bytes: bytes) -> str:
    with pdfplumber.open(io.BytesIO(file_bytes)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def _word_text(file_bytes: bytes) -> str:
    return docx2txt.process(io.BytesIO(file_bytes)) or ""


def extract_text(file_bytes: bytes, mime_type: str) -> str:
    """
    Extract plain text from a PDF or Word document.

    Raises:
        UnsupportedFormat: the MIME type is not PDF or Word.
        ExtractionFailed: the parser failed or produced too little text.
    """
    if mime_type not in SUPPORTED_MIME_TYPES:
        raise UnsupportedFormat()

    try:
        if mime_type == PDF_MIME_TYPE:
            text = _pdf_text(file_bytes)
        else:
            text = _word_text(file_bytes)
    except Exception as exc:
        # pdfminer and zipfile each raise their own hierarchies
        logger.warning("Could not parse %s document: %s", mime_type, exc)
        raise ExtractionFailed() from exc

    text = text.strip()
    if len(text) < min_resume_chars():
        logger.warning("Extracted only %d characters from %s document", len(text), mime_type)
        raise ExtractionFailed()

    logger.info("Extracted %d characters from %s document", len(text), mime_type)
    return text


def read_upload(uploaded_file) -> str:
    """
    Extract text from a Django ``UploadedFile``.

    Raises:
        InvalidRequest: the file exceeds RESUME_MAX_UPLOAD_BYTES.
    """
    max_bytes = int(getattr(settings, "RESUME_MAX_UPLOAD_BYTES", 5 * 1024 * 1024))
    if uploaded_file.size > max_bytes:
        raise InvalidRequest(f"Resume files must be smaller than {max_bytes // (1024 * 1024)} MB.")

    mime_type = resolve_mime_type(uploaded_file.content_type, uploaded_file.name)
    return extract_text(uploaded_file.read(), mime_type)
