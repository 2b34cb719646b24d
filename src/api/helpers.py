"""
API helper functions shared across route modules.
Provides the outbound service dependencies (overridable in tests through
``app.dependency_overrides``) and upload validation.
"""
from typing import Iterable, Optional

from fastapi import UploadFile

import config
from errors import FileTooLargeError, ValidationError


def get_zoho_client():
    """Return a Zoho Books client sharing the process-wide token cache."""
    from zoho.books_client import ZohoBooksClient
    return ZohoBooksClient()


def get_backend_client():
    """Return a client for the PDF / voice extraction backend."""
    from extraction.backend_client import ExtractionBackendClient
    return ExtractionBackendClient()


def get_screenshot_ocr():
    """
    Return a factory for the screenshot OCR engine.

    The engine is built lazily so text-only requests work without a
    configured GOOGLE_API_KEY.
    """
    from extraction.screenshot_ocr import ScreenshotOcr
    return ScreenshotOcr


def _extension(filename: Optional[str]) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def is_image_upload(upload: UploadFile, allowed_formats: Optional[Iterable[str]] = None) -> bool:
    """True when the upload declares an image content type or has an allowed image extension."""
    allowed = [fmt.strip().lower() for fmt in (allowed_formats or config.ALLOWED_IMAGE_FORMATS)]
    content_type = (upload.content_type or "").lower()
    if content_type.startswith("image/"):
        return True
    return _extension(upload.filename) in allowed


def is_pdf_upload(upload: UploadFile) -> bool:
    content_type = (upload.content_type or "").lower()
    return content_type == "application/pdf" or _extension(upload.filename) == "pdf"


async def read_upload(upload: UploadFile, max_bytes: Optional[int] = None) -> bytes:
    """
    Read an uploaded file, enforcing ``max_bytes`` when given.

    At most ``max_bytes + 1`` bytes are read, so an oversized upload is
    rejected without buffering it completely.
    """
    if max_bytes is None:
        content = await upload.read()
    else:
        content = await upload.read(max_bytes + 1)
        if len(content) > max_bytes:
            raise FileTooLargeError(upload.filename or "", max_bytes)
    if not content:
        raise ValidationError(f"{upload.filename or 'Uploaded file'} is empty")
    return content
