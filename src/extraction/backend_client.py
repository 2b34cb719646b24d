"""
Extraction Backend Client
Forwards PDF and voice uploads to the extraction backend, which runs document
parsing, transcription and Zoho matching and answers with JSON.

Calls use a fixed timeout and are never retried. Every failure is raised as
an UpstreamError carrying the backend's own message when it sent one.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import requests

import config
from errors import UpstreamError
from utils.logger import get_logger

SERVICE = "Backend"

# (filename, content, content_type)
UploadFile = Tuple[str, bytes, str]


class ExtractionBackendClient:
    """HTTP client for the PDF / voice extraction backend."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None) -> None:
        self.base_url = (base_url if base_url is not None else config.API_BASE_URL).rstrip("/")
        self.timeout = timeout or config.HTTP_TIMEOUT_SECONDS

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def process_pdf(self, filename: str, content: bytes) -> Dict[str, Any]:
        """Process a single PDF document."""
        files = [("pdf", (filename, content, "application/pdf"))]
        return self._post("/api/upload-process-pdf", files=files, failure="Failed to process PDF")

    def process_pdf_batch(self, pdfs: List[Tuple[str, bytes]]) -> Dict[str, Any]:
        """Process several PDF documents in one request."""
        files = [("pdfs", (name, content, "application/pdf")) for name, content in pdfs]
        return self._post("/api/process-folder-pdfs", files=files, failure="Failed to process PDFs")

    def process_voice(
        self,
        audio: Optional[UploadFile] = None,
        text: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Turn a voice recording (or its typed transcript) into a purchase order."""
        if audio is not None:
            return self._post("/api/voice", files=[("audio", audio)], failure="Failed to process voice data")
        return self._post("/api/voice", data={"text": text or ""}, failure="Failed to process voice data")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _post(
        self,
        path: str,
        files: Optional[List[Tuple[str, UploadFile]]] = None,
        data: Optional[Dict[str, str]] = None,
        failure: str = "Backend request failed",
    ) -> Dict[str, Any]:
        if not self.base_url:
            raise UpstreamError("Extraction backend is not configured (API_BASE_URL)", service=SERVICE)

        url = f"{self.base_url}{path}"
        logger = get_logger()
        try:
            resp = requests.post(url, files=files, data=data, timeout=self.timeout)
        except requests.Timeout as exc:
            logger.error(f"{failure}: timed out after {self.timeout}s", component=SERVICE)
            raise UpstreamError(f"{failure}: backend timed out", service=SERVICE) from exc
        except requests.RequestException as exc:
            logger.error(f"{failure}: {exc}", component=SERVICE)
            raise UpstreamError(f"{failure}: backend unreachable", service=SERVICE) from exc

        logger.log_upstream_call(SERVICE, "POST", url, resp.status_code)
        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.status_code >= 400:
            message = None
            if isinstance(body, dict):
                message = body.get("message") or body.get("error") or body.get("detail")
            message = message or (resp.text or "").strip()[:500] or failure
            raise UpstreamError(f"{failure}: {resp.status_code} - {message}", service=SERVICE,
                                status_code_upstream=resp.status_code)

        if not isinstance(body, dict):
            raise UpstreamError(f"{failure}: backend returned invalid JSON", service=SERVICE,
                                status_code_upstream=resp.status_code)
        return body
