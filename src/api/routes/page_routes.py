"""
Dashboard page routes - JSON descriptors for the dashboard screens.
Every path here sits behind RouteProtectionMiddleware.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query, Request

from api.navigation import (
    AI_READER_OPTIONS,
    DASHBOARD_MENU,
    MANUAL_BOOKING_OPTIONS,
    PAGE_LABELS,
    build_breadcrumbs,
    upload_limits,
)
from utils.text import to_title_case

router = APIRouter()

APP_TITLE = "Classic Wines Florida - Invoice Creator"
DEFAULT_HEADER = "Customer Dashboard"

# page slug -> (endpoint the page submits to, upload field, accepted files)
READER_PAGES = {
    "po-sms-text": ("/api/process-sms", "text", "text/*"),
    "po-sms-screenshot": ("/api/process-sms", "screenshot", "image/*"),
    "upload-pdf": ("/api/upload-process-pdf", "pdf", ".pdf,application/pdf"),
    "upload-voice": ("/api/voice", "audio", "audio/*"),
}


def header_title(user_name: Optional[str]) -> str:
    """Page header: "<Name> Dashboard" for a named user, else the generic title."""
    if user_name and user_name.strip():
        return f"{to_title_case(user_name.strip())} Dashboard"
    return DEFAULT_HEADER


def _page(request: Request, title: str, **extra: Any) -> Dict[str, Any]:
    return {
        "title": title,
        "path": request.url.path,
        "breadcrumbs": build_breadcrumbs(request.url.path),
        **extra,
    }


@router.get("/dashboard", summary="Main dashboard menu")
async def dashboard_page(request: Request):
    return _page(request, "Classic Wines Dashboard", menu=DASHBOARD_MENU)


@router.get("/order-manually", summary="Manual booking links")
async def order_manually_page(request: Request):
    return _page(request, PAGE_LABELS["order-manually"], options=MANUAL_BOOKING_OPTIONS)


@router.get("/ai-page", summary="AI reader options")
async def ai_page(request: Request):
    return _page(request, PAGE_LABELS["ai-page"], readers=AI_READER_OPTIONS)


def _reader_page(slug: str, request: Request, user_name: Optional[str]) -> Dict[str, Any]:
    endpoint, field, accepted = READER_PAGES[slug]
    return _page(
        request,
        PAGE_LABELS[slug],
        header=header_title(user_name),
        heading=APP_TITLE,
        endpoint=endpoint,
        uploadField=field,
        acceptedFiles=accepted,
        uploadLimits=upload_limits(),
    )


@router.get("/po-sms-text", summary="SMS text reader")
async def sms_text_page(request: Request, user_name: Optional[str] = Query(None)):
    return _reader_page("po-sms-text", request, user_name)


@router.get("/po-sms-screenshot", summary="SMS screenshot reader")
async def sms_screenshot_page(request: Request, user_name: Optional[str] = Query(None)):
    return _reader_page("po-sms-screenshot", request, user_name)


@router.get("/upload-pdf", summary="PDF reader")
async def upload_pdf_page(request: Request, user_name: Optional[str] = Query(None)):
    return _reader_page("upload-pdf", request, user_name)


@router.get("/upload-voice", summary="Voice reader")
async def upload_voice_page(request: Request, user_name: Optional[str] = Query(None)):
    return _reader_page("upload-voice", request, user_name)
