"""
Purchase order routes - build draft POs from SMS text, screenshots, PDFs and
voice recordings, and finalize them into Zoho Books invoices.

SMS text and screenshots are parsed locally. PDFs and voice recordings are
forwarded to the extraction backend.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile

import config
from api.helpers import (
    get_backend_client, get_screenshot_ocr, get_zoho_client,
    is_image_upload, is_pdf_upload, read_upload,
)
from errors import OrderLockedError, ValidationError
from extraction.voice_mapping import purchase_order_from_voice
from purchase_orders.editor import PurchaseOrderEditor
from purchase_orders.models import PurchaseOrder
from purchase_orders.sms_parser import parse_order_text
from utils.logger import get_logger

router = APIRouter()


def finalize_order(order: PurchaseOrder, zoho) -> Dict[str, Any]:
    """Create the Zoho Books invoice for a draft PO and mark it sent."""
    if order.is_sent:
        raise OrderLockedError(order.id)

    editor = PurchaseOrderEditor(order)
    invoice = zoho.create_invoice(order)
    editor.mark_sent()

    invoice_id = str(invoice.get("invoice_id") or "")
    get_logger().log_order_finalized(order.id, invoice_id)
    return {
        "message": "PO finalized successfully",
        "orderId": order.id,
        "status": order.status.value,
        "invoiceId": invoice_id,
        "invoiceNumber": invoice.get("invoice_number") or "",
        "totalAmount": float(order.total_amount),
    }


@router.post(
    "/process-sms",
    summary="Parse an SMS order (text or screenshot) into a draft PO",
)
async def process_sms(
    text: Optional[str] = Form(None),
    screenshot: Optional[UploadFile] = File(None),
    ocr_factory=Depends(get_screenshot_ocr),
):
    """
    Build a draft purchase order from an SMS.

    - **screenshot**: Image of the message (max 10MB); read with OCR and used
      in preference to `text`
    - **text**: The message text, one item per line (`Product: qty` or `qty Product`)

    Returns 400 when neither is provided or no line could be parsed.
    """
    logger = get_logger()

    if screenshot is not None and screenshot.filename:
        if not is_image_upload(screenshot):
            raise ValidationError("Screenshot must be an image file")
        content = await read_upload(screenshot, config.MAX_SCREENSHOT_BYTES)
        logger.info(f"Screenshot received: {screenshot.filename} ({len(content) // 1024}KB)", component="SMS")
        order_text = ocr_factory().extract_text(content)
        source = "screenshot"
    elif text and text.strip():
        order_text = text
        source = "text"
    else:
        raise ValidationError("No text or screenshot provided")

    order = parse_order_text(order_text)
    logger.log_order_parsed(order.id, source, len(order.items), order.total_amount)
    return order.to_dict()


@router.post(
    "/upload-process-pdf",
    summary="Process a single PDF through the extraction backend",
)
async def upload_process_pdf(
    pdf: UploadFile = File(...),
    backend=Depends(get_backend_client),
):
    """Forward one PDF (max 50MB) to the extraction backend and return its result."""
    if not is_pdf_upload(pdf):
        raise ValidationError(f"{pdf.filename} is not a PDF. Please upload PDF files only.")
    content = await read_upload(pdf, config.MAX_PDF_BYTES)
    get_logger().info(f"PDF received: {pdf.filename} ({len(content) // 1024}KB)", component="PDF")
    return backend.process_pdf(pdf.filename or "document.pdf", content)


@router.post(
    "/process-folder-pdfs",
    summary="Process several PDFs through the extraction backend",
)
async def process_folder_pdfs(
    pdfs: List[UploadFile] = File(...),
    backend=Depends(get_backend_client),
):
    """Forward a batch of PDFs (max 50MB each) to the extraction backend."""
    invalid = [upload.filename or "unnamed" for upload in pdfs if not is_pdf_upload(upload)]
    if invalid:
        raise ValidationError(f"Invalid files: {', '.join(invalid)}. Please upload PDF files only.")

    documents = []
    for upload in pdfs:
        content = await read_upload(upload, config.MAX_PDF_BYTES)
        documents.append((upload.filename or "document.pdf", content))

    get_logger().info(f"PDF batch received: {len(documents)} file(s)", component="PDF")
    return backend.process_pdf_batch(documents)


@router.post(
    "/voice",
    summary="Build a draft PO from a voice recording or transcript",
)
async def process_voice(
    audio: Optional[UploadFile] = File(None),
    text: Optional[str] = Form(None),
    backend=Depends(get_backend_client),
):
    """
    Send a recording (any size) or its transcript to the extraction backend
    and map the result onto a draft purchase order.
    """
    logger = get_logger()

    if audio is not None and audio.filename:
        content = await read_upload(audio)
        result = backend.process_voice(
            audio=(audio.filename, content, audio.content_type or "application/octet-stream")
        )
        source = "voice"
    elif text and text.strip():
        result = backend.process_voice(text=text.strip())
        source = "voice-text"
    else:
        raise ValidationError("No audio or text provided")

    order = purchase_order_from_voice(result)
    logger.log_order_parsed(order.id, source, len(order.items), order.total_amount)
    return order.to_dict()


@router.post(
    "/finalize-po",
    summary="Send a purchase order to Zoho Books",
)
async def finalize_po(
    payload: Dict[str, Any] = Body(...),
    zoho=Depends(get_zoho_client),
):
    """
    Finalize a purchase order.

    Totals are recomputed from the line items, ignoring any totals sent by
    the client. The order must carry a Zoho customer (`customerDetails.contact_id`).
    """
    editor = PurchaseOrderEditor.from_payload(payload)
    return finalize_order(editor.order, zoho)
