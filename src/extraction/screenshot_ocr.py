"""
SMS Screenshot OCR
==================

Reads the text of an SMS / chat screenshot with Gemini Vision and returns it
in the line format the SMS parser understands.
"""
from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError
import google.generativeai as genai

import config
from errors import UpstreamError, ValidationError
from utils.logger import get_logger


SMS_OCR_PROMPT = """
You are reading a SCREENSHOT of an SMS or chat message that contains a liquor / wine order.

OUTPUT RULES:
1. If the message names the customer or business (e.g. "Total Wines", "ABC Liquor"),
   output that name ALONE on the first line.
2. Then output one line per ordered product in exactly this format:
   <product name>: <quantity>
3. The quantity is a whole number. Keep the bottle size as part of the product name
   (e.g. "Royal Stage 1L", "Old Monk 500ml"). Sizes are NOT quantities.
4. Ignore timestamps, phone numbers, greetings and message metadata.
5. Output plain text only, no bullets, numbering or commentary.

EXAMPLE OUTPUT:
Total Wines
Royal Stage 1L: 5
Old Monk 500ml: 10
"""


class ScreenshotOcr:
    """Gemini Vision OCR for SMS screenshots."""

    def __init__(self, api_key: str = None, model_name: str = None) -> None:
        api_key = api_key or config.GOOGLE_API_KEY
        if not api_key:
            raise UpstreamError("OCR is not configured (GOOGLE_API_KEY is not set)", service="OCR")
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name or config.GEMINI_OCR_MODEL)

    def extract_text(self, image_bytes: bytes) -> str:
        """Run OCR on one screenshot and return the order text."""
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ValidationError("Screenshot is not a readable image") from exc

        logger = get_logger()
        logger.info(f"OCR call for screenshot ({len(image_bytes) // 1024}KB)", component="OCR")
        try:
            response = self.model.generate_content([SMS_OCR_PROMPT, image])
        except Exception as exc:
            logger.error(f"Screenshot OCR failed: {exc}", component="OCR")
            raise UpstreamError("Failed to read text from the screenshot", service="OCR") from exc
        return (response.text or "").strip()
