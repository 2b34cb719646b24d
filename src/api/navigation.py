"""
Dashboard navigation data: menu cards, manual booking links, AI reader
options and breadcrumb generation for the /pages/* descriptors.
"""
from typing import Any, Dict, List

import config

ZOHO_CREATOR_BASE = "https://creatorapp.zohopublic.com/gilberto_classicwines/customer-onboarding"

DASHBOARD_MENU: List[Dict[str, str]] = [
    {
        "title": "Go to Zoho Books",
        "description": "Access your Zoho Books accounting platform",
        "url": "https://accounts.zoho.com/signin?servicename=ZohoBooks&signupurl=https://www.zoho.com%2fin/books/signup/",
        "type": "external",
    },
    {
        "title": "Go to Quick Books",
        "description": "Navigate to your QuickBooks dashboard",
        "url": (
            "https://accounts.intuit.com/app/sign-in?app_group=QBO"
            "&asset_alias=Intuit.accounting.core.qbowebapp&locale=en-ROW&app_environment=prod"
        ),
        "type": "external",
    },
    {
        "title": "Book an Order Manually",
        "description": "Create and manage orders manually",
        "url": "/pages/order-manually",
        "type": "internal",
    },
    {
        "title": "Check Zoho Reports",
        "description": "View detailed analytics and reports",
        "url": "https://reports.zoho.com",
        "type": "external",
    },
    {
        "title": "Let AI Book My Order",
        "description": "Use AI assistance to automate order booking",
        "url": "/pages/ai-page",
        "type": "internal",
    },
]

# (id, title, description, type, path under the Zoho Creator app)
_MANUAL_BOOKING = [
    ("customer-form", "Customer Form", "Add new customer information", "form",
     "form-perma/New_Customer/qqv36f0qOkwQNkDEA7d1DUjP4B8MTQjsBODXH5Vq2FB2GwN32OPGP6vJyuay0CHAsy35WFEN3B1Q5DsB39dJJ5PfGAXp3e660dU5"),
    ("customer-list", "Customer List", "View and manage existing customers", "list",
     "report-perma/All_New_Customer/G0H3YXmk0wMnRD8Jg1eVrQybjtHNXUCpYQVEjkuxe95OtXnyqCAtQr8TYX2OWVErHnTXffbW9eWwHr1hSwMQMMrabrCKZh0Rt0Ed"),
    ("vendor-form", "Vendor Form", "Add new vendor information", "form",
     "form-perma/Vendor/6dUAJQuqwA9Js4ym5YGGsjYDdgnzazZre1pa6gFMnqRXQ7Okb3DVX30mMuEJtrP85dQE4twyq3waNW9qDnb0aEYPnWP4mk5Pjmaa"),
    ("vendor-list", "Vendor List", "View and manage existing vendors", "list",
     "report-perma/All_Vendors/nYKayS53a9nCR0pEfhZXDeOZmtpS84FusYQSvJk4UPEnmCgWExs8JkvwqgYg8RRmdrway3qBhFMvJRCWxtMXeBxKuTFPTEJmqrPH"),
    ("item-form", "Item Form", "Add new products or services", "form",
     "form-perma/Item/byYgX6uGZCSgnFuaU3Zh6Dd1JyrVE675XwsC3EzubA6u3AgqwV4jrpWFF5wHwg9MQPWRwt2OZHsGMpwvw5kzTybgB7RpOyaWhOjS"),
    ("item-lists", "Item Lists", "View and manage inventory items", "list",
     "report-perma/Items_List/9Sbu3ZParrmbXEEVUM1jQmDeWtGnHseq3dzpu6GvQGuhNMwrySx5h5HmsqmJGW4U4wwHNgJ456PgGX2SuBy3QT03v9Ta4XtwsqWD"),
    ("invoice-form", "Invoice Form", "Create new invoices", "form",
     "form-perma/Invoice/j9NyBVMbzAGyyWCbAG6NG00JGBNAJ0PXu9AsDDzWCuVez6ysJrCgphNXDvCJKaayhdhPeyH3XdCOKntqMeJgBAwSFBUahEBWqBnq"),
    ("invoice-lists", "Invoice Lists", "View and manage all invoices", "list",
     "report-perma/All_Invoices/5qQRYzHfR6f4vDGARZTgFj1pb3pN73GuHOaEt2jCAq24EtO9PsZv1rTe0jMmUkYVs3krYGKKHdpYzFzFmmfwm0WaCqXDyssuwHez"),
]

MANUAL_BOOKING_OPTIONS: List[Dict[str, str]] = [
    {
        "id": option_id,
        "title": title,
        "description": description,
        "type": kind,
        "action": "Create New" if kind == "form" else "View List",
        "url": f"{ZOHO_CREATOR_BASE}/{path}",
    }
    for option_id, title, description, kind, path in _MANUAL_BOOKING
]

AI_READER_OPTIONS: List[Dict[str, str]] = [
    {
        "id": "text",
        "title": "Text Message Reader",
        "description": "Enter invoice details here...",
        "acceptedFiles": "text/*",
        "route": "/pages/po-sms-text",
    },
    {
        "id": "screenshot",
        "title": "Screenshot Reader",
        "description": "Upload screenshot of invoice or proof",
        "acceptedFiles": "image/*",
        "route": "/pages/po-sms-screenshot",
    },
    {
        "id": "pdf",
        "title": "PDF Reader",
        "description": "Upload PDF invoice or attachment",
        "acceptedFiles": ".pdf",
        "route": "/pages/upload-pdf",
    },
    {
        "id": "voice",
        "title": "Voice Recording Reader",
        "description": "Record or upload voice notes for invoice detail",
        "acceptedFiles": "audio/*",
        "route": "/pages/upload-voice",
    },
]

PAGE_LABELS: Dict[str, str] = {
    "ai-page": "AI Tools",
    "order-manually": "Manual Booking",
    "po-sms-text": "SMS Text Processing",
    "po-sms-screenshot": "SMS Screenshot Processing",
    "upload-pdf": "PDF Upload",
    "upload-voice": "Voice Upload",
}

# Reader pages sit under "AI Tools" in the breadcrumb trail
AI_TOOL_PAGES = ("po-sms-text", "po-sms-screenshot", "upload-pdf", "upload-voice")


def build_breadcrumbs(path: str) -> List[Dict[str, Any]]:
    """Breadcrumb trail for a /pages/* path; the last labelled segment is active."""
    segments = [segment for segment in path.split("/") if segment]
    crumbs: List[Dict[str, Any]] = [{"label": "Home", "href": "/pages/dashboard", "isActive": False}]

    if any(segment in AI_TOOL_PAGES for segment in segments):
        crumbs.append({"label": "AI Tools", "href": "/pages/ai-page", "isActive": False})

    current = ""
    for index, segment in enumerate(segments):
        current += f"/{segment}"
        label = PAGE_LABELS.get(segment)
        if label:
            crumbs.append({"label": label, "href": current, "isActive": index == len(segments) - 1})
    return crumbs


def upload_limits() -> Dict[str, Any]:
    return {
        "screenshotMaxBytes": config.MAX_SCREENSHOT_BYTES,
        "pdfMaxBytes": config.MAX_PDF_BYTES,
        "audioMaxBytes": None,
    }
