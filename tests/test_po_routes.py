"""
Endpoint tests for the purchase order API.
Zoho Books, the extraction backend and OCR are replaced through
``app.dependency_overrides``.
"""
import sys
import unittest
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

# Ensure src/ is on path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))

from fastapi.testclient import TestClient  # noqa: E402

import config  # noqa: E402
from api.auth.dependencies import get_current_user  # noqa: E402
from api.helpers import get_backend_client, get_screenshot_ocr, get_zoho_client  # noqa: E402
from api.main import create_app  # noqa: E402
from api.routes.purchase_order_routes import clear_drafts  # noqa: E402
from errors import UpstreamError  # noqa: E402
from purchase_orders.models import CatalogItem, Customer  # noqa: E402
from zoho.books_client import build_invoice_payload  # noqa: E402

SMS_TEXT = "Total Wines\nRoyal Stage 1L: 5\nOld Monk 500ml: 10"

VOICE_RESPONSE = {
    "purchase_order": {
        "po_number": "PO-VOICE-1",
        "items": [{"item_description": "Royal Stage 1L", "quantity": 3, "unit_price": 25.99}],
        "zoho_customer_match": {"contact_name": "ABC Liquors", "contact_id": "c-2"},
    }
}


class FakeZoho:
    def __init__(self):
        self.invoiced = []

    def list_customers(self, search=None):
        customers = [
            Customer(contact_id="c-1", contact_name="Total Wines", email="buy@total.test"),
            Customer(contact_id="c-2", contact_name="ABC Liquors"),
        ]
        if search:
            customers = [c for c in customers if search.lower() in c.contact_name.lower()]
        return customers

    def list_items(self, search=None):
        return [CatalogItem(item_id="i-1", name="Royal Stage 1L", rate=Decimal("24.50"))]

    def create_invoice(self, order):
        build_invoice_payload(order)
        self.invoiced.append(order)
        return {"invoice_id": "inv-1", "invoice_number": "INV-0001"}


class FakeBackend:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name, args))
        if self.fail:
            raise UpstreamError("Failed to process PDF: backend unreachable", service="Backend")

    def process_pdf(self, filename, content):
        self._record("pdf", filename, content)
        return {"success": True, "filename": filename}

    def process_pdf_batch(self, pdfs):
        self._record("batch", pdfs)
        return {"success": True, "count": len(pdfs)}

    def process_voice(self, audio=None, text=None):
        self._record("voice", audio, text)
        return VOICE_RESPONSE


class FakeOcr:
    def extract_text(self, image_bytes):
        return "Royal Stage 1L: 5\nOld Monk 500ml: 10"


class RouteTestCase(unittest.TestCase):

    def setUp(self):
        self.zoho = FakeZoho()
        self.backend = FakeBackend()
        self.app = create_app()
        self.app.dependency_overrides[get_zoho_client] = lambda: self.zoho
        self.app.dependency_overrides[get_backend_client] = lambda: self.backend
        self.app.dependency_overrides[get_screenshot_ocr] = lambda: FakeOcr
        self.client = TestClient(self.app)

    def tearDown(self):
        self.app.dependency_overrides.clear()


class TestProcessSms(RouteTestCase):

    def test_text(self):
        res = self.client.post("/api/process-sms", data={"text": SMS_TEXT})
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertEqual(data["customerName"], "Total Wines")
        self.assertEqual(len(data["items"]), 2)
        self.assertEqual(data["totalAmount"], 289.85)
        self.assertEqual(data["status"], "draft")

    def test_screenshot(self):
        res = self.client.post(
            "/api/process-sms",
            files={"screenshot": ("sms.png", b"\x89PNG fake", "image/png")},
        )
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertEqual(data["customerName"], "Unknown Customer")
        self.assertEqual(data["totalAmount"], 289.85)

    def test_screenshot_must_be_image(self):
        res = self.client.post(
            "/api/process-sms",
            files={"screenshot": ("order.txt", b"Royal Stage: 1", "text/plain")},
        )
        self.assertEqual(res.status_code, 400)

    def test_screenshot_size_limit(self):
        with patch.object(config, "MAX_SCREENSHOT_BYTES", 16):
            res = self.client.post(
                "/api/process-sms",
                files={"screenshot": ("sms.png", b"x" * 17, "image/png")},
            )
        self.assertEqual(res.status_code, 413)

    def test_blank_text(self):
        res = self.client.post("/api/process-sms", data={"text": "   \n  "})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "No text or screenshot provided")

    def test_nothing_provided(self):
        res = self.client.post("/api/process-sms")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "No text or screenshot provided")

    def test_quantity_out_of_range(self):
        res = self.client.post("/api/process-sms", data={"text": "Royal Stage 1L: 99999999999999999999999999999"})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "Quantity or price out of range")
        self.assertEqual(res.json()["category"], "validation")

    def test_no_items(self):
        res = self.client.post("/api/process-sms", data={"text": "Total Wines\ncall me"})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "No valid items found in the text")


class TestPdfAndVoice(RouteTestCase):

    def test_single_pdf(self):
        res = self.client.post(
            "/api/upload-process-pdf",
            files={"pdf": ("order.pdf", b"%PDF-1.4 data", "application/pdf")},
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["filename"], "order.pdf")
        self.assertEqual(self.backend.calls[0][0], "pdf")

    def test_pdf_type_checked(self):
        res = self.client.post(
            "/api/upload-process-pdf",
            files={"pdf": ("photo.jpg", b"jpeg", "image/jpeg")},
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(self.backend.calls, [])

    def test_pdf_size_limit(self):
        with patch.object(config, "MAX_PDF_BYTES", 8):
            res = self.client.post(
                "/api/upload-process-pdf",
                files={"pdf": ("order.pdf", b"%PDF-1.4 too big", "application/pdf")},
            )
        self.assertEqual(res.status_code, 413)

    def test_pdf_batch(self):
        res = self.client.post(
            "/api/process-folder-pdfs",
            files=[
                ("pdfs", ("a.pdf", b"%PDF a", "application/pdf")),
                ("pdfs", ("b.pdf", b"%PDF b", "application/pdf")),
            ],
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["count"], 2)

    def test_pdf_batch_rejects_non_pdf(self):
        res = self.client.post(
            "/api/process-folder-pdfs",
            files=[
                ("pdfs", ("a.pdf", b"%PDF a", "application/pdf")),
                ("pdfs", ("notes.docx", b"doc", "application/octet-stream")),
            ],
        )
        self.assertEqual(res.status_code, 400)
        self.assertIn("notes.docx", res.json()["message"])

    def test_backend_failure_is_502(self):
        self.backend.fail = True
        res = self.client.post(
            "/api/upload-process-pdf",
            files={"pdf": ("order.pdf", b"%PDF-1.4 data", "application/pdf")},
        )
        self.assertEqual(res.status_code, 502)
        self.assertIn("backend unreachable", res.json()["message"])
        self.assertEqual(res.json()["category"], "upstream")
        self.assertEqual(res.json()["service"], "Backend")

    def test_voice_audio(self):
        res = self.client.post(
            "/api/voice",
            files={"audio": ("note.webm", b"audio-bytes", "audio/webm")},
        )
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertEqual(data["id"], "PO-VOICE-1")
        self.assertEqual(data["customerName"], "ABC Liquors")
        self.assertEqual(data["totalAmount"], 77.97)

    def test_voice_text(self):
        res = self.client.post("/api/voice", data={"text": "three royal stage for abc"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(self.backend.calls[0][1][1], "three royal stage for abc")

    def test_voice_requires_input(self):
        res = self.client.post("/api/voice")
        self.assertEqual(res.status_code, 400)


class TestCatalogAndFinalize(RouteTestCase):

    def test_customers(self):
        res = self.client.get("/api/customers")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([c["contact_id"] for c in res.json()], ["c-1", "c-2"])

    def test_customers_search(self):
        res = self.client.get("/api/customers", params={"search": "abc"})
        self.assertEqual([c["contact_name"] for c in res.json()], ["ABC Liquors"])

    def test_items(self):
        res = self.client.get("/api/items")
        self.assertEqual(res.json(), [{"item_id": "i-1", "name": "Royal Stage 1L", "rate": 24.5}])

    def test_finalize(self):
        payload = {
            "id": "PO-42",
            "customerName": "Total Wines",
            "customerDetails": {"name": "Total Wines", "contact_id": "c-1"},
            "items": [{"id": "a", "product": "Royal Stage 1L", "quantity": 2, "unitPrice": 25.99,
                       "totalPrice": 999}],
            "totalAmount": 999,
            "status": "ready",
        }
        res = self.client.post("/api/finalize-po", json=payload)
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertEqual(data["message"], "PO finalized successfully")
        self.assertEqual(data["orderId"], "PO-42")
        self.assertEqual(data["status"], "sent")
        self.assertEqual(data["invoiceId"], "inv-1")
        self.assertEqual(data["totalAmount"], 51.98)
        self.assertEqual(self.zoho.invoiced[0].total_amount, Decimal("51.98"))

    def test_finalize_requires_customer(self):
        payload = {"id": "PO-43", "items": [{"product": "Old Monk", "quantity": 1, "unitPrice": 15.99}]}
        res = self.client.post("/api/finalize-po", json=payload)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(self.zoho.invoiced, [])

    def test_finalize_sent_order_conflicts(self):
        payload = {"id": "PO-44", "status": "sent", "customerDetails": {"contact_id": "c-1"},
                   "items": [{"product": "Old Monk", "quantity": 1, "unitPrice": 15.99}]}
        res = self.client.post("/api/finalize-po", json=payload)
        self.assertEqual(res.status_code, 409)


class TestDraftPurchaseOrders(RouteTestCase):

    def setUp(self):
        super().setUp()
        clear_drafts()
        self.app.dependency_overrides[get_current_user] = lambda: {
            "id": "user-1", "email": "staff@classicwines.com", "full_name": "Jane Doe",
        }
        res = self.client.post("/api/process-sms", data={"text": SMS_TEXT})
        self.draft = self.client.post("/api/purchase-orders", json=res.json()).json()
        self.base = f"/api/purchase-orders/{self.draft['id']}"

    def test_get(self):
        res = self.client.get(self.base)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["totalAmount"], 289.85)

    def test_unknown_draft(self):
        res = self.client.get("/api/purchase-orders/PO-missing")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()["category"], "not_found")
        self.assertIn("PO-missing", res.json()["detail"])

    def test_drafts_are_per_user(self):
        self.app.dependency_overrides[get_current_user] = lambda: {
            "id": "user-2", "email": "other@classicwines.com", "full_name": "Other",
        }
        self.assertEqual(self.client.get(self.base).status_code, 404)

    def test_edit_quantity(self):
        item_id = self.draft["items"][0]["id"]
        res = self.client.patch(f"{self.base}/items/{item_id}", json={"field": "quantity", "value": 1})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["items"][0]["totalPrice"], 25.99)
        self.assertEqual(res.json()["totalAmount"], 185.89)

    def test_select_catalog_item(self):
        item_id = self.draft["items"][0]["id"]
        res = self.client.patch(
            f"{self.base}/items/{item_id}",
            json={"catalogItem": {"item_id": "i-1", "name": "Royal Stage 1L", "rate": 24.5}},
        )
        self.assertEqual(res.json()["items"][0]["unitPrice"], 24.5)
        self.assertEqual(res.json()["totalAmount"], 282.4)

    def test_empty_item_update(self):
        item_id = self.draft["items"][0]["id"]
        res = self.client.patch(f"{self.base}/items/{item_id}", json={})
        self.assertEqual(res.status_code, 400)

    def test_add_and_remove_item(self):
        res = self.client.post(f"{self.base}/items")
        self.assertEqual(res.status_code, 201)
        items = res.json()["items"]
        self.assertEqual(len(items), 3)
        self.assertEqual(items[-1]["quantity"], 1)

        res = self.client.delete(f"{self.base}/items/{items[-1]['id']}")
        self.assertEqual(len(res.json()["items"]), 2)

    def test_update_customer_and_finalize(self):
        res = self.client.patch(f"{self.base}/customer", json={"name": "Total Wines", "contactId": "c-1"})
        self.assertEqual(res.json()["customerDetails"]["contact_id"], "c-1")

        res = self.client.post(f"{self.base}/finalize")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["status"], "sent")

        res = self.client.post(f"{self.base}/items")
        self.assertEqual(res.status_code, 409)

    def test_non_finite_price_counts_as_zero(self):
        item_id = self.draft["items"][0]["id"]
        for value in ("NaN", "Infinity"):
            res = self.client.patch(f"{self.base}/items/{item_id}", json={"field": "unitPrice", "value": value})
            self.assertEqual(res.status_code, 200, value)
            self.assertEqual(res.json()["items"][0]["unitPrice"], 0)
            self.assertEqual(res.json()["totalAmount"], 159.9)

        res = self.client.get(self.base)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["totalAmount"], 159.9)

    def test_out_of_range_price_keeps_draft_readable(self):
        item_id = self.draft["items"][0]["id"]
        res = self.client.patch(f"{self.base}/items/{item_id}", json={"field": "unitPrice", "value": 1e30})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "Quantity or price out of range")

        res = self.client.get(self.base)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["items"][0]["unitPrice"], 25.99)
        self.assertEqual(res.json()["totalAmount"], 289.85)

    def test_add_item_with_non_finite_price(self):
        res = self.client.post(f"{self.base}/items", json={"product": "Bacardi 750ml", "unitPrice": "Infinity"})
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.json()["items"][-1]["unitPrice"], 0)
        self.assertEqual(res.json()["totalAmount"], 289.85)
        self.assertEqual(self.client.get(self.base).status_code, 200)

    def test_mark_ready(self):
        res = self.client.post(f"{self.base}/ready")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["status"], "ready")
        self.assertEqual(self.client.get(self.base).json()["status"], "ready")

    def test_ready_after_send_conflicts(self):
        self.client.patch(f"{self.base}/customer", json={"contactId": "c-1"})
        self.client.post(f"{self.base}/finalize")
        res = self.client.post(f"{self.base}/ready")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.json()["category"], "conflict")

    def test_requires_authentication(self):
        del self.app.dependency_overrides[get_current_user]
        self.assertEqual(self.client.get(self.base).status_code, 401)


if __name__ == "__main__":
    unittest.main()
