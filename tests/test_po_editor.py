"""
Tests for the purchase order editing state.
Every mutation must leave item totals and the order total consistent, and
sent orders must be read-only.
"""
import sys
import unittest
from decimal import Decimal
from pathlib import Path

# Ensure src/ is on path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))

from errors import ItemNotFoundError, OrderLockedError, ValidationError  # noqa: E402
from purchase_orders import PurchaseOrderEditor, parse_order_text  # noqa: E402
from purchase_orders.models import CatalogItem, OrderStatus, PurchaseOrder  # noqa: E402


def _editor():
    return PurchaseOrderEditor(parse_order_text("Total Wines\nRoyal Stage 1L: 5\nOld Monk 500ml: 10"))


class TestItemEditing(unittest.TestCase):

    def test_quantity_change_recomputes_totals(self):
        editor = _editor()
        item = editor.order.items[0]
        editor.update_item(item.id, "quantity", 2)
        self.assertEqual(item.total_price, Decimal("51.98"))
        self.assertEqual(editor.order.total_amount, Decimal("211.88"))

    def test_unit_price_alias(self):
        editor = _editor()
        item = editor.order.items[1]
        editor.update_item(item.id, "unitPrice", "12.50")
        self.assertEqual(item.total_price, Decimal("125.00"))
        self.assertEqual(editor.order.total_amount, Decimal("254.95"))

    def test_invalid_numbers_count_as_zero(self):
        editor = _editor()
        item = editor.order.items[0]
        editor.update_item(item.id, "quantity", "lots")
        self.assertEqual(item.quantity, 0)
        self.assertEqual(editor.order.total_amount, Decimal("159.90"))

    def test_non_finite_price_counts_as_zero(self):
        editor = _editor()
        item = editor.order.items[0]
        for value in ("NaN", "Infinity", "-Infinity", float("inf"), float("nan")):
            editor.update_item(item.id, "unitPrice", value)
            self.assertEqual(item.unit_price, Decimal("0"))
            self.assertEqual(editor.order.total_amount, Decimal("159.90"))

    def test_infinite_quantity_counts_as_zero(self):
        editor = _editor()
        item = editor.order.items[0]
        editor.update_item(item.id, "quantity", "Infinity")
        self.assertEqual(item.quantity, 0)
        editor.update_item(item.id, "quantity", float("inf"))
        self.assertEqual(item.quantity, 0)

    def test_out_of_range_price_leaves_item_unchanged(self):
        editor = _editor()
        item = editor.order.items[0]
        with self.assertRaises(ValidationError) as ctx:
            editor.update_item(item.id, "unitPrice", "1e30")
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(item.unit_price, Decimal("25.99"))
        self.assertEqual(item.total_price, Decimal("129.95"))
        self.assertEqual(editor.order.total_amount, Decimal("289.85"))

    def test_out_of_range_new_item_is_not_added(self):
        editor = _editor()
        with self.assertRaises(ValidationError):
            editor.add_item(product="Bulk", quantity=10 ** 30, unit_price=1)
        self.assertEqual(len(editor.order.items), 2)
        self.assertEqual(editor.order.total_amount, Decimal("289.85"))

    def test_unknown_field_rejected(self):
        editor = _editor()
        with self.assertRaises(ValidationError):
            editor.update_item(editor.order.items[0].id, "totalPrice", 1000)

    def test_add_item_defaults(self):
        editor = _editor()
        item = editor.add_item()
        self.assertEqual(item.product, "")
        self.assertEqual(item.quantity, 1)
        self.assertEqual(item.unit_price, Decimal("0"))
        self.assertEqual(len(editor.order.items), 3)
        self.assertEqual(editor.order.total_amount, Decimal("289.85"))

    def test_remove_item(self):
        editor = _editor()
        editor.remove_item(editor.order.items[0].id)
        self.assertEqual(len(editor.order.items), 1)
        self.assertEqual(editor.order.total_amount, Decimal("159.90"))

    def test_remove_unknown_item(self):
        with self.assertRaises(ItemNotFoundError):
            _editor().remove_item("missing")

    def test_select_catalog_product(self):
        editor = _editor()
        item = editor.order.items[0]
        editor.select_product(item.id, CatalogItem(item_id="z-1", name="Royal Stage 1L Zoho", rate=Decimal("20")))
        self.assertEqual(item.product, "Royal Stage 1L Zoho")
        self.assertEqual(item.total_price, Decimal("100.00"))
        self.assertEqual(editor.order.total_amount, Decimal("259.90"))


class TestCustomerAndStatus(unittest.TestCase):

    def test_update_customer_mirrors_name(self):
        editor = _editor()
        editor.update_customer(name="ABC Liquors", contactId="460000000012345", phone="305-555-0100")
        self.assertEqual(editor.order.customer_name, "ABC Liquors")
        self.assertEqual(editor.order.customer_details.contact_id, "460000000012345")
        self.assertEqual(editor.order.customer_details.phone, "305-555-0100")

    def test_unknown_customer_field(self):
        with self.assertRaises(ValidationError):
            _editor().update_customer(fax="123")

    def test_mark_ready_requires_items(self):
        editor = PurchaseOrderEditor(PurchaseOrder())
        with self.assertRaises(ValidationError):
            editor.mark_ready()

    def test_sent_order_is_locked(self):
        editor = _editor()
        editor.mark_sent()
        self.assertEqual(editor.order.status, OrderStatus.SENT)
        with self.assertRaises(OrderLockedError):
            editor.add_item()
        with self.assertRaises(OrderLockedError):
            editor.update_item(editor.order.items[0].id, "quantity", 3)
        with self.assertRaises(OrderLockedError):
            editor.update_customer(name="Someone Else")


class TestFromPayload(unittest.TestCase):

    def test_client_totals_are_ignored(self):
        payload = {
            "id": "PO-1",
            "customerName": "Total Wines",
            "customerDetails": {"name": "Total Wines", "contact_id": "c-1"},
            "items": [
                {"id": "a", "product": "Royal Stage 1L", "quantity": 2, "unitPrice": 25.99, "totalPrice": 1},
                {"id": "b", "product": "Old Monk", "quantity": "3", "unitPrice": "15.99", "totalPrice": 1},
            ],
            "totalAmount": 2,
            "status": "draft",
        }
        editor = PurchaseOrderEditor.from_payload(payload)
        self.assertEqual(editor.order.items[0].total_price, Decimal("51.98"))
        self.assertEqual(editor.order.items[1].total_price, Decimal("47.97"))
        self.assertEqual(editor.order.total_amount, Decimal("99.95"))
        self.assertEqual(editor.order.customer_details.contact_id, "c-1")

    def test_unknown_status_becomes_draft(self):
        editor = PurchaseOrderEditor.from_payload({"items": [], "status": "archived"})
        self.assertEqual(editor.order.status, OrderStatus.DRAFT)

    def test_out_of_range_payload_rejected(self):
        payload = {"items": [{"product": "Royal Stage 1L", "quantity": 1, "unitPrice": "9e99"}]}
        with self.assertRaises(ValidationError):
            PurchaseOrderEditor.from_payload(payload)

    def test_non_object_payload(self):
        with self.assertRaises(ValidationError):
            PurchaseOrderEditor.from_payload(["not", "an", "order"])


if __name__ == "__main__":
    unittest.main()
