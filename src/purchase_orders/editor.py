"""
Purchase Order Editor
Holds one editable purchase order and keeps its totals consistent.

Every mutation recomputes the touched item and the order total before it
returns, so no caller can observe a stale total. Orders that were already
sent to Zoho Books are read-only.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from errors import ItemNotFoundError, OrderLockedError, ValidationError
from purchase_orders.models import (
    CatalogItem,
    LineItem,
    OrderStatus,
    PurchaseOrder,
    to_money,
    to_quantity,
)


EDITABLE_ITEM_FIELDS = ("product", "quantity", "unit_price")
CUSTOMER_FIELDS = ("name", "phone", "email", "address", "contact_id")

# camelCase names used by the front-end
_FIELD_ALIASES = {
    "unitPrice": "unit_price",
    "contactId": "contact_id",
}


class PurchaseOrderEditor:
    """Editing state for a single purchase order."""

    def __init__(self, order: PurchaseOrder):
        self.order = order
        self.order.recompute_totals()

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PurchaseOrderEditor":
        """Create an editor from client JSON; client-sent totals are discarded."""
        if not isinstance(payload, dict):
            raise ValidationError("Purchase order payload must be a JSON object")
        return cls(PurchaseOrder.from_dict(payload))

    # ------------------------------------------------------------------
    # Item operations
    # ------------------------------------------------------------------

    def add_item(self, product: str = "", quantity: int = 1, unit_price: Any = 0) -> LineItem:
        self._ensure_editable()
        item = LineItem(product=product, quantity=to_quantity(quantity), unit_price=to_money(unit_price))
        self.order.items.append(item)
        try:
            self.order.recompute_totals()
        except ValidationError:
            self.order.items.remove(item)
            self.order.recompute_totals()
            raise
        return item

    def remove_item(self, item_id: str) -> None:
        self._ensure_editable()
        item = self._get_item(item_id)
        self.order.items.remove(item)
        self.order.recompute_totals()

    def update_item(self, item_id: str, field: str, value: Any) -> LineItem:
        """Set one of product, quantity or unit_price on an item."""
        self._ensure_editable()
        field = _FIELD_ALIASES.get(field, field)
        if field not in EDITABLE_ITEM_FIELDS:
            raise ValidationError(f"Field cannot be edited: {field}")

        item = self._get_item(item_id)
        if field == "quantity":
            self._apply(item, quantity=to_quantity(value))
        elif field == "unit_price":
            self._apply(item, unit_price=to_money(value))
        else:
            self._apply(item, product=str(value or "").strip())
        return item

    def select_product(self, item_id: str, catalog_item: CatalogItem) -> LineItem:
        """Replace an item's product and price with a Zoho catalog item."""
        self._ensure_editable()
        item = self._get_item(item_id)
        self._apply(item, product=catalog_item.name, unit_price=catalog_item.rate or to_money(0))
        return item

    # ------------------------------------------------------------------
    # Customer / status
    # ------------------------------------------------------------------

    def update_customer(self, **fields: Any) -> None:
        """Merge customer detail fields; ``name`` also becomes the customer name."""
        self._ensure_editable()
        details = self.order.customer_details
        for key, value in fields.items():
            key = _FIELD_ALIASES.get(key, key)
            if key not in CUSTOMER_FIELDS:
                raise ValidationError(f"Unknown customer field: {key}")
            if value is None:
                continue
            setattr(details, key, str(value))
        if "name" in fields and fields["name"] is not None:
            self.order.customer_name = details.name

    def mark_ready(self) -> None:
        self._ensure_editable()
        if not self.order.items:
            raise ValidationError("Cannot mark an order without items as ready")
        self.order.status = OrderStatus.READY

    def mark_sent(self) -> None:
        self.order.recompute_totals()
        self.order.status = OrderStatus.SENT

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _apply(self, item: LineItem, **changes: Any) -> None:
        """Set item fields and recompute; the item is restored when the totals are out of range."""
        previous = {name: getattr(item, name) for name in changes}
        for name, value in changes.items():
            setattr(item, name, value)
        try:
            self.order.recompute_totals()
        except ValidationError:
            for name, value in previous.items():
                setattr(item, name, value)
            self.order.recompute_totals()
            raise

    def _ensure_editable(self) -> None:
        if self.order.is_sent:
            raise OrderLockedError(self.order.id)

    def _get_item(self, item_id: str) -> LineItem:
        item: Optional[LineItem] = self.order.find_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item
