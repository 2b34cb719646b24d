"""
Purchase Order Data Models
Dataclasses for purchase orders, their line items and the Zoho Books records
(customers, catalog items) used to fill them in.

Serialized dicts use the camelCase keys the dashboard front-end expects
(customerName, unitPrice, totalAmount, ...).
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, DecimalException, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional

from errors import ValidationError


CENT = Decimal("0.01")
UNKNOWN_CUSTOMER = "Unknown Customer"


class OrderStatus(str, Enum):
    """Purchase order lifecycle status"""
    DRAFT = "draft"
    READY = "ready"
    SENT = "sent"


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

def to_money(value: Any) -> Decimal:
    """Convert a number or numeric string to Decimal. Invalid, NaN and infinite values give 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, float):
            amount = Decimal(str(value))
        else:
            cleaned = str(value).replace(",", "").replace("$", "").strip()
            amount = Decimal(cleaned) if cleaned else Decimal("0")
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return amount if amount.is_finite() else Decimal("0")


def to_quantity(value: Any) -> int:
    """Coerce a quantity to int; anything unparseable counts as 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        try:
            return int(Decimal(str(value).strip()))
        except (InvalidOperation, ValueError, OverflowError):
            return 0


def to_cents(amount: Decimal) -> Decimal:
    """Quantize to cents; amounts too large for the decimal context are rejected."""
    try:
        return amount.quantize(CENT)
    except DecimalException:
        raise ValidationError("Quantity or price out of range") from None


def line_total(quantity: int, unit_price: Decimal) -> Decimal:
    try:
        amount = Decimal(quantity) * unit_price
    except DecimalException:
        raise ValidationError("Quantity or price out of range") from None
    return to_cents(amount)


def new_item_id() -> str:
    return uuid.uuid4().hex


def new_order_id() -> str:
    return f"PO-{int(time.time() * 1000)}"


def today_iso() -> str:
    return date.today().isoformat()


# ---------------------------------------------------------------------------
# Purchase order models
# ---------------------------------------------------------------------------

@dataclass
class LineItem:
    """A single product line on a purchase order."""
    product: str = ""
    quantity: int = 1
    unit_price: Decimal = Decimal("0")
    total_price: Decimal = Decimal("0")
    id: str = field(default_factory=new_item_id)

    def recompute(self) -> Decimal:
        """Recalculate total_price from quantity and unit_price."""
        self.total_price = line_total(self.quantity, self.unit_price)
        return self.total_price

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "product": self.product,
            "quantity": self.quantity,
            "unitPrice": float(self.unit_price),
            "totalPrice": float(self.total_price),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LineItem":
        """Build an item from client JSON. Totals are recomputed, never trusted."""
        item = cls(
            product=str(data.get("product") or "").strip(),
            quantity=to_quantity(data.get("quantity")),
            unit_price=to_money(data.get("unitPrice", data.get("unit_price"))),
            id=str(data.get("id") or new_item_id()),
        )
        item.recompute()
        return item


@dataclass
class CustomerDetails:
    """Contact details attached to a purchase order."""
    name: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    contact_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "contact_id": self.contact_id,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CustomerDetails":
        data = data or {}
        return cls(
            name=str(data.get("name") or ""),
            phone=str(data.get("phone") or ""),
            email=str(data.get("email") or ""),
            address=str(data.get("address") or ""),
            contact_id=str(data.get("contact_id") or data.get("contactId") or ""),
        )


@dataclass
class PurchaseOrder:
    """Draft order built from parsed input before it is sent to Zoho Books."""
    id: str = field(default_factory=new_order_id)
    customer_name: str = UNKNOWN_CUSTOMER
    customer_details: CustomerDetails = field(default_factory=CustomerDetails)
    items: List[LineItem] = field(default_factory=list)
    total_amount: Decimal = Decimal("0")
    date: str = field(default_factory=today_iso)
    status: OrderStatus = OrderStatus.DRAFT
    notes: str = ""

    def recompute_totals(self) -> Decimal:
        """Recalculate every item total and the order total."""
        total = Decimal("0")
        for item in self.items:
            try:
                total += item.recompute()
            except DecimalException:
                raise ValidationError("Quantity or price out of range") from None
        self.total_amount = to_cents(total)
        return self.total_amount

    def find_item(self, item_id: str) -> Optional[LineItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    @property
    def is_sent(self) -> bool:
        return self.status == OrderStatus.SENT

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "customerName": self.customer_name,
            "customerDetails": self.customer_details.to_dict(),
            "items": [item.to_dict() for item in self.items],
            "totalAmount": float(self.total_amount),
            "date": self.date,
            "status": self.status.value,
        }
        if self.notes:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PurchaseOrder":
        """Build an order from client JSON and recompute all totals."""
        details = CustomerDetails.from_dict(data.get("customerDetails") or data.get("customer_details"))
        customer_name = str(data.get("customerName") or data.get("customer_name") or details.name or "")
        if not details.name:
            details.name = customer_name

        raw_status = str(data.get("status") or OrderStatus.DRAFT.value).lower()
        try:
            status = OrderStatus(raw_status)
        except ValueError:
            status = OrderStatus.DRAFT

        order = cls(
            id=str(data.get("id") or new_order_id()),
            customer_name=customer_name,
            customer_details=details,
            items=[LineItem.from_dict(item) for item in data.get("items") or [] if isinstance(item, dict)],
            date=str(data.get("date") or today_iso()),
            status=status,
            notes=str(data.get("notes") or ""),
        )
        order.recompute_totals()
        return order


# ---------------------------------------------------------------------------
# Zoho Books records
# ---------------------------------------------------------------------------

@dataclass
class CatalogItem:
    """An item from the Zoho Books catalog."""
    item_id: str = ""
    name: str = ""
    rate: Decimal = Decimal("0")

    def to_dict(self) -> Dict[str, Any]:
        return {"item_id": self.item_id, "name": self.name, "rate": float(self.rate)}

    @classmethod
    def from_zoho(cls, data: Dict[str, Any]) -> "CatalogItem":
        return cls(
            item_id=str(data.get("item_id") or ""),
            name=str(data.get("name") or data.get("item_name") or ""),
            rate=to_money(data.get("rate")),
        )


@dataclass
class Customer:
    """A customer contact from Zoho Books."""
    contact_id: str = ""
    contact_name: str = ""
    email: str = ""
    phone: str = ""
    mobile: str = ""
    billing_address: Dict[str, str] = field(default_factory=dict)

    @property
    def formatted_address(self) -> str:
        """One-line billing address: "street, city, state zip"."""
        if not self.billing_address:
            return ""
        street = self.billing_address.get("address", "")
        city = self.billing_address.get("city", "")
        state_zip = " ".join(
            part for part in (self.billing_address.get("state", ""), self.billing_address.get("zip", "")) if part
        )
        return ", ".join(part for part in (street, city, state_zip) if part)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contact_id": self.contact_id,
            "contact_name": self.contact_name,
            "email": self.email,
            "phone": self.phone,
            "mobile": self.mobile,
            "billing_address": dict(self.billing_address),
            "address": self.formatted_address,
        }

    @classmethod
    def from_zoho(cls, data: Dict[str, Any]) -> "Customer":
        address = data.get("billing_address") or {}
        if not isinstance(address, dict):
            address = {}
        return cls(
            contact_id=str(data.get("contact_id") or data.get("customer_id") or ""),
            contact_name=str(data.get("contact_name") or data.get("customer_name") or ""),
            email=str(data.get("email") or ""),
            phone=str(data.get("phone") or ""),
            mobile=str(data.get("mobile") or ""),
            billing_address={
                key: str(address.get(key) or "")
                for key in ("address", "city", "state", "zip", "country")
            },
        )
