"""
Maps the extraction backend's voice response onto a draft purchase order.

Backend shape:

    {"purchase_order": {
        "po_number": ..., "customer_name": ..., "order_date": ...,
        "total_amount": ...,
        "items": [{"item_description" | "zoho_item_name", "quantity", "unit_price", "total"}],
        "zoho_customer_match": {"contact_name", "phone", "email", "cf_email", "contact_id"}
    }}
"""
from __future__ import annotations

from typing import Any, Dict

from errors import UpstreamError
from purchase_orders.models import (
    CustomerDetails,
    LineItem,
    OrderStatus,
    PurchaseOrder,
    new_order_id,
    to_money,
    to_quantity,
    today_iso,
)


def purchase_order_from_voice(payload: Dict[str, Any]) -> PurchaseOrder:
    """Build a draft PurchaseOrder from a voice extraction response."""
    po = payload.get("purchase_order") if isinstance(payload, dict) else None
    if not isinstance(po, dict):
        raise UpstreamError("Voice backend response has no purchase_order", service="Backend")

    items = []
    for raw in po.get("items") or []:
        if not isinstance(raw, dict):
            continue
        quantity = to_quantity(raw.get("quantity")) or 1
        items.append(LineItem(
            product=str(raw.get("item_description") or raw.get("zoho_item_name") or ""),
            quantity=quantity,
            unit_price=to_money(raw.get("unit_price")),
        ))

    match = po.get("zoho_customer_match")
    if not isinstance(match, dict):
        match = {}
    customer_name = str(match.get("contact_name") or po.get("customer_name") or "")

    order = PurchaseOrder(
        id=str(po.get("po_number") or new_order_id()),
        customer_name=customer_name,
        customer_details=CustomerDetails(
            name=customer_name,
            phone=str(match.get("phone") or ""),
            email=str(match.get("email") or match.get("cf_email") or ""),
            contact_id=str(match.get("contact_id") or ""),
        ),
        items=items,
        date=str(po.get("order_date") or today_iso()),
        status=OrderStatus.DRAFT,
    )
    order.recompute_totals()
    return order
