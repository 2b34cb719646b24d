"""
SMS / Free-Text Order Parser
============================

Turns a pasted SMS (or OCR output of an SMS screenshot) into a draft
purchase order.

Input is normally one item per line, in either of two shapes:

    Royal Stage 1L: 5        ("<product>: <quantity>")
    10 Old Monk 500ml        ("<quantity> <product>")

The first line is the customer name when it has neither a colon nor a digit.
Otherwise the first line mentioning a business keyword is used. Lines that
match neither item pattern are skipped.
"""
from __future__ import annotations

import re
from decimal import Decimal
from typing import Dict, List, Mapping, Optional

from errors import NoItemsFoundError
from purchase_orders.models import (
    CustomerDetails,
    LineItem,
    OrderStatus,
    PurchaseOrder,
    UNKNOWN_CUSTOMER,
    to_quantity,
)


# Known products and their unit prices; keys are lowercase product names
PRODUCT_PRICES: Dict[str, Decimal] = {
    "royal stage 1l": Decimal("25.99"),
    "old monk 500ml": Decimal("15.99"),
    "royal stage": Decimal("25.99"),
    "old monk": Decimal("15.99"),
    "bacardi 750ml": Decimal("19.99"),
    "mcdowell 1l": Decimal("22.99"),
    "teachers 750ml": Decimal("28.99"),
    "blenders pride 750ml": Decimal("24.99"),
}

BUSINESS_KEYWORDS = ("wines", "liquor", "spirits", "beverages", "total", "abc")

_PRODUCT_COLON_QTY = re.compile(r"^(.+?)\s*:\s*(\d+)$")
_QTY_PRODUCT = re.compile(r"^(\d+)\s+(.+)$")
_DIGIT = re.compile(r"\d")


def _split_lines(text: str) -> List[str]:
    return (text or "").replace("\r\n", "\n").replace("\r", "\n").split("\n")


def _is_name_line(line: str) -> bool:
    """A line with neither a colon nor a digit cannot be an item line."""
    return ":" not in line and not _DIGIT.search(line)


def lookup_price(product: str, price_table: Optional[Mapping[str, Decimal]] = None) -> Decimal:
    """Exact, case-insensitive price lookup; unknown products cost 0."""
    table = PRODUCT_PRICES if price_table is None else price_table
    return Decimal(table.get(product.lower(), Decimal("0")))


def extract_customer_name(text: str) -> str:
    """
    Find the customer name in an order text.

    Returns the first line if it has no colon and no digit, else the first
    line containing a business keyword, else "Unknown Customer".
    """
    lines = _split_lines(text)
    first_line = lines[0].strip()

    if first_line and _is_name_line(first_line):
        return first_line

    for line in lines:
        lower_line = line.lower()
        if any(keyword in lower_line for keyword in BUSINESS_KEYWORDS):
            return line.strip()

    return UNKNOWN_CUSTOMER


def parse_line(line: str, price_table: Optional[Mapping[str, Decimal]] = None) -> Optional[LineItem]:
    """Parse one stripped line into a LineItem, or None when it matches no pattern."""
    match = _PRODUCT_COLON_QTY.match(line)
    if match:
        product, quantity = match.group(1).strip(), to_quantity(match.group(2))
    else:
        match = _QTY_PRODUCT.match(line)
        if not match:
            return None
        quantity, product = to_quantity(match.group(1)), match.group(2).strip()

    item = LineItem(
        product=product,
        quantity=quantity,
        unit_price=lookup_price(product, price_table),
    )
    item.recompute()
    return item


def parse_order_items(text: str, price_table: Optional[Mapping[str, Decimal]] = None) -> List[LineItem]:
    """Extract every parseable line item from an order text, in order."""
    items: List[LineItem] = []
    for raw_line in _split_lines(text):
        line = raw_line.strip()
        if not line or _is_name_line(line):
            continue
        item = parse_line(line, price_table)
        if item is not None:
            items.append(item)
    return items


def parse_order_text(text: str, price_table: Optional[Mapping[str, Decimal]] = None) -> PurchaseOrder:
    """
    Build a draft purchase order from free text.

    Raises:
        NoItemsFoundError: when no line item could be extracted.
        ValidationError: when a quantity or price is too large to total.
    """
    items = parse_order_items(text, price_table)
    if not items:
        raise NoItemsFoundError()

    customer_name = extract_customer_name(text)
    order = PurchaseOrder(
        customer_name=customer_name,
        customer_details=CustomerDetails(name=customer_name),
        items=items,
        status=OrderStatus.DRAFT,
    )
    order.recompute_totals()
    return order
