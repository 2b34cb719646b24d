"""
Draft purchase order routes - server-side editing of a draft PO.
Mirrors the dashboard's editing state so other clients (scripts, mobile)
can load a parsed PO, edit it item by item and send it to Zoho Books.
Drafts live in memory for the life of the process.
"""
import threading
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from api.auth.dependencies import get_current_user
from api.helpers import get_zoho_client
from api.routes.po_routes import finalize_order
from errors import OrderNotFoundError, ValidationError
from purchase_orders.editor import PurchaseOrderEditor
from purchase_orders.models import CatalogItem

router = APIRouter()

# ── Pydantic models ──────────────────────────────────────────────

class NewItemRequest(BaseModel):
    """Body for adding a line item. Defaults give an empty one-unit row."""
    model_config = ConfigDict(populate_by_name=True)

    product: str = ""
    quantity: int = 1
    unit_price: Any = Field(0, alias="unitPrice")


class CatalogItemRef(BaseModel):
    item_id: str = ""
    name: str
    rate: float = 0


class ItemUpdateRequest(BaseModel):
    """Either a single field edit or a catalog product selection."""
    model_config = ConfigDict(populate_by_name=True)

    field: Optional[str] = None
    value: Any = None
    catalog_item: Optional[CatalogItemRef] = Field(None, alias="catalogItem")


class CustomerUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    contact_id: Optional[str] = Field(None, alias="contactId")


# ── In-memory draft store ─────────────────────────────────────────

_drafts: Dict[str, Dict[str, Any]] = {}
_drafts_lock = threading.Lock()


def _key(user: dict, order_id: str) -> str:
    return f"{user['id']}:{order_id}"


def _get_editor(user: dict, order_id: str) -> PurchaseOrderEditor:
    with _drafts_lock:
        session = _drafts.get(_key(user, order_id))
    if session is None:
        raise OrderNotFoundError(order_id)
    return session["editor"]


def clear_drafts():
    """Drop every stored draft."""
    with _drafts_lock:
        _drafts.clear()


# ── Routes ────────────────────────────────────────────────────────

@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Store a draft purchase order",
)
async def create_draft(
    payload: Dict[str, Any] = Body(...),
    user: dict = Depends(get_current_user),
):
    """
    Store a PO (as returned by /api/process-sms or /api/voice) for editing.
    Totals are recomputed; a stored draft with the same id is replaced.
    """
    editor = PurchaseOrderEditor.from_payload(payload)
    with _drafts_lock:
        _drafts[_key(user, editor.order.id)] = {"user_id": user["id"], "editor": editor}
    return editor.order.to_dict()


@router.get(
    "/{order_id}",
    summary="Get a draft purchase order",
)
async def get_draft(order_id: str, user: dict = Depends(get_current_user)):
    return _get_editor(user, order_id).order.to_dict()


@router.post(
    "/{order_id}/items",
    status_code=status.HTTP_201_CREATED,
    summary="Add a line item",
)
async def add_item(
    order_id: str,
    body: Optional[NewItemRequest] = None,
    user: dict = Depends(get_current_user),
):
    """Add an item; without a body a blank one-unit row is added."""
    body = body or NewItemRequest()
    editor = _get_editor(user, order_id)
    editor.add_item(product=body.product, quantity=body.quantity, unit_price=body.unit_price)
    return editor.order.to_dict()


@router.patch(
    "/{order_id}/items/{item_id}",
    summary="Edit a line item",
)
async def update_item(
    order_id: str,
    item_id: str,
    body: ItemUpdateRequest,
    user: dict = Depends(get_current_user),
):
    """
    Edit one item. Send `{"field": "quantity" | "unitPrice" | "product", "value": ...}`
    or `{"catalogItem": {"item_id", "name", "rate"}}` to pick a Zoho product.
    """
    editor = _get_editor(user, order_id)
    if body.catalog_item is not None:
        editor.select_product(item_id, CatalogItem.from_zoho(body.catalog_item.model_dump()))
    elif body.field:
        editor.update_item(item_id, body.field, body.value)
    else:
        raise ValidationError("Provide either field/value or catalogItem")
    return editor.order.to_dict()


@router.delete(
    "/{order_id}/items/{item_id}",
    summary="Remove a line item",
)
async def remove_item(order_id: str, item_id: str, user: dict = Depends(get_current_user)):
    editor = _get_editor(user, order_id)
    editor.remove_item(item_id)
    return editor.order.to_dict()


@router.patch(
    "/{order_id}/customer",
    summary="Edit the customer details",
)
async def update_customer(
    order_id: str,
    body: CustomerUpdateRequest,
    user: dict = Depends(get_current_user),
):
    editor = _get_editor(user, order_id)
    editor.update_customer(**body.model_dump(exclude_none=True))
    return editor.order.to_dict()


@router.post(
    "/{order_id}/ready",
    summary="Mark a draft as ready to send",
)
async def mark_ready(order_id: str, user: dict = Depends(get_current_user)):
    editor = _get_editor(user, order_id)
    editor.mark_ready()
    return editor.order.to_dict()


@router.post(
    "/{order_id}/finalize",
    summary="Send a draft to Zoho Books",
)
async def finalize_draft(
    order_id: str,
    user: dict = Depends(get_current_user),
    zoho=Depends(get_zoho_client),
):
    """Create the Zoho Books invoice; the draft becomes read-only once sent."""
    editor = _get_editor(user, order_id)
    return finalize_order(editor.order, zoho)
