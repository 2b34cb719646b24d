"""
Zoho Books lookup routes - customers and catalog items for the PO editor dropdowns.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from api.helpers import get_zoho_client

router = APIRouter()


@router.get(
    "/customers",
    summary="List Zoho Books customers",
)
async def list_customers(
    search: Optional[str] = Query(None, description="Case-insensitive name filter"),
    zoho=Depends(get_zoho_client),
) -> List[Dict[str, Any]]:
    """
    Customers from Zoho Books as a JSON array.

    Each entry has `contact_id`, `contact_name`, `email`, `phone`,
    `billing_address` and the one-line `address`.
    """
    return [customer.to_dict() for customer in zoho.list_customers(search)]


@router.get(
    "/items",
    summary="List Zoho Books items",
)
async def list_items(
    search: Optional[str] = Query(None, description="Case-insensitive name filter"),
    zoho=Depends(get_zoho_client),
) -> List[Dict[str, Any]]:
    """Catalog items from Zoho Books as a JSON array of `{item_id, name, rate}`."""
    return [item.to_dict() for item in zoho.list_items(search)]
