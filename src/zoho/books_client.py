"""
Zoho Books Client
Reads customers and catalog items from Zoho Books and creates invoices for
finalized purchase orders.

Access tokens come from the Zoho OAuth refresh-token grant and are cached
process-wide until shortly before they expire. Outbound calls use a fixed
timeout and are not retried.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, List, Optional

import requests

import config
from errors import UpstreamError, ValidationError
from purchase_orders.models import CatalogItem, Customer, PurchaseOrder
from utils.logger import get_logger

SERVICE = "Zoho"


class ZohoTokenCache:
    """
    Process-wide OAuth access-token cache.

    Refresh runs under a lock with a second expiry check inside it, so
    concurrent callers trigger at most one refresh.
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        refresh_token: Optional[str] = None,
        accounts_url: Optional[str] = None,
        timeout: Optional[float] = None,
        expiry_buffer_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.client_id = client_id if client_id is not None else config.ZOHO_CLIENT_ID
        self.client_secret = client_secret if client_secret is not None else config.ZOHO_CLIENT_SECRET
        self.refresh_token = refresh_token if refresh_token is not None else config.ZOHO_REFRESH_TOKEN
        self.accounts_url = (accounts_url or config.ZOHO_ACCOUNTS_URL).rstrip("/")
        self.timeout = timeout or config.HTTP_TIMEOUT_SECONDS
        self.expiry_buffer_seconds = (
            expiry_buffer_seconds if expiry_buffer_seconds is not None
            else config.ZOHO_TOKEN_EXPIRY_BUFFER_SECONDS
        )
        self._clock = clock
        self._lock = threading.Lock()
        self._access_token = ""
        self._expires_at = 0.0

    def _is_valid(self) -> bool:
        return bool(self._access_token) and self._clock() < self._expires_at

    def get_access_token(self) -> str:
        """Return a cached access token, refreshing it when expired."""
        if self._is_valid():
            return self._access_token
        with self._lock:
            if self._is_valid():
                return self._access_token
            self._refresh()
            return self._access_token

    def invalidate(self) -> None:
        with self._lock:
            self._access_token = ""
            self._expires_at = 0.0

    def _refresh(self) -> None:
        if not self.client_id or not self.client_secret or not self.refresh_token:
            raise UpstreamError("Missing Zoho OAuth configuration", service=SERVICE)

        url = f"{self.accounts_url}/oauth/v2/token"
        logger = get_logger()
        try:
            resp = requests.post(
                url,
                params={
                    "refresh_token": self.refresh_token,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "grant_type": "refresh_token",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error(f"Error refreshing Zoho access token: {exc}", component=SERVICE)
            raise UpstreamError("Failed to get access token", service=SERVICE) from exc

        logger.log_upstream_call(SERVICE, "POST", url, resp.status_code)
        try:
            data = resp.json()
        except ValueError:
            data = {}

        access_token = data.get("access_token") if isinstance(data, dict) else None
        if resp.status_code >= 400 or not access_token:
            reason = data.get("error") if isinstance(data, dict) else None
            logger.error(f"Zoho token refresh rejected: {reason or resp.status_code}", component=SERVICE)
            raise UpstreamError("Failed to get access token", service=SERVICE,
                                status_code_upstream=resp.status_code)

        expires_in = int(data.get("expires_in") or 3600)
        self._access_token = access_token
        self._expires_at = self._clock() + max(expires_in - self.expiry_buffer_seconds, 0)


_default_token_cache: Optional[ZohoTokenCache] = None
_default_cache_lock = threading.Lock()


def get_token_cache() -> ZohoTokenCache:
    """Get or create the process-wide token cache."""
    global _default_token_cache
    if _default_token_cache is None:
        with _default_cache_lock:
            if _default_token_cache is None:
                _default_token_cache = ZohoTokenCache()
    return _default_token_cache


def _matches(name: str, search: Optional[str]) -> bool:
    if not search:
        return True
    return search.strip().lower() in (name or "").lower()


class ZohoBooksClient:
    """HTTP client for the Zoho Books v3 API."""

    def __init__(
        self,
        token_cache: Optional[ZohoTokenCache] = None,
        books_url: Optional[str] = None,
        organization_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.token_cache = token_cache or get_token_cache()
        self.books_url = (books_url or config.ZOHO_BOOKS_URL).rstrip("/")
        self.organization_id = organization_id if organization_id is not None else config.ZOHO_ORGANIZATION_ID
        self.timeout = timeout or config.HTTP_TIMEOUT_SECONDS

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_customers(self, search: Optional[str] = None) -> List[Customer]:
        data = self._request("GET", "/contacts", params={"contact_type": "customer"},
                             failure="Failed to fetch customers")
        customers = [
            Customer.from_zoho(raw) for raw in data.get("contacts") or data.get("customers") or []
            if isinstance(raw, dict)
        ]
        return [c for c in customers if _matches(c.contact_name, search)]

    def list_items(self, search: Optional[str] = None) -> List[CatalogItem]:
        data = self._request("GET", "/items", failure="Failed to fetch items")
        items = [CatalogItem.from_zoho(raw) for raw in data.get("items") or [] if isinstance(raw, dict)]
        return [item for item in items if _matches(item.name, search)]

    def create_invoice(self, order: PurchaseOrder) -> Dict[str, Any]:
        """Create a Zoho Books invoice for a purchase order and return it."""
        payload = build_invoice_payload(order)
        data = self._request("POST", "/invoices", json_body=payload,
                             failure="Failed to create invoice in Zoho Books")
        invoice = data.get("invoice")
        return invoice if isinstance(invoice, dict) else {}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Zoho-oauthtoken {self.token_cache.get_access_token()}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        failure: str = "Zoho Books request failed",
    ) -> Dict[str, Any]:
        url = f"{self.books_url}{path}"
        query = dict(params or {})
        if self.organization_id:
            query["organization_id"] = self.organization_id

        logger = get_logger()
        try:
            resp = requests.request(
                method,
                url,
                params=query,
                json=json_body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error(f"{failure}: {exc}", component=SERVICE)
            raise UpstreamError(failure, service=SERVICE) from exc

        logger.log_upstream_call(SERVICE, method, url, resp.status_code)
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        # Zoho reports errors with a non-zero "code" even on some 2xx responses
        if resp.status_code >= 400 or data.get("code", 0) != 0:
            message = data.get("message") or failure
            logger.error(f"{failure}: {message}", component=SERVICE)
            raise UpstreamError(message, service=SERVICE, status_code_upstream=resp.status_code)
        return data


def build_invoice_payload(order: PurchaseOrder) -> Dict[str, Any]:
    """Zoho Books invoice body for a purchase order."""
    customer_id = order.customer_details.contact_id
    if not customer_id:
        raise ValidationError("Select a Zoho Books customer before sending the PO")
    if not order.items:
        raise ValidationError("Purchase order has no items")

    return {
        "customer_id": customer_id,
        "reference_number": order.id,
        "date": order.date,
        "line_items": [
            {
                "name": item.product,
                "description": item.product,
                "rate": float(item.unit_price),
                "quantity": item.quantity,
            }
            for item in order.items
        ],
        "notes": order.notes or f"PO Reference: {order.id}",
    }
