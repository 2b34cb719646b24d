"""
Purchase Order Module
Order models, the free-text SMS parser and the editing state used before an
order is sent to Zoho Books.
"""
from .models import (
    CatalogItem,
    Customer,
    CustomerDetails,
    LineItem,
    OrderStatus,
    PurchaseOrder,
)
from .sms_parser import extract_customer_name, parse_order_items, parse_order_text
from .editor import PurchaseOrderEditor

__all__ = [
    'CatalogItem',
    'Customer',
    'CustomerDetails',
    'LineItem',
    'OrderStatus',
    'PurchaseOrder',
    'PurchaseOrderEditor',
    'extract_customer_name',
    'parse_order_items',
    'parse_order_text',
]
