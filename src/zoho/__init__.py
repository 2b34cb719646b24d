"""
Zoho Books integration: OAuth token cache, customers, items and invoices.
"""
from .books_client import ZohoBooksClient, ZohoTokenCache, build_invoice_payload, get_token_cache

__all__ = ['ZohoBooksClient', 'ZohoTokenCache', 'build_invoice_payload', 'get_token_cache']
