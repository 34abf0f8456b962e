from __future__ import annotations

from functools import lru_cache

from inventory_sync.config import settings
from inventory_sync.services.backend_client import ShopifyBackend, WalmartBackend
from inventory_sync.services.mock_backends import MockShopifyBackend, MockWalmartBackend
from inventory_sync.services.shopify_client import ShopifyClient
from inventory_sync.services.walmart_client import WalmartClient


@lru_cache(maxsize=1)
def get_backends() -> tuple[ShopifyBackend, WalmartBackend]:
    provider = settings.inventory_backend.strip().lower()
    if provider == 'live':
        return ShopifyClient(), WalmartClient()
    return MockShopifyBackend(), MockWalmartBackend()
