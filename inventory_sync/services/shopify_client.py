from __future__ import annotations

from urllib.parse import urlencode

from inventory_sync.config import settings
from inventory_sync.services.http_transport import JsonTransport


def _numeric_id(value: str) -> int | str:
    return int(value) if str(value).isdigit() else value


class ShopifyClient:
    def __init__(self) -> None:
        if not settings.shopify_shop_url:
            raise ValueError('SHOPIFY_SHOP_URL is required when INVENTORY_BACKEND=live')
        if not settings.shopify_access_token:
            raise ValueError('SHOPIFY_ACCESS_TOKEN is required when INVENTORY_BACKEND=live')

        self.transport = JsonTransport(
            base_url=settings.shopify_admin_base_url,
            headers={
                'X-Shopify-Access-Token': settings.shopify_access_token,
                'Content-Type': 'application/json',
                'Accept': 'application/json',
            },
            timeout_seconds=settings.backend_timeout_seconds,
            name='Shopify',
        )

    async def fetch_catalog(self) -> dict:
        return await self.transport.get('/products.json?limit=250')

    async def fetch_inventory(self, inventory_item_id: str) -> dict:
        query = urlencode({'inventory_item_ids': inventory_item_id})
        return await self.transport.get(f'/inventory_levels.json?{query}')

    async def write_inventory(self, inventory_item_id: str, new_quantity: int, *, location_id: str) -> dict:
        payload = {
            'location_id': _numeric_id(location_id),
            'inventory_item_id': _numeric_id(inventory_item_id),
            'available': new_quantity,
        }
        return await self.transport.post('/inventory_levels/set.json', payload)
