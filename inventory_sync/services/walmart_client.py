from __future__ import annotations

import uuid
from urllib.parse import urlencode

from inventory_sync.config import settings
from inventory_sync.services.http_transport import JsonTransport


class WalmartClient:
    def __init__(self) -> None:
        if not settings.walmart_access_token:
            raise ValueError('WALMART_ACCESS_TOKEN is required when INVENTORY_BACKEND=live')

        self.transport = JsonTransport(
            base_url=settings.walmart_api_base_url,
            headers={
                'WM_SEC.ACCESS_TOKEN': settings.walmart_access_token,
                'WM_SVC.NAME': settings.walmart_service_name,
                'Content-Type': 'application/json',
                'Accept': 'application/json',
            },
            timeout_seconds=settings.backend_timeout_seconds,
            name='Walmart',
        )

    def _correlation_headers(self) -> dict[str, str]:
        return {'WM_QOS.CORRELATION_ID': uuid.uuid4().hex}

    async def fetch_catalog(self) -> dict:
        return await self.transport.request('GET', '/v3/items', extra_headers=self._correlation_headers())

    async def fetch_inventory(self, sku: str) -> dict:
        query = urlencode({'sku': sku})
        return await self.transport.request('GET', f'/v3/inventory?{query}', extra_headers=self._correlation_headers())

    async def write_inventory(self, sku: str, new_quantity: int) -> dict:
        query = urlencode({'sku': sku})
        payload = {'sku': sku, 'quantity': {'unit': 'EACH', 'amount': new_quantity}}
        return await self.transport.request(
            'PUT',
            f'/v3/inventory?{query}',
            payload,
            extra_headers=self._correlation_headers(),
        )
