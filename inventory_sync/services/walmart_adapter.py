from __future__ import annotations

import asyncio
import logging
from decimal import Decimal, InvalidOperation

from inventory_sync.errors import UnknownError
from inventory_sync.models import PENDING_QUANTITY, InventoryUpdate, SkuListing
from inventory_sync.services.backend_client import WalmartBackend

logger = logging.getLogger(__name__)


def _read_quantity(payload: dict) -> tuple[str, int]:
    try:
        return str(payload['sku']), int(payload['quantity']['amount'])
    except (KeyError, TypeError, ValueError) as exc:
        raise UnknownError(f'Malformed Walmart inventory payload: {exc!r}') from exc


class WalmartAdapter:
    """
    Two-phase fetch: catalog metadata first, then one inventory lookup per sku.

    Listings leave phase one with a pending quantity and are only returned once
    every lookup has succeeded.
    """

    def __init__(self, backend: WalmartBackend) -> None:
        self.backend = backend

    async def _list_items(self) -> list[SkuListing]:
        payload = await self.backend.fetch_catalog()
        if not payload.get('totalItems'):
            return []

        results: list[SkuListing] = []
        seen: set[str] = set()
        try:
            for item in payload.get('ItemResponse') or []:
                sku = item['sku']
                if sku in seen:
                    logger.warning('Skipping duplicate Walmart sku %r', sku)
                    continue
                results.append(
                    SkuListing(
                        product_name=item['productName'],
                        product_sku=sku,
                        quantity=PENDING_QUANTITY,
                        price=Decimal(str(item['price']['amount'])),
                    )
                )
                seen.add(sku)
        except (KeyError, TypeError, InvalidOperation) as exc:
            raise UnknownError(f'Malformed Walmart catalog payload: {exc!r}') from exc
        return results

    async def _with_quantity(self, listing: SkuListing) -> SkuListing:
        payload = await self.backend.fetch_inventory(listing.product_sku)
        _sku, quantity = _read_quantity(payload)
        return listing.with_quantity(quantity)

    async def fetch(self) -> list[SkuListing]:
        pending = await self._list_items()
        if not pending:
            return []

        lookups = [asyncio.ensure_future(self._with_quantity(listing)) for listing in pending]
        try:
            return list(await asyncio.gather(*lookups))
        except BaseException:
            for lookup in lookups:
                lookup.cancel()
            raise

    async def update_quantity(self, sku: str, new_quantity: int) -> InventoryUpdate:
        payload = await self.backend.write_inventory(sku, new_quantity)
        updated_sku, quantity = _read_quantity(payload)
        return InventoryUpdate(mutation_key=updated_sku, quantity=quantity)
