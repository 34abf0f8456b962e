from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from inventory_sync.errors import DataConsistencyError, UnknownError
from inventory_sync.models import InventoryUpdate, VariantListing
from inventory_sync.services.backend_client import ShopifyBackend

logger = logging.getLogger(__name__)


def _resolve_image_url(product: dict, variant: dict) -> str | None:
    image_id = variant.get('image_id')
    if image_id is None:
        default_image = product.get('image') or {}
        return default_image.get('src')

    for image in product.get('images') or []:
        if image.get('id') == image_id:
            return image.get('src')
    raise DataConsistencyError(
        f'Variant {variant.get("id")} of product {product.get("id")} references missing image {image_id}'
    )


class ShopifyAdapter:
    """Expands every product variant into its own listing."""

    def __init__(self, backend: ShopifyBackend) -> None:
        self.backend = backend

    async def fetch(self) -> list[VariantListing]:
        payload = await self.backend.fetch_catalog()
        products = payload.get('products') or []
        if not products:
            return []

        results: list[VariantListing] = []
        seen_items: set[str] = set()
        seen_skus: set[str] = set()
        try:
            for product in products:
                for variant in product.get('variants') or []:
                    inventory_item_id = str(variant['inventory_item_id'])
                    if inventory_item_id in seen_items:
                        logger.warning(
                            'Skipping repeated Shopify inventory item %s on product %s', inventory_item_id, product.get('id')
                        )
                        continue
                    sku = variant.get('sku') or ''
                    if sku and sku in seen_skus:
                        logger.warning('Shopify sku %r is shared by more than one variant', sku)
                    results.append(
                        VariantListing(
                            product_name=f'{product["title"]} - {variant["title"]}',
                            product_sku=sku,
                            quantity=int(variant.get('inventory_quantity') or 0),
                            price=Decimal(str(variant['price'])),
                            image_url=_resolve_image_url(product, variant),
                            inventory_item_id=inventory_item_id,
                        )
                    )
                    seen_items.add(inventory_item_id)
                    seen_skus.add(sku)
        except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
            raise UnknownError(f'Malformed Shopify catalog payload: {exc!r}') from exc
        return results

    async def _resolve_location_id(self, inventory_item_id: str) -> str:
        payload = await self.backend.fetch_inventory(inventory_item_id)
        levels = payload.get('inventory_levels') or []
        if not levels:
            raise DataConsistencyError(f'Inventory item {inventory_item_id} has no inventory levels')
        location_id = levels[0].get('location_id')
        if location_id is None:
            raise DataConsistencyError(f'Inventory level for {inventory_item_id} is missing location_id')
        return str(location_id)

    async def update_quantity(self, inventory_item_id: str, new_quantity: int) -> InventoryUpdate:
        # Read-then-write; the location can move between the two calls.
        location_id = await self._resolve_location_id(inventory_item_id)
        payload = await self.backend.write_inventory(inventory_item_id, new_quantity, location_id=location_id)
        try:
            level = payload['inventory_level']
            return InventoryUpdate(
                mutation_key=str(level['inventory_item_id']),
                quantity=int(level['available']),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise UnknownError(f'Malformed Shopify inventory response: {exc!r}') from exc
