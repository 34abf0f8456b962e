from __future__ import annotations

from typing import Protocol


class ShopifyBackend(Protocol):
    async def fetch_catalog(self) -> dict: ...

    async def fetch_inventory(self, inventory_item_id: str) -> dict: ...

    async def write_inventory(self, inventory_item_id: str, new_quantity: int, *, location_id: str) -> dict: ...


class WalmartBackend(Protocol):
    async def fetch_catalog(self) -> dict: ...

    async def fetch_inventory(self, sku: str) -> dict: ...

    async def write_inventory(self, sku: str, new_quantity: int) -> dict: ...
