from __future__ import annotations

import asyncio
import unittest
from decimal import Decimal
from unittest.mock import AsyncMock

from inventory_sync.errors import NetworkError, UnknownError
from inventory_sync.models import PENDING_QUANTITY, InventoryUpdate
from inventory_sync.services.walmart_adapter import WalmartAdapter


def _catalog(*skus: str) -> dict:
    return {
        'totalItems': len(skus),
        'ItemResponse': [
            {'sku': sku, 'productName': f'Item {sku}', 'price': {'currency': 'USD', 'amount': 4.99}}
            for sku in skus
        ],
    }


class WalmartAdapterFetchTests(unittest.IsolatedAsyncioTestCase):
    async def test_quantities_are_filled_in_by_second_phase(self) -> None:
        backend = AsyncMock()
        backend.fetch_catalog.return_value = _catalog('A', 'B', 'C')
        on_hand = {'A': 1, 'B': 0, 'C': 17}
        backend.fetch_inventory.side_effect = lambda sku: {'sku': sku, 'quantity': {'unit': 'EACH', 'amount': on_hand[sku]}}

        listings = await WalmartAdapter(backend).fetch()

        self.assertEqual([(listing.product_sku, listing.quantity) for listing in listings], [('A', 1), ('B', 0), ('C', 17)])
        self.assertNotIn(PENDING_QUANTITY, [listing.quantity for listing in listings])
        self.assertEqual(listings[0].price, Decimal('4.99'))
        self.assertEqual(backend.fetch_inventory.await_count, 3)

    async def test_inventory_lookups_run_concurrently(self) -> None:
        backend = AsyncMock()
        backend.fetch_catalog.return_value = _catalog('A', 'B', 'C')
        in_flight = 0
        peak = 0

        async def lookup(sku: str) -> dict:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return {'sku': sku, 'quantity': {'amount': 2}}

        backend.fetch_inventory.side_effect = lookup

        await WalmartAdapter(backend).fetch()

        self.assertEqual(peak, 3)

    async def test_any_failed_lookup_fails_whole_fetch(self) -> None:
        backend = AsyncMock()
        backend.fetch_catalog.return_value = _catalog('A', 'B', 'C')

        async def lookup(sku: str) -> dict:
            if sku == 'B':
                raise NetworkError('connection reset')
            await asyncio.sleep(0.05)
            return {'sku': sku, 'quantity': {'amount': 2}}

        backend.fetch_inventory.side_effect = lookup

        with self.assertRaises(NetworkError):
            await WalmartAdapter(backend).fetch()

    async def test_zero_items_skips_inventory_phase(self) -> None:
        backend = AsyncMock()
        backend.fetch_catalog.return_value = {'totalItems': 0, 'ItemResponse': []}

        self.assertEqual(await WalmartAdapter(backend).fetch(), [])
        backend.fetch_inventory.assert_not_awaited()

    async def test_malformed_inventory_payload_is_unknown_error(self) -> None:
        backend = AsyncMock()
        backend.fetch_catalog.return_value = _catalog('A')
        backend.fetch_inventory.return_value = {'sku': 'A'}

        with self.assertRaises(UnknownError):
            await WalmartAdapter(backend).fetch()


class WalmartAdapterUpdateTests(unittest.IsolatedAsyncioTestCase):
    async def test_update_is_a_single_write(self) -> None:
        backend = AsyncMock()
        backend.write_inventory.return_value = {'sku': 'ABC', 'quantity': {'unit': 'EACH', 'amount': 42}}

        update = await WalmartAdapter(backend).update_quantity('ABC', 42)

        backend.write_inventory.assert_awaited_once_with('ABC', 42)
        backend.fetch_inventory.assert_not_awaited()
        self.assertEqual(update, InventoryUpdate(mutation_key='ABC', quantity=42))


if __name__ == '__main__':
    unittest.main()
