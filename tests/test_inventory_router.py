from __future__ import annotations

import asyncio
import time
import unittest
from contextlib import AsyncExitStack
from unittest.mock import patch

import httpx
from fastapi.testclient import TestClient

from inventory_sync.main import app
from inventory_sync.services.mock_backends import MockShopifyBackend, MockWalmartBackend


class InventoryRouterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.shopify_backend = MockShopifyBackend()
        self.walmart_backend = MockWalmartBackend()
        patcher = patch(
            'inventory_sync.main.get_backends',
            return_value=(self.shopify_backend, self.walmart_backend),
        )
        patcher.start()
        self.addCleanup(patcher.stop)
        self.client = TestClient(app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def _wait_for_quantity(self, key: str, quantity: int) -> dict | None:
        deadline = time.monotonic() + 2
        while time.monotonic() < deadline:
            listings = self.client.get('/inventory/listings').json()['listings']
            match = next(listing for listing in listings if listing['key'] == key)
            if match['quantity'] == quantity:
                return match
            time.sleep(0.02)
        return None

    def test_sources_list_marks_active_store(self) -> None:
        r = self.client.get('/inventory/sources')
        self.assertEqual(r.status_code, 200)
        self.assertEqual([source['name'] for source in r.json()], ['WALMART', 'SHOPIFY'])
        self.assertFalse(any(source['active'] for source in r.json()))

        self.client.post('/inventory/source', json={'index': 1})
        r = self.client.get('/inventory/sources')
        self.assertEqual([source['active'] for source in r.json()], [False, True])

    def test_listings_are_empty_before_selection(self) -> None:
        r = self.client.get('/inventory/listings')
        self.assertEqual(r.json(), {'source': None, 'listings': None})

    def test_select_source_returns_normalized_listings(self) -> None:
        r = self.client.post('/inventory/source', json={'index': 1})
        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertEqual(data['source'], 'SHOPIFY')
        names = [listing['product_name'] for listing in data['listings']]
        self.assertEqual(names, ['Lava Mug - Red', 'Lava Mug - Black', 'Ember Tee - M'])
        self.assertEqual(data['listings'][1]['image_url'], 'https://cdn.example.com/lava-mug-black.png')
        self.assertEqual(data['listings'][0]['price'], '14.00')

    def test_invalid_source_index_is_bad_request(self) -> None:
        r = self.client.post('/inventory/source', json={'index': 9})
        self.assertEqual(r.status_code, 400)

    def test_selected_listing_round_trip(self) -> None:
        self.client.post('/inventory/source', json={'index': 0})

        r = self.client.put('/inventory/selected', json={'key': 'WM-1002'})
        self.assertEqual(r.status_code, 200)
        r = self.client.get('/inventory/selected')
        self.assertEqual(r.json()['listing']['product_sku'], 'WM-1002')

        r = self.client.put('/inventory/selected', json={'key': 'missing'})
        self.assertEqual(r.status_code, 404)

    def test_mutation_for_selected_listing_is_applied(self) -> None:
        self.client.post('/inventory/source', json={'index': 0})
        self.client.put('/inventory/selected', json={'key': 'WM-1001'})

        r = self.client.post('/inventory/mutations', json={'quantity': 42})
        self.assertEqual(r.status_code, 202)
        self.assertEqual(r.json()['key'], 'WM-1001')

        self.assertIsNotNone(self._wait_for_quantity('WM-1001', 42))
        self.assertEqual(self.walmart_backend.on_hand['WM-1001'], 42)

    def test_shopify_mutation_updates_backend_and_cache(self) -> None:
        self.client.post('/inventory/source', json={'index': 1})

        r = self.client.post('/inventory/mutations', json={'key': '3002', 'quantity': 9})
        self.assertEqual(r.status_code, 202)

        listing = self._wait_for_quantity('3002', 9)
        self.assertIsNotNone(listing)
        self.assertEqual(listing['product_sku'], 'MUG-BLK')

    def test_mutation_validation(self) -> None:
        r = self.client.post('/inventory/mutations', json={'key': 'WM-1001', 'quantity': 1})
        self.assertEqual(r.status_code, 400)

        self.client.post('/inventory/source', json={'index': 0})
        r = self.client.post('/inventory/mutations', json={'quantity': 1})
        self.assertEqual(r.status_code, 400)
        r = self.client.post('/inventory/mutations', json={'key': 'WM-1001', 'quantity': -1})
        self.assertEqual(r.status_code, 400)

    def test_forced_refresh_refetches_walmart(self) -> None:
        self.client.post('/inventory/source', json={'index': 0})
        self.walmart_backend.on_hand['WM-1003'] = 77

        r = self.client.post('/inventory/refresh', json={})
        stale = next(listing for listing in r.json()['listings'] if listing['key'] == 'WM-1003')
        self.assertNotEqual(stale['quantity'], 77)

        r = self.client.post('/inventory/refresh', json={'force': True})
        fresh = next(listing for listing in r.json()['listings'] if listing['key'] == 'WM-1003')
        self.assertEqual(fresh['quantity'], 77)


class OverlappingSelectionTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.shopify_backend = MockShopifyBackend(latency_seconds=0.2)
        stack = AsyncExitStack()
        stack.enter_context(
            patch('inventory_sync.main.get_backends', return_value=(self.shopify_backend, MockWalmartBackend()))
        )
        await stack.enter_async_context(app.router.lifespan_context(app))
        self.client = await stack.enter_async_context(
            httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url='http://testserver')
        )
        self.stack = stack

    async def asyncTearDown(self) -> None:
        await self.stack.aclose()

    async def test_superseded_select_answers_with_newer_fetch(self) -> None:
        first, second = await asyncio.gather(
            self.client.post('/inventory/source', json={'index': 1}),
            self.client.post('/inventory/source', json={'index': 1}),
        )

        self.assertEqual(first.status_code, 200)
        self.assertEqual(second.status_code, 200)
        expected = ['Lava Mug - Red', 'Lava Mug - Black', 'Ember Tee - M']
        for response in (first, second):
            self.assertEqual([listing['product_name'] for listing in response.json()['listings']], expected)


if __name__ == '__main__':
    unittest.main()
