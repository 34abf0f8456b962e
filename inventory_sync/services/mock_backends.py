from __future__ import annotations

import asyncio
import copy

from inventory_sync.errors import ServerError


class MockShopifyBackend:
    def __init__(self, latency_seconds: float = 0.0) -> None:
        self.latency_seconds = latency_seconds
        self.location_id = '7001'
        self.products = [
            {
                'id': 501,
                'title': 'Lava Mug',
                'image': {'id': 9001, 'src': 'https://cdn.example.com/lava-mug.png'},
                'images': [
                    {'id': 9001, 'src': 'https://cdn.example.com/lava-mug.png'},
                    {'id': 9002, 'src': 'https://cdn.example.com/lava-mug-black.png'},
                ],
                'variants': [
                    {
                        'id': 1,
                        'title': 'Red',
                        'sku': 'MUG-RED',
                        'price': '14.00',
                        'inventory_quantity': 12,
                        'image_id': None,
                        'inventory_item_id': 3001,
                    },
                    {
                        'id': 2,
                        'title': 'Black',
                        'sku': 'MUG-BLK',
                        'price': '14.00',
                        'inventory_quantity': 4,
                        'image_id': 9002,
                        'inventory_item_id': 3002,
                    },
                ],
            },
            {
                'id': 502,
                'title': 'Ember Tee',
                'image': {'id': 9003, 'src': 'https://cdn.example.com/ember-tee.png'},
                'images': [{'id': 9003, 'src': 'https://cdn.example.com/ember-tee.png'}],
                'variants': [
                    {
                        'id': 3,
                        'title': 'M',
                        'sku': 'TEE-M',
                        'price': '22.50',
                        'inventory_quantity': 30,
                        'image_id': None,
                        'inventory_item_id': 3003,
                    },
                ],
            },
        ]

    def _variant_by_inventory_item(self, inventory_item_id: str) -> dict:
        for product in self.products:
            for variant in product['variants']:
                if str(variant['inventory_item_id']) == str(inventory_item_id):
                    return variant
        raise ServerError(404, f'Inventory item {inventory_item_id} not found')

    async def fetch_catalog(self) -> dict:
        await asyncio.sleep(self.latency_seconds)
        return {'products': copy.deepcopy(self.products)}

    async def fetch_inventory(self, inventory_item_id: str) -> dict:
        await asyncio.sleep(self.latency_seconds)
        variant = self._variant_by_inventory_item(inventory_item_id)
        return {
            'inventory_levels': [
                {
                    'inventory_item_id': variant['inventory_item_id'],
                    'location_id': self.location_id,
                    'available': variant['inventory_quantity'],
                }
            ]
        }

    async def write_inventory(self, inventory_item_id: str, new_quantity: int, *, location_id: str) -> dict:
        await asyncio.sleep(self.latency_seconds)
        if str(location_id) != self.location_id:
            raise ServerError(422, f'Unknown location {location_id}')
        variant = self._variant_by_inventory_item(inventory_item_id)
        variant['inventory_quantity'] = new_quantity
        return {
            'inventory_level': {
                'inventory_item_id': variant['inventory_item_id'],
                'location_id': location_id,
                'available': new_quantity,
            }
        }


class MockWalmartBackend:
    def __init__(self, latency_seconds: float = 0.0) -> None:
        self.latency_seconds = latency_seconds
        self.items = [
            ('WM-1001', 'Volcanic Cold Brew 12oz', '4.99'),
            ('WM-1002', 'Volcanic Cold Brew 16oz', '5.99'),
            ('WM-1003', 'Ash Mocha 12oz', '5.49'),
        ]
        self.on_hand = {sku: (sum(ord(char) for char in sku) % 11) + 4 for sku, _name, _price in self.items}

    async def fetch_catalog(self) -> dict:
        await asyncio.sleep(self.latency_seconds)
        return {
            'totalItems': len(self.items),
            'ItemResponse': [
                {'sku': sku, 'productName': name, 'price': {'currency': 'USD', 'amount': price}}
                for sku, name, price in self.items
            ],
        }

    async def fetch_inventory(self, sku: str) -> dict:
        await asyncio.sleep(self.latency_seconds)
        if sku not in self.on_hand:
            raise ServerError(404, f'SKU {sku} not found')
        return {'sku': sku, 'quantity': {'unit': 'EACH', 'amount': self.on_hand[sku]}}

    async def write_inventory(self, sku: str, new_quantity: int) -> dict:
        await asyncio.sleep(self.latency_seconds)
        if sku not in self.on_hand:
            raise ServerError(404, f'SKU {sku} not found')
        self.on_hand[sku] = new_quantity
        return {'sku': sku, 'quantity': {'unit': 'EACH', 'amount': new_quantity}}
