from __future__ import annotations

import unittest
from decimal import Decimal

from inventory_sync.models import SkuListing, StoreKind, VariantListing


class ListingModelTests(unittest.TestCase):
    def test_with_quantity_returns_copy_with_only_quantity_changed(self) -> None:
        listing = VariantListing(
            product_name='Lava Mug - Red',
            product_sku='MUG-RED',
            quantity=12,
            price=Decimal('14.00'),
            image_url='https://cdn.example.com/lava-mug.png',
            inventory_item_id='3001',
        )
        updated = listing.with_quantity(5)
        self.assertIsInstance(updated, VariantListing)
        self.assertEqual(updated.quantity, 5)
        self.assertEqual(listing.quantity, 12)
        self.assertEqual(updated.product_name, listing.product_name)
        self.assertEqual(updated.price, listing.price)
        self.assertEqual(updated.image_url, listing.image_url)
        self.assertEqual(updated.inventory_item_id, '3001')

    def test_mutation_key_per_store(self) -> None:
        variant = VariantListing(
            product_name='Ember Tee - M',
            product_sku='TEE-M',
            quantity=1,
            price=Decimal('22.50'),
            inventory_item_id='3003',
        )
        sku = SkuListing(product_name='Ash Mocha 12oz', product_sku='WM-1003', quantity=2, price=Decimal('5.49'))
        self.assertEqual(variant.source_mutation_key, '3003')
        self.assertEqual(variant.source, StoreKind.SHOPIFY)
        self.assertEqual(sku.source_mutation_key, 'WM-1003')
        self.assertEqual(sku.source, StoreKind.WALMART)
        self.assertIsNone(sku.image_url)


if __name__ == '__main__':
    unittest.main()
