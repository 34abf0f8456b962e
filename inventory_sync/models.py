from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import ClassVar

# Walmart listings carry this between the catalog read and their inventory lookup.
PENDING_QUANTITY = -1


class StoreKind(str, Enum):
    WALMART = 'WALMART'
    SHOPIFY = 'SHOPIFY'


@dataclass(frozen=True)
class CanonicalListing:
    source: ClassVar[StoreKind]

    product_name: str
    product_sku: str
    quantity: int
    price: Decimal

    @property
    def source_mutation_key(self) -> str:
        raise NotImplementedError

    def with_quantity(self, quantity: int):
        return dataclasses.replace(self, quantity=quantity)


@dataclass(frozen=True)
class VariantListing(CanonicalListing):
    source: ClassVar[StoreKind] = StoreKind.SHOPIFY

    inventory_item_id: str = ''
    image_url: str | None = None

    @property
    def source_mutation_key(self) -> str:
        return self.inventory_item_id


@dataclass(frozen=True)
class SkuListing(CanonicalListing):
    source: ClassVar[StoreKind] = StoreKind.WALMART

    image_url: ClassVar[None] = None

    @property
    def source_mutation_key(self) -> str:
        return self.product_sku


@dataclass(frozen=True)
class InventoryUpdate:
    mutation_key: str
    quantity: int
