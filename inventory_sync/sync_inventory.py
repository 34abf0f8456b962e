from __future__ import annotations

import argparse
import asyncio
import logging

from inventory_sync.config import settings
from inventory_sync.errors import Err
from inventory_sync.models import StoreKind
from inventory_sync.services.inventory_coordinator import InventoryCoordinator
from inventory_sync.services.provider_factory import get_backends


async def sync_inventory(*, source: str, set_key: str | None = None, set_quantity: int | None = None) -> int:
    shopify_backend, walmart_backend = get_backends()
    coordinator = InventoryCoordinator(
        shopify_backend,
        walmart_backend,
        debounce_seconds=settings.mutation_debounce_seconds,
    )
    try:
        task = coordinator.select_source(source)
        if task is not None:
            result = await task
            if isinstance(result, Err):
                print(f'Fetch failed for {source}: {result.error}')
                return 1

        listings = coordinator.current_listings() or ()
        total_units = sum(listing.quantity for listing in listings)
        print(f'{coordinator.current_source.value} listings: count={len(listings)}, units={total_units}')

        if set_key is not None and set_quantity is not None:
            outcome = await coordinator.request_mutation(set_key, set_quantity)
            if isinstance(outcome, Err):
                print(f'Inventory update failed for {set_key}: {outcome.error}')
                return 1
            print(f'Inventory updated: key={outcome.value.mutation_key}, quantity={outcome.value.quantity}')
        return 0
    finally:
        await coordinator.aclose()


def main() -> None:
    parser = argparse.ArgumentParser(description='Fetch listings from a store and optionally update one quantity.')
    parser.add_argument(
        '--source',
        choices=[kind.value.lower() for kind in StoreKind],
        required=True,
        help='Store to fetch listings from.',
    )
    parser.add_argument(
        '--set',
        nargs=2,
        metavar=('KEY', 'QTY'),
        help='Set the quantity for a listing key (inventory item id for Shopify, sku for Walmart).',
    )
    args = parser.parse_args()

    set_key, set_quantity = None, None
    if args.set:
        set_key = args.set[0]
        try:
            set_quantity = int(args.set[1])
        except ValueError:
            parser.error(f'QTY must be an integer, got {args.set[1]!r}')
        if set_quantity < 0:
            parser.error('QTY cannot be negative')

    logging.basicConfig(level=settings.log_level.upper())
    raise SystemExit(asyncio.run(sync_inventory(source=args.source, set_key=set_key, set_quantity=set_quantity)))


if __name__ == '__main__':
    main()
