from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence

from inventory_sync.errors import Err, InvalidSelectionError, Ok, Result, SyncError, UnknownError, log_failure
from inventory_sync.models import CanonicalListing, StoreKind
from inventory_sync.services.backend_client import ShopifyBackend, WalmartBackend
from inventory_sync.services.listing_cache import ListingCache, ListingsObserver, ListingsSnapshot
from inventory_sync.services.mutation_coordinator import DEFAULT_DEBOUNCE_SECONDS, MutationCoordinator
from inventory_sync.services.shopify_adapter import ShopifyAdapter
from inventory_sync.services.source_selector import ActiveSourceSelector, resolve_store
from inventory_sync.services.task_scope import TaskScope
from inventory_sync.services.walmart_adapter import WalmartAdapter

logger = logging.getLogger(__name__)


class InventoryCoordinator:
    """
    Unified view over the Shopify and Walmart listings.

    Fetch and mutation failures never escape as exceptions: tasks returned by
    :meth:`select_source`, :meth:`refresh` and :meth:`request_mutation` resolve
    to ``Ok`` or ``Err`` and the cache keeps its last good state.
    """

    def __init__(
        self,
        shopify_backend: ShopifyBackend,
        walmart_backend: WalmartBackend,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self.scope = TaskScope()
        self.caches = {kind: ListingCache(kind) for kind in StoreKind}
        self.selector = ActiveSourceSelector(self.caches)
        self.shopify = ShopifyAdapter(shopify_backend)
        self.walmart = WalmartAdapter(walmart_backend)
        self.mutations = MutationCoordinator(
            self.scope,
            self.caches,
            shopify=self.shopify,
            walmart=self.walmart,
            debounce_seconds=debounce_seconds,
        )
        self._fetch_jobs: dict[StoreKind, asyncio.Task] = {}

    @property
    def current_source(self) -> StoreKind | None:
        return self.selector.active

    def select_source(self, selection: int | str | StoreKind) -> asyncio.Task | None:
        kind = resolve_store(selection)
        self.selector.activate(kind)
        if not self.selector.should_fetch(kind):
            logger.debug('%s listings already cached, skipping fetch', kind.value)
            return None
        return self._launch_fetch(kind)

    def refresh(self, *, force: bool = False) -> asyncio.Task | None:
        kind = self.selector.active
        if kind is None:
            raise InvalidSelectionError('No store selected')
        if force:
            self.clear_cache(kind)
        if not self.selector.should_fetch(kind):
            return None
        return self._launch_fetch(kind)

    def clear_cache(self, kind: StoreKind) -> None:
        self.caches[kind].clear()

    def _launch_fetch(self, kind: StoreKind) -> asyncio.Task:
        previous = self._fetch_jobs.get(kind)
        if previous is not None and not previous.done():
            previous.cancel()
        task = self.scope.launch(self._fetch(kind), name=f'fetch-listings:{kind.value}')
        self._fetch_jobs[kind] = task
        return task

    def fetch_job(self, kind: StoreKind) -> asyncio.Task | None:
        """Latest fetch launched for ``kind``, finished or not."""
        return self._fetch_jobs.get(kind)

    async def _fetch(self, kind: StoreKind) -> Result[tuple[CanonicalListing, ...]]:
        adapter = self.shopify if kind is StoreKind.SHOPIFY else self.walmart
        action = f'fetch {kind.value} listings'
        cache = self.caches[kind]
        try:
            listings: Sequence[CanonicalListing] = await adapter.fetch()
            cache.replace(listings)
        except asyncio.CancelledError:
            logger.debug('%s: cancelled', action)
            raise
        except SyncError as exc:
            log_failure(logger, action, exc)
            return Err(exc)
        except Exception as exc:
            logger.exception('%s: unexpected error', action)
            return Err(UnknownError(repr(exc)))

        logger.info('%s: cached %d listings', action, len(listings))
        return Ok(cache.listings)

    def current_listings(self) -> ListingsSnapshot:
        return self.selector.current_listings()

    def observe_listings(self, observer: ListingsObserver) -> Callable[[], None]:
        return self.selector.observe(observer)

    @property
    def selected_listing(self) -> CanonicalListing | None:
        return self.selector.selected_listing

    def set_selected_listing(self, listing: CanonicalListing | None) -> None:
        self.selector.set_selected_listing(listing)

    def find_listing(self, key: str) -> CanonicalListing | None:
        for listing in self.current_listings() or ():
            if listing.source_mutation_key == key:
                return listing
        return None

    def request_mutation(
        self,
        key: str,
        new_quantity: int,
        *,
        debounce_seconds: float | None = None,
    ) -> asyncio.Task:
        kind = self.selector.active
        if kind is None:
            raise InvalidSelectionError('No store selected')
        return self.mutations.mutate(kind, key, new_quantity, debounce_seconds=debounce_seconds)

    async def aclose(self) -> None:
        await self.scope.aclose()
