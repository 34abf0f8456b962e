from __future__ import annotations

import asyncio
import logging

from inventory_sync.errors import Err, Ok, Result, SyncError, UnknownError, log_failure
from inventory_sync.models import InventoryUpdate, StoreKind
from inventory_sync.services.listing_cache import ListingCache
from inventory_sync.services.shopify_adapter import ShopifyAdapter
from inventory_sync.services.task_scope import TaskScope
from inventory_sync.services.walmart_adapter import WalmartAdapter

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.1


class MutationCoordinator:
    """
    Serializes inventory writes across both stores.

    At most one mutation job is alive at a time. Scheduling a new one cancels
    the previous job unconditionally, so a superseded write can never patch the
    cache after the newer request. Each job waits out the debounce delay before
    it touches the backend, which collapses rapid stepper clicks into one write.
    """

    def __init__(
        self,
        scope: TaskScope,
        caches: dict[StoreKind, ListingCache],
        *,
        shopify: ShopifyAdapter,
        walmart: WalmartAdapter,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self.scope = scope
        self.caches = caches
        self.shopify = shopify
        self.walmart = walmart
        self.debounce_seconds = debounce_seconds
        self._job: asyncio.Task | None = None

    @property
    def active_job(self) -> asyncio.Task | None:
        if self._job is None or self._job.done():
            return None
        return self._job

    def mutate(
        self,
        kind: StoreKind,
        key: str,
        new_quantity: int,
        *,
        debounce_seconds: float | None = None,
    ) -> asyncio.Task:
        if self._job is not None:
            self._job.cancel()
        delay = self.debounce_seconds if debounce_seconds is None else debounce_seconds
        self._job = self.scope.launch(
            self._run(kind, key, new_quantity, delay),
            name=f'update-inventory:{kind.value}:{key}',
        )
        return self._job

    async def _write(self, kind: StoreKind, key: str, new_quantity: int) -> InventoryUpdate:
        if kind is StoreKind.SHOPIFY:
            return await self.shopify.update_quantity(key, new_quantity)
        return await self.walmart.update_quantity(key, new_quantity)

    async def _run(self, kind: StoreKind, key: str, new_quantity: int, delay: float) -> Result[InventoryUpdate]:
        action = f'update {kind.value} inventory for {key}'
        try:
            # Avoid firing too many requests in a short period
            await asyncio.sleep(delay)
            update = await self._write(kind, key, new_quantity)
        except asyncio.CancelledError:
            logger.debug('%s: cancelled', action)
            raise
        except SyncError as exc:
            log_failure(logger, action, exc)
            return Err(exc)
        except Exception as exc:
            logger.exception('%s: unexpected error', action)
            return Err(UnknownError(repr(exc)))

        if not self.caches[kind].patch(update):
            logger.info('%s: no cached listing matched %s, cache left as is', action, update.mutation_key)
        return Ok(update)
