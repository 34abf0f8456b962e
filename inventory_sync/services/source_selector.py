from __future__ import annotations

from collections.abc import Callable

from inventory_sync.errors import InvalidSelectionError
from inventory_sync.models import CanonicalListing, StoreKind
from inventory_sync.services.listing_cache import ListingCache, ListingsObserver, ListingsSnapshot

STORE_ORDER: tuple[StoreKind, ...] = (StoreKind.WALMART, StoreKind.SHOPIFY)


def resolve_store(selection: int | str | StoreKind) -> StoreKind:
    if isinstance(selection, StoreKind):
        return selection
    if isinstance(selection, bool):
        raise InvalidSelectionError(f'No such store: {selection!r}')
    if isinstance(selection, int):
        if 0 <= selection < len(STORE_ORDER):
            return STORE_ORDER[selection]
        raise InvalidSelectionError(f'No store at index {selection}')
    if isinstance(selection, str):
        try:
            return StoreKind(selection.strip().upper())
        except ValueError as exc:
            raise InvalidSelectionError(f'No such store: {selection!r}') from exc
    raise InvalidSelectionError(f'No such store: {selection!r}')


class ActiveSourceSelector:
    def __init__(self, caches: dict[StoreKind, ListingCache]) -> None:
        self.caches = caches
        self._active: StoreKind | None = None
        self._observers: list[ListingsObserver] = []
        self._cache_subscription: Callable[[], None] | None = None
        self.selected_listing: CanonicalListing | None = None

    @property
    def active(self) -> StoreKind | None:
        return self._active

    def cache_for(self, kind: StoreKind) -> ListingCache:
        return self.caches[kind]

    def activate(self, kind: StoreKind) -> None:
        if kind not in self.caches:
            raise InvalidSelectionError(f'No cache registered for {kind!r}')
        if self._cache_subscription is not None:
            self._cache_subscription()
        self._active = kind
        self._cache_subscription = self.caches[kind].subscribe(self._notify)
        self._notify(self.current_listings())

    def should_fetch(self, kind: StoreKind) -> bool:
        # Walmart inventory costs one call per sku, so it is only fetched into an empty cache.
        if kind is StoreKind.WALMART:
            return self.caches[kind].is_empty
        return True

    def current_listings(self) -> ListingsSnapshot:
        if self._active is None:
            return None
        return self.caches[self._active].listings

    def observe(self, observer: ListingsObserver) -> Callable[[], None]:
        self._observers.append(observer)
        observer(self.current_listings())

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self, listings: ListingsSnapshot) -> None:
        for observer in list(self._observers):
            observer(listings)

    def set_selected_listing(self, listing: CanonicalListing | None) -> None:
        self.selected_listing = listing
