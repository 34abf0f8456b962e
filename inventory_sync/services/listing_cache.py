from __future__ import annotations

from collections.abc import Callable, Iterable

from inventory_sync.models import CanonicalListing, InventoryUpdate, StoreKind

ListingsSnapshot = tuple[CanonicalListing, ...] | None
ListingsObserver = Callable[[ListingsSnapshot], None]


class ListingCache:
    """
    Cached listings for one store.

    The collection is an immutable tuple whose reference is swapped on every
    write, so readers only ever see a fully replaced or fully patched snapshot.
    ``None`` means the store has never been fetched.
    """

    def __init__(self, kind: StoreKind) -> None:
        self.kind = kind
        self._listings: ListingsSnapshot = None
        self._observers: list[ListingsObserver] = []

    @property
    def listings(self) -> ListingsSnapshot:
        return self._listings

    @property
    def is_empty(self) -> bool:
        return not self._listings

    def subscribe(self, observer: ListingsObserver) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self, listings: ListingsSnapshot) -> None:
        self._listings = listings
        for observer in list(self._observers):
            observer(listings)

    def replace(self, listings: Iterable[CanonicalListing]) -> None:
        self._publish(tuple(listings))

    def patch(self, update: InventoryUpdate) -> bool:
        current = self._listings
        if not current:
            return False

        matched = False
        patched: list[CanonicalListing] = []
        for listing in current:
            if not matched and listing.source_mutation_key == update.mutation_key:
                patched.append(listing.with_quantity(update.quantity))
                matched = True
            else:
                patched.append(listing)

        if matched:
            self._publish(tuple(patched))
        return matched

    def clear(self) -> None:
        self._publish(None)
