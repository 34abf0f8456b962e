from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from inventory_sync.dependencies import get_coordinator
from inventory_sync.errors import Err, InvalidSelectionError
from inventory_sync.models import CanonicalListing, StoreKind
from inventory_sync.services.inventory_coordinator import InventoryCoordinator
from inventory_sync.services.source_selector import STORE_ORDER

router = APIRouter(prefix='/inventory', tags=['inventory'])


class SourceSelection(BaseModel):
    index: int


class RefreshRequest(BaseModel):
    force: bool = False


class SelectedListingRequest(BaseModel):
    key: str


class MutationRequest(BaseModel):
    quantity: int
    key: str | None = None


def _serialize_listing(listing: CanonicalListing) -> dict:
    return {
        'source': listing.source.value,
        'product_name': listing.product_name,
        'product_sku': listing.product_sku,
        'quantity': listing.quantity,
        'price': str(listing.price),
        'image_url': listing.image_url,
        'key': listing.source_mutation_key,
    }


def _listings_payload(coordinator: InventoryCoordinator) -> dict:
    listings = coordinator.current_listings()
    source = coordinator.current_source
    return {
        'source': source.value if source else None,
        'listings': [_serialize_listing(listing) for listing in listings] if listings is not None else None,
    }


async def _await_fetch(coordinator: InventoryCoordinator, kind: StoreKind, task: asyncio.Task | None) -> None:
    # A newer fetch of the same store cancels this one; answer with whichever replaced it.
    while task is not None:
        try:
            result = await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            latest = coordinator.fetch_job(kind)
            task = latest if latest is not task else None
            continue
        if isinstance(result, Err):
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(result.error))
        return


@router.get('/sources')
def list_sources(coordinator: InventoryCoordinator = Depends(get_coordinator)):
    return [
        {'index': index, 'name': kind.value, 'active': kind is coordinator.current_source}
        for index, kind in enumerate(STORE_ORDER)
    ]


@router.post('/source')
async def select_source(
    selection: SourceSelection,
    coordinator: InventoryCoordinator = Depends(get_coordinator),
):
    try:
        task = coordinator.select_source(selection.index)
    except InvalidSelectionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    await _await_fetch(coordinator, coordinator.current_source, task)
    return _listings_payload(coordinator)


@router.get('/listings')
def get_listings(coordinator: InventoryCoordinator = Depends(get_coordinator)):
    return _listings_payload(coordinator)


@router.post('/refresh')
async def refresh_listings(
    body: RefreshRequest,
    coordinator: InventoryCoordinator = Depends(get_coordinator),
):
    try:
        task = coordinator.refresh(force=body.force)
    except InvalidSelectionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    await _await_fetch(coordinator, coordinator.current_source, task)
    return _listings_payload(coordinator)


@router.get('/selected')
def get_selected_listing(coordinator: InventoryCoordinator = Depends(get_coordinator)):
    listing = coordinator.selected_listing
    return {'listing': _serialize_listing(listing) if listing else None}


@router.put('/selected')
def set_selected_listing(
    body: SelectedListingRequest,
    coordinator: InventoryCoordinator = Depends(get_coordinator),
):
    listing = coordinator.find_listing(body.key)
    if listing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f'No listing with key {body.key}')
    coordinator.set_selected_listing(listing)
    return {'listing': _serialize_listing(listing)}


@router.post('/mutations', status_code=status.HTTP_202_ACCEPTED)
async def request_mutation(
    body: MutationRequest,
    coordinator: InventoryCoordinator = Depends(get_coordinator),
):
    if body.quantity < 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Quantity cannot be negative')
    key = body.key
    if key is None:
        selected = coordinator.selected_listing
        if selected is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='No listing selected')
        key = selected.source_mutation_key
    try:
        coordinator.request_mutation(key, body.quantity)
    except InvalidSelectionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {'status': 'scheduled', 'key': key, 'quantity': body.quantity}
