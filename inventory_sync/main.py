import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from inventory_sync.config import settings
from inventory_sync.routers import inventory
from inventory_sync.services.inventory_coordinator import InventoryCoordinator
from inventory_sync.services.provider_factory import get_backends


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level.upper())
    shopify_backend, walmart_backend = get_backends()
    coordinator = InventoryCoordinator(
        shopify_backend,
        walmart_backend,
        debounce_seconds=settings.mutation_debounce_seconds,
    )
    app.state.coordinator = coordinator
    try:
        yield
    finally:
        await coordinator.aclose()


app = FastAPI(title='Inventory Sync', lifespan=lifespan)
app.include_router(inventory.router)
