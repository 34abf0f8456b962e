from fastapi import Request

from inventory_sync.services.inventory_coordinator import InventoryCoordinator


def get_coordinator(request: Request) -> InventoryCoordinator:
    return request.app.state.coordinator
