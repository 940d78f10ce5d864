"""Application services."""

from .inventory import InventoryService, get_inventory_service, reset_inventory_state

__all__ = [
    "InventoryService",
    "get_inventory_service",
    "reset_inventory_state",
]
