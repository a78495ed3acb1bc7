"""Inventory Service Interfaces"""

from flight_booking.service.inventory.app.interface.i_seat_inventory_store import (
    ISeatInventoryStore,
)

__all__ = ['ISeatInventoryStore']
