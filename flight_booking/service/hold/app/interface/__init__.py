"""Hold Service Interfaces"""

from flight_booking.service.hold.app.interface.i_hold_store import IHoldStore
from flight_booking.service.hold.app.interface.i_lock_service import ILockService

__all__ = ['IHoldStore', 'ILockService']
