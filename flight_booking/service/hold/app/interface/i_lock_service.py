"""
Distributed Lock Service Interface

Per-seat exclusive claims with a TTL. Lock keys are derived from
(flight_id, seat_id) alone so any instance can inspect or release any lock.
Any backing store with atomic create-if-absent-with-expiry and atomic
compare-then-delete can implement this.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from flight_booking.service.hold.app.dto.lock_dto import (
    LockAcquisition,
    LockExtension,
    LockReleaseOutcome,
)
from flight_booking.service.hold.domain.hold_entity import SeatLock


class ILockService(ABC):
    @abstractmethod
    async def acquire(
        self,
        *,
        flight_id: str,
        seat_id: str,
        holder_id: str,
        session_id: str,
        ttl_seconds: float,
    ) -> LockAcquisition:
        """
        Create the lock only if absent. Exactly one concurrent caller wins;
        the others get acquired=False and the winner's lock. Re-acquiring a
        lock this holder+session already owns counts as acquired.
        """
        pass

    @abstractmethod
    async def release_if_owner(
        self, *, flight_id: str, seat_id: str, holder_id: str, session_id: str
    ) -> LockReleaseOutcome:
        pass

    @abstractmethod
    async def extend_if_owner(
        self,
        *,
        flight_id: str,
        seat_id: str,
        holder_id: str,
        session_id: str,
        expires_at: datetime,
    ) -> LockExtension:
        """Move the lock's expiry to expires_at; the session id never changes."""
        pass

    @abstractmethod
    async def get(self, *, flight_id: str, seat_id: str) -> SeatLock | None:
        pass

    @abstractmethod
    async def list_locks(self, *, flight_id: str) -> list[SeatLock]:
        pass
