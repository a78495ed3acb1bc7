"""
In-Memory State Store

A single-process stand-in for Kvrocks used by the in-memory adapters and the
test suite. Adapters hold `lock` for the whole of any multi-key operation, so
several use-case instances sharing one store coordinate exactly like several
servers sharing one Kvrocks. Expiry is lazy and driven by the injected clock.
"""

import asyncio
from datetime import datetime
from typing import Any

from flight_booking.service.shared_kernel.app.interface.i_clock import IClock


class InMemoryStateStore:
    def __init__(self, *, clock: IClock) -> None:
        self.clock = clock
        self.lock = asyncio.Lock()
        self._values: dict[str, Any] = {}
        self._expiry: dict[str, datetime] = {}

    # The methods below assume the caller holds `lock`

    def _purge_if_expired(self, key: str) -> None:
        expires_at = self._expiry.get(key)
        if expires_at is not None and self.clock.now() >= expires_at:
            self._values.pop(key, None)
            self._expiry.pop(key, None)

    def get(self, key: str, default: Any = None) -> Any:
        self._purge_if_expired(key)
        return self._values.get(key, default)

    def exists(self, key: str) -> bool:
        self._purge_if_expired(key)
        return key in self._values

    def set(
        self,
        key: str,
        value: Any,
        *,
        expires_at: datetime | None = None,
        nx: bool = False,
        keep_expiry: bool = False,
    ) -> bool:
        self._purge_if_expired(key)
        if nx and key in self._values:
            return False
        self._values[key] = value
        if expires_at is not None:
            self._expiry[key] = expires_at
        elif not keep_expiry:
            self._expiry.pop(key, None)
        return True

    def setdefault(self, key: str, factory: type) -> Any:
        """Fetch a container value (dict/set), creating it when absent."""
        self._purge_if_expired(key)
        if key not in self._values:
            self._values[key] = factory()
        return self._values[key]

    def delete(self, key: str) -> bool:
        self._purge_if_expired(key)
        self._expiry.pop(key, None)
        return self._values.pop(key, None) is not None

    def expires_at(self, key: str) -> datetime | None:
        self._purge_if_expired(key)
        return self._expiry.get(key)

    def keys(self, prefix: str) -> list[str]:
        for key in list(self._values):
            self._purge_if_expired(key)
        return [key for key in self._values if key.startswith(prefix)]

    def clear(self) -> None:
        self._values.clear()
        self._expiry.clear()
