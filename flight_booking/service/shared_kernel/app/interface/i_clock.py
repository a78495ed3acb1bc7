from abc import ABC, abstractmethod
from datetime import datetime


class IClock(ABC):
    """Time source. Injected everywhere a rule depends on "now"."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time, timezone-aware (UTC)."""
        pass
