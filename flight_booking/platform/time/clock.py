from datetime import datetime, timezone

from flight_booking.service.shared_kernel.app.interface.i_clock import IClock


class SystemClock(IClock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
