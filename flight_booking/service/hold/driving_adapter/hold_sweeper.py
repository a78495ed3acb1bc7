import anyio

from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.hold.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)
from flight_booking.service.hold.app.dto import SweepResult


class HoldSweeper:
    """Periodic driver for SweepExpiredHoldsUseCase."""

    def __init__(self, *, sweep_use_case: SweepExpiredHoldsUseCase, interval_seconds: float) -> None:
        self.sweep_use_case = sweep_use_case
        self.interval_seconds = interval_seconds
        self._stopped = anyio.Event()

    async def run_once(self) -> SweepResult | None:
        try:
            return await self.sweep_use_case.execute()
        except Exception as e:
            # One bad pass must not stop the loop; the next pass retries
            Logger.base.error(f'❌ [SWEEPER] pass failed: {e}')
            return None

    async def start(self) -> None:
        Logger.base.info(f'🧹 [SWEEPER] every {self.interval_seconds}s')
        while not self._stopped.is_set():
            await self.run_once()
            with anyio.move_on_after(self.interval_seconds):
                await self._stopped.wait()

    def stop(self) -> None:
        self._stopped.set()
