"""
Standalone Hold Sweeper Entry Point (Async)

Usage:
    PYTHONPATH=$PWD python flight_booking/service/hold/driving_adapter/start_hold_sweeper.py

Reverts seats whose hold lock expired without an explicit release.
"""

import signal

import anyio

from flight_booking.platform.config.core_setting import settings
from flight_booking.platform.config.di import container
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.platform.state.kvrocks_client import kvrocks_client
from flight_booking.service.hold.driving_adapter.hold_sweeper import HoldSweeper


async def main() -> None:
    Logger.base.info('🚀 [Hold Sweeper] Starting...')

    if settings.STATE_BACKEND == 'kvrocks':
        try:
            await kvrocks_client.initialize()
        except Exception as e:
            Logger.base.error(f'❌ [Hold Sweeper] Failed to initialize Kvrocks: {e}')
            raise

    sweeper = HoldSweeper(
        sweep_use_case=container.sweep_expired_holds_use_case(),
        interval_seconds=settings.HOLD_SWEEP_INTERVAL_SECONDS,
    )

    try:
        with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:

            async def signal_watcher() -> None:
                async for signum in signals:
                    Logger.base.info(f'🛑 [Hold Sweeper] Received signal {signum}')
                    sweeper.stop()
                    break

            async with anyio.create_task_group() as tg:
                tg.start_soon(signal_watcher)
                await sweeper.start()
                tg.cancel_scope.cancel()
    finally:
        await kvrocks_client.disconnect()
        Logger.base.info('👋 [Hold Sweeper] Shutdown complete')


def run() -> None:
    anyio.run(main)


if __name__ == '__main__':
    run()
