from datetime import datetime

from flight_booking.platform.state.kvrocks_client import kvrocks_client, translate_store_errors
from flight_booking.platform.state.lua_script_executor import lua_scripts
from flight_booking.service.hold.app.interface.i_hold_store import IHoldStore
from flight_booking.service.hold.domain.hold_entity import Hold
from flight_booking.service.hold.driven_adapter.state.hold_codec import hold_from_dict
from flight_booking.service.shared_kernel.app.interface.i_clock import IClock
from flight_booking.service.shared_kernel.driven_adapter.json_codec import dumps, loads
from flight_booking.service.shared_kernel.driven_adapter.key_str_generator import make_hold_key


class HoldStoreImpl(IHoldStore):
    """hold:{session_id} -> Hold JSON, PX matching the hold's expiry"""

    def __init__(self, *, clock: IClock) -> None:
        self.clock = clock

    def _ttl_ms(self, expires_at: datetime) -> int:
        return max(1, int((expires_at - self.clock.now()).total_seconds() * 1000))

    @translate_store_errors
    async def save(self, *, hold: Hold) -> None:
        await kvrocks_client.get_client().set(
            make_hold_key(session_id=hold.session_id),
            dumps(hold),
            px=self._ttl_ms(hold.expires_at),
        )

    @translate_store_errors
    async def get(self, *, session_id: str) -> Hold | None:
        raw = await kvrocks_client.get_client().get(make_hold_key(session_id=session_id))
        return hold_from_dict(loads(raw)) if raw else None

    @translate_store_errors
    async def delete(self, *, session_id: str) -> bool:
        return bool(await kvrocks_client.get_client().delete(make_hold_key(session_id=session_id)))

    @translate_store_errors
    async def remove_seat(self, *, session_id: str, seat_id: str) -> None:
        await lua_scripts.run(
            'hold_remove_seat',
            client=kvrocks_client.get_client(),
            keys=[make_hold_key(session_id=session_id)],
            args=[seat_id],
        )

    @translate_store_errors
    async def update_expiry(self, *, session_id: str, expires_at: datetime) -> bool:
        result = await lua_scripts.run(
            'hold_update_expiry',
            client=kvrocks_client.get_client(),
            keys=[make_hold_key(session_id=session_id)],
            args=[expires_at.isoformat(), self._ttl_ms(expires_at)],
        )
        return result == 'UPDATED'
