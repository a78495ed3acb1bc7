from flight_booking.platform.exception.exceptions import NotFoundError
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.platform.state.kvrocks_client import kvrocks_client, translate_store_errors
from flight_booking.service.booking.app.interface import IBookingQueryRepo
from flight_booking.service.booking.domain.booking_entity import Booking
from flight_booking.service.booking.driven_adapter.state.booking_codec import booking_from_dict
from flight_booking.service.shared_kernel.driven_adapter.json_codec import loads
from flight_booking.service.shared_kernel.driven_adapter.key_str_generator import (
    make_booking_key,
    make_booking_session_key,
    make_flight_bookings_key,
    make_user_bookings_key,
)


class BookingQueryRepoImpl(IBookingQueryRepo):
    @Logger.io
    @translate_store_errors
    async def get(self, *, reference: str) -> Booking:
        raw = await kvrocks_client.get_client().get(make_booking_key(reference=reference))
        if raw is None:
            raise NotFoundError(f'Booking {reference} not found')
        return booking_from_dict(loads(raw))

    @translate_store_errors
    async def get_by_hold_session(self, *, session_id: str) -> Booking | None:
        reference = await kvrocks_client.get_client().get(
            make_booking_session_key(session_id=session_id)
        )
        if reference is None:
            return None
        return await self.get(reference=reference)

    @translate_store_errors
    async def reference_exists(self, *, reference: str) -> bool:
        return bool(await kvrocks_client.get_client().exists(make_booking_key(reference=reference)))

    @Logger.io
    @translate_store_errors
    async def list_by_flight(self, *, flight_id: str) -> list[Booking]:
        return await self._load_index(make_flight_bookings_key(flight_id=flight_id))

    @Logger.io
    @translate_store_errors
    async def list_by_user(self, *, user_id: str) -> list[Booking]:
        return await self._load_index(make_user_bookings_key(user_id=user_id))

    async def _load_index(self, index_key: str) -> list[Booking]:
        client = kvrocks_client.get_client()
        references = sorted(await client.smembers(index_key))
        if not references:
            return []
        raws = await client.mget([make_booking_key(reference=ref) for ref in references])
        return [booking_from_dict(loads(raw)) for raw in raws if raw]
