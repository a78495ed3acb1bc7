"""
Seat Inventory Store - Kvrocks implementation

Per flight:
- flight:{id}       JSON snapshot
- seat_state:{id}   Hash seat_id -> state
- seat_class:{id}   Hash seat_id -> class
- seat_price:{id}   Hash seat_id -> price charged
- seat_stats:{id}   Hash "<class>:<counter>" -> count

State changes go through transition_seat_state.lua so the counters move in the
same atomic step as the seat.
"""

from typing import NoReturn

from opentelemetry import trace

from flight_booking.platform.exception.exceptions import NotFoundError
from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.platform.state.kvrocks_client import kvrocks_client, translate_store_errors
from flight_booking.platform.state.lua_script_executor import lua_scripts
from flight_booking.service.inventory.app.interface.i_seat_inventory_store import (
    ISeatInventoryStore,
)
from flight_booking.service.inventory.domain.class_availability import (
    ClassAvailability,
    SeatTransition,
)
from flight_booking.service.inventory.domain.flight_entity import Flight
from flight_booking.service.inventory.domain.seat_entity import Seat, seat_sort_key
from flight_booking.service.inventory.driven_adapter.state.flight_codec import flight_from_dict
from flight_booking.service.shared_kernel.domain.enum import SeatClass, SeatState
from flight_booking.service.shared_kernel.driven_adapter.json_codec import dumps, loads
from flight_booking.service.shared_kernel.driven_adapter.key_str_generator import (
    make_flight_index_key,
    make_flight_key,
    make_seat_class_key,
    make_seat_price_key,
    make_seat_state_key,
    make_seat_stats_key,
)


_COUNTERS = ('capacity', 'available', 'held', 'booked')


def seat_keys(flight_id: str) -> list[str]:
    """KEYS layout shared by the seat-mutating Lua scripts."""
    return [
        make_seat_state_key(flight_id=flight_id),
        make_seat_class_key(flight_id=flight_id),
        make_seat_stats_key(flight_id=flight_id),
    ]


class SeatInventoryStoreImpl(ISeatInventoryStore):
    def __init__(self) -> None:
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    @translate_store_errors
    async def save_flight(self, *, flight: Flight, seats: list[Seat]) -> None:
        with self.tracer.start_as_current_span(
            'inventory.save_flight', attributes={'flight.id': flight.id}
        ):
            client = kvrocks_client.get_client()
            async with client.pipeline(transaction=True) as pipe:
                pipe.set(make_flight_key(flight_id=flight.id), dumps(flight))
                pipe.delete(
                    make_seat_state_key(flight_id=flight.id),
                    make_seat_class_key(flight_id=flight.id),
                    make_seat_price_key(flight_id=flight.id),
                )
                if seats:
                    pipe.hset(
                        make_seat_state_key(flight_id=flight.id),
                        mapping={seat.seat_id: seat.state.value for seat in seats},
                    )
                    pipe.hset(
                        make_seat_class_key(flight_id=flight.id),
                        mapping={seat.seat_id: seat.seat_class.value for seat in seats},
                    )
                    prices = {seat.seat_id: seat.price for seat in seats if seat.price is not None}
                    if prices:
                        pipe.hset(make_seat_price_key(flight_id=flight.id), mapping=prices)
                pipe.sadd(make_flight_index_key(), flight.id)
                await pipe.execute()

            await self._recompute(flight_id=flight.id)
            Logger.base.info(f'✈️ [INVENTORY] Saved flight {flight.id} with {len(seats)} seats')

    @Logger.io
    @translate_store_errors
    async def update_flight(self, *, flight: Flight) -> None:
        client = kvrocks_client.get_client()
        updated = await client.set(make_flight_key(flight_id=flight.id), dumps(flight), xx=True)
        if not updated:
            raise NotFoundError(f'Flight {flight.id} not found')

    @Logger.io
    @translate_store_errors
    async def get_flight(self, *, flight_id: str) -> Flight:
        raw = await kvrocks_client.get_client().get(make_flight_key(flight_id=flight_id))
        if raw is None:
            raise NotFoundError(f'Flight {flight_id} not found')
        return flight_from_dict(loads(raw))

    @Logger.io
    @translate_store_errors
    async def list_flight_ids(self) -> list[str]:
        members = await kvrocks_client.get_client().smembers(make_flight_index_key())
        return sorted(members)

    async def _raise_missing(self, *, flight_id: str, seat_id: str) -> NoReturn:
        client = kvrocks_client.get_client()
        if not await client.exists(make_flight_key(flight_id=flight_id)):
            raise NotFoundError(f'Flight {flight_id} not found')
        raise NotFoundError(f'Seat {seat_id} not found on flight {flight_id}')

    @Logger.io
    @translate_store_errors
    async def get_seat_state(self, *, flight_id: str, seat_id: str) -> SeatState:
        raw = await kvrocks_client.get_client().hget(
            make_seat_state_key(flight_id=flight_id), seat_id
        )
        if raw is None:
            await self._raise_missing(flight_id=flight_id, seat_id=seat_id)
        return SeatState(raw)

    @Logger.io
    @translate_store_errors
    async def get_seat(self, *, flight_id: str, seat_id: str) -> Seat:
        client = kvrocks_client.get_client()
        async with client.pipeline(transaction=False) as pipe:
            pipe.hget(make_seat_state_key(flight_id=flight_id), seat_id)
            pipe.hget(make_seat_class_key(flight_id=flight_id), seat_id)
            pipe.hget(make_seat_price_key(flight_id=flight_id), seat_id)
            state, seat_class, price = await pipe.execute()
        if state is None:
            await self._raise_missing(flight_id=flight_id, seat_id=seat_id)
        return Seat(
            flight_id=flight_id,
            seat_id=seat_id,
            seat_class=SeatClass(seat_class),
            state=SeatState(state),
            price=int(price) if price is not None else None,
        )

    @Logger.io
    @translate_store_errors
    async def set_seat_state(
        self, *, flight_id: str, seat_id: str, new_state: SeatState
    ) -> SeatState:
        transition = await self._run_transition(
            flight_id=flight_id, seat_id=seat_id, allowed_from=set(), new_state=new_state
        )
        return transition.previous

    @Logger.io
    @translate_store_errors
    async def transition_seat_state(
        self,
        *,
        flight_id: str,
        seat_id: str,
        allowed_from: set[SeatState],
        new_state: SeatState,
    ) -> SeatTransition:
        if not allowed_from:
            raise ValueError('allowed_from must name at least one state')
        return await self._run_transition(
            flight_id=flight_id, seat_id=seat_id, allowed_from=allowed_from, new_state=new_state
        )

    async def _run_transition(
        self,
        *,
        flight_id: str,
        seat_id: str,
        allowed_from: set[SeatState],
        new_state: SeatState,
    ) -> SeatTransition:
        outcome, previous = await lua_scripts.run(
            'transition_seat_state',
            client=kvrocks_client.get_client(),
            keys=seat_keys(flight_id),
            args=[seat_id, new_state.value, *sorted(state.value for state in allowed_from)],
        )
        if outcome == 'NOT_FOUND':
            await self._raise_missing(flight_id=flight_id, seat_id=seat_id)
        return SeatTransition(success=outcome == 'OK', previous=SeatState(previous))

    @Logger.io
    @translate_store_errors
    async def get_class_availability(
        self, *, flight_id: str, seat_class: SeatClass
    ) -> ClassAvailability:
        values = await kvrocks_client.get_client().hmget(
            make_seat_stats_key(flight_id=flight_id),
            [f'{seat_class.value}:{counter}' for counter in _COUNTERS],
        )
        counts = {counter: int(value or 0) for counter, value in zip(_COUNTERS, values)}
        return ClassAvailability(seat_class=seat_class, **counts)

    @Logger.io
    @translate_store_errors
    async def list_seats(self, *, flight_id: str, state: SeatState | None = None) -> list[Seat]:
        client = kvrocks_client.get_client()
        async with client.pipeline(transaction=False) as pipe:
            pipe.hgetall(make_seat_state_key(flight_id=flight_id))
            pipe.hgetall(make_seat_class_key(flight_id=flight_id))
            pipe.hgetall(make_seat_price_key(flight_id=flight_id))
            states, classes, prices = await pipe.execute()

        seats = [
            Seat(
                flight_id=flight_id,
                seat_id=seat_id,
                seat_class=SeatClass(classes[seat_id]),
                state=SeatState(seat_state),
                price=int(prices[seat_id]) if seat_id in prices else None,
            )
            for seat_id, seat_state in states.items()
            if state is None or seat_state == state.value
        ]
        return sorted(seats, key=lambda seat: seat_sort_key(seat.seat_id))

    @Logger.io
    @translate_store_errors
    async def recompute_availability(self, *, flight_id: str) -> dict[SeatClass, ClassAvailability]:
        await self._recompute(flight_id=flight_id)
        return {
            seat_class: await self.get_class_availability(
                flight_id=flight_id, seat_class=seat_class
            )
            for seat_class in SeatClass
        }

    async def _recompute(self, *, flight_id: str) -> None:
        await lua_scripts.run(
            'recompute_availability',
            client=kvrocks_client.get_client(),
            keys=seat_keys(flight_id),
            args=[seat_class.value for seat_class in SeatClass],
        )
