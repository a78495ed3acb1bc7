"""
Unit tests for the seat inventory

- Canonical seat order (row number, then letter)
- Flight initialization and per-class counters
- Compare-and-set seat transitions
"""

import attrs
import pytest

from flight_booking.platform.exception.exceptions import DomainError, NotFoundError
from flight_booking.service.inventory.app.command.initialize_flight_use_case import (
    InitializeFlightUseCase,
)
from flight_booking.service.inventory.app.command.update_flight_use_case import (
    UpdateFlightUseCase,
)
from flight_booking.service.inventory.app.query.get_flight_availability_use_case import (
    GetFlightAvailabilityUseCase,
)
from flight_booking.service.inventory.domain.flight_entity import Flight, RouteKey
from flight_booking.service.inventory.domain.seat_entity import (
    Seat,
    canonical_seat_order,
    seat_sort_key,
)
from flight_booking.service.inventory.driven_adapter.state.in_memory_seat_inventory_store_impl import (
    InMemorySeatInventoryStoreImpl,
)
from flight_booking.service.shared_kernel.domain.enum import FlightStatus, SeatClass, SeatState
from test.shared.utils import T0, build_flight, build_seats


@pytest.mark.unit
class TestCanonicalSeatOrder:
    def test_rows_sort_numerically(self) -> None:
        assert canonical_seat_order(['10A', '2A', '10B', '1C']) == ['1C', '2A', '10A', '10B']

    def test_duplicates_collapse(self) -> None:
        assert canonical_seat_order(['12A', '12A', '3B']) == ['3B', '12A']

    def test_letter_case_sorts_together_then_by_raw_id(self) -> None:
        assert seat_sort_key('12a')[:3] == seat_sort_key('12A')[:3]
        assert canonical_seat_order(['12a', '12A', '12B']) == ['12A', '12a', '12B']
        assert canonical_seat_order(['12A', '12a']) == canonical_seat_order(['12a', '12A'])

    def test_unusual_ids_sort_last(self) -> None:
        assert canonical_seat_order(['JUMP', '99F', '1A']) == ['1A', '99F', 'JUMP']


@pytest.mark.unit
class TestFlightEntity:
    def test_route_codes_are_normalised(self) -> None:
        route = RouteKey(source=' tpe', destination='nrt ')
        assert str(route) == 'TPE-NRT'

    def test_naive_departure_is_rejected(self) -> None:
        with pytest.raises(DomainError):
            build_flight(departure_time=T0.replace(tzinfo=None))

    def test_negative_base_price_is_rejected(self) -> None:
        with pytest.raises(DomainError):
            build_flight(base_price=-1)


@pytest.mark.unit
class TestInitializeFlight:
    async def test_counters_match_seat_map(
        self,
        get_flight_availability_use_case: GetFlightAvailabilityUseCase,
        flight: Flight,
    ) -> None:
        availability = await get_flight_availability_use_case.execute(flight_id=flight.id)

        assert availability[SeatClass.ECONOMY].capacity == 20
        assert availability[SeatClass.ECONOMY].available == 20
        assert availability[SeatClass.BUSINESS].capacity == 4
        assert availability[SeatClass.FIRST].capacity == 0

    async def test_seats_start_available_whatever_they_were(
        self,
        initialize_flight_use_case: InitializeFlightUseCase,
        inventory_store: InMemorySeatInventoryStoreImpl,
    ) -> None:
        seats = [
            Seat(flight_id='', seat_id='1A', seat_class=SeatClass.FIRST, state=SeatState.BOOKED, price=5)
        ]
        await initialize_flight_use_case.execute(flight=build_flight(flight_id='FL200'), seats=seats)

        seat = await inventory_store.get_seat(flight_id='FL200', seat_id='1A')
        assert seat.state == SeatState.AVAILABLE
        assert seat.price is None
        assert seat.flight_id == 'FL200'

    async def test_duplicate_seat_ids_are_rejected(
        self, initialize_flight_use_case: InitializeFlightUseCase
    ) -> None:
        seats = build_seats(flight_id='FL300', economy_rows=range(10, 11), business_rows=range(0))
        with pytest.raises(DomainError):
            await initialize_flight_use_case.execute(
                flight=build_flight(flight_id='FL300'), seats=seats + seats[:1]
            )

    async def test_list_seats_in_canonical_order(
        self,
        get_flight_availability_use_case: GetFlightAvailabilityUseCase,
        flight: Flight,
    ) -> None:
        seats = await get_flight_availability_use_case.list_seats(flight_id=flight.id)
        ids = [seat.seat_id for seat in seats]
        assert ids[:5] == ['1A', '1B', '2A', '2B', '10A']
        assert ids[-1] == '14D'


@pytest.mark.unit
class TestUpdateFlight:
    async def test_status_change_is_stored(
        self,
        update_flight_use_case: UpdateFlightUseCase,
        inventory_store: InMemorySeatInventoryStoreImpl,
        flight: Flight,
    ) -> None:
        await update_flight_use_case.execute(
            flight=attrs.evolve(flight, status=FlightStatus.DELAYED)
        )
        stored = await inventory_store.get_flight(flight_id=flight.id)
        assert stored.status == FlightStatus.DELAYED

    async def test_unknown_flight_is_not_found(
        self, update_flight_use_case: UpdateFlightUseCase
    ) -> None:
        with pytest.raises(NotFoundError):
            await update_flight_use_case.execute(flight=build_flight(flight_id='GHOST'))


@pytest.mark.unit
class TestSeatTransitions:
    async def test_transition_applies_only_from_allowed_states(
        self, inventory_store: InMemorySeatInventoryStoreImpl, flight: Flight
    ) -> None:
        held = await inventory_store.transition_seat_state(
            flight_id=flight.id,
            seat_id='12A',
            allowed_from={SeatState.AVAILABLE},
            new_state=SeatState.HELD,
        )
        again = await inventory_store.transition_seat_state(
            flight_id=flight.id,
            seat_id='12A',
            allowed_from={SeatState.AVAILABLE},
            new_state=SeatState.HELD,
        )

        assert held.success and held.previous == SeatState.AVAILABLE
        assert not again.success and again.previous == SeatState.HELD

    async def test_counters_follow_transitions(
        self, inventory_store: InMemorySeatInventoryStoreImpl, flight: Flight
    ) -> None:
        await inventory_store.set_seat_state(
            flight_id=flight.id, seat_id='12A', new_state=SeatState.HELD
        )
        await inventory_store.set_seat_state(
            flight_id=flight.id, seat_id='12B', new_state=SeatState.BOOKED
        )

        availability = await inventory_store.get_class_availability(
            flight_id=flight.id, seat_class=SeatClass.ECONOMY
        )
        assert (availability.available, availability.held, availability.booked) == (18, 1, 1)

        recomputed = await inventory_store.recompute_availability(flight_id=flight.id)
        assert recomputed[SeatClass.ECONOMY] == availability

    async def test_empty_allowed_set_is_a_programming_error(
        self, inventory_store: InMemorySeatInventoryStoreImpl, flight: Flight
    ) -> None:
        with pytest.raises(ValueError):
            await inventory_store.transition_seat_state(
                flight_id=flight.id, seat_id='12A', allowed_from=set(), new_state=SeatState.HELD
            )

    async def test_unknown_seat_is_not_found(
        self, inventory_store: InMemorySeatInventoryStoreImpl, flight: Flight
    ) -> None:
        with pytest.raises(NotFoundError):
            await inventory_store.get_seat_state(flight_id=flight.id, seat_id='99Z')
