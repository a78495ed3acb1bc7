import attrs

from flight_booking.service.shared_kernel.domain.enum import SeatClass, SeatState


@attrs.define(frozen=True)
class ClassAvailability:
    seat_class: SeatClass
    capacity: int = 0
    available: int = 0
    held: int = 0
    booked: int = 0

    @property
    def occupancy_rate(self) -> float:
        """Percent of capacity in the booked state."""
        if self.capacity == 0:
            return 0.0
        return self.booked * 100 / self.capacity

    @classmethod
    def count(cls, seat_class: SeatClass, states: list[SeatState]) -> 'ClassAvailability':
        return cls(
            seat_class=seat_class,
            capacity=len(states),
            available=states.count(SeatState.AVAILABLE),
            held=states.count(SeatState.HELD),
            booked=states.count(SeatState.BOOKED),
        )


@attrs.define(frozen=True)
class SeatTransition:
    """Result of a compare-and-set on a seat's state."""

    success: bool
    previous: SeatState
