from enum import StrEnum


class FlightStatus(StrEnum):
    SCHEDULED = 'scheduled'
    DELAYED = 'delayed'
    BOARDING = 'boarding'
    DEPARTED = 'departed'
    ARRIVED = 'arrived'
    CANCELLED = 'cancelled'

    @property
    def accepts_holds(self) -> bool:
        return self in (FlightStatus.SCHEDULED, FlightStatus.DELAYED)
