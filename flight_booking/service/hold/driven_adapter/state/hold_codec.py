from typing import Any

from flight_booking.service.hold.domain.hold_entity import Hold, SeatLock
from flight_booking.service.shared_kernel.domain.enum import SeatClass
from flight_booking.service.shared_kernel.driven_adapter.json_codec import parse_datetime


def seat_lock_from_dict(data: dict[str, Any]) -> SeatLock:
    return SeatLock(
        flight_id=data['flight_id'],
        seat_id=data['seat_id'],
        holder_id=data['holder_id'],
        session_id=data['session_id'],
        held_at=parse_datetime(data['held_at']),  # type: ignore[arg-type]
        expires_at=parse_datetime(data['expires_at']),  # type: ignore[arg-type]
    )


def hold_from_dict(data: dict[str, Any]) -> Hold:
    # cjson re-encodes an emptied table as {} and numbers as floats
    seat_prices = data.get('seat_prices') or {}
    seat_classes = data.get('seat_classes') or {}
    return Hold(
        session_id=data['session_id'],
        flight_id=data['flight_id'],
        holder_id=data['holder_id'],
        seat_ids=list(data['seat_ids']),
        created_at=parse_datetime(data['created_at']),  # type: ignore[arg-type]
        expires_at=parse_datetime(data['expires_at']),  # type: ignore[arg-type]
        seat_prices={seat_id: int(price) for seat_id, price in seat_prices.items()},
        seat_classes={seat_id: SeatClass(value) for seat_id, value in seat_classes.items()},
    )
