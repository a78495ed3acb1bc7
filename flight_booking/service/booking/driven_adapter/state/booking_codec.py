from typing import Any

from flight_booking.service.booking.domain.booking_entity import Booking
from flight_booking.service.booking.domain.passenger import Passenger
from flight_booking.service.shared_kernel.domain.enum import BookingStatus, PaymentStatus, SeatClass
from flight_booking.service.shared_kernel.driven_adapter.json_codec import parse_datetime


_DATETIME_FIELDS = (
    'created_at',
    'updated_at',
    'paid_at',
    'checked_in_at',
    'completed_at',
    'cancelled_at',
)


def booking_from_dict(data: dict[str, Any]) -> Booking:
    return Booking(
        reference=data['reference'],
        flight_id=data['flight_id'],
        user_id=data['user_id'],
        hold_session_id=data['hold_session_id'],
        seat_ids=list(data['seat_ids']),
        passengers=[Passenger(**passenger) for passenger in data['passengers']],
        seat_prices={seat_id: int(price) for seat_id, price in data['seat_prices'].items()},
        seat_classes={seat_id: SeatClass(value) for seat_id, value in data['seat_classes'].items()},
        total_price=int(data['total_price']),
        status=BookingStatus(data['status']),
        payment_status=PaymentStatus(data['payment_status']),
        payment_method=data.get('payment_method'),
        transaction_id=data.get('transaction_id'),
        cancelled_by=data.get('cancelled_by'),
        cancellation_reason=data.get('cancellation_reason'),
        **{field: parse_datetime(data.get(field)) for field in _DATETIME_FIELDS},
    )
