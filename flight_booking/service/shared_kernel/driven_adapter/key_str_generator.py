"""
Key String Generator

Helper functions for generating Kvrocks keys. Every key is derived
deterministically from domain identifiers so any instance can find any
hold, seat or booking.
"""

from flight_booking.platform.config.core_setting import settings


def _make_key(key: str) -> str:
    """Add prefix to key for test isolation in parallel testing"""
    return f'{settings.KVROCKS_KEY_PREFIX}{key}'


def make_seat_lock_key(*, flight_id: str, seat_id: str) -> str:
    return _make_key(f'seat_hold:{flight_id}:{seat_id}')


def make_seat_lock_pattern(*, flight_id: str) -> str:
    return _make_key(f'seat_hold:{flight_id}:*')


def make_hold_key(*, session_id: str) -> str:
    return _make_key(f'hold:{session_id}')


def make_flight_key(*, flight_id: str) -> str:
    return _make_key(f'flight:{flight_id}')


def make_flight_index_key() -> str:
    return _make_key('flights')


def make_seat_state_key(*, flight_id: str) -> str:
    """Hash: seat_id -> available | held | booked"""
    return _make_key(f'seat_state:{flight_id}')


def make_seat_class_key(*, flight_id: str) -> str:
    """Hash: seat_id -> economy | business | first"""
    return _make_key(f'seat_class:{flight_id}')


def make_seat_price_key(*, flight_id: str) -> str:
    """Hash: seat_id -> price charged (minor units), set at commit"""
    return _make_key(f'seat_price:{flight_id}')


def make_seat_stats_key(*, flight_id: str) -> str:
    """Hash: "<class>:<capacity|available|held|booked>" -> count"""
    return _make_key(f'seat_stats:{flight_id}')


def make_booking_key(*, reference: str) -> str:
    return _make_key(f'booking:{reference}')


def make_booking_session_key(*, session_id: str) -> str:
    """Hold session -> booking reference, makes commit retry-safe"""
    return _make_key(f'booking_session:{session_id}')


def make_flight_bookings_key(*, flight_id: str) -> str:
    return _make_key(f'flight_bookings:{flight_id}')


def make_user_bookings_key(*, user_id: str) -> str:
    return _make_key(f'user_bookings:{user_id}')


def make_price_cache_key(*, flight_id: str, seat_class: str) -> str:
    return _make_key(f'price:{flight_id}:{seat_class}')


def make_price_cache_pattern(*, flight_id: str | None = None) -> str:
    return _make_key(f'price:{flight_id}:*' if flight_id else 'price:*')


def make_route_pricing_key(*, source: str, destination: str) -> str:
    return _make_key(f'route_pricing:{source}-{destination}')
