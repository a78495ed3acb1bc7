from datetime import datetime
import secrets


_BASE36_DIGITS = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ'


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError('base36 input must be non-negative')
    if value == 0:
        return '0'
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return ''.join(reversed(digits))


def generate_booking_reference(*, prefix: str, now: datetime, suffix: str | None = None) -> str:
    """
    prefix + base36 millisecond timestamp + 6 random hex chars, upper case.
    e.g. FBMGX3K2Q1A9F04C
    """
    millis = int(now.timestamp() * 1000)
    random_part = suffix if suffix is not None else secrets.token_hex(3)
    return f'{prefix}{to_base36(millis)}{random_part.upper()}'
