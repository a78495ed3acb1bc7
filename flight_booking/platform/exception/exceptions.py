class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    log_level: str = 'WARNING'

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


# Hold / booking taxonomy


class HoldExpiredError(CustomBaseError):
    """Hold TTL elapsed (or the hold never existed); the caller must re-hold."""

    def __init__(self, message: str = 'Hold has expired') -> None:
        super().__init__(message, 410)


class HoldMismatchError(CustomBaseError):
    """Holder or session does not match the current lock owner."""

    def __init__(self, message: str = 'Hold does not belong to this session') -> None:
        super().__init__(message, 403)


class InventoryConflictError(CustomBaseError):
    """Seat was not in the expected state at commit time - a coordination bug."""

    log_level = 'ERROR'

    def __init__(self, message: str, *, seat_id: str | None = None) -> None:
        self.seat_id = seat_id
        super().__init__(message, 409)


class NotCancellableError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class NotCheckinWindowError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class PaymentFailedError(DomainError):
    def __init__(self, message: str = 'Payment failed') -> None:
        super().__init__(message, 402)


class StoreUnavailableError(CustomBaseError):
    log_level = 'ERROR'

    def __init__(self, message: str) -> None:
        super().__init__(message, 503)


class TransientStoreError(Exception):
    """Connection/timeout failure talking to the shared store. Retryable."""
