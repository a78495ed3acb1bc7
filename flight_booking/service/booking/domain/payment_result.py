import attrs

from flight_booking.service.shared_kernel.domain.enum import PaymentStatus


@attrs.define(frozen=True)
class PaymentResult:
    """Outcome reported by the (external) payment collaborator."""

    status: PaymentStatus
    transaction_id: str | None = None
    method: str | None = None
