# app/lifecycle.py

"""
Booking status state machine.

    PENDENTE ──> CONFIRMADO ──> CANCELADO
        │             │             │
        └─────────────┴──> CONCLUIDO <┘

PENDENTE also goes straight to CANCELADO. Requesting the current status is a
no-op. Anything else is rejected.

Observers are plain callables taking a BookingStatusChanged. They run
synchronously, in registration order, after the new status is committed.
"""

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional

from app.errors import AuthorizationError, NotFound, ValidationError
from app.logging_config import get_logger
from app.models import Booking
from app.schemas import BookingStatus
from app.settings import SchedulingSettings
from app.stores import Stores

logger = get_logger(__name__)


@dataclass(frozen=True)
class BookingStatusChanged:
    booking_id: int
    old_status: BookingStatus
    new_status: BookingStatus
    client_id: int
    tenant_id: int


StatusObserver = Callable[[BookingStatusChanged], None]

ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDENTE: frozenset({
        BookingStatus.CONFIRMADO, BookingStatus.CANCELADO, BookingStatus.CONCLUIDO,
    }),
    BookingStatus.CONFIRMADO: frozenset({BookingStatus.CANCELADO, BookingStatus.CONCLUIDO}),
    BookingStatus.CANCELADO: frozenset({BookingStatus.CONCLUIDO}),
    BookingStatus.CONCLUIDO: frozenset(),
}

REJECTION_MESSAGES = {
    (BookingStatus.CANCELADO, BookingStatus.CONFIRMADO): "Cannot confirm a cancelled booking",
    (BookingStatus.CONCLUIDO, BookingStatus.CANCELADO): "Cannot cancel a completed booking",
}


def validate_transition(current: BookingStatus, requested: BookingStatus):
    if requested in ALLOWED_TRANSITIONS[current]:
        return
    message = REJECTION_MESSAGES.get(
        (current, requested),
        f"Cannot change booking status from {current.value} to {requested.value}",
    )
    raise ValidationError(message)


class BookingLifecycle:
    def __init__(
        self,
        stores: Stores,
        settings: SchedulingSettings,
        observers: Optional[List[StatusObserver]] = None,
    ):
        self.stores = stores
        self.settings = settings
        # own copy; register() must not grow a list shared across requests
        self.observers = list(observers) if observers is not None else []

    def register(self, observer: StatusObserver):
        self.observers.append(observer)

    def update_booking_status(self, booking_id: int, tenant_id: int, new_status: BookingStatus) -> Booking:
        booking = self.stores.bookings.get(booking_id)
        if booking is None:
            raise NotFound(f"Booking {booking_id} not found")
        if booking.tenant_id != tenant_id:
            raise AuthorizationError("This booking does not belong to your tenant")
        return self.transition(booking, new_status)

    def transition(self, booking: Booking, new_status: BookingStatus) -> Booking:
        """Apply a status change to an already authorized booking."""
        old_status = booking.status
        if old_status == new_status:
            return booking

        validate_transition(old_status, new_status)

        booking.status = new_status
        booking.updated_at = self.settings.now()
        self.stores.bookings.add(booking)
        self.stores.commit()
        self.stores.refresh(booking)

        logger.info("booking_status_changed", booking_id=booking.id,
                    old_status=old_status.value, new_status=new_status.value)
        self._notify(BookingStatusChanged(
            booking_id=booking.id,
            old_status=old_status,
            new_status=new_status,
            client_id=booking.client_id,
            tenant_id=booking.tenant_id,
        ))
        return booking

    def _notify(self, event: BookingStatusChanged):
        for observer in self.observers:
            try:
                observer(event)
            except Exception:
                # delivery is best effort; the status change is already committed
                logger.exception("status_observer_failed", booking_id=event.booking_id,
                                 observer=getattr(observer, "__name__", repr(observer)))


def log_status_change(event: BookingStatusChanged):
    logger.info(
        "booking_status_notification",
        booking_id=event.booking_id,
        old_status=event.old_status.value,
        new_status=event.new_status.value,
        client_id=event.client_id,
        tenant_id=event.tenant_id,
    )


# process-wide observers handed to every BookingLifecycle built by the API
status_observers: List[StatusObserver] = [log_status_change]


def get_status_observers() -> List[StatusObserver]:
    return status_observers
