"""
Payment Event Service - applies verified Stripe events to reservations

Every transition is a conditional UPDATE on the current status, so
redelivered or out-of-order events cannot double-apply or undo a payment.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union
import logging

from rental_service.database import atomic
from rental_service.models import ReservationStatus
from rental_service.repositories import ReservationRepository

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = 'checkout.session.completed'
CHECKOUT_EXPIRED = 'checkout.session.expired'
CHARGE_REFUNDED = 'charge.refunded'


@dataclass(frozen=True)
class CheckoutCompleted:
    reservation_id: str
    payment_intent_id: Optional[str]
    session_id: Optional[str] = None


@dataclass(frozen=True)
class CheckoutExpired:
    reservation_id: str
    session_id: Optional[str] = None


@dataclass(frozen=True)
class ChargeRefunded:
    charge_id: Optional[str]


@dataclass(frozen=True)
class IgnoredEvent:
    event_type: Optional[str]
    reason: str


PaymentEvent = Union[CheckoutCompleted, CheckoutExpired, ChargeRefunded, IgnoredEvent]


class Outcome(Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    ALREADY_APPLIED = "already_applied"
    UNCHANGED = "unchanged"
    LOGGED = "logged"
    IGNORED = "ignored"


def classify_event(envelope: Dict[str, Any]) -> PaymentEvent:
    """Turn a Stripe event envelope into one of the events we act on"""
    event_type = envelope.get('type')
    data_object = (envelope.get('data') or {}).get('object') or {}

    if event_type in (CHECKOUT_COMPLETED, CHECKOUT_EXPIRED):
        booking_id = (data_object.get('metadata') or {}).get('booking_id')
        if not booking_id:
            return IgnoredEvent(event_type, 'no booking_id in session metadata')
        if event_type == CHECKOUT_COMPLETED:
            return CheckoutCompleted(booking_id, data_object.get('payment_intent'), data_object.get('id'))
        return CheckoutExpired(booking_id, data_object.get('id'))

    if event_type == CHARGE_REFUNDED:
        return ChargeRefunded(data_object.get('id'))

    return IgnoredEvent(event_type, 'unhandled event type')


class PaymentEventService:
    """Business logic for payment lifecycle events"""

    def __init__(self):
        self.reservation_repo = ReservationRepository()

    def apply(self, envelope: Dict[str, Any]) -> Outcome:
        """Classify an already-authenticated event envelope and apply it"""
        event = classify_event(envelope)

        if isinstance(event, CheckoutCompleted):
            return self._confirm(event)
        if isinstance(event, CheckoutExpired):
            return self._expire(event)
        if isinstance(event, ChargeRefunded):
            # Deposit refunds are handled by staff in the Stripe dashboard
            logger.info(f"Charge refunded: {event.charge_id}")
            return Outcome.LOGGED

        logger.info(f"Ignoring event {event.event_type}: {event.reason}")
        return Outcome.IGNORED

    def _confirm(self, event: CheckoutCompleted) -> Outcome:
        with atomic():
            if self.reservation_repo.transition(
                    event.reservation_id,
                    [ReservationStatus.PENDING],
                    ReservationStatus.CONFIRMED,
                    stripe_payment_intent=event.payment_intent_id):
                logger.info(f"Booking {event.reservation_id} confirmed")
                return Outcome.CONFIRMED

            reservation = self.reservation_repo.get_by_id(event.reservation_id)
            if (reservation is not None and reservation.status == ReservationStatus.CANCELLED
                    and event.payment_intent_id):
                # Kept for the refund; the booking stays cancelled
                self.reservation_repo.record_payment_intent(event.reservation_id, event.payment_intent_id)

        if reservation is None:
            logger.warning(f"Checkout completed for unknown booking {event.reservation_id}")
            return Outcome.IGNORED
        if reservation.status == ReservationStatus.CANCELLED:
            logger.warning(
                f"Payment {event.payment_intent_id} received for cancelled booking "
                f"{event.reservation_id}; needs manual review"
            )
            return Outcome.UNCHANGED

        logger.info(f"Booking {event.reservation_id} already {reservation.status.value}; completion replay ignored")
        return Outcome.ALREADY_APPLIED

    def _expire(self, event: CheckoutExpired) -> Outcome:
        with atomic():
            cancelled = self.reservation_repo.transition(
                event.reservation_id, [ReservationStatus.PENDING], ReservationStatus.CANCELLED
            )
            reservation = None if cancelled else self.reservation_repo.get_by_id(event.reservation_id)

        if cancelled:
            logger.info(f"Booking {event.reservation_id} cancelled (session expired)")
            return Outcome.CANCELLED
        if reservation is None:
            logger.warning(f"Checkout expired for unknown booking {event.reservation_id}")
            return Outcome.IGNORED

        logger.info(f"Booking {event.reservation_id} is {reservation.status.value}; expiry ignored")
        return Outcome.UNCHANGED
