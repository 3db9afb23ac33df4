"""
Reservation Service - lookup, manual cancellation and the pending sweep
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional
import logging

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from rental_service.database import atomic
from rental_service.errors import BookingNotFound, UpstreamFailure
from rental_service.models import ReservationStatus, ACTIVE_STATUSES
from rental_service.repositories import ReservationRepository

logger = logging.getLogger(__name__)


class ReservationService:
    """Business logic for reservation management"""

    def __init__(self):
        self.reservation_repo = ReservationRepository()

    def get_booking(self, booking_id: str) -> Dict[str, Any]:
        """Get booking summary by ID"""
        try:
            reservation = self.reservation_repo.get_by_id(booking_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting booking {booking_id}: {e}")
            raise UpstreamFailure() from e
        if reservation is None:
            raise BookingNotFound(booking_id)
        return reservation.to_dict()

    def cancel_booking(self, booking_id: str) -> bool:
        """Cancel an active booking; False if it is already cancelled or finished"""
        with atomic():
            if self.reservation_repo.get_by_id(booking_id) is None:
                raise BookingNotFound(booking_id)
            cancelled = self.reservation_repo.transition(
                booking_id, ACTIVE_STATUSES, ReservationStatus.CANCELLED
            )

        if cancelled:
            logger.info(f"Cancelled booking {booking_id}")
        return cancelled

    def expire_stale_pending(self, now: Optional[datetime] = None,
                             session_grace: Optional[timedelta] = None) -> Dict[str, Any]:
        """
        Cancel pending bookings whose checkout window has elapsed

        Bookings that reached Stripe are only cancelled once ``session_grace``
        has also passed; until then checkout.session.expired releases them.
        """
        now = now or datetime.utcnow()
        if session_grace is None:
            session_grace = timedelta(hours=current_app.config.get('PENDING_SWEEP_GRACE_HOURS', 72))
        processed_count = 0

        with atomic():
            for reservation in self.reservation_repo.get_stale_pending(now, session_grace):
                # Rows confirmed by a webhook in the meantime are skipped
                if self.reservation_repo.transition(
                        reservation.id, [ReservationStatus.PENDING], ReservationStatus.CANCELLED):
                    processed_count += 1
                    logger.info(f"Expired pending booking {reservation.id}")

        return {
            'processed_count': processed_count,
            'processed_at': now.isoformat()
        }
