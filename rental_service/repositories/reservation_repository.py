"""
Reservation Repository Implementation

Methods flush but never commit; callers own the transaction.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional
from sqlalchemy import and_, or_
from rental_service.database import db
from rental_service.models import Reservation, ReservationStatus, ACTIVE_STATUSES
from .base import ReservationRepositoryInterface


class ReservationRepository(ReservationRepositoryInterface):
    """Concrete implementation of reservation repository"""

    def add(self, reservation: Reservation) -> Reservation:
        """Stage a new reservation and assign its id"""
        db.session.add(reservation)
        db.session.flush()
        return reservation

    def get_by_id(self, reservation_id: str) -> Optional[Reservation]:
        """Get reservation by ID"""
        return db.session.get(Reservation, reservation_id)

    def find_active_overlapping(self, start: date, end: date) -> List[Reservation]:
        """Active reservations whose span intersects [start, end]"""
        return Reservation.query.filter(
            and_(
                Reservation.status.in_(ACTIVE_STATUSES),
                Reservation.start_date <= end,
                Reservation.end_date >= start
            )
        ).all()

    def transition(self, reservation_id: str, from_statuses: Iterable[ReservationStatus],
                   to_status: ReservationStatus, **fields) -> bool:
        """Compare-and-swap status update.

        Only rows currently in one of ``from_statuses`` are changed. Returns
        True when the row was updated.
        """
        values = dict(fields)
        values['status'] = to_status
        values['updated_at'] = datetime.utcnow()
        count = Reservation.query.filter(
            and_(
                Reservation.id == reservation_id,
                Reservation.status.in_(tuple(from_statuses))
            )
        ).update(values, synchronize_session='fetch')
        return count == 1

    def attach_checkout_session(self, reservation_id: str, session_id: str) -> bool:
        """Record the Stripe checkout session on a reservation"""
        count = Reservation.query.filter(Reservation.id == reservation_id).update(
            {'stripe_session_id': session_id, 'updated_at': datetime.utcnow()},
            synchronize_session='fetch'
        )
        return count == 1

    def record_payment_intent(self, reservation_id: str, payment_intent_id: str) -> bool:
        """Store a payment intent on a reservation that has none yet"""
        count = Reservation.query.filter(
            and_(
                Reservation.id == reservation_id,
                Reservation.stripe_payment_intent.is_(None)
            )
        ).update(
            {'stripe_payment_intent': payment_intent_id, 'updated_at': datetime.utcnow()},
            synchronize_session='fetch'
        )
        return count == 1

    def get_stale_pending(self, now: datetime, session_grace: timedelta) -> List[Reservation]:
        """Pending reservations the sweep may cancel.

        A hold without a checkout session is stale once it expires. A hold with
        a session stays until ``session_grace`` past expiry, so a late
        checkout.session.completed delivery can still confirm it.
        """
        return Reservation.query.filter(
            and_(
                Reservation.status == ReservationStatus.PENDING,
                or_(
                    and_(Reservation.stripe_session_id.is_(None), Reservation.expires_at < now),
                    Reservation.expires_at < now - session_grace
                )
            )
        ).order_by(Reservation.expires_at).all()
