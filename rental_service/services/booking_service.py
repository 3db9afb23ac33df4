"""
Booking Service - admission of new reservations and checkout hand-off
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional, Tuple
import logging
from uuid import uuid4

from flask import current_app
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from rental_service.catalog import RentalProduct, get_catalog
from rental_service.clients import LineItem, get_checkout_client
from rental_service.database import atomic
from rental_service.errors import CapacityExceeded, InvalidRequest, UpstreamFailure
from rental_service.models import Reservation, ReservationStatus, FulfillmentMode
from rental_service.repositories import ReservationRepository, InventoryLockRepository
from rental_service.services.availability_service import AvailabilityService, DateVerdict
from rental_service.utils.schemas import BookingRequestSchema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Quote:
    line_items: Tuple[LineItem, ...]
    total_cents: int
    deposit_cents: int


class BookingService:
    """Business logic for booking admission"""

    def __init__(self, catalog=None, checkout_client=None):
        self.config = current_app.config
        self.catalog = catalog or get_catalog()
        self.checkout_client = checkout_client or get_checkout_client()
        self.availability = AvailabilityService(self.catalog, self.config['FLEET_SIZE'])
        self.reservation_repo = ReservationRepository()
        self.lock_repo = InventoryLockRepository()
        self.request_schema = BookingRequestSchema()

    def quote(self, product: RentalProduct, fulfillment: FulfillmentMode,
              start_date: date, end_date: date) -> Quote:
        """Price a rental: product charge, refundable deposit, optional delivery fee"""
        deposit = self.config['DEPOSIT_AMOUNT_CENTS']
        items = [
            LineItem(product.name, f"{start_date.isoformat()} to {end_date.isoformat()}",
                     product.unit_price_cents),
            LineItem('Security Deposit', 'Refundable upon return of equipment in good condition', deposit),
        ]
        if fulfillment is FulfillmentMode.DELIVERY:
            items.append(LineItem('Delivery Fee', 'Delivery within 15 miles', self.config['DELIVERY_FEE_CENTS']))

        return Quote(
            line_items=tuple(items),
            total_cents=sum(item.amount_cents for item in items),
            deposit_cents=deposit
        )

    def create_booking(self, payload: Optional[Dict[str, Any]], today: Optional[date] = None) -> Dict[str, str]:
        """
        Admit a booking request and open its checkout session

        Args:
            payload: Raw request body
            today: Reference date for rejecting past start dates

        Returns:
            Dict with booking_id and checkout_url

        Raises:
            InvalidRequest, InvalidProduct, CapacityExceeded, UpstreamFailure
        """
        try:
            data = self.request_schema.load(payload or {})
        except ValidationError as e:
            raise InvalidRequest('Missing or invalid fields', details=e.messages) from e

        product = self.catalog.lookup(data['rental_type'])
        start_date = data['start_date']
        end_date = product.end_date(start_date)
        today = today or date.today()

        if start_date < today:
            raise InvalidRequest('Start date cannot be in the past',
                                 details={'start_date': start_date.isoformat()})
        if not product.can_start_on(start_date):
            raise InvalidRequest(f"{product.name} is not offered starting {start_date:%A}",
                                 details={'start_date': start_date.isoformat(), 'rental_type': product.id})

        fulfillment = FulfillmentMode(data['pickup_delivery'])
        quote = self.quote(product, fulfillment, start_date, end_date)
        reservation = self._admit(product, data, fulfillment, start_date, end_date, quote)

        try:
            session = self.checkout_client.create_session(reservation, quote.line_items)
        except UpstreamFailure:
            self._release(reservation.id)
            raise
        except Exception as e:
            logger.error(f"Checkout creation failed for booking {reservation.id}: {e}")
            self._release(reservation.id)
            raise UpstreamFailure() from e

        self._attach_session(reservation.id, session.id)
        logger.info(f"Booking {reservation.id} awaiting payment, session {session.id}")
        return {'booking_id': reservation.id, 'checkout_url': session.url}

    def _admit(self, product: RentalProduct, data: Dict[str, Any], fulfillment: FulfillmentMode,
               start_date: date, end_date: date, quote: Quote) -> Reservation:
        """Capacity check and insert as one transaction behind the inventory lock"""
        now = datetime.utcnow()
        reservation_id = str(uuid4())
        try:
            with atomic():
                self.lock_repo.acquire()
                calendar = self.availability.load_calendar(start_date, end_date)
                verdict, remaining = calendar.verdict(product, start_date)
                if verdict is not DateVerdict.OFFERED:
                    logger.info(f"Refused {product.id} booking for {start_date}..{end_date}: {verdict.value}")
                    raise CapacityExceeded(start_date, end_date)

                reservation = Reservation(
                    id=reservation_id,
                    rental_type=product.id,
                    start_date=start_date,
                    end_date=end_date,
                    status=ReservationStatus.PENDING,
                    customer_name=data['customer_name'],
                    customer_email=data['customer_email'],
                    customer_phone=data['customer_phone'],
                    fulfillment=fulfillment,
                    delivery_address=data.get('delivery_address') if fulfillment is FulfillmentMode.DELIVERY else None,
                    notes=data.get('notes'),
                    total_amount_cents=quote.total_cents,
                    deposit_amount_cents=quote.deposit_cents,
                    expires_at=now + timedelta(minutes=self.config['PENDING_RESERVATION_TTL_MINUTES']),
                    created_at=now,
                    updated_at=now
                )
                self.reservation_repo.add(reservation)
        except SQLAlchemyError as e:
            logger.error(f"Error persisting booking for {start_date}..{end_date}: {e}")
            raise UpstreamFailure() from e

        logger.info(f"Created pending booking {reservation_id} ({product.id}, {start_date}..{end_date}, "
                    f"{remaining - 1} machines left on start date)")
        return reservation

    def _release(self, reservation_id: str) -> None:
        """Cancel a pending reservation whose checkout could not be opened"""
        try:
            with atomic():
                self.reservation_repo.transition(
                    reservation_id, [ReservationStatus.PENDING], ReservationStatus.CANCELLED
                )
        except SQLAlchemyError as e:
            logger.error(f"Could not release booking {reservation_id}, left for the pending sweep: {e}")

    def _attach_session(self, reservation_id: str, session_id: str) -> None:
        try:
            with atomic():
                self.reservation_repo.attach_checkout_session(reservation_id, session_id)
        except SQLAlchemyError as e:
            # Webhooks locate the booking through session metadata, not this column
            logger.error(f"Could not store session {session_id} on booking {reservation_id}: {e}")
