"""
Reservation Model
"""

from rental_service.database import db
from datetime import datetime
import uuid
from .enums import ReservationStatus, FulfillmentMode


class Reservation(db.Model):
    """Machine rental reservation"""
    __tablename__ = 'reservations'
    __table_args__ = (
        db.Index('ix_reservations_status_span', 'status', 'start_date', 'end_date'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    rental_type = db.Column(db.String(50), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.Enum(ReservationStatus), default=ReservationStatus.PENDING, nullable=False)

    customer_name = db.Column(db.String(200), nullable=False)
    customer_email = db.Column(db.String(254), nullable=False)
    customer_phone = db.Column(db.String(50), nullable=False)
    fulfillment = db.Column(db.Enum(FulfillmentMode), nullable=False)
    delivery_address = db.Column(db.Text, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    total_amount_cents = db.Column(db.Integer, nullable=False)
    deposit_amount_cents = db.Column(db.Integer, nullable=False)

    stripe_session_id = db.Column(db.String(255), nullable=True, index=True)
    stripe_payment_intent = db.Column(db.String(255), nullable=True)

    expires_at = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Reservation {self.id} {self.rental_type} {self.start_date}..{self.end_date}>'

    def to_dict(self):
        """Public summary, safe to show on the confirmation page"""
        return {
            'booking_id': self.id,
            'rental_type': self.rental_type,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'status': self.status.value,
            'pickup_delivery': self.fulfillment.value,
            'total_amount': self.total_amount_cents,
            'deposit_amount': self.deposit_amount_cents,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
