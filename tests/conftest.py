import os
import sys
import hashlib
import hmac
import json
import tempfile
import time
import pytest
from datetime import date, datetime, timedelta
from itertools import count

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Set test environment variables before importing the app
os.environ['FLASK_ENV'] = 'testing'

from rental_service import create_app
from rental_service.clients import StripeCheckoutClient, CheckoutSession
from rental_service.errors import UpstreamFailure
from rental_service.models import db, Reservation, BlockedDate, ReservationStatus, FulfillmentMode

WEBHOOK_SECRET = 'whsec_test_secret'


@pytest.fixture(scope='session')
def app():
    """Create application for the tests.

    Backed by a temporary SQLite file so threads get their own connections.
    """
    db_fd, db_path = tempfile.mkstemp(suffix='.db')
    app = create_app('testing', {'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}'})

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()

    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """A test runner for the app's Click commands."""
    return app.test_cli_runner()


@pytest.fixture
def db_session(app):
    """Database session for a test; every table is emptied afterwards."""
    yield db.session

    db.session.rollback()
    for table in reversed(db.metadata.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()


class FakeCheckoutClient(StripeCheckoutClient):
    """Checkout client that never talks to Stripe.

    Webhook verification is inherited, so signed payloads still go through
    the real Stripe signature check.
    """

    def __init__(self):
        super().__init__(
            api_key='sk_test_dummy',
            webhook_secret=WEBHOOK_SECRET,
            public_base_url='https://rentals.example.com'
        )
        self.sessions = []
        self.error = None
        self._ids = count(1)

    def create_session(self, reservation, line_items):
        if self.error is not None:
            raise self.error
        session = CheckoutSession(
            id=f'cs_test_{next(self._ids)}',
            url=f'https://checkout.stripe.test/pay/{reservation.id}'
        )
        self.sessions.append({
            'session': session,
            'booking_id': reservation.id,
            'line_items': list(line_items),
            'expires_at': reservation.expires_at
        })
        return session


@pytest.fixture
def checkout_client(app):
    """Swap the app's Stripe client for a fake for the duration of a test."""
    original = app.extensions['checkout_client']
    fake = FakeCheckoutClient()
    app.extensions['checkout_client'] = fake
    yield fake
    app.extensions['checkout_client'] = original


@pytest.fixture
def failing_checkout_client(checkout_client):
    checkout_client.error = UpstreamFailure()
    return checkout_client


# Helper functions for tests
def next_weekday(weekday, after=None):
    """First date strictly after ``after`` (default: a week from today) falling on ``weekday``"""
    day = (after or date.today() + timedelta(days=7)) + timedelta(days=1)
    while day.weekday() != weekday:
        day += timedelta(days=1)
    return day


def create_test_reservation(db_session, start_date, end_date=None, **kwargs):
    """Create a test reservation with default values."""
    defaults = {
        'rental_type': 'full_day_weekday',
        'start_date': start_date,
        'end_date': end_date or start_date,
        'status': ReservationStatus.CONFIRMED,
        'customer_name': 'Test Customer',
        'customer_email': 'customer@example.com',
        'customer_phone': '555-0100',
        'fulfillment': FulfillmentMode.PICKUP,
        'total_amount_cents': 37500,
        'deposit_amount_cents': 30000,
        'expires_at': datetime.utcnow() + timedelta(hours=1)
    }
    defaults.update(kwargs)

    reservation = Reservation(**defaults)
    db_session.add(reservation)
    db_session.commit()
    return reservation


def create_test_blocked_date(db_session, day, machine_id=None, reason='Maintenance'):
    """Create a test blocked date; machine_id None blocks the whole fleet."""
    blocked = BlockedDate(date=day, machine_id=machine_id, reason=reason)
    db_session.add(blocked)
    db_session.commit()
    return blocked


# Test data generators
def generate_booking_data(**kwargs):
    """Generate booking request test data."""
    defaults = {
        'customer_name': 'Jane Doe',
        'customer_email': 'jane@example.com',
        'customer_phone': '555-0123',
        'rental_type': 'full_day_weekday',
        'start_date': next_weekday(0).isoformat(),
        'pickup_delivery': 'pickup',
        'notes': 'Gate code 1234'
    }
    defaults.update(kwargs)
    return defaults


def generate_stripe_event(event_type, booking_id=None, **object_fields):
    """Generate a Stripe event envelope."""
    data_object = {'id': 'cs_test_1', 'object': 'checkout.session'}
    if booking_id is not None:
        data_object['metadata'] = {'booking_id': booking_id}
    data_object.update(object_fields)
    return {
        'id': f'evt_{event_type.replace(".", "_")}',
        'object': 'event',
        'type': event_type,
        'data': {'object': data_object}
    }


def sign_payload(payload, secret=WEBHOOK_SECRET, timestamp=None):
    """Build a Stripe-Signature header for a payload."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f'{timestamp}.{payload}'.encode('utf-8')
    signature = hmac.new(secret.encode('utf-8'), signed, hashlib.sha256).hexdigest()
    return f't={timestamp},v1={signature}'


def signed_event(event_type, booking_id=None, **object_fields):
    """Serialized event body and a valid signature header for it."""
    payload = json.dumps(generate_stripe_event(event_type, booking_id, **object_fields))
    return payload, sign_payload(payload)
