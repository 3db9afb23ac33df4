import json
from datetime import timedelta
from unittest.mock import patch

from rental_service.models import Reservation, ReservationStatus
from tests.conftest import (
    create_test_reservation, create_test_blocked_date, generate_booking_data,
    next_weekday, sign_payload, signed_event
)


def post_booking(client, **kwargs):
    return client.post('/api/bookings',
                       data=json.dumps(generate_booking_data(**kwargs)),
                       content_type='application/json')


class TestAvailabilityEndpoint:
    """Test GET /api/availability."""

    def test_get_availability(self, client, db_session):
        monday = next_weekday(0)
        tuesday = monday + timedelta(days=1)
        sunday = monday + timedelta(days=6)
        create_test_reservation(db_session, tuesday)

        response = client.get(f'/api/availability?start={monday}&end={sunday}&type=full_day_weekday')

        assert response.status_code == 200
        json_data = response.get_json()
        assert json_data['rental_type'] == 'full_day_weekday'
        assert json_data['price'] == 7500
        assert json_data['days'] == 1
        assert len(json_data['available_dates']) == 5
        assert json_data['machines_by_date'][monday.isoformat()] == 3
        assert json_data['machines_by_date'][tuesday.isoformat()] == 2

    def test_blocked_date_absent(self, client, db_session):
        monday = next_weekday(0)
        create_test_blocked_date(db_session, monday)

        response = client.get(f'/api/availability?start={monday}&end={monday}&type=weekly')

        assert response.status_code == 200
        assert response.get_json()['available_dates'] == []

    def test_defaults(self, client, db_session):
        response = client.get('/api/availability?type=')

        assert response.status_code == 200
        json_data = response.get_json()
        assert json_data['rental_type'] == 'full_day_weekday'
        assert len(json_data['available_dates']) > 0

    def test_unknown_rental_type(self, client, db_session):
        response = client.get('/api/availability?type=monthly')

        assert response.status_code == 400
        json_data = response.get_json()
        assert json_data['code'] == 'INVALID_PRODUCT'
        assert json_data['error'] == 'Invalid rental type'

    def test_invalid_date(self, client, db_session):
        response = client.get('/api/availability?start=06/10/2025')

        assert response.status_code == 400
        assert 'start' in response.get_json()['details']

    def test_range_too_long(self, client, db_session):
        response = client.get('/api/availability?start=2025-01-01&end=2026-12-31')

        assert response.status_code == 400
        assert response.get_json()['code'] == 'INVALID_REQUEST'


class TestBookingEndpoints:
    """Test POST /api/bookings and GET /api/bookings/<id>."""

    def test_create_booking(self, client, db_session, checkout_client):
        response = post_booking(client)

        assert response.status_code == 200
        json_data = response.get_json()
        assert set(json_data) == {'booking_id', 'checkout_url'}
        assert json_data['checkout_url'].startswith('https://checkout.stripe.test/pay/')

        reservation = db_session.get(Reservation, json_data['booking_id'])
        assert reservation.status == ReservationStatus.PENDING

    def test_create_booking_invalid(self, client, db_session, checkout_client):
        response = client.post('/api/bookings',
                               data=json.dumps({'customer_name': 'Jane'}),
                               content_type='application/json')

        assert response.status_code == 400
        json_data = response.get_json()
        assert json_data['code'] == 'INVALID_REQUEST'
        assert 'customer_email' in json_data['details']

    def test_create_booking_not_json(self, client, db_session, checkout_client):
        response = client.post('/api/bookings', data='name=Jane', content_type='text/plain')

        assert response.status_code == 400

    def test_create_booking_no_capacity(self, client, db_session, checkout_client):
        day = next_weekday(2)
        for _ in range(3):
            create_test_reservation(db_session, day)

        response = post_booking(client, start_date=day.isoformat())

        assert response.status_code == 409
        assert response.get_json()['error'] == 'No machines available for selected dates'

    def test_create_booking_checkout_down(self, client, db_session, failing_checkout_client):
        response = post_booking(client)

        assert response.status_code == 502
        assert response.get_json()['code'] == 'UPSTREAM_FAILURE'
        assert Reservation.query.one().status == ReservationStatus.CANCELLED

    def test_get_booking(self, client, db_session, checkout_client):
        booking_id = post_booking(client).get_json()['booking_id']

        response = client.get(f'/api/bookings/{booking_id}')

        assert response.status_code == 200
        json_data = response.get_json()
        assert json_data['booking_id'] == booking_id
        assert json_data['status'] == 'pending'

    def test_get_booking_not_found(self, client, db_session):
        response = client.get('/api/bookings/does-not-exist')

        assert response.status_code == 404
        assert response.get_json()['code'] == 'BOOKING_NOT_FOUND'


class TestStripeWebhook:
    """Test POST /api/webhooks/stripe."""

    def post_event(self, client, payload, signature):
        headers = {'Stripe-Signature': signature} if signature else {}
        return client.post('/api/webhooks/stripe', data=payload,
                           content_type='application/json', headers=headers)

    def test_checkout_completed_confirms(self, client, db_session):
        reservation = create_test_reservation(db_session, next_weekday(1), status=ReservationStatus.PENDING)
        payload, signature = signed_event('checkout.session.completed', reservation.id, payment_intent='pi_1')

        response = self.post_event(client, payload, signature)

        assert response.status_code == 200
        assert response.get_json() == {'received': True}
        db_session.refresh(reservation)
        assert reservation.status == ReservationStatus.CONFIRMED

    def test_redelivery_is_acknowledged(self, client, db_session):
        reservation = create_test_reservation(db_session, next_weekday(1), status=ReservationStatus.PENDING)
        payload, signature = signed_event('checkout.session.completed', reservation.id)

        first = self.post_event(client, payload, signature)
        second = self.post_event(client, payload, signature)

        assert first.status_code == 200
        assert second.status_code == 200
        db_session.refresh(reservation)
        assert reservation.status == ReservationStatus.CONFIRMED

    def test_unknown_event_type(self, client, db_session):
        payload, signature = signed_event('customer.created')

        response = self.post_event(client, payload, signature)

        assert response.status_code == 200
        assert response.get_json() == {'received': True}

    def test_bad_signature(self, client, db_session):
        reservation = create_test_reservation(db_session, next_weekday(1), status=ReservationStatus.PENDING)
        payload, _ = signed_event('checkout.session.completed', reservation.id)

        response = self.post_event(client, payload, sign_payload(payload, secret='whsec_forged'))

        assert response.status_code == 400
        assert response.get_json()['code'] == 'SIGNATURE_INVALID'
        db_session.refresh(reservation)
        assert reservation.status == ReservationStatus.PENDING

    def test_missing_signature(self, client, db_session):
        payload, _ = signed_event('checkout.session.completed', 'booking-1')

        response = self.post_event(client, payload, None)

        assert response.status_code == 400

    def test_undecodable_body(self, client, db_session):
        response = self.post_event(client, b'\xff\xfe{"type":"x"}', 't=1,v1=abc')

        assert response.status_code == 400
        assert response.get_json()['code'] == 'SIGNATURE_INVALID'

    def test_signed_garbage(self, client, db_session):
        payload = 'not json'

        response = self.post_event(client, payload, sign_payload(payload))

        assert response.status_code == 400
        assert response.get_json()['code'] == 'INVALID_REQUEST'

    def test_apply_failure_is_acknowledged(self, client, db_session):
        payload, signature = signed_event('checkout.session.completed', 'booking-1')

        with patch('rental_service.api.controllers.webhooks.PaymentEventService.apply',
                   side_effect=RuntimeError('database unavailable')):
            response = self.post_event(client, payload, signature)

        assert response.status_code == 200
        assert response.get_json() == {'received': True}


class TestOperationalEndpoints:
    """Test health checks and app-level behavior."""

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.get_json()['status'] == 'healthy'

    def test_readiness(self, client, db_session):
        response = client.get('/health/ready')

        assert response.status_code == 200
        json_data = response.get_json()
        assert json_data['status'] == 'ready'
        assert json_data['checks']['database']['status'] == 'healthy'

    def test_unknown_route(self, client):
        response = client.get('/nope')

        assert response.status_code == 404
        assert response.get_json()['code'] == 'NOT_FOUND'

    def test_correlation_id_echoed(self, client):
        response = client.get('/health', headers={'X-Correlation-ID': 'abc-123'})

        assert response.headers['X-Correlation-ID'] == 'abc-123'

    def test_correlation_id_generated(self, client):
        response = client.get('/health')

        assert len(response.headers['X-Correlation-ID']) == 36
