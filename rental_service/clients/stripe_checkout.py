"""
Stripe Checkout Client - hosted checkout sessions and webhook verification
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

import stripe

from rental_service.errors import InvalidRequest, SignatureInvalid, UpstreamFailure

logger = logging.getLogger(__name__)

# Stripe rejects sessions that expire less than 30 minutes after creation
MIN_SESSION_LIFETIME = timedelta(minutes=31)


@dataclass(frozen=True)
class LineItem:
    name: str
    description: str
    amount_cents: int


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: str


class StripeCheckoutClient:
    """Client for the Stripe hosted checkout flow"""

    def __init__(self, api_key: Optional[str], webhook_secret: Optional[str],
                 public_base_url: str, currency: str = 'usd', webhook_tolerance: int = 300):
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.public_base_url = public_base_url.rstrip('/')
        self.currency = currency
        self.webhook_tolerance = webhook_tolerance

    def create_session(self, reservation, line_items: Iterable[LineItem]) -> CheckoutSession:
        """
        Open a checkout session for a pending reservation

        Args:
            reservation: The persisted pending reservation
            line_items: Charges to present (rental, deposit, optional delivery)

        Returns:
            CheckoutSession with the session id and redirect URL
        """
        if not self.api_key:
            logger.error("STRIPE_SECRET_KEY is not configured")
            raise UpstreamFailure()

        expires_at = max(reservation.expires_at, datetime.utcnow() + MIN_SESSION_LIFETIME)
        params = {
            'payment_method_types': ['card'],
            'mode': 'payment',
            'line_items': [
                {
                    'price_data': {
                        'currency': self.currency,
                        'product_data': {
                            'name': item.name,
                            'description': item.description
                        },
                        'unit_amount': item.amount_cents
                    },
                    'quantity': 1
                }
                for item in line_items
            ],
            'success_url': (
                f"{self.public_base_url}/confirmation.html"
                f"?booking_id={reservation.id}&session_id={{CHECKOUT_SESSION_ID}}"
            ),
            'cancel_url': f"{self.public_base_url}/book.html?cancelled=true",
            'customer_email': reservation.customer_email,
            'client_reference_id': reservation.id,
            'metadata': {'booking_id': reservation.id},
            # Session expiry fires checkout.session.expired, which releases the hold
            'expires_at': int(expires_at.replace(tzinfo=timezone.utc).timestamp()),
        }

        try:
            session = stripe.checkout.Session.create(api_key=self.api_key, **params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed for booking {reservation.id}: {e}")
            raise UpstreamFailure() from e

        logger.info(f"Created checkout session {session.id} for booking {reservation.id}")
        return CheckoutSession(id=session.id, url=session.url)

    def verify_event(self, payload: bytes, signature_header: Optional[str]) -> dict:
        """
        Authenticate a webhook delivery and decode its envelope

        Raises:
            SignatureInvalid: missing secret, missing header or bad signature
            InvalidRequest: authenticated body that is not a JSON object
        """
        if not self.webhook_secret:
            logger.error("STRIPE_WEBHOOK_SECRET is not configured; rejecting webhook")
            raise SignatureInvalid()
        if not signature_header:
            raise SignatureInvalid("Missing Stripe-Signature header")

        try:
            body = payload.decode('utf-8') if isinstance(payload, bytes) else payload
        except UnicodeDecodeError as e:
            logger.warning("Webhook payload is not valid UTF-8")
            raise SignatureInvalid() from e
        try:
            stripe.WebhookSignature.verify_header(
                body, signature_header, self.webhook_secret, self.webhook_tolerance
            )
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            raise SignatureInvalid() from e

        try:
            envelope = json.loads(body)
        except ValueError as e:
            raise InvalidRequest("Invalid webhook payload") from e
        if not isinstance(envelope, dict):
            raise InvalidRequest("Invalid webhook payload")
        return envelope


def init_checkout_client(app):
    """Create the Stripe client from app config and attach it to the app"""
    client = StripeCheckoutClient(
        api_key=app.config.get('STRIPE_SECRET_KEY'),
        webhook_secret=app.config.get('STRIPE_WEBHOOK_SECRET'),
        public_base_url=app.config.get('PUBLIC_BASE_URL', 'http://localhost:3000'),
        currency=app.config.get('CURRENCY', 'usd'),
        webhook_tolerance=app.config.get('STRIPE_WEBHOOK_TOLERANCE_SECONDS', 300)
    )
    app.extensions['checkout_client'] = client
    return client


def get_checkout_client():
    """Checkout client attached to the current app"""
    from flask import current_app
    return current_app.extensions['checkout_client']
