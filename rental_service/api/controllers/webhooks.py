"""
Stripe Webhook Endpoint
Plain Flask blueprint: signature verification needs the raw request body
"""

from flask import Blueprint, request, jsonify
from rental_service.clients import get_checkout_client
from rental_service.errors import RentalServiceError
from rental_service.services import PaymentEventService
import logging

logger = logging.getLogger(__name__)

webhooks_bp = Blueprint('webhooks', __name__, url_prefix='/api/webhooks')


@webhooks_bp.route('/stripe', methods=['POST'])
def stripe_webhook():
    """
    Receive Stripe events.
    Returns 400 only for a bad signature or payload; every other delivery,
    including one that fails to apply, gets 200.
    """
    payload = request.get_data()
    signature = request.headers.get('Stripe-Signature')

    try:
        envelope = get_checkout_client().verify_event(payload, signature)
    except RentalServiceError as e:
        return jsonify(e.to_dict()), e.status_code

    event_type = envelope.get('type')
    try:
        outcome = PaymentEventService().apply(envelope)
        logger.info(f"Processed Stripe event {envelope.get('id')} ({event_type}): {outcome.value}")
    except Exception as e:
        logger.error(f"Failed to apply Stripe event {envelope.get('id')} ({event_type}): {e}")

    return jsonify({'received': True}), 200
