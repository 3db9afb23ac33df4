"""
Clients Module
Centralized exports for all external service clients
"""

from rental_service.clients.stripe_checkout import (
    StripeCheckoutClient,
    CheckoutSession,
    LineItem,
    init_checkout_client,
    get_checkout_client
)

__all__ = [
    'StripeCheckoutClient',
    'CheckoutSession',
    'LineItem',
    'init_checkout_client',
    'get_checkout_client',
]
