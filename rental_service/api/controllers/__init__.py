"""
Controllers package initialization
"""

from flask import Blueprint
from flask_restx import Api

from rental_service.api.controllers.availability import availability_ns
from rental_service.api.controllers.bookings import bookings_ns
from rental_service.api.controllers.webhooks import webhooks_bp
from rental_service.api.controllers.health import health_bp

# Public JSON API
api_bp = Blueprint('api', __name__)
api = Api(api_bp, version='1.0', title='Rental API',
          description='Machine rental availability and booking endpoints', doc='/docs/')

api.add_namespace(availability_ns, path='/availability')
api.add_namespace(bookings_ns, path='/bookings')

__all__ = ['api_bp', 'webhooks_bp', 'health_bp']
