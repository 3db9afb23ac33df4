"""
Bookings Controller - booking creation and confirmation lookup
"""

from flask import request
from flask_restx import Namespace, Resource, fields
from rental_service.errors import RentalServiceError
from rental_service.services import BookingService, ReservationService
import logging

logger = logging.getLogger(__name__)

bookings_ns = Namespace('bookings', description='Booking operations')

booking_request_model = bookings_ns.model('BookingRequest', {
    'customer_name': fields.String(required=True, description='Customer full name'),
    'customer_email': fields.String(required=True, description='Customer email'),
    'customer_phone': fields.String(required=True, description='Customer phone'),
    'rental_type': fields.String(required=True, description='Rental product identifier'),
    'start_date': fields.Date(required=True, description='First rental day'),
    'pickup_delivery': fields.String(required=True, enum=['pickup', 'delivery'], description='Fulfillment mode'),
    'delivery_address': fields.String(description='Required for delivery'),
    'notes': fields.String(description='Additional notes')
})

booking_created_model = bookings_ns.model('BookingCreated', {
    'booking_id': fields.String(description='Reservation identifier'),
    'checkout_url': fields.String(description='Hosted checkout redirect URL')
})


@bookings_ns.route('')
class BookingList(Resource):
    @bookings_ns.doc('create_booking')
    @bookings_ns.expect(booking_request_model)
    @bookings_ns.response(200, 'Pending booking created', booking_created_model)
    @bookings_ns.response(400, 'Invalid request')
    @bookings_ns.response(409, 'No machines available')
    def post(self):
        """Create a pending booking and return the checkout URL"""
        try:
            booking_service = BookingService()
            return booking_service.create_booking(request.get_json(silent=True)), 200

        except RentalServiceError as e:
            if e.status_code >= 500:
                logger.error(f"Booking creation failed upstream: {e}")
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error creating booking: {e}")
            return {'error': 'Internal server error'}, 500


@bookings_ns.route('/<string:booking_id>')
class Booking(Resource):
    @bookings_ns.doc('get_booking')
    def get(self, booking_id):
        """Get booking status for the confirmation page"""
        try:
            reservation_service = ReservationService()
            return reservation_service.get_booking(booking_id), 200

        except RentalServiceError as e:
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error getting booking {booking_id}: {e}")
            return {'error': 'Internal server error'}, 500
