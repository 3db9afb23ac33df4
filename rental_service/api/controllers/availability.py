"""
Availability Controller - bookable start dates per rental type
"""

from flask import request
from flask_restx import Namespace, Resource, fields
from marshmallow import ValidationError
from rental_service.errors import RentalServiceError
from rental_service.services import AvailabilityService
from rental_service.utils.schemas import AvailabilityQuerySchema
import logging

logger = logging.getLogger(__name__)

availability_ns = Namespace('availability', description='Date availability')

availability_query_schema = AvailabilityQuerySchema()

availability_model = availability_ns.model('Availability', {
    'rental_type': fields.String(description='Rental product identifier'),
    'price': fields.Integer(description='Product price in cents'),
    'days': fields.Integer(description='Rental span in days'),
    'available_dates': fields.List(fields.String, description='Bookable start dates'),
    'machines_by_date': fields.Raw(description='Remaining machines per start date')
})


@availability_ns.route('')
class Availability(Resource):
    @availability_ns.doc('get_availability', params={
        'start': 'First date (YYYY-MM-DD), defaults to today',
        'end': 'Last date (YYYY-MM-DD), defaults to today + 90 days',
        'type': 'Rental type, defaults to full_day_weekday'
    })
    @availability_ns.response(200, 'Success', availability_model)
    def get(self):
        """Get available start dates and remaining machines"""
        try:
            args = {key: value for key, value in request.args.items() if value}
            params = availability_query_schema.load(args)

            availability_service = AvailabilityService()
            return availability_service.get_availability(
                start=params['start'],
                end=params['end'],
                product_id=params['type']
            ), 200

        except ValidationError as e:
            return {'error': 'Invalid query parameters', 'code': 'INVALID_REQUEST', 'details': e.messages}, 400
        except RentalServiceError as e:
            if e.status_code >= 500:
                logger.error(f"Availability lookup failed: {e}")
            return e.to_dict(), e.status_code
        except Exception as e:
            logger.error(f"Error computing availability: {e}")
            return {'error': 'Internal server error'}, 500
