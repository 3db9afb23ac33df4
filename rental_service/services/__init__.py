"""
Services package - Business logic layer
"""

from rental_service.services.availability_service import AvailabilityService, CapacityCalendar, DateVerdict
from rental_service.services.booking_service import BookingService, Quote
from rental_service.services.reservation_service import ReservationService
from rental_service.services.payment_event_service import PaymentEventService, Outcome, classify_event

__all__ = [
    'AvailabilityService',
    'CapacityCalendar',
    'DateVerdict',
    'BookingService',
    'Quote',
    'ReservationService',
    'PaymentEventService',
    'Outcome',
    'classify_event'
]
