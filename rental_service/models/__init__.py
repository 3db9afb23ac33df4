"""
Models package - Database models for the rental service
"""

# Import database instance
from rental_service.database import db

# Import enums first
from .enums import ReservationStatus, FulfillmentMode, DayType, ACTIVE_STATUSES

# Import models
from .reservation import Reservation
from .blocked_date import BlockedDate
from .inventory_lock import InventoryLock

# Export all models and enums
__all__ = [
    'db',
    'ReservationStatus',
    'FulfillmentMode',
    'DayType',
    'ACTIVE_STATUSES',
    'Reservation',
    'BlockedDate',
    'InventoryLock'
]
