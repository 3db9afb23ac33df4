"""
Repositories package - Data access layer for the rental service
"""

# Import interfaces
from .base import (
    ReservationRepositoryInterface,
    BlockedDateRepositoryInterface,
    InventoryLockRepositoryInterface
)

# Import concrete implementations
from .reservation_repository import ReservationRepository
from .blocked_date_repository import BlockedDateRepository
from .inventory_lock_repository import InventoryLockRepository, FLEET_LOCK

# Export all interfaces and implementations
__all__ = [
    'ReservationRepositoryInterface',
    'BlockedDateRepositoryInterface',
    'InventoryLockRepositoryInterface',
    'ReservationRepository',
    'BlockedDateRepository',
    'InventoryLockRepository',
    'FLEET_LOCK'
]
