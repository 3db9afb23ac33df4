"""
Base Repository Interface - Abstract base classes
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional
from rental_service.models import Reservation, ReservationStatus, BlockedDate


class ReservationRepositoryInterface(ABC):
    """Abstract base class for reservation repository"""

    @abstractmethod
    def add(self, reservation: Reservation) -> Reservation:
        pass

    @abstractmethod
    def get_by_id(self, reservation_id: str) -> Optional[Reservation]:
        pass

    @abstractmethod
    def find_active_overlapping(self, start: date, end: date) -> List[Reservation]:
        pass

    @abstractmethod
    def transition(self, reservation_id: str, from_statuses: Iterable[ReservationStatus],
                   to_status: ReservationStatus, **fields) -> bool:
        pass

    @abstractmethod
    def attach_checkout_session(self, reservation_id: str, session_id: str) -> bool:
        pass

    @abstractmethod
    def record_payment_intent(self, reservation_id: str, payment_intent_id: str) -> bool:
        pass

    @abstractmethod
    def get_stale_pending(self, now: datetime, session_grace: timedelta) -> List[Reservation]:
        pass


class BlockedDateRepositoryInterface(ABC):
    """Abstract base class for blocked date repository"""

    @abstractmethod
    def find_between(self, start: date, end: date) -> List[BlockedDate]:
        pass

    @abstractmethod
    def exists(self, day: date, machine_id: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    def add(self, day: date, machine_id: Optional[int] = None, reason: str = None) -> BlockedDate:
        pass

    @abstractmethod
    def remove(self, day: date, machine_id: Optional[int] = None) -> int:
        pass


class InventoryLockRepositoryInterface(ABC):
    """Abstract base class for the admission lock"""

    @abstractmethod
    def ensure(self, name: str) -> None:
        pass

    @abstractmethod
    def acquire(self, name: str) -> int:
        pass
