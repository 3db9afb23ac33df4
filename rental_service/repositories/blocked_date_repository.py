"""
Blocked Date Repository Implementation
"""

from datetime import date
from typing import List, Optional
from sqlalchemy import and_
from rental_service.database import db
from rental_service.models import BlockedDate
from .base import BlockedDateRepositoryInterface


class BlockedDateRepository(BlockedDateRepositoryInterface):
    """Concrete implementation of blocked date repository"""

    def find_between(self, start: date, end: date) -> List[BlockedDate]:
        """Blocked dates in [start, end]"""
        return BlockedDate.query.filter(
            and_(BlockedDate.date >= start, BlockedDate.date <= end)
        ).all()

    def _scoped(self, day: date, machine_id: Optional[int]):
        query = BlockedDate.query.filter(BlockedDate.date == day)
        if machine_id is None:
            return query.filter(BlockedDate.machine_id.is_(None))
        return query.filter(BlockedDate.machine_id == machine_id)

    def exists(self, day: date, machine_id: Optional[int] = None) -> bool:
        return self._scoped(day, machine_id).first() is not None

    def add(self, day: date, machine_id: Optional[int] = None, reason: str = None) -> BlockedDate:
        blocked = BlockedDate(date=day, machine_id=machine_id, reason=reason)
        db.session.add(blocked)
        db.session.flush()
        return blocked

    def remove(self, day: date, machine_id: Optional[int] = None) -> int:
        """Delete matching blocks, returning how many were removed"""
        return self._scoped(day, machine_id).delete(synchronize_session='fetch')
