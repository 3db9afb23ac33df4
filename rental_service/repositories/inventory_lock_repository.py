"""
Inventory Lock Repository Implementation
"""

from rental_service.database import db
from rental_service.models import InventoryLock
from .base import InventoryLockRepositoryInterface

FLEET_LOCK = 'fleet'


class InventoryLockRepository(InventoryLockRepositoryInterface):
    """Serializes admissions through a single guard row"""

    def ensure(self, name: str = FLEET_LOCK) -> None:
        """Create and commit the guard row if it does not exist yet"""
        if db.session.get(InventoryLock, name) is None:
            db.session.add(InventoryLock(name=name, version=0))
            db.session.commit()

    def acquire(self, name: str = FLEET_LOCK) -> int:
        """Bump the guard row; must be the first write of the transaction.

        The row stays locked until the surrounding transaction ends.
        Returns the new version.
        """
        count = InventoryLock.query.filter(InventoryLock.name == name).update(
            {InventoryLock.version: InventoryLock.version + 1},
            synchronize_session=False
        )
        if count == 0:
            # First admission on a fresh database
            db.session.add(InventoryLock(name=name, version=1))
            db.session.flush()
        return db.session.query(InventoryLock.version).filter(InventoryLock.name == name).scalar()
