"""
Inventory Lock Model
"""

from rental_service.database import db
from datetime import datetime


class InventoryLock(db.Model):
    """Guard row bumped at the start of every admission transaction.

    The UPDATE takes a row (or, on SQLite, database) write lock that is held
    until commit, so capacity checks and inserts never interleave.
    """
    __tablename__ = 'inventory_locks'

    name = db.Column(db.String(50), primary_key=True)
    version = db.Column(db.Integer, default=0, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<InventoryLock {self.name} v{self.version}>'
