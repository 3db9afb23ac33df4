"""
Blocked Date Model
"""

from rental_service.database import db
from datetime import datetime


class BlockedDate(db.Model):
    """A day taken out of service, for one machine or (machine_id NULL) the whole fleet"""
    __tablename__ = 'blocked_dates'

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    machine_id = db.Column(db.Integer, nullable=True)
    reason = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        scope = f'machine {self.machine_id}' if self.machine_id is not None else 'all machines'
        return f'<BlockedDate {self.date} {scope}>'
