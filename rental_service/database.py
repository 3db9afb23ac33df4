"""
Database instance, migrations and transaction helpers
"""

from contextlib import contextmanager

from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()


def init_db(app):
    """Bind the database and migration extensions to the Flask app"""
    db.init_app(app)
    migrate.init_app(app, db)
    return db


@contextmanager
def atomic():
    """Run a block as one transaction: commit on success, roll back on any error."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
