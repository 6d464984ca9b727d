"""Database lifecycle helpers around the ``db`` extension.

The engine is bound once by ``create_app``; these helpers probe it at startup,
report health, and wrap multi-step writes so they commit or roll back as one.
"""
from contextlib import contextmanager
import time

from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from booking_portal.extensions import db
from booking_portal.utils.errors import BookingError, TransactionError


def check_database_health() -> bool:
    try:
        db.session.execute(text('SELECT 1'))
        return True
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Database health check failed: {e}")
        return False


def wait_for_database(app):
    """Probe the database, retrying with a fixed delay. Raises after the last attempt."""
    retries = max(1, app.config.get('DB_CONNECT_RETRIES', 3))
    delay = app.config.get('DB_CONNECT_RETRY_DELAY', 5)

    with app.app_context():
        for attempt in range(1, retries + 1):
            try:
                with db.engine.connect() as conn:
                    conn.execute(text('SELECT 1'))
                app.logger.info(f"Database connection established (attempt {attempt}/{retries})")
                return
            except SQLAlchemyError as e:
                app.logger.warning(f"Database connection attempt {attempt}/{retries} failed: {e}")
                db.engine.dispose()
                if attempt == retries:
                    app.logger.error("All database connection attempts failed")
                    raise
                time.sleep(delay)


def close_database(app):
    with app.app_context():
        db.session.remove()
        db.engine.dispose()
    app.logger.info("Database connections closed")


@contextmanager
def atomic(description):
    """Run a unit of work in the current session and commit it once.

    Storage errors roll back and surface as an opaque TransactionError. Any
    other error, domain or not, rolls back and propagates unchanged.
    """
    try:
        yield db.session
        db.session.commit()
    except BookingError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Transaction failed while {description}: {e}")
        raise TransactionError(f"Failed while {description}; no changes were saved") from e
    except Exception:
        db.session.rollback()
        raise
