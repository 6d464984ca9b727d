from flask import current_app
from booking_portal.extensions import db
from booking_portal.models import AuditLog


class AuditService:

    @staticmethod
    def record(booking_id, actor_id, action, details=None):
        """
        Append an audit entry after the primary change has been committed.
        Best effort: a failed write is rolled back and logged, never raised.
        """
        try:
            entry = AuditLog(booking_id=booking_id, actor_id=actor_id, action=action, details=details)
            db.session.add(entry)
            db.session.commit()
            return entry
        except Exception as e:
            db.session.rollback()
            current_app.logger.warning(f"Audit write failed for booking {booking_id} ({action}): {e}")
            return None

    @staticmethod
    def list_entries(booking_id=None, limit=200):
        query = AuditLog.query
        if booking_id is not None:
            query = query.filter(AuditLog.booking_id == booking_id)
        return query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()
