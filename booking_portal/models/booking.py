from booking_portal.extensions import db
from datetime import datetime
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = 'Pending Approval'
    CONFIRMED = 'Confirmed'
    DENIED = 'Denied'
    CANCELLED = 'Cancelled'
    OVERRIDDEN = 'Cancelled - Overridden'
    COMPLETED = 'Completed'

    @classmethod
    def parse(cls, value):
        """Map an incoming status label to a member; 'Pending' is a legacy alias."""
        if isinstance(value, cls):
            return value
        if value == 'Pending':
            return cls.PENDING
        return cls(value)

    @property
    def is_terminal(self):
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({
    BookingStatus.DENIED,
    BookingStatus.CANCELLED,
    BookingStatus.OVERRIDDEN,
    BookingStatus.COMPLETED,
})


class Booking(db.Model):
    __tablename__ = 'bookings'

    id = db.Column(db.Integer, primary_key=True)
    resource_id = db.Column(db.Integer, db.ForeignKey('resources.id'), nullable=False, index=True)

    start_date_time = db.Column(db.DateTime, nullable=False, index=True)
    end_date_time = db.Column(db.DateTime, nullable=False, index=True)

    event_name = db.Column(db.String(200), nullable=False)
    activity_type = db.Column(db.String(100), nullable=False, default='General')
    participant_count = db.Column(db.Integer)
    description = db.Column(db.Text)

    incharge_name = db.Column(db.String(200), nullable=False)
    incharge_email = db.Column(db.String(200), nullable=False, index=True)
    contact_phone = db.Column(db.String(50))

    status = db.Column(db.String(30), nullable=False, default=BookingStatus.PENDING.value, index=True)
    is_urgent = db.Column(db.Boolean, nullable=False, default=False)
    denial_reason = db.Column(db.String(500))
    admin_id = db.Column(db.Integer)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    resource = db.relationship('Resource', lazy='joined', innerjoin=True)

    __table_args__ = (
        db.CheckConstraint('start_date_time < end_date_time', name='check_booking_window'),
        db.CheckConstraint('participant_count IS NULL OR participant_count >= 0',
                           name='check_booking_participants'),
        db.CheckConstraint(
            "status IN ('Pending Approval','Confirmed','Denied','Cancelled','Cancelled - Overridden','Completed')",
            name='check_booking_status'),
    )

    @property
    def booking_status(self):
        return BookingStatus(self.status)

    def __repr__(self):
        return f"<Booking {self.id} resource={self.resource_id} status={self.status}>"

    def to_dict(self):
        return {
            'id': self.id,
            'eventName': self.event_name,
            'resourceId': self.resource_id,
            'resourceName': self.resource.name if self.resource else None,
            'resourceType': self.resource.type if self.resource else None,
            'location': self.resource.location if self.resource else None,
            'startDateTime': self.start_date_time.isoformat(),
            'endDateTime': self.end_date_time.isoformat(),
            'activityType': self.activity_type,
            'participantCount': self.participant_count,
            'description': self.description,
            'inchargeName': self.incharge_name,
            'inchargeEmail': self.incharge_email,
            'contactPhone': self.contact_phone,
            'status': self.status,
            'isUrgent': self.is_urgent,
            'denialReason': self.denial_reason,
            'adminId': self.admin_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
