from booking_portal.models.resource import Resource
from booking_portal.models.booking import Booking, BookingStatus, TERMINAL_STATUSES
from booking_portal.models.user import User
from booking_portal.models.audit_log import AuditLog
