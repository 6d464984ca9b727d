from datetime import datetime
from booking_portal.models import Booking, BookingStatus
from booking_portal.utils.errors import ValidationError

# Statuses that block a new reservation, per creation path
STANDARD_BLOCKING = frozenset({BookingStatus.CONFIRMED})
OVERRIDE_BLOCKING = frozenset({BookingStatus.CONFIRMED, BookingStatus.PENDING})


class ConflictService:

    @staticmethod
    def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
        """Half-open interval intersection: [start_a, end_a) meets [start_b, end_b)."""
        return start_a < end_b and end_a > start_b

    @staticmethod
    def validate_window(start_time: datetime, end_time: datetime):
        if start_time is None or end_time is None:
            raise ValidationError.for_field('startDateTime', "Start and end date/time are required.")
        if start_time >= end_time:
            raise ValidationError.for_field('endDateTime', "End date/time must be after the start date/time.")

    @staticmethod
    def find_conflicts(resource_id, start_time, end_time, blocking=STANDARD_BLOCKING,
                       exclude_booking_id=None):
        """Return bookings on the resource with a blocking status that overlap the window."""
        # (StartA < EndB) and (EndA > StartB)
        query = Booking.query.filter(
            Booking.resource_id == resource_id,
            Booking.status.in_([s.value for s in blocking]),
            Booking.start_date_time < end_time,
            Booking.end_date_time > start_time
        )
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        return query.order_by(Booking.start_date_time, Booking.id).all()
