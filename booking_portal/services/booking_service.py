from datetime import datetime
from flask import current_app
from pydantic.networks import validate_email
from booking_portal.models import Booking, BookingStatus
from booking_portal.extensions import db
from booking_portal.services.conflict_service import ConflictService, STANDARD_BLOCKING, OVERRIDE_BLOCKING
from booking_portal.services.resource_service import ResourceService
from booking_portal.services.audit_service import AuditService
from booking_portal.storage import atomic
from booking_portal.utils.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from booking_portal.utils.roles import role_of, can_override, can_manage_bookings

# Allowed status transitions. Statuses without an entry are terminal.
TRANSITIONS = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.DENIED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED}),
}

# Targets accepted by update_booking_status. OVERRIDDEN is only reached through the override cascade.
SETTABLE_STATUSES = frozenset({
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.DENIED,
    BookingStatus.CANCELLED,
    BookingStatus.COMPLETED,
})

UPDATABLE_FIELDS = frozenset({
    'event_name', 'resource_id', 'start_date_time', 'end_date_time', 'activity_type',
    'participant_count', 'incharge_name', 'incharge_email', 'contact_phone', 'description',
})

PRIORITY_ACTIVITY_TYPE = 'Placement Activity'


class BookingService:

    # --- validation helpers ---

    @staticmethod
    def _validate_fields(event_name, start_time, end_time, participant_count=None, incharge_email=None):
        """Field guards shared by every creation path. Nothing is written on failure."""
        min_length = current_app.config.get('MIN_EVENT_NAME_LENGTH', 3)
        if not event_name or len(event_name.strip()) < min_length:
            raise ValidationError.for_field(
                'eventName', f"Event name must be at least {min_length} characters long.")

        ConflictService.validate_window(start_time, end_time)

        if participant_count is not None and participant_count < 0:
            raise ValidationError.for_field('participantCount', "Participant count cannot be negative.")

        if incharge_email is not None:
            try:
                validate_email(incharge_email)
            except ValueError:
                raise ValidationError.for_field('inchargeEmail', "A valid email address is required.")

    @staticmethod
    def _get_booking(booking_id, lock=False):
        if isinstance(booking_id, bool) or not isinstance(booking_id, int) or booking_id <= 0:
            raise ValidationError.for_field('bookingId', "Booking id must be a positive integer.")
        query = Booking.query.filter(Booking.id == booking_id)
        if lock:
            query = query.with_for_update()
        booking = query.first()
        if not booking:
            raise NotFoundError(f"Booking {booking_id} not found.")
        return booking

    @staticmethod
    def _ensure_no_conflict(resource, start_time, end_time, exclude_booking_id=None):
        conflicts = ConflictService.find_conflicts(
            resource.id, start_time, end_time, STANDARD_BLOCKING, exclude_booking_id)
        if conflicts:
            current_app.logger.info(
                f"Booking rejected: {resource.name} already booked "
                f"{start_time.isoformat()} - {end_time.isoformat()} (conflicts: {[c.id for c in conflicts]})")
            raise ConflictError(
                f"{resource.name} is already booked between "
                f"{start_time.strftime('%Y-%m-%d %H:%M')} and {end_time.strftime('%Y-%m-%d %H:%M')}.",
                details={
                    'resourceId': resource.id,
                    'resourceName': resource.name,
                    'startDateTime': start_time.isoformat(),
                    'endDateTime': end_time.isoformat(),
                    'conflictingBookingIds': [c.id for c in conflicts],
                }
            )

    @staticmethod
    def _require_identity(requester):
        if requester is None:
            raise AuthenticationError("Authentication required.")

    # --- creation paths ---

    @staticmethod
    def create_direct_booking(event_name, resource_id, start_date_time, end_date_time, incharge_name,
                              incharge_email, activity_type='General', participant_count=None,
                              contact_phone=None, description=None, actor=None):
        """
        Admin path: the booking is confirmed immediately unless a confirmed
        booking already holds an overlapping slot on the resource.
        """
        BookingService._validate_fields(event_name, start_date_time, end_date_time,
                                        participant_count, incharge_email)
        if not incharge_name:
            raise ValidationError.for_field('inchargeName', "Incharge name is required.")

        actor_id = actor.id if actor is not None else None
        with atomic('creating booking'):
            resource = ResourceService.get_bookable_resource(resource_id, participant_count, lock=True)
            BookingService._ensure_no_conflict(resource, start_date_time, end_date_time)

            booking = Booking(
                event_name=event_name.strip(),
                resource_id=resource.id,
                start_date_time=start_date_time,
                end_date_time=end_date_time,
                activity_type=activity_type or 'General',
                participant_count=participant_count,
                incharge_name=incharge_name,
                incharge_email=incharge_email,
                contact_phone=contact_phone,
                description=description,
                status=BookingStatus.CONFIRMED.value,
                is_urgent=False,
                admin_id=actor_id
            )
            db.session.add(booking)

        current_app.logger.info(f"Booking {booking.id} confirmed for resource {booking.resource_id}")
        AuditService.record(booking.id, actor_id, 'Booking created',
                            f"Direct booking confirmed for {booking.event_name}")
        return booking

    @staticmethod
    def create_booking_request(requester, event_name, resource_id, start_date_time, end_date_time,
                               contact_phone, description=None, attendee_count=None):
        """Requester path: stored as Pending Approval for an approver to decide."""
        BookingService._require_identity(requester)
        BookingService._validate_fields(event_name, start_date_time, end_date_time, attendee_count)
        if not contact_phone:
            raise ValidationError.for_field('contactPhone', "Contact phone is required.")

        with atomic('submitting booking request'):
            resource = ResourceService.get_bookable_resource(resource_id, attendee_count, lock=True)
            BookingService._ensure_no_conflict(resource, start_date_time, end_date_time)

            booking = Booking(
                event_name=event_name.strip(),
                resource_id=resource.id,
                start_date_time=start_date_time,
                end_date_time=end_date_time,
                activity_type='General',
                participant_count=attendee_count,
                incharge_name=requester.name,
                incharge_email=requester.email,
                contact_phone=contact_phone,
                description=description,
                status=BookingStatus.PENDING.value,
                is_urgent=False
            )
            db.session.add(booking)

        current_app.logger.info(f"Booking request {booking.id} submitted by {requester.email}")
        AuditService.record(booking.id, requester.id, 'Booking requested',
                            'Booking request submitted and pending approval')
        return booking

    @staticmethod
    def create_priority_booking(requester, event_name, resource_id, start_date_time, end_date_time,
                                contact_phone, description=None, attendee_count=None):
        """
        Priority path for roles allowed to override.

        Every Confirmed or Pending Approval booking overlapping the window is
        moved to Cancelled - Overridden and the new booking is inserted as
        Confirmed and urgent. Both steps share one transaction: if either fails
        nothing is changed.

        Returns ``(booking, overridden_bookings)``.
        """
        BookingService._require_identity(requester)
        if not can_override(role_of(requester)):
            raise AuthorizationError("Only Placement Executives can create priority bookings.")
        BookingService._validate_fields(event_name, start_date_time, end_date_time, attendee_count)
        if not contact_phone:
            raise ValidationError.for_field('contactPhone', "Contact phone is required.")

        with atomic('creating priority booking'):
            resource = ResourceService.get_bookable_resource(resource_id, attendee_count, lock=True)
            overridden = ConflictService.find_conflicts(
                resource.id, start_date_time, end_date_time, OVERRIDE_BLOCKING)

            now = datetime.utcnow()
            for conflict in overridden:
                conflict.status = BookingStatus.OVERRIDDEN.value
                conflict.updated_at = now
            db.session.flush()

            booking = Booking(
                event_name=event_name.strip(),
                resource_id=resource.id,
                start_date_time=start_date_time,
                end_date_time=end_date_time,
                activity_type=PRIORITY_ACTIVITY_TYPE,
                participant_count=attendee_count,
                incharge_name=requester.name,
                incharge_email=requester.email,
                contact_phone=contact_phone,
                description=description,
                status=BookingStatus.CONFIRMED.value,
                is_urgent=True
            )
            db.session.add(booking)
            overridden_ids = [b.id for b in overridden]

        if overridden_ids:
            current_app.logger.warning(
                f"Priority booking {booking.id} by {requester.email} overrode bookings {overridden_ids}")
        else:
            current_app.logger.info(f"Priority booking {booking.id} created by {requester.email}")

        for overridden_id in overridden_ids:
            AuditService.record(overridden_id, requester.id,
                                f"Status changed to {BookingStatus.OVERRIDDEN.value}",
                                f"Overridden by priority booking {booking.id}")
        AuditService.record(booking.id, requester.id, 'Priority booking created',
                            f"Overrode {len(overridden_ids)} booking(s)")
        return booking, overridden

    # --- status lifecycle ---

    @staticmethod
    def _ensure_transition(booking, target):
        current = booking.booking_status
        if target not in TRANSITIONS.get(current, frozenset()):
            raise InvalidTransitionError(
                f"Booking {booking.id} cannot change from {current.value} to {target.value}.",
                details={'bookingId': booking.id, 'from': current.value, 'to': target.value}
            )
        if target == BookingStatus.CANCELLED and booking.start_date_time <= datetime.now():
            raise InvalidTransitionError(
                f"Booking {booking.id} has already started and can no longer be cancelled.",
                details={'bookingId': booking.id, 'startDateTime': booking.start_date_time.isoformat()}
            )

    @staticmethod
    def _apply_status(booking, target, actor_id=None, denial_reason=None):
        previous = booking.booking_status
        BookingService._ensure_transition(booking, target)

        if target == BookingStatus.CONFIRMED and previous == BookingStatus.PENDING \
                and current_app.config.get('REVALIDATE_ON_APPROVE', True):
            BookingService._ensure_no_conflict(
                booking.resource, booking.start_date_time, booking.end_date_time,
                exclude_booking_id=booking.id)

        booking.status = target.value
        if actor_id is not None:
            booking.admin_id = actor_id
        if target == BookingStatus.DENIED:
            booking.denial_reason = denial_reason or current_app.config.get(
                'DEFAULT_DENIAL_REASON', 'No reason specified')
        booking.updated_at = datetime.utcnow()
        return previous

    @staticmethod
    def update_booking_status(booking_id, new_status, actor=None, denial_reason=None):
        try:
            target = BookingStatus.parse(new_status)
        except ValueError:
            target = None
        if target not in SETTABLE_STATUSES:
            raise ValidationError.for_field(
                'status', "Invalid status. Must be: Pending, Confirmed, Cancelled, Completed, or Denied")

        actor_id = actor.id if actor is not None else None
        with atomic('updating booking status'):
            booking = BookingService._get_booking(booking_id, lock=True)
            previous = BookingService._apply_status(booking, target, actor_id, denial_reason)

        current_app.logger.info(f"Booking {booking_id} status {previous.value} -> {target.value}")
        if target == BookingStatus.DENIED:
            details = f"Reason: {booking.denial_reason}"
        else:
            details = f"Status updated from {previous.value}"
        AuditService.record(booking_id, actor_id, f"Status changed to {target.value}", details)
        return booking

    @staticmethod
    def cancel_booking(booking_id, actor):
        """Requester self-cancel, or cancellation by a booking manager."""
        BookingService._require_identity(actor)
        manager = can_manage_bookings(role_of(actor))

        with atomic('cancelling booking'):
            booking = BookingService._get_booking(booking_id, lock=True)
            if not manager and (booking.incharge_email or '').lower() != (actor.email or '').lower():
                raise AuthorizationError("You can only cancel your own bookings.")
            previous = BookingService._apply_status(
                booking, BookingStatus.CANCELLED, actor.id if manager else None)

        current_app.logger.info(f"Booking {booking_id} cancelled by {actor.email}")
        AuditService.record(booking_id, actor.id, f"Status changed to {BookingStatus.CANCELLED.value}",
                            f"Cancelled from {previous.value}")
        return booking

    # --- edits ---

    @staticmethod
    def update_booking(booking_id, actor=None, **fields):
        """
        Partial update; fields left as None keep their stored value.
        The overlap check re-runs only when resource and both times are given together.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                "Unknown or read-only booking fields.",
                details=[{'field': name, 'message': 'Field cannot be updated'} for name in sorted(unknown)]
            )
        changes = {k: v for k, v in fields.items() if v is not None}
        if 'event_name' in changes:
            min_length = current_app.config.get('MIN_EVENT_NAME_LENGTH', 3)
            if len(changes['event_name'].strip()) < min_length:
                raise ValidationError.for_field(
                    'eventName', f"Event name must be at least {min_length} characters long.")
        if 'participant_count' in changes and changes['participant_count'] < 0:
            raise ValidationError.for_field('participantCount', "Participant count cannot be negative.")
        if 'incharge_email' in changes:
            try:
                validate_email(changes['incharge_email'])
            except ValueError:
                raise ValidationError.for_field('inchargeEmail', "A valid email address is required.")

        actor_id = actor.id if actor is not None else None
        reschedule_keys = {'resource_id', 'start_date_time', 'end_date_time'}
        with atomic('updating booking'):
            booking = BookingService._get_booking(booking_id, lock=True)

            start_time = changes.get('start_date_time', booking.start_date_time)
            end_time = changes.get('end_date_time', booking.end_date_time)
            ConflictService.validate_window(start_time, end_time)

            if 'resource_id' in changes or 'participant_count' in changes:
                resource = ResourceService.get_bookable_resource(
                    changes.get('resource_id', booking.resource_id),
                    changes.get('participant_count', booking.participant_count),
                    lock=True
                )
                if reschedule_keys <= set(changes):
                    BookingService._ensure_no_conflict(resource, start_time, end_time,
                                                       exclude_booking_id=booking.id)

            for name, value in changes.items():
                setattr(booking, name, value)
            booking.updated_at = datetime.utcnow()

        rescheduled = bool(reschedule_keys & set(changes))
        current_app.logger.info(f"Booking {booking_id} updated ({', '.join(sorted(changes)) or 'no changes'})")
        AuditService.record(booking_id, actor_id,
                            'Booking rescheduled' if rescheduled else 'Booking updated',
                            f"Fields: {', '.join(sorted(changes))}" if changes else None)
        return booking

    @staticmethod
    def delete_booking(booking_id, actor=None):
        """Remove the row outright. Soft cancellation goes through cancel_booking."""
        with atomic('deleting booking'):
            booking = BookingService._get_booking(booking_id, lock=True)
            summary = f"{booking.event_name} ({booking.status})"
            db.session.delete(booking)

        current_app.logger.info(f"Booking {booking_id} deleted")
        AuditService.record(booking_id, actor.id if actor is not None else None, 'Booking deleted', summary)

    # --- reads ---

    @staticmethod
    def get_booking(booking_id):
        return BookingService._get_booking(booking_id)

    @staticmethod
    def list_bookings(status=None, resource_id=None, incharge_email=None, start_date=None, end_date=None):
        query = Booking.query
        if status:
            try:
                query = query.filter(Booking.status == BookingStatus.parse(status).value)
            except ValueError:
                raise ValidationError.for_field('status', f"Unknown booking status '{status}'.")
        if resource_id is not None:
            query = query.filter(Booking.resource_id == resource_id)
        if incharge_email:
            query = query.filter(Booking.incharge_email == incharge_email)
        if start_date is not None and end_date is not None:
            ConflictService.validate_window(start_date, end_date)
        if start_date is not None:
            query = query.filter(Booking.end_date_time > start_date)
        if end_date is not None:
            query = query.filter(Booking.start_date_time < end_date)
        return query.order_by(Booking.start_date_time.desc(), Booking.id.desc()).all()

    @staticmethod
    def get_user_requests(user):
        """Bookings requested by the user, newest first."""
        BookingService._require_identity(user)
        return Booking.query.filter(
            Booking.incharge_email == user.email
        ).order_by(Booking.created_at.desc(), Booking.id.desc()).all()
