from booking_portal.models import Resource, Booking, BookingStatus
from booking_portal.services.conflict_service import ConflictService
from booking_portal.utils.errors import NotFoundError, ValidationError


class ResourceService:

    @staticmethod
    def list_active_resources():
        return Resource.query.filter(Resource.is_active == True).order_by(Resource.name).all()

    @staticmethod
    def get_resource(resource_id):
        """Active resource by id, or NotFoundError."""
        resource = Resource.query.filter(Resource.id == resource_id, Resource.is_active == True).first()
        if not resource:
            raise NotFoundError(f"Resource {resource_id} not found.")
        return resource

    @staticmethod
    def get_bookable_resource(resource_id, participant_count=None, lock=False):
        """
        Resolve the resource a booking is written against.

        With ``lock`` the resource row is selected FOR UPDATE so that concurrent
        check-then-write sequences on the same resource run one after another
        (databases without row locks, such as SQLite, ignore the clause).
        """
        query = Resource.query.filter(Resource.id == resource_id, Resource.is_active == True)
        if lock:
            query = query.with_for_update()
        resource = query.first()
        if not resource:
            raise NotFoundError(f"Resource {resource_id} not found or inactive.")

        if participant_count is not None and resource.capacity is not None \
                and participant_count > resource.capacity:
            raise ValidationError.for_field(
                'participantCount',
                f"Resource capacity error: {resource.name} holds {resource.capacity}, requested {participant_count}."
            )
        return resource

    @staticmethod
    def search_resources(term):
        pattern = f"%{term}%"
        return Resource.query.filter(
            Resource.is_active == True,
            (Resource.name.ilike(pattern)
             | Resource.type.ilike(pattern)
             | Resource.location.ilike(pattern)
             | Resource.description.ilike(pattern))
        ).order_by(Resource.name).all()

    @staticmethod
    def get_availability(resource_id, range_start, range_end):
        """Confirmed bookings on the resource that intersect [range_start, range_end)."""
        ConflictService.validate_window(range_start, range_end)
        ResourceService.get_resource(resource_id)
        return Booking.query.filter(
            Booking.resource_id == resource_id,
            Booking.status == BookingStatus.CONFIRMED.value,
            Booking.start_date_time < range_end,
            Booking.end_date_time > range_start
        ).order_by(Booking.start_date_time).all()
