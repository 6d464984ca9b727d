from booking_portal.schemas.booking import (
    AvailabilityQuery,
    BookingListQuery,
    BookingRequestCreate,
    BookingStatusUpdate,
    BookingUpdate,
    DirectBookingCreate,
    PriorityBookingCreate,
)
