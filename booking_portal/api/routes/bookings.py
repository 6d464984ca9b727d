from flask import Blueprint, request, jsonify
from booking_portal.services.booking_service import BookingService
from booking_portal.schemas import (
    BookingListQuery,
    BookingRequestCreate,
    BookingStatusUpdate,
    BookingUpdate,
    DirectBookingCreate,
    PriorityBookingCreate,
)
from booking_portal.utils.decorators import token_required, capability_required
from booking_portal.utils.errors import ValidationError, parse_id
from booking_portal.utils.roles import can_create_direct, can_manage_bookings

bookings_bp = Blueprint('bookings', __name__)


def get_payload():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('No input data provided')
    return data


@bookings_bp.route('/', methods=['GET'])
@token_required
def list_bookings(current_user):
    query = BookingListQuery.model_validate(request.args.to_dict())
    bookings = BookingService.list_bookings(
        status=query.status,
        resource_id=query.resource_id,
        incharge_email=query.incharge_email,
        start_date=query.start_date,
        end_date=query.end_date
    )
    return jsonify({'success': True, 'data': [b.to_dict() for b in bookings]})


@bookings_bp.route('/', methods=['POST'])
@token_required
@capability_required(can_create_direct, 'Only portal admins can create confirmed bookings directly')
def create_booking(current_user):
    data = DirectBookingCreate.model_validate(get_payload())
    booking = BookingService.create_direct_booking(
        event_name=data.event_name,
        resource_id=data.resource_id,
        start_date_time=data.start_date_time,
        end_date_time=data.end_date_time,
        incharge_name=data.incharge_name,
        incharge_email=data.incharge_email,
        activity_type=data.activity_type,
        participant_count=data.participant_count,
        contact_phone=data.contact_phone,
        description=data.description,
        actor=current_user
    )
    return jsonify({'success': True, 'message': 'Booking created successfully', 'data': booking.to_dict()}), 201


@bookings_bp.route('/my-requests', methods=['GET'])
@token_required
def get_my_requests(current_user):
    bookings = BookingService.get_user_requests(current_user)
    return jsonify({'success': True, 'bookings': [b.to_dict() for b in bookings]})


@bookings_bp.route('/user/role', methods=['GET'])
@token_required
def get_user_role(current_user):
    return jsonify({'success': True, 'role': current_user.role})


@bookings_bp.route('/requests', methods=['POST'])
@token_required
def create_booking_request(current_user):
    data = BookingRequestCreate.model_validate(get_payload())
    booking = BookingService.create_booking_request(
        requester=current_user,
        event_name=data.event_name,
        resource_id=data.resource_id,
        start_date_time=data.start_date_time,
        end_date_time=data.end_date_time,
        contact_phone=data.contact_phone,
        description=data.description,
        attendee_count=data.attendee_count
    )
    return jsonify({
        'success': True,
        'message': 'Booking request submitted successfully and is pending approval',
        'data': booking.to_dict()
    }), 201


@bookings_bp.route('/priority-booking', methods=['POST'])
@token_required
def create_priority_booking(current_user):
    data = PriorityBookingCreate.model_validate(get_payload())
    booking, overridden = BookingService.create_priority_booking(
        requester=current_user,
        event_name=data.event_name,
        resource_id=data.resource_id,
        start_date_time=data.start_date_time,
        end_date_time=data.end_date_time,
        contact_phone=data.contact_phone,
        description=data.description,
        attendee_count=data.attendee_count
    )
    return jsonify({
        'success': True,
        'message': 'Priority booking created successfully',
        'data': booking.to_dict(),
        'overriddenBookings': len(overridden),
        'overriddenBookingIds': [b.id for b in overridden]
    }), 201


@bookings_bp.route('/<booking_id>', methods=['GET'])
@token_required
def get_booking(current_user, booking_id):
    booking = BookingService.get_booking(parse_id(booking_id, 'bookingId'))
    return jsonify({'success': True, 'data': booking.to_dict()})


@bookings_bp.route('/<booking_id>', methods=['PUT'])
@token_required
@capability_required(can_manage_bookings, 'Admin privilege required')
def update_booking(current_user, booking_id):
    booking_id = parse_id(booking_id, 'bookingId')
    data = BookingUpdate.model_validate(get_payload())
    booking = BookingService.update_booking(
        booking_id,
        actor=current_user,
        **data.model_dump(exclude_none=True)
    )
    return jsonify({'success': True, 'message': 'Booking updated successfully', 'data': booking.to_dict()})


@bookings_bp.route('/<booking_id>/status', methods=['PUT'])
@token_required
@capability_required(can_manage_bookings, 'Admin privilege required')
def update_booking_status(current_user, booking_id):
    booking_id = parse_id(booking_id, 'bookingId')
    data = BookingStatusUpdate.model_validate(get_payload())
    booking = BookingService.update_booking_status(
        booking_id,
        data.status,
        actor=current_user,
        denial_reason=data.reason
    )
    return jsonify({'success': True, 'message': 'Booking status updated successfully', 'data': booking.to_dict()})


@bookings_bp.route('/<booking_id>/cancel', methods=['POST'])
@token_required
def cancel_booking(current_user, booking_id):
    booking = BookingService.cancel_booking(parse_id(booking_id, 'bookingId'), current_user)
    return jsonify({'success': True, 'message': 'Booking cancelled successfully', 'data': booking.to_dict()})


@bookings_bp.route('/<booking_id>', methods=['DELETE'])
@token_required
@capability_required(can_manage_bookings, 'Admin privilege required')
def delete_booking(current_user, booking_id):
    BookingService.delete_booking(parse_id(booking_id, 'bookingId'), actor=current_user)
    return jsonify({'success': True, 'message': 'Booking deleted successfully'}), 200
