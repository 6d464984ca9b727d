from flask import Blueprint, request, jsonify
from booking_portal.services.audit_service import AuditService
from booking_portal.utils.decorators import token_required, capability_required
from booking_portal.utils.errors import parse_id
from booking_portal.utils.roles import can_manage_bookings

admin_bp = Blueprint('admin', __name__)

# --- AUDIT LOG ---

@admin_bp.route('/audit-logs', methods=['GET'])
@token_required
@capability_required(can_manage_bookings, 'Admin privilege required')
def get_audit_logs(current_user):
    booking_id = request.args.get('bookingId')
    if booking_id is not None:
        booking_id = parse_id(booking_id, 'bookingId')
    entries = AuditService.list_entries(booking_id=booking_id)
    return jsonify({'success': True, 'data': [e.to_dict() for e in entries], 'count': len(entries)}), 200
