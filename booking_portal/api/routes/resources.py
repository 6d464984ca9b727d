from flask import Blueprint, request, jsonify
from booking_portal.services.resource_service import ResourceService
from booking_portal.schemas import AvailabilityQuery
from booking_portal.utils.errors import ValidationError, parse_id

resources_bp = Blueprint('resources', __name__)


@resources_bp.route('/', methods=['GET'])
def list_resources():
    resources = ResourceService.list_active_resources()
    return jsonify({'success': True, 'data': [r.to_dict() for r in resources]})


@resources_bp.route('/search', methods=['GET'])
def search_resources():
    term = (request.args.get('q') or '').strip()
    if not term:
        raise ValidationError.for_field('q', 'Search query is required')
    resources = ResourceService.search_resources(term)
    return jsonify({'success': True, 'data': [r.to_dict() for r in resources]})


@resources_bp.route('/<resource_id>', methods=['GET'])
def get_resource(resource_id):
    resource = ResourceService.get_resource(parse_id(resource_id, 'resourceId'))
    return jsonify({'success': True, 'data': resource.to_dict()})


@resources_bp.route('/<resource_id>/availability', methods=['GET'])
def get_resource_availability(resource_id):
    resource_id = parse_id(resource_id, 'resourceId')
    if not request.args.get('startDate') or not request.args.get('endDate'):
        raise ValidationError('Start date and end date are required')
    query = AvailabilityQuery.model_validate(request.args.to_dict())
    bookings = ResourceService.get_availability(resource_id, query.start_date, query.end_date)
    return jsonify({'success': True, 'data': [b.to_dict() for b in bookings]})
