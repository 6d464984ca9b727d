from flask import jsonify, current_app
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException
import traceback


class BookingError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code = 500
    code = 'error'

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        payload = {'error': self.message, 'code': self.code}
        if self.details is not None:
            payload['details'] = self.details
        return payload


class ValidationError(BookingError):
    status_code = 400
    code = 'validation_error'

    @classmethod
    def for_field(cls, field, message):
        return cls(message, details=[{'field': field, 'message': message}])

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError):
        details = []
        for err in exc.errors():
            field = '.'.join(str(part) for part in err.get('loc', ())) or None
            details.append({'field': field, 'message': err.get('msg')})
        return cls('Invalid booking payload', details=details)


class AuthenticationError(BookingError):
    status_code = 401
    code = 'authentication_required'


class AuthorizationError(BookingError):
    status_code = 403
    code = 'forbidden'


class NotFoundError(BookingError):
    status_code = 404
    code = 'not_found'


class ConflictError(BookingError):
    status_code = 409
    code = 'conflict'


class InvalidTransitionError(BookingError):
    status_code = 409
    code = 'invalid_transition'


class TransactionError(BookingError):
    # Details are never attached; partial state must not leak to callers
    status_code = 500
    code = 'transaction_failed'


def parse_id(value, field='id'):
    """Parse a positive integer identifier taken from a URL or query string."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError.for_field(field, f"{field} must be an integer")
    if parsed <= 0:
        raise ValidationError.for_field(field, f"{field} must be a positive integer")
    return parsed


def register_error_handlers(app):
    @app.errorhandler(BookingError)
    def handle_booking_error(error):
        if error.status_code >= 500:
            current_app.logger.error(f"{error.code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(PydanticValidationError)
    def handle_schema_error(error):
        wrapped = ValidationError.from_pydantic(error)
        return jsonify(wrapped.to_dict()), wrapped.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        code = error.name.lower().replace(' ', '_')
        return jsonify({'error': error.description, 'code': code}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        current_app.logger.error(f"Unhandled error: {error}\n{traceback.format_exc()}")
        return jsonify({'error': 'Internal Server Error', 'code': 'internal_error'}), 500
