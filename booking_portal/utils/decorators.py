from functools import wraps
from flask import request, current_app
import jwt
from booking_portal.models import User
from booking_portal.extensions import db
from booking_portal.utils.errors import AuthenticationError, AuthorizationError
from booking_portal.utils.roles import role_of


def current_identity():
    """Resolve the bearer token to an active User, or raise AuthenticationError."""
    token = None
    if 'Authorization' in request.headers:
        # Bearer <token>
        auth_header = request.headers['Authorization']
        if auth_header.startswith("Bearer "):
            token = auth_header.split(" ", 1)[1].strip()

    if not token:
        raise AuthenticationError('Token is missing!')

    try:
        data = jwt.decode(token, current_app.config['SECRET_KEY'], algorithms=["HS256"])
    except jwt.InvalidTokenError as e:
        raise AuthenticationError('Token is invalid!', details=str(e))

    user_id = data.get('user_id')
    user = db.session.get(User, user_id) if isinstance(user_id, int) else None
    if not user or not user.is_active:
        raise AuthenticationError('Token is invalid!', details='User not found')
    return user


def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        return f(current_identity(), *args, **kwargs)

    return decorated


def capability_required(check, message='Insufficient privileges'):
    """
    Gate a view on a capability from ``booking_portal.utils.roles``.
    Must be stacked under @token_required, which passes current_user first.
    """
    def decorator(f):
        @wraps(f)
        def decorated(current_user, *args, **kwargs):
            if not check(role_of(current_user)):
                raise AuthorizationError(message)
            return f(current_user, *args, **kwargs)
        return decorated
    return decorator
