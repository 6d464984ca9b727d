import pytest
import jwt
from types import SimpleNamespace
from booking_portal import create_app, db
from booking_portal.config import TestingConfig
from booking_portal.models import User, Resource, Booking, BookingStatus


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def init_data(app):
    admin = User(name='Portal Admin', email='admin@campus.edu', role='Portal Admin')
    faculty = User(name='Dr. Meera Rao', email='meera.rao@campus.edu', role='Faculty')
    coordinator = User(name='Student Coordinator', email='coordinator@campus.edu', role='Student Coordinator')
    placement = User(name='Placement Cell', email='placements@campus.edu', role='Placement Executive')
    hall = Resource(name='Seminar Hall A', type='Seminar Hall', location='Main Block', capacity=120)
    lab = Resource(name='Computer Lab 2', type='Lab', location='IT Block', capacity=30)
    retired = Resource(name='Old Studio', type='Studio', location='Annex', capacity=10, is_active=False)
    db.session.add_all([admin, faculty, coordinator, placement, hall, lab, retired])
    db.session.commit()
    return SimpleNamespace(admin=admin, faculty=faculty, coordinator=coordinator, placement=placement,
                           hall=hall, lab=lab, retired=retired)


@pytest.fixture
def auth_headers(app):
    def make(user):
        token = jwt.encode({'user_id': user.id}, app.config['SECRET_KEY'], algorithm="HS256")
        return {'Authorization': f'Bearer {token}'}
    return make


@pytest.fixture
def make_booking(app):
    """Insert a booking row directly, bypassing the lifecycle rules."""
    def make(resource, start, end, status=BookingStatus.CONFIRMED, email='owner@campus.edu', **fields):
        booking = Booking(
            resource_id=resource.id,
            start_date_time=start,
            end_date_time=end,
            event_name=fields.pop('event_name', 'Existing Event'),
            incharge_name=fields.pop('incharge_name', 'Owner'),
            incharge_email=email,
            status=BookingStatus.parse(status).value,
            **fields
        )
        db.session.add(booking)
        db.session.commit()
        return booking
    return make
