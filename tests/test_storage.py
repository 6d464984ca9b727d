import pytest
from unittest.mock import patch
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from booking_portal import db
from booking_portal.models import Resource
from booking_portal.storage import atomic, check_database_health, wait_for_database
from booking_portal.utils.errors import NotFoundError, TransactionError


def test_wait_for_database_succeeds(app):
    wait_for_database(app)


def test_wait_for_database_gives_up_after_retries(app):
    app.config['DB_CONNECT_RETRIES'] = 2
    failure = OperationalError('SELECT 1', {}, Exception('server unreachable'))

    with patch.object(Engine, 'connect', side_effect=failure) as connect:
        with pytest.raises(OperationalError):
            wait_for_database(app)

    assert connect.call_count == 2


def test_health_check_reports_failure(app):
    failure = OperationalError('SELECT 1', {}, Exception('server unreachable'))
    with patch.object(db.session, 'execute', side_effect=failure):
        assert check_database_health() is False
    assert check_database_health() is True


def test_atomic_commits(app):
    with atomic('adding resource'):
        db.session.add(Resource(name='Drone Kit', type='Equipment'))
    assert Resource.query.filter_by(name='Drone Kit').count() == 1


def test_atomic_rolls_back_domain_errors(app):
    with pytest.raises(NotFoundError):
        with atomic('adding resource'):
            db.session.add(Resource(name='Drone Kit', type='Equipment'))
            raise NotFoundError('missing')
    assert Resource.query.count() == 0


def test_atomic_wraps_storage_errors(app):
    db.session.add(Resource(name='Drone Kit', type='Equipment'))
    db.session.commit()

    with pytest.raises(TransactionError) as exc:
        with atomic('adding resource'):
            # unique name violation surfaces at commit
            db.session.add(Resource(name='Drone Kit', type='Equipment'))

    assert exc.value.details is None
    assert Resource.query.count() == 1


def test_atomic_rolls_back_unexpected_errors(app):
    with pytest.raises(RuntimeError):
        with atomic('adding resource'):
            db.session.add(Resource(name='Drone Kit', type='Equipment'))
            db.session.flush()
            raise RuntimeError('boom')

    db.session.commit()
    assert Resource.query.count() == 0
