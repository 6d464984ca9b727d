import os
from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), '.env'))


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-prod'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///campus_booking.db'
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Storage lifecycle
    DB_CHECK_ON_STARTUP = _env_flag('DB_CHECK_ON_STARTUP', False)
    DB_CONNECT_RETRIES = int(os.environ.get('DB_CONNECT_RETRIES', 3))
    DB_CONNECT_RETRY_DELAY = float(os.environ.get('DB_CONNECT_RETRY_DELAY', 5))

    # Business Rules Defaults
    MIN_EVENT_NAME_LENGTH = 3
    DEFAULT_DENIAL_REASON = 'No reason specified'
    # Approving a pending request re-runs the conflict check against confirmed bookings
    REVALIDATE_ON_APPROVE = _env_flag('REVALIDATE_ON_APPROVE', True)


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    DB_CHECK_ON_STARTUP = False
    DB_CONNECT_RETRY_DELAY = 0


class ProductionConfig(Config):
    DEBUG = False
    DB_CHECK_ON_STARTUP = True
    # In prod, rely on env vars strictly
