import logging
from flask import Flask, jsonify
from booking_portal.config import DevelopmentConfig
from booking_portal.extensions import db, migrate
from booking_portal.utils.errors import register_error_handlers


def create_app(config_class=DevelopmentConfig):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Models must be imported before migrations / create_all see the metadata
    from booking_portal import models  # noqa: F401

    if app.config.get('DB_CHECK_ON_STARTUP'):
        from booking_portal.storage import wait_for_database
        wait_for_database(app)

    register_error_handlers(app)

    # Register Blueprints
    from booking_portal.api.routes.bookings import bookings_bp
    from booking_portal.api.routes.resources import resources_bp
    from booking_portal.api.routes.admin import admin_bp

    app.register_blueprint(bookings_bp, url_prefix='/api/bookings')
    app.register_blueprint(resources_bp, url_prefix='/api/resources')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    @app.route('/health')
    def health():
        from booking_portal.storage import check_database_health
        healthy = check_database_health()
        body = {"status": "ok" if healthy else "degraded", "app": "CampusBooking", "database": healthy}
        return jsonify(body), 200 if healthy else 503

    return app
