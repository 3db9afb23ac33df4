import logging
from flask import Flask


def create_app(config_name='default', config_overrides=None):
    """Application factory pattern"""
    app = Flask(__name__)

    # Load configuration
    from config import config, get_database_uri
    app.config.from_object(config[config_name])
    if config_overrides:
        app.config.update(config_overrides)

    # Load environment variables
    from dotenv import load_dotenv
    load_dotenv()

    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        app.config['SQLALCHEMY_DATABASE_URI'] = get_database_uri()

    # Initialize correlation ID middleware
    from rental_service.api.middlewares.correlation_id import CorrelationIdMiddleware, init_correlation_id_logging
    CorrelationIdMiddleware(app)
    init_correlation_id_logging(app)

    # Initialize database
    from rental_service.database import init_db
    init_db(app)

    # Configure logging
    if not app.testing:
        logging.basicConfig(
            level=getattr(logging, app.config['LOG_LEVEL'].upper()),
            format='%(asctime)s %(levelname)s %(name)s: %(message)s'
        )

    # Catalog and payment provider are built once and shared by every request
    from rental_service.catalog import init_catalog
    from rental_service.clients import init_checkout_client
    init_catalog(app)
    init_checkout_client(app)

    # Register blueprints
    from rental_service.api.controllers import api_bp, webhooks_bp, health_bp
    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(webhooks_bp)
    app.register_blueprint(health_bp)

    # Register error handlers
    from rental_service.utils.error_handlers import register_error_handlers
    register_error_handlers(app)

    # Register admin commands
    from rental_service.cli import register_commands
    register_commands(app)

    # Database tables creation is deferred to init_database() function
    return app


def init_database(app):
    """Create tables and the inventory guard row - call this explicitly when ready"""
    from rental_service.database import db
    from rental_service.repositories import InventoryLockRepository
    with app.app_context():
        try:
            from sqlalchemy import text
            db.session.execute(text('SELECT 1'))  # Test connection
            db.create_all()
            InventoryLockRepository().ensure()
            app.logger.info("Database tables created successfully")
            return True
        except Exception as e:
            app.logger.error(f"Failed to create database tables: {e}")
            if not app.config.get('DEBUG'):
                raise
            app.logger.warning("Continuing without database connection in development mode")
            return False
