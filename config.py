import os


def get_database_uri():
    """
    Resolve the database URI from the environment.
    Falls back to a local SQLite file when DATABASE_URL is not set.
    """
    url = os.environ.get('DATABASE_URL')
    if url:
        # Heroku-style URLs still use the deprecated scheme
        if url.startswith('postgres://'):
            url = url.replace('postgres://', 'postgresql://', 1)
        return url
    basedir = os.path.abspath(os.path.dirname(__file__))
    return 'sqlite:///' + os.path.join(basedir, 'rental.db')


class Config:
    """Base configuration"""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database
    SQLALCHEMY_DATABASE_URI = None  # Will be set at runtime
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # Fleet and pricing (amounts in cents)
    FLEET_SIZE = int(os.environ.get('FLEET_SIZE', 3))
    DEPOSIT_AMOUNT_CENTS = int(os.environ.get('DEPOSIT_AMOUNT_CENTS', 30000))
    DELIVERY_FEE_CENTS = int(os.environ.get('DELIVERY_FEE_CENTS', 2500))
    CURRENCY = os.environ.get('CURRENCY', 'usd')

    # Availability query defaults
    DEFAULT_RENTAL_TYPE = os.environ.get('DEFAULT_RENTAL_TYPE', 'full_day_weekday')
    AVAILABILITY_WINDOW_DAYS = int(os.environ.get('AVAILABILITY_WINDOW_DAYS', 90))
    MAX_AVAILABILITY_RANGE_DAYS = int(os.environ.get('MAX_AVAILABILITY_RANGE_DAYS', 366))

    # Pending reservations hold a unit until checkout completes or this window elapses
    PENDING_RESERVATION_TTL_MINUTES = int(os.environ.get('PENDING_RESERVATION_TTL_MINUTES', 60))
    # Holds that reached Stripe are swept this long after expiry (Stripe retries webhooks for three days)
    PENDING_SWEEP_GRACE_HOURS = int(os.environ.get('PENDING_SWEEP_GRACE_HOURS', 72))

    # Stripe
    STRIPE_SECRET_KEY = os.environ.get('STRIPE_SECRET_KEY')
    STRIPE_WEBHOOK_SECRET = os.environ.get('STRIPE_WEBHOOK_SECRET')
    STRIPE_WEBHOOK_TOLERANCE_SECONDS = int(os.environ.get('STRIPE_WEBHOOK_TOLERANCE_SECONDS', 300))

    # Used to build checkout success/cancel URLs
    PUBLIC_BASE_URL = os.environ.get('PUBLIC_BASE_URL', 'http://localhost:3000')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    LOG_LEVEL = 'DEBUG'


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    # Use in-memory SQLite for testing
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    FLEET_SIZE = 3
    DEPOSIT_AMOUNT_CENTS = 30000
    DELIVERY_FEE_CENTS = 2500
    PENDING_RESERVATION_TTL_MINUTES = 60
    STRIPE_SECRET_KEY = 'sk_test_dummy'
    STRIPE_WEBHOOK_SECRET = 'whsec_test_secret'
    PUBLIC_BASE_URL = 'https://rentals.example.com'


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
