"""
Flask application configuration classes.
Provides configuration for development, production, and testing environments.
"""

import os
from datetime import timedelta


class Config:
    """Base configuration class with common settings."""

    # Secret key for session management and CSRF protection
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database configuration
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'instance/catering.db'

    # Security settings
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600  # CSRF token expires after 1 hour
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = False  # Set to True in production with HTTPS
    PERMANENT_SESSION_LIFETIME = timedelta(
        hours=int(os.environ.get('SESSION_TIMEOUT_HOURS', 8))
    )

    # Timezone
    TIMEZONE = os.environ.get('TIMEZONE', 'Asia/Manila')

    # Booking rules
    DOWNPAYMENT_RATIO = float(os.environ.get('DOWNPAYMENT_RATIO', 0.5))
    OCCASION_SELECTION_MODE = os.environ.get('OCCASION_SELECTION_MODE', 'single')  # 'single' | 'multi'
    VENUE_MOBILE_MIN_LENGTH = 8
    VENUE_ADDRESS_MIN_LENGTH = 5

    # Calendar navigation
    BOOKING_MAX_MONTH_OFFSET = 12
    SCHEDULE_MONTH_RANGE = 12

    # Guarded exit
    DOUBLE_BACK_WINDOW_SECONDS = 1.5

    # Draft sessions (process-local)
    DRAFT_SESSION_TTL = int(os.environ.get('DRAFT_SESSION_TTL', 60 * 60))
    DRAFT_SESSION_MAX = int(os.environ.get('DRAFT_SESSION_MAX', 256))

    # Reservation list
    USER_RESERVATION_LIMIT = 40

    # Optional JSON file replacing the built-in price table
    PRICE_TABLE_PATH = os.environ.get('PRICE_TABLE_PATH')

    # Application settings
    APP_NAME = 'Ezekiel Ezaiah Event & Catering'
    APP_VERSION = '1.0.0'


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False
    SESSION_COOKIE_SECURE = False
    WTF_CSRF_SSL_STRICT = False


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = os.environ.get('SESSION_COOKIE_SECURE', 'true').lower() == 'true'
    WTF_CSRF_SSL_STRICT = SESSION_COOKIE_SECURE

    SECRET_KEY = os.environ.get('SECRET_KEY') or Config.SECRET_KEY
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or Config.DATABASE_PATH

    # URL scheme preference (follows SESSION_COOKIE_SECURE setting)
    PREFERRED_URL_SCHEME = 'https' if SESSION_COOKIE_SECURE else 'http'

    @classmethod
    def validate(cls) -> None:
        """Validate that required production environment variables are set."""
        secret_key = os.environ.get('SECRET_KEY')
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        if len(secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters in production")
        if not os.environ.get('DATABASE_PATH'):
            raise ValueError("DATABASE_PATH environment variable must be set in production")
        if not 0 <= cls.DOWNPAYMENT_RATIO <= 1:
            raise ValueError("DOWNPAYMENT_RATIO must be between 0 and 1")
        if cls.OCCASION_SELECTION_MODE not in ('single', 'multi'):
            raise ValueError("OCCASION_SELECTION_MODE must be 'single' or 'multi'")


class TestConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    WTF_CSRF_ENABLED = False  # Disable CSRF for tests
    DATABASE_PATH = os.environ.get('DATABASE_PATH', ':memory:')
    SECRET_KEY = 'test-secret-key'
    DOWNPAYMENT_RATIO = 0.5
    OCCASION_SELECTION_MODE = 'single'
    PRICE_TABLE_PATH = None


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
