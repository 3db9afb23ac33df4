"""
Configuration Validator
Validates environment variables at startup and fails fast on bad values

Runs before logging is configured, so findings go straight to stderr.
"""

import os
import sys
from urllib.parse import urlparse


def is_valid_url(url: str) -> bool:
    """Validates a URL format"""
    try:
        result = urlparse(url)
        return all([result.scheme, result.netloc])
    except ValueError:
        return False


def is_valid_log_level(level: str) -> bool:
    valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    return level.upper() in valid_levels


def is_valid_environment(env: str) -> bool:
    valid_envs = ['development', 'production', 'testing']
    return env.lower() in valid_envs


def is_int_between(low: int, high: int):
    def check(value: str) -> bool:
        return value.isdigit() and low <= int(value) <= high
    return check


# Stripe only accepts checkout expirations between 30 minutes and 24 hours
VALIDATION_RULES = {
    'FLASK_ENV': {
        'required': False,
        'validator': is_valid_environment,
        'error_message': 'FLASK_ENV must be one of: development, production, testing',
        'default': 'production',
    },
    'DATABASE_URL': {
        'required': False,
        'production': True,
        'validator': lambda v: '://' in v,
        'error_message': 'DATABASE_URL must be a SQLAlchemy database URL',
    },
    'SECRET_KEY': {
        'required': False,
        'production': True,
        'validator': lambda v: len(v) >= 32,
        'error_message': 'SECRET_KEY must be at least 32 characters long',
    },
    'STRIPE_SECRET_KEY': {
        'required': False,
        'production': True,
        'validator': lambda v: v.startswith(('sk_', 'rk_')),
        'error_message': 'STRIPE_SECRET_KEY must be a Stripe secret or restricted key',
    },
    'STRIPE_WEBHOOK_SECRET': {
        'required': False,
        'production': True,
        'validator': lambda v: v.startswith('whsec_'),
        'error_message': 'STRIPE_WEBHOOK_SECRET must be a Stripe webhook signing secret',
    },
    'PUBLIC_BASE_URL': {
        'required': False,
        'production': True,
        'validator': is_valid_url,
        'error_message': 'PUBLIC_BASE_URL must be a valid URL',
    },
    'FLEET_SIZE': {
        'required': False,
        'validator': is_int_between(1, 1000),
        'error_message': 'FLEET_SIZE must be a positive integer',
        'default': '3',
    },
    'PENDING_RESERVATION_TTL_MINUTES': {
        'required': False,
        'validator': is_int_between(30, 1440),
        'error_message': 'PENDING_RESERVATION_TTL_MINUTES must be between 30 and 1440',
        'default': '60',
    },
    'PENDING_SWEEP_GRACE_HOURS': {
        'required': False,
        'validator': is_int_between(1, 720),
        'error_message': 'PENDING_SWEEP_GRACE_HOURS must be between 1 and 720',
        'default': '72',
    },
    'DEPOSIT_AMOUNT_CENTS': {
        'required': False,
        'validator': is_int_between(0, 10 ** 7),
        'error_message': 'DEPOSIT_AMOUNT_CENTS must be a non-negative integer',
        'default': '30000',
    },
    'DELIVERY_FEE_CENTS': {
        'required': False,
        'validator': is_int_between(0, 10 ** 7),
        'error_message': 'DELIVERY_FEE_CENTS must be a non-negative integer',
        'default': '2500',
    },
    'LOG_LEVEL': {
        'required': False,
        'validator': is_valid_log_level,
        'error_message': 'LOG_LEVEL must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL',
        'default': 'INFO',
    },
}


def collect_config_errors(environ=None):
    """
    Check every rule against ``environ`` (defaults to os.environ).
    Returns (errors, warnings) as lists of messages; missing optional
    values are reported as warnings and their defaults are filled in.
    """
    environ = os.environ if environ is None else environ
    errors = []
    warnings = []
    production = environ.get('FLASK_ENV', 'production').lower() == 'production'

    for key, rule in VALIDATION_RULES.items():
        value = environ.get(key)
        required = rule['required'] or (production and rule.get('production', False))

        if not value:
            if required:
                errors.append(f"{key} is required but not set")
            elif 'default' in rule:
                warnings.append(f"{key} not set, using default: {rule['default']}")
                environ[key] = rule['default']
            continue

        if not rule['validator'](value):
            errors.append(f"{key}: {rule['error_message']}")

    return errors, warnings


def validate_config(environ=None):
    """
    Validates environment variables according to the rules
    Raises SystemExit if any required variable is missing or invalid
    """
    errors, warnings = collect_config_errors(environ)

    for warning in warnings:
        print(f"[CONFIG] {warning}", file=sys.stderr)

    if errors:
        print('[CONFIG] Configuration validation failed:', file=sys.stderr)
        for error in errors:
            print(f"  {error}", file=sys.stderr)
        sys.exit(1)
