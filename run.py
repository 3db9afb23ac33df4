#!/usr/bin/env python3
"""
Rental Service
Flask-based booking service for a small fleet of rental machines.
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from rental_service.validators.config_validator import validate_config
from rental_service import create_app, init_database

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main():
    """Main application entry point."""
    validate_config()

    env = os.environ.get('FLASK_ENV', 'production')
    logger.info(f"Starting Rental Service in {env} mode")

    app = create_app(env)
    init_database(app)

    host = os.environ.get('HOST', '0.0.0.0')
    port = int(os.environ.get('PORT', 5000))
    debug = env == 'development'

    logger.info(f"Starting Rental Service on {host}:{port}")

    app.run(
        host=host,
        port=port,
        debug=debug,
        threaded=True
    )


if __name__ == '__main__':
    main()
