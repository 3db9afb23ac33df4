"""
Health check endpoints for load balancers and uptime monitors
"""

from flask import Blueprint, jsonify
from datetime import datetime
from sqlalchemy import text
import os
import time
import logging

from rental_service.database import db

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__)


def check_database_health():
    """Run a trivial query and report how long it took"""
    start_time = time.time()
    try:
        db.session.execute(text('SELECT 1'))
        return {
            'status': 'healthy',
            'response_time_ms': round((time.time() - start_time) * 1000, 2)
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db.session.rollback()
        return {
            'status': 'unhealthy',
            'error': str(e),
            'response_time_ms': round((time.time() - start_time) * 1000, 2)
        }


@health_bp.route('/health', methods=['GET'])
def health():
    """Main health check endpoint"""
    return jsonify({
        'status': 'healthy',
        'service': os.environ.get('NAME', 'rental-service'),
        'timestamp': datetime.utcnow().isoformat() + 'Z',
        'version': os.environ.get('VERSION', '1.0.0'),
        'environment': os.environ.get('FLASK_ENV', 'development'),
    }), 200


@health_bp.route('/health/ready', methods=['GET'])
def readiness():
    """Readiness probe - the service is ready once the database answers"""
    database = check_database_health()
    ready = database['status'] == 'healthy'

    return jsonify({
        'status': 'ready' if ready else 'not ready',
        'service': os.environ.get('NAME', 'rental-service'),
        'timestamp': datetime.utcnow().isoformat() + 'Z',
        'checks': {'database': database}
    }), 200 if ready else 503
