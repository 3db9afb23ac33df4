from flask import jsonify
from werkzeug.exceptions import HTTPException
from rental_service.errors import RentalServiceError
import logging

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """Register application error handlers"""

    @app.errorhandler(RentalServiceError)
    def rental_service_error(error):
        if error.status_code >= 500:
            logger.error(f"Unhandled service error: {error}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'error': 'The requested resource was not found',
            'code': 'NOT_FOUND',
            'details': {}
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'error': 'Method not allowed',
            'code': 'METHOD_NOT_ALLOWED',
            'details': {}
        }), 405

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return jsonify({
            'error': 'Internal server error',
            'code': 'INTERNAL_ERROR',
            'details': {}
        }), 500

    @app.errorhandler(HTTPException)
    def http_exception(error):
        return jsonify({
            'error': error.description,
            'code': error.name.upper().replace(' ', '_'),
            'details': {}
        }), error.code
