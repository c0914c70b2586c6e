"""
Error envelope middleware - fallbacks for requests no route handler answered.

Every error body uses the same shape as the route gates:
{
    "responseStatus": "ERR_NOT_FOUND"
}

- Unknown path                    -> 404 ERR_NOT_FOUND
- Known path, unregistered method -> 400 ERR_INVALID_METHOD (same as the method gate)
- Unhandled exception             -> 500 ERR_INTERNAL_ERROR (no detail leaked)
"""

import logging
from flask import Flask, jsonify, g
from werkzeug.exceptions import HTTPException

from api.serializers.response import ResponseStatus, STATUS_CODES, error_envelope


logger = logging.getLogger('api.middleware.error')

# Werkzeug HTTP error code -> response status
HTTP_ERROR_STATUSES = {
    404: ResponseStatus.ERR_NOT_FOUND,
    405: ResponseStatus.ERR_INVALID_METHOD,
}


def make_error_response(status: ResponseStatus, status_code: int = None):
    """
    Create an error response outside the route pipeline.

    Args:
        status: Response status for the body
        status_code: HTTP status code (defaults based on response status)

    Returns:
        Tuple of (response, status_code)
    """
    if status_code is None:
        status_code = STATUS_CODES[status]

    response = jsonify(error_envelope(status))
    request_id = getattr(g, 'request_id', None)
    if request_id:
        response.headers['X-Request-ID'] = request_id

    return response, status_code


def setup_error_handlers(app: Flask) -> None:
    """
    Set up fallback error handlers on Flask app.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        """Handle Flask/Werkzeug HTTP exceptions (404, 405, ...)."""
        status = HTTP_ERROR_STATUSES.get(error.code)
        if status is not None:
            return make_error_response(status)

        # Anything else keeps its own code; body still uses the closed status set
        return make_error_response(ResponseStatus.ERR_INTERNAL_ERROR, error.code)

    @app.errorhandler(Exception)
    def handle_generic_error(error):
        """Handle unhandled Python exceptions."""
        logger.exception(
            f"Unhandled error: {error}",
            extra={
                "event": "unhandled_error",
                "request_id": getattr(g, 'request_id', None),
                "error_type": type(error).__name__,
            }
        )
        return make_error_response(ResponseStatus.ERR_INTERNAL_ERROR)
