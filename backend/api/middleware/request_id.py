"""
Request ID middleware - X-Request-ID on every response.

Lets a client's error report be matched to the server log line that the
pipeline, handlers, and request logger emit for the same request.
"""

import uuid
from typing import Optional
from flask import Flask, request, g, has_app_context


def setup_request_id_middleware(app: Flask) -> None:
    """
    Accept the caller's X-Request-ID, or mint one, and echo it back.

    Args:
        app: Flask application instance
    """

    @app.before_request
    def inject_request_id():
        g.request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())

    @app.after_request
    def add_request_id_header(response):
        request_id = getattr(g, 'request_id', None)
        if request_id:
            response.headers['X-Request-ID'] = request_id
        return response


def get_request_id() -> Optional[str]:
    """Request ID of the current request, or None outside a request."""
    if not has_app_context():
        return None
    return getattr(g, 'request_id', None)
