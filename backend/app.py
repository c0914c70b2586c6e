"""
Flask Application Factory - Employee Directory API

Routes:
- /employees  (create, list, details, update, delete)
- /contacts   (create)

Every route is an ordered chain of gates (method, required params, value
validation) in front of its handler; see api/middleware/pipeline.py.

The store is built here (or injected by the caller) and attached to the app,
so routes and validators never open their own connections.
"""

import atexit
import logging

from flask import Flask
from flask_cors import CORS

from config import Config
from db.store import Store, init_store

logger = logging.getLogger(__name__)


def create_app(config_overrides=None, store=None):
    """
    Build the Flask app.

    Args:
        config_overrides: Optional mapping applied on top of Config
        store: Optional already-open Store. When omitted, a Store is opened
               from DATABASE_URL and closed at interpreter exit.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # Keep response keys in the order handlers build them
    app.json.sort_keys = False

    CORS(app,
         resources={r"/*": {"origins": app.config['CORS_ORIGINS']}},
         methods=["GET", "POST", "OPTIONS", "PUT", "DELETE"],
         allow_headers=["Content-Type", "X-Request-ID"],
         expose_headers=["X-Request-ID"],
         supports_credentials=False)

    # === REQUEST MIDDLEWARE ===
    from api.middleware import (
        setup_request_id_middleware,
        setup_request_logging_middleware,
        setup_error_handlers,
    )
    setup_request_id_middleware(app)
    setup_request_logging_middleware(app)
    setup_error_handlers(app)

    # === STORE ===
    if store is None:
        store = Store(
            app.config['DATABASE_URL'],
            engine_options=app.config['SQLALCHEMY_ENGINE_OPTIONS'],
        ).open()
        atexit.register(store.close)
    init_store(app, store)

    # Register routes
    from routes.employees import employees_bp
    app.register_blueprint(employees_bp, url_prefix='/employees')

    from routes.contacts import contacts_bp
    app.register_blueprint(contacts_bp, url_prefix='/contacts')

    return app


def run_app():
    """Main entry point for local development - starts server with Flask's dev server."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    store = Store(Config.DATABASE_URL, engine_options=Config.SQLALCHEMY_ENGINE_OPTIONS).open()
    try:
        app = create_app(store=store)
        logger.info(f"Listening on port {Config.PORT}")
        app.run(host="0.0.0.0", port=Config.PORT)
    finally:
        store.close()


if __name__ == "__main__":
    run_app()
