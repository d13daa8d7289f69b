"""
Application factory for the Emotional Trigger Tracker.

This module provides a function to create and configure the Flask
application. All extensions (SQLAlchemy, Migrate, JWT) are initialised
here. Individual blueprints for different parts of the API are
registered inside the factory to allow for modular development and
unit testing.

Environment variables control the database connection, the JWT secret,
the log level and the scoring windows. In production set
``DATABASE_URL`` and ``JWT_SECRET_KEY`` in your environment. A default
configuration is provided for development, using SQLite when no
database URL is available.
"""

from __future__ import annotations

import logging
import logging.config
import os

from flask import Flask
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager

# instantiate extensions without binding them to an app yet.  They will
# be bound in create_app().  This pattern avoids issues with circular
# imports and makes testing easier.
from .db import db  # use shared db object from db.py
migrate = Migrate()
jwt = JWTManager()


def setup_logging(level: str) -> None:
    """Configure console logging for the whole process."""
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
                "datefmt": "%Y-%m-%dT%H:%M:%S%z",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "standard",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    })


def create_app(test_config: dict | None = None) -> Flask:
    """Create and configure a Flask application.

    Parameters
    ----------
    test_config: dict | None, optional
        Optional configuration overrides used when running tests.

    Returns
    -------
    Flask
        A configured Flask application instance.
    """
    app = Flask(__name__)

    # Default configuration. Override using environment variables or
    # by passing a ``test_config`` mapping.
    app.config.update(
        SQLALCHEMY_DATABASE_URI=os.environ.get("DATABASE_URL", "sqlite:///triggers.db"),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        JWT_SECRET_KEY=os.environ.get("JWT_SECRET_KEY", "please-change-this-secret-key"),
        LOG_LEVEL=os.environ.get("LOG_LEVEL", "INFO"),
        SCORE_PERIOD_DAYS=int(os.environ.get("SCORE_PERIOD_DAYS", 30)),
        MAX_PAGE_SIZE=int(os.environ.get("MAX_PAGE_SIZE", 200)),
        VOLATILITY_WINDOW_DAYS=int(os.environ.get("VOLATILITY_WINDOW_DAYS", 7)),
        VOLATILITY_THRESHOLD=float(os.environ.get("VOLATILITY_THRESHOLD", 0.5)),
    )

    if test_config:
        app.config.update(test_config)

    setup_logging(app.config["LOG_LEVEL"])
    logger = logging.getLogger(__name__)

    # Initialise extensions with the app
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # Register custom error handlers
    from .errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints. Importing here avoids circular imports.
    from .routes.triggers import triggers_bp
    from .routes.scores import scores_bp
    from .routes.patterns import patterns_bp

    app.register_blueprint(triggers_bp, url_prefix="/api")
    app.register_blueprint(scores_bp, url_prefix="/api")
    app.register_blueprint(patterns_bp, url_prefix="/api")

    # Provide a simple health check route
    @app.route("/api/health")
    def health_check() -> dict[str, str]:
        """Return a simple health check response.

        This endpoint can be used by deployment platforms to verify
        that the application has started correctly.
        """
        return {"status": "ok"}

    logger.info("Trigger tracker app created (database: %s)", app.config["SQLALCHEMY_DATABASE_URI"].split("://")[0])
    return app
