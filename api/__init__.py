import logging

import click
from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config, DEFAULT_JWT_SECRET, DEFAULT_JWT_REFRESH_SECRET
from .errors import register_error_handlers
from models import storage
from utils.tokens import TokenService, TokenSettings

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Blog API",
        "version": "1.0.0",
        "description": "REST API for users, posts and comments with JWT authentication.",
    },
    "basePath": "/",
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Install a basic stream handler unless the host already configured logging."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    else:
        root.setLevel(level)


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.

    `overrides` is applied on top of the selected config class (tests use it
    for the database URL and token lifetimes). Signing secrets and token
    lifetimes are read here once and handed to the TokenService.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    if not app.debug and not app.testing and (
        app.config["JWT_SECRET"] == DEFAULT_JWT_SECRET
        or app.config["JWT_REFRESH_SECRET"] == DEFAULT_JWT_REFRESH_SECRET
    ):
        logger.warning("JWT signing secrets are using the built-in defaults; set JWT_SECRET and JWT_REFRESH_SECRET")

    # Database
    storage.configure(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    storage.reload()

    # Token service, built once from configuration and shared by every request
    app.extensions["token_service"] = TokenService(TokenSettings.from_config(app.config), storage)

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .posts import bp as posts_bp
    from .comments import bp as comments_bp
    from .users import bp as users_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(posts_bp)
    app.register_blueprint(comments_bp)
    app.register_blueprint(users_bp)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.cli.command("purge-tokens")
    def purge_tokens():
        """Delete stored refresh tokens that have expired."""
        removed = app.extensions["token_service"].purge_expired()
        click.echo(f"Removed {removed} expired refresh token(s)")

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Blog API",
            "docs": "/apidocs/",
            "health": "/health",
        }, 200

    return app
