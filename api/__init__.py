import logging
import os

import click
from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import REQUIRED_KEYS, get_config, validate_config
from .errors import register_error_handlers
from models import storage  # DBStorage singleton (scoped_session)

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "sold.bd API",
        "version": "1.0.0",
        "description": "Flash deals storefront API: public catalog, admin back-office and session auth.",
    },
    "basePath": "/",  # blueprints are mounted under /api
    "schemes": ["http", "https"],
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


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    Raises ConfigurationError when a required secret or the database URL is missing.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config); required keys are re-read
    # from the environment so a factory call always sees the current values.
    app.config.from_object(get_config(config_name))
    app.config.update({key: os.getenv(key) for key in REQUIRED_KEYS if os.getenv(key)})
    if overrides:
        app.config.update(overrides)
    validate_config(app.config)

    _configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    origins = app.config.get("CORS_ORIGINS", "*")
    if origins != "*":
        origins = [o.strip() for o in origins.split(",") if o.strip()]
    CORS(app, resources={r"/*": {"origins": origins}})

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    storage.configure(
        app.config["DATABASE_URL"],
        pool_size=app.config.get("DB_POOL_SIZE", 10),
        echo=app.config.get("DB_ECHO", False),
    )
    storage.reload()

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .public import bp as public_bp
    from .admin import bp as admin_bp

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(public_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/api")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to the sold.bd API",
            "docs": "/apidocs/",
            "health": "/api/health",
        }, 200

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.password_option()
    def create_admin(email, password):
        """Provision an admin account directly, without the bootstrap ceremony."""
        from models.credential_store import CredentialStore
        from utils.security import hash_password
        from utils.sessions import MIN_PASSWORD_LENGTH, is_valid_email
        from utils.exceptions import Conflict

        email = email.strip().lower()
        if not is_valid_email(email):
            raise click.BadParameter("invalid email", param_hint="EMAIL")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise click.BadParameter(f"must be {MIN_PASSWORD_LENGTH}+ chars", param_hint="password")
        try:
            user = CredentialStore().create_account(email, hash_password(password))
        except Conflict as err:
            raise click.ClickException(err.message)
        click.echo(f"Created admin {user.email} ({user.id})")

    return app
