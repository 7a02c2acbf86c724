# backend/rta/__init__.py
import time

from flask import Flask, request, jsonify, g
from werkzeug.exceptions import HTTPException

from .config import Config
from .errors import ServiceError
from .extensions import db, migrate



def create_app(config_object=None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or Config)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so create_all / Alembic see the metadata
    from . import models  # noqa: F401

    # Storage backend (memory maps or SQL tables)
    from .storage import init_repository
    from .seed import seed_residents
    repository = init_repository(app)
    if repository.backend_name == "memory" and app.config.get("SEED_RESIDENTS"):
        seed_residents(repository)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.documents import documents_bp
    from .routes.orders import orders_bp
    from .routes.residents import residents_bp
    from .routes.communications import communications_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(documents_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(residents_bp)
    app.register_blueprint(communications_bp)

    register_error_handlers(app)

    @app.before_request
    def start_timer():
        g.request_started_at = time.perf_counter()

    @app.after_request
    def log_api_request(response):
        if request.path.startswith("/api"):
            started = g.get("request_started_at")
            duration_ms = (time.perf_counter() - started) * 1000 if started else 0.0
            app.logger.info(
                "%s %s %s in %dms", request.method, request.path, response.status_code, duration_ms
            )
        return response

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in app.config.get("CORS_ALLOWED_ORIGINS", ()):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app


def register_error_handlers(app: Flask) -> None:
    """Translate exceptions into JSON {"error": ...} responses."""

    @app.errorhandler(ServiceError)
    def handle_service_error(error: ServiceError):
        if error.status_code >= 500:
            app.logger.error("%s on %s %s: %s", type(error).__name__, request.method, request.path, error.message)
        return jsonify({"error": error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        return jsonify({"error": error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500
