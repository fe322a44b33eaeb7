from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config, validate_config
from .errors import register_error_handlers
from .logging_config import setup_logging
from .middleware import register_request_hooks
from .rate_limit import init_limiter
from models import storage  # DBStorage singleton (scoped_session)
from models.query_metrics import QueryMetricsCollector, SlowQueryLogger

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Starter API",
        "version": "1.0.0",
        "description": "REST API boilerplate: authentication with refresh-token rotation and user management.",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
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


def _cors_origins(raw: str):
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    if not origins or "*" in origins:
        return "*"
    return origins


def attach_query_observers(app: Flask):
    """Register this app's query observers on the shared storage."""
    collector = QueryMetricsCollector(max_entries=app.config["QUERY_METRICS_MAX_ENTRIES"])
    slow_log = SlowQueryLogger(
        threshold_ms=app.config["DB_SLOW_QUERY_THRESHOLD_MS"],
        log_all=app.config["DB_QUERY_LOG"],
    )
    app.extensions["query_metrics"] = collector
    app.extensions["slow_query_logger"] = slow_log
    storage.add_observer(collector)
    storage.add_observer(slow_log)


def detach_query_observers(app: Flask):
    """Undo attach_query_observers (app shutdown, tests)."""
    for key in ("query_metrics", "slow_query_logger"):
        observer = app.extensions.pop(key, None)
        if observer is not None:
            storage.remove_observer(observer)


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config) and refuse to start on bad values
    app.config.from_object(get_config(config_name))
    validate_config(app.config)

    setup_logging(app.config["LOG_LEVEL"])

    CORS(
        app,
        resources={r"/*": {"origins": _cors_origins(app.config.get("CORS_ORIGINS"))}},
        supports_credentials=True,
        expose_headers=["X-Request-Id"],
    )

    if app.config.get("SWAGGER_ENABLED"):
        Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_request_hooks(app)
    # after the request-id hook, so throttled responses still carry an id
    init_limiter(app)
    register_error_handlers(app)
    attach_query_observers(app)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .cli import register_commands

    prefix = app.config["API_PREFIX"]
    app.register_blueprint(health_bp, url_prefix=prefix)
    app.register_blueprint(auth_bp, url_prefix=f"{prefix}/auth")
    app.register_blueprint(users_bp, url_prefix=prefix)
    register_commands(app)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # calls scoped_session.remove(), preventing connection leaks
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Starter API",
            "docs": "/apidocs/",
            "health": f"{prefix}/health",
        }, 200

    return app
