from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import storage  # DBStorage singleton (scoped_session)
from services import build_services
from utils.logger import configure_logging, get_logger

logger = get_logger("app")

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "E-Learning Admin API",
        "version": "1.0.0",
        "description": "REST API for courses, sessions, contents, enrollments, learner progress and messaging.",
    },
    "basePath": "/",  # blueprints are mounted under API_PREFIX
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


def create_app(config_name: str | None = None, **overrides) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    Keyword overrides are applied on top of the selected config class.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    app.config.update(overrides)

    configure_logging(app.config["LOG_LEVEL"])

    if not app.config.get("JWT_ACCESS_SECRET") or not app.config.get("JWT_REFRESH_SECRET"):
        raise RuntimeError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be set")
    if app.config["JWT_ACCESS_SECRET"] == app.config["JWT_REFRESH_SECRET"]:
        raise RuntimeError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ")

    storage.connect(app.config["DATABASE_URL"], echo=app.config.get("SQLALCHEMY_ECHO", False))
    storage.reload()

    app.extensions["services"] = build_services(app.config, storage)

    origins = app.config.get("CORS_ORIGINS", "*")
    if origins != "*":
        origins = [o.strip() for o in origins.split(",") if o.strip()]
    CORS(app, resources={r"/*": {"origins": origins}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .courses import bp as courses_bp
    from .course_sessions import bp as sessions_bp
    from .course_contents import bp as contents_bp
    from .enrollments import bp as enrollments_bp
    from .learner_progress import bp as progress_bp
    from .messages import bp as messages_bp
    from .notifications import bp as notifications_bp
    from .auth_providers import bp as auth_providers_bp

    prefix = app.config["API_PREFIX"]
    for bp in (health_bp, auth_bp, users_bp, courses_bp, sessions_bp, contents_bp,
               enrollments_bp, progress_bp, messages_bp, notifications_bp, auth_providers_bp):
        app.register_blueprint(bp, url_prefix=prefix + (bp.url_prefix or ""))

    from .cli import register_commands
    register_commands(app)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to the E-Learning Admin API",
            "docs": "/apidocs/",
            "health": f"{prefix}/health",
        }, 200

    logger.info("App created (env=%s, db=%s, email=%s)",
                app.config.get("APP_ENV"), app.config["DATABASE_URL"], app.config["EMAIL_BACKEND"])
    return app
