from typing import Mapping, Optional

from dotenv import load_dotenv
from flask import Flask, request
from flask_compress import Compress
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# Load environment variables early so config is available for blueprint creation
load_dotenv()

from quizmaster.config import config  # noqa: E402

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
compress = Compress()

CONFIG_KEYS = (
    "APP_ENV",
    "SECRET_KEY",
    "LOG_LEVEL",
    "SQLALCHEMY_TRACK_MODIFICATIONS",
    "SQLALCHEMY_ECHO",
    "API_PREFIX",
    "ACCESS_TOKEN_TTL_SECONDS",
    "MIN_PASSWORD_LENGTH",
    "BCRYPT_ROUNDS",
    "SEED_PASSWORD",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "ENFORCE_TIME_LIMIT",
    "TIME_LIMIT_GRACE_SECONDS",
    "RATE_LIMIT_ENABLED",
)


def create_app(overrides: Optional[Mapping] = None) -> Flask:
    """
    Application factory for the QuizMaster API.

    Args:
        overrides: Config values applied on top of the environment,
            e.g. ``{"SQLALCHEMY_DATABASE_URI": "sqlite://"}`` in tests
    """
    # Re-initialize config to ensure latest .env values are loaded
    from quizmaster.config import Config
    global config
    config = Config()
    config.validate()

    app = Flask(__name__)

    for key in CONFIG_KEYS:
        app.config[key] = getattr(config, key)
    db_uri = config.SQLALCHEMY_DATABASE_URI
    app.config["SQLALCHEMY_DATABASE_URI"] = db_uri
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = config.engine_options(db_uri)

    # Response compression settings
    app.config["COMPRESS_MIMETYPES"] = ["application/json"]
    app.config["COMPRESS_LEVEL"] = 6
    app.config["COMPRESS_MIN_SIZE"] = 500

    if overrides:
        app.config.update(overrides)
        if "SQLALCHEMY_DATABASE_URI" in overrides and "SQLALCHEMY_ENGINE_OPTIONS" not in overrides:
            app.config["SQLALCHEMY_ENGINE_OPTIONS"] = config.engine_options(
                app.config["SQLALCHEMY_DATABASE_URI"]
            )

    from quizmaster.common.request_logging import configure_logging, init_request_logging
    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    compress.init_app(app)

    from quizmaster.common.errors import UnauthorizedError, register_error_handlers
    register_error_handlers(app)
    init_request_logging(app)

    from quizmaster.security import init_security
    init_security(app)

    @login_manager.request_loader
    def load_user_from_request(req):
        """Resolve ``Authorization: Bearer <token>`` to a User."""
        from quizmaster.auth.models import User
        from quizmaster.auth.utils import decode_access_token

        header = req.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None

        payload = decode_access_token(token.strip())
        if not payload:
            return None
        try:
            return db.session.get(User, int(payload.get("sub")))
        except (TypeError, ValueError):
            return None

    @login_manager.unauthorized_handler
    def unauthorized():
        from quizmaster.security import SecurityLogger
        SecurityLogger.log_unauthorized_access(request.path)
        raise UnauthorizedError("Authentication required")

    # Register blueprints
    prefix = app.config["API_PREFIX"]

    from quizmaster.auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix=f"{prefix}/auth")

    from quizmaster.users import users_bp
    app.register_blueprint(users_bp, url_prefix=f"{prefix}/users")

    from quizmaster.quiz import quiz_bp
    app.register_blueprint(quiz_bp, url_prefix=f"{prefix}/quizzes")

    from quizmaster.submissions import submissions_bp
    app.register_blueprint(submissions_bp, url_prefix=f"{prefix}/submissions")

    from quizmaster.health import health_bp
    app.register_blueprint(health_bp, url_prefix="/health")

    from quizmaster.cli import register_commands
    register_commands(app)

    # Create tables if they do not exist
    with app.app_context():
        db.create_all()

    app.logger.info(f"QuizMaster API ready (env={app.config['APP_ENV']}, prefix={prefix})")
    return app
