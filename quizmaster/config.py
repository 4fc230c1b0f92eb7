"""
Configuration module for the application.
All configuration values are read from environment variables,
usually loaded from a .env file.
"""
import os
import secrets
import warnings


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name, "")
    if not value:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "")
    return int(value) if value else default


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        # Application
        self.APP_ENV: str = os.getenv("APP_ENV", "development").strip().lower()
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # Generate a development SECRET_KEY if not set outside production
        if not self.SECRET_KEY and self.APP_ENV != "production":
            self.SECRET_KEY = secrets.token_urlsafe(32)
            warnings.warn(
                "SECRET_KEY not set. Generated a temporary key for development. "
                "Set SECRET_KEY in your .env file for production!",
                UserWarning
            )

        # Database Configuration
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "")
        self.DB_USER: str = os.getenv("DB_USER", "")
        self.DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
        self.DB_HOST: str = os.getenv("DB_HOST", "")
        self.DB_PORT: str = os.getenv("DB_PORT", "3306")
        self.DB_NAME: str = os.getenv("DB_NAME", "")
        self.SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
        self.SQLALCHEMY_ECHO: bool = _env_bool("SQLALCHEMY_ECHO")

        # API Configuration
        self.API_PREFIX: str = os.getenv("API_PREFIX", "/api").rstrip("/")

        # Authentication
        self.ACCESS_TOKEN_TTL_SECONDS: int = _env_int("ACCESS_TOKEN_TTL_SECONDS", 7 * 24 * 3600)
        self.MIN_PASSWORD_LENGTH: int = _env_int("MIN_PASSWORD_LENGTH", 8)
        self.BCRYPT_ROUNDS: int = _env_int("BCRYPT_ROUNDS", 12)
        self.SEED_PASSWORD: str = os.getenv("SEED_PASSWORD", "password123")

        # Pagination
        self.DEFAULT_PAGE_SIZE: int = _env_int("DEFAULT_PAGE_SIZE", 10)
        self.MAX_PAGE_SIZE: int = _env_int("MAX_PAGE_SIZE", 100)

        # Submissions
        self.ENFORCE_TIME_LIMIT: bool = _env_bool("ENFORCE_TIME_LIMIT")
        self.TIME_LIMIT_GRACE_SECONDS: int = _env_int("TIME_LIMIT_GRACE_SECONDS", 30)

        # Rate limiting
        self.RATE_LIMIT_ENABLED: bool = _env_bool("RATE_LIMIT_ENABLED", True)

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Database URI: explicit DATABASE_URL, then MySQL settings, then local SQLite."""
        if self.DATABASE_URL:
            # SQLAlchemy requires 'postgresql://' instead of 'postgres://'
            if self.DATABASE_URL.startswith("postgres://"):
                return self.DATABASE_URL.replace("postgres://", "postgresql://", 1)
            return self.DATABASE_URL
        if self.DB_HOST:
            return (
                f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4"
            )
        return "sqlite:///quizmaster.db"

    def engine_options(self, uri: str) -> dict:
        """Connection pool options; SQLite uses its own pool and takes none."""
        if uri.startswith("sqlite"):
            return {}
        return {
            "pool_size": 10,
            "pool_recycle": 3600,
            "pool_pre_ping": True,
            "max_overflow": 20,
        }

    def validate(self) -> None:
        """
        Validate required configuration values.
        Only enforces SECRET_KEY in production environment.
        """
        if not self.SECRET_KEY and self.is_production:
            raise ValueError(
                "SECRET_KEY environment variable is required in production. "
                "Set it in your .env file or environment variables."
            )
        if self.MIN_PASSWORD_LENGTH < 1:
            raise ValueError("MIN_PASSWORD_LENGTH must be a positive integer")
        if self.DEFAULT_PAGE_SIZE < 1 or self.DEFAULT_PAGE_SIZE > self.MAX_PAGE_SIZE:
            raise ValueError("DEFAULT_PAGE_SIZE must be between 1 and MAX_PAGE_SIZE")


# Global config instance - re-initialized by create_app() after load_dotenv()
config = Config()
