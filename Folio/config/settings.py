"""Configuration management for Folio.

Values come from the environment. ``.env`` and ``.env.local`` in the
working directory are loaded first, without overriding variables that are
already set.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from ..storage.local_cache import is_valid_key
from ..utils.errors import ConfigurationError

PORTFOLIO_DOCUMENT_KEY = 1


def load_environment() -> None:
    """Load .env files into the process environment."""
    load_dotenv(".env.local")
    load_dotenv(".env")


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_optional(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


@dataclass
class RemoteConfig:
    """Remote document store and object storage."""
    url: Optional[str] = field(default_factory=lambda: _env_optional("SUPABASE_URL"))
    api_key: Optional[str] = field(default_factory=lambda: _env_optional("SUPABASE_ANON_KEY"))
    table: str = field(default_factory=lambda: _env("SUPABASE_TABLE", "portfolio"))
    bucket: str = field(default_factory=lambda: _env("SUPABASE_BUCKET", "portfolio-images"))
    document_key: int = field(default_factory=lambda: int(_env("PORTFOLIO_DOCUMENT_KEY", str(PORTFOLIO_DOCUMENT_KEY))))
    timeout: float = field(default_factory=lambda: float(_env("REMOTE_TIMEOUT", "10")))
    max_upload_bytes: int = field(default_factory=lambda: int(_env("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024))))

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.api_key)


@dataclass
class CacheConfig:
    """Local cache location. An empty directory keeps the cache in memory."""
    directory: str = field(default_factory=lambda: _env("CACHE_DIR", "./data/cache"))
    key: str = field(default_factory=lambda: _env("CACHE_KEY", "portfolio_data"))


@dataclass
class UploadConfig:
    """Image uploads."""
    directory: str = field(default_factory=lambda: _env("UPLOAD_DIR", "./public/uploads"))
    url_prefix: str = field(default_factory=lambda: _env("UPLOAD_URL_PREFIX", "/uploads"))
    backend: str = field(default_factory=lambda: _env("UPLOAD_BACKEND", "remote").lower())


@dataclass
class MailConfig:
    """Contact form delivery."""
    resend_api_key: Optional[str] = field(default_factory=lambda: _env_optional("RESEND_API_KEY"))
    sender: str = field(default_factory=lambda: _env("MAIL_SENDER", "Portfolio Contact <onboarding@resend.dev>"))


@dataclass
class SecurityConfig:
    """Admin authentication."""
    jwt_secret: Optional[str] = field(default_factory=lambda: _env_optional("JWT_SECRET_KEY"))
    jwt_algorithm: str = field(default_factory=lambda: _env("JWT_ALGORITHM", "HS256"))
    jwt_expiry_hours: int = field(default_factory=lambda: int(_env("JWT_EXPIRY_HOURS", "24")))
    admin_password: Optional[str] = field(default_factory=lambda: _env_optional("ADMIN_PASSWORD"))
    environment: str = field(default_factory=lambda: _env("ENVIRONMENT", "development"))


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    format: str = field(default_factory=lambda: _env("LOG_FORMAT", "json"))


@dataclass
class APIConfig:
    """API configuration."""
    host: str = field(default_factory=lambda: _env("API_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(_env("API_PORT", "8000")))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG"))
    cors_origins: List[str] = field(
        default_factory=lambda: [s.strip() for s in _env("CORS_ORIGINS", "*").split(",") if s.strip()]
    )


class Settings:
    """Main configuration class."""

    def __init__(self):
        self.remote = RemoteConfig()
        self.cache = CacheConfig()
        self.uploads = UploadConfig()
        self.mail = MailConfig()
        self.security = SecurityConfig()
        self.logging = LoggingConfig()
        self.api = APIConfig()
        self.version = "0.1.0"

    @property
    def environment(self) -> str:
        return self.security.environment

    def validate(self) -> None:
        """Validate configuration."""
        errors = []

        if self.remote.timeout <= 0:
            errors.append("REMOTE_TIMEOUT must be positive")

        if self.remote.max_upload_bytes <= 0:
            errors.append("MAX_UPLOAD_BYTES must be positive")

        if not is_valid_key(self.cache.key):
            errors.append("CACHE_KEY may only contain letters, digits, '.', '_' and '-'")

        if self.uploads.backend not in ("remote", "local"):
            errors.append("UPLOAD_BACKEND must be 'remote' or 'local'")

        if self.environment == "production":
            if not self.security.jwt_secret:
                errors.append("JWT_SECRET_KEY required in production")
            if not self.security.admin_password:
                errors.append("ADMIN_PASSWORD required in production")

        if errors:
            raise ConfigurationError(f"Configuration errors: {'; '.join(errors)}", context={"errors": errors})

    def to_dict(self):
        """Convert to dictionary (safe for API responses)."""
        return {
            "environment": self.environment,
            "version": self.version,
            "remote": {
                "configured": self.remote.is_configured,
                "table": self.remote.table,
                "bucket": self.remote.bucket,
            },
            "uploads": {
                "backend": self.uploads.backend,
            },
            "mail": {
                "configured": bool(self.mail.resend_api_key),
            },
        }


def get_settings() -> Settings:
    """Build settings from the current environment."""
    load_environment()
    return Settings()
