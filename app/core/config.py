"""Application configuration helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
import os

ENV_PREFIX = "APP_"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_ENVIRONMENT = "development"
DEFAULT_ACCESS_TOKEN_TTL_SECONDS = 900
DEFAULT_REFRESH_TOKEN_TTL_SECONDS = 604800
DEFAULT_JWT_ALGORITHM = "HS256"
DEFAULT_LOG_LEVEL = "INFO"

ENVIRONMENTS = ("development", "test", "production")
PRODUCTION_MIN_SECRET_LENGTH = 32

REQUIRED_VARIABLES = (
    "DATABASE_URL",
    "ACCESS_TOKEN_SECRET",
    "REFRESH_TOKEN_SECRET",
    "CORS_ORIGIN",
)


class ConfigurationError(RuntimeError):
    """Raised when the environment cannot produce a usable configuration."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("Invalid configuration: " + "; ".join(self.problems))


def redact_secret(secret: str) -> str:
    """Return a non-recoverable placeholder for sensitive values."""
    if not secret:
        return "<empty>"
    return "<redacted>"


@dataclass(frozen=True)
class Settings:
    """Process-wide runtime settings, immutable once loaded."""

    database_url: str
    access_token_secret: str
    refresh_token_secret: str
    cors_origins: tuple[str, ...]
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    environment: str = DEFAULT_ENVIRONMENT
    access_token_ttl_seconds: int = DEFAULT_ACCESS_TOKEN_TTL_SECONDS
    refresh_token_ttl_seconds: int = DEFAULT_REFRESH_TOKEN_TTL_SECONDS
    jwt_algorithm: str = DEFAULT_JWT_ALGORITHM
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def safe_for_logging(self) -> dict[str, str | int | list[str]]:
        """Return settings safe for logs."""
        return {
            "database_url": redact_secret(self.database_url),
            "access_token_secret": redact_secret(self.access_token_secret),
            "refresh_token_secret": redact_secret(self.refresh_token_secret),
            "cors_origins": list(self.cors_origins),
            "host": self.host,
            "port": self.port,
            "environment": self.environment,
            "access_token_ttl_seconds": self.access_token_ttl_seconds,
            "refresh_token_ttl_seconds": self.refresh_token_ttl_seconds,
            "jwt_algorithm": self.jwt_algorithm,
            "log_level": self.log_level,
        }


def _get(environ: Mapping[str, str], name: str) -> str | None:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _get_int(environ: Mapping[str, str], name: str, default: int, problems: list[str]) -> int:
    raw = _get(environ, name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        problems.append(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}")
        return default


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from environment variables, reporting every problem at once."""
    if environ is None:
        environ = os.environ

    problems = [
        f"{ENV_PREFIX}{name} is required"
        for name in REQUIRED_VARIABLES
        if _get(environ, name) is None
    ]

    port = _get_int(environ, "PORT", DEFAULT_PORT, problems)
    if not 1 <= port <= 65535:
        problems.append(f"{ENV_PREFIX}PORT must be between 1 and 65535, got {port}")

    access_ttl = _get_int(environ, "ACCESS_TOKEN_TTL_SECONDS", DEFAULT_ACCESS_TOKEN_TTL_SECONDS, problems)
    refresh_ttl = _get_int(environ, "REFRESH_TOKEN_TTL_SECONDS", DEFAULT_REFRESH_TOKEN_TTL_SECONDS, problems)
    for name, value in (("ACCESS_TOKEN_TTL_SECONDS", access_ttl), ("REFRESH_TOKEN_TTL_SECONDS", refresh_ttl)):
        if value <= 0:
            problems.append(f"{ENV_PREFIX}{name} must be positive, got {value}")

    environment = (_get(environ, "ENV") or DEFAULT_ENVIRONMENT).lower()
    if environment not in ENVIRONMENTS:
        problems.append(f"{ENV_PREFIX}ENV must be one of {', '.join(ENVIRONMENTS)}, got {environment!r}")

    access_secret = _get(environ, "ACCESS_TOKEN_SECRET") or ""
    refresh_secret = _get(environ, "REFRESH_TOKEN_SECRET") or ""
    if environment == "production" and access_secret and refresh_secret:
        if access_secret == refresh_secret:
            problems.append("Production requires distinct access and refresh token secrets")
        for name, value in (("ACCESS_TOKEN_SECRET", access_secret), ("REFRESH_TOKEN_SECRET", refresh_secret)):
            if len(value) < PRODUCTION_MIN_SECRET_LENGTH:
                problems.append(
                    f"Production requires {ENV_PREFIX}{name} with at least {PRODUCTION_MIN_SECRET_LENGTH} characters"
                )

    if problems:
        raise ConfigurationError(problems)

    cors_origins = tuple(origin.strip() for origin in (_get(environ, "CORS_ORIGIN") or "").split(",") if origin.strip())

    return Settings(
        database_url=_get(environ, "DATABASE_URL") or "",
        access_token_secret=access_secret,
        refresh_token_secret=refresh_secret,
        cors_origins=cors_origins,
        host=_get(environ, "HOST") or DEFAULT_HOST,
        port=port,
        environment=environment,
        access_token_ttl_seconds=access_ttl,
        refresh_token_ttl_seconds=refresh_ttl,
        jwt_algorithm=_get(environ, "JWT_ALGORITHM") or DEFAULT_JWT_ALGORITHM,
        log_level=(_get(environ, "LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from the process environment once."""
    return load_settings()
