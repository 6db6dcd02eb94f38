"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the auth API happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET). Type coercion and validation are built in.

  @model_validator(mode="after"): Cross-field validation after all fields are
      resolved. Dev mode (DEBUG=true) fills in missing secrets and the CORS
      origin with a warning; production mode refuses to start without them.

Security notes:
  Both signing secrets must be at least 32 characters and must differ from
  each other. A shared secret would let a refresh token pass as an access
  token and vice versa.

  Token lifetimes must be positive. There is no "never expires" setting.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("authapi.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'authapi.db'}"
_DEV_FRONTEND_URL = "http://localhost:3000"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Secrets and the frontend origin default to "" (not configured). The
    model_validator either fills them in for dev mode or raises, so callers
    never see an empty value.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 3000

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    jwt_secret: str = ""
    jwt_expiration: int = Field(default=600, gt=0)  # seconds (10 minutes)
    jwt_refresh_secret: str = ""
    jwt_refresh_expiration: int = Field(default=604800, gt=0)  # seconds (7 days)

    # ------------------------------------------------------------------
    # Passwords
    # ------------------------------------------------------------------

    # bcrypt accepts 4..31; each step doubles the work.
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    frontend_url: str = ""

    rate_limit_enabled: bool = True
    signup_rate_limit: str = "5/minute"
    signin_rate_limit: str = "10/minute"
    refresh_rate_limit: str = "20/minute"

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {value!r}.")
        return level

    @field_validator("frontend_url")
    @classmethod
    def strip_frontend_url(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Enforce the secret and origin policy.

        Dev mode (DEBUG=true): auto-generate missing secrets and fall back to
            http://localhost:3000 for FRONTEND_URL, each with a warning.
            Tokens will not survive a restart -- acceptable for local dev.

        Production mode: refuse to start if JWT_SECRET, JWT_REFRESH_SECRET or
            FRONTEND_URL is missing.

        Both modes: reject secrets shorter than 32 characters and identical
            access/refresh secrets.
        """
        for name in ("jwt_secret", "jwt_refresh_secret"):
            if getattr(self, name):
                continue
            env_name = name.upper()
            if not self.debug:
                raise ValueError(
                    f"{env_name} is required in production mode. "
                    f"Set {env_name} in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
            setattr(self, name, secrets.token_hex(32))
            logger.warning("Using auto-generated %s. Issued tokens will not survive a restart.", env_name)

        if len(self.jwt_secret) < _MIN_SECRET_LENGTH:
            raise ValueError("JWT_SECRET must be at least 32 characters.")
        if len(self.jwt_refresh_secret) < _MIN_SECRET_LENGTH:
            raise ValueError("JWT_REFRESH_SECRET must be at least 32 characters.")
        if self.jwt_secret == self.jwt_refresh_secret:
            raise ValueError("JWT_SECRET and JWT_REFRESH_SECRET must be different.")

        if not self.frontend_url:
            if not self.debug:
                raise ValueError("FRONTEND_URL is required in production mode.")
            self.frontend_url = _DEV_FRONTEND_URL
            logger.warning("FRONTEND_URL not set; allowing CORS from %s.", _DEV_FRONTEND_URL)
        if "*" in self.frontend_url:
            raise ValueError("FRONTEND_URL must be an exact origin; wildcards are not allowed.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
