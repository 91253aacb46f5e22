"""
BlogSpace — Application Configuration
======================================

What:  Centralized configuration management using Pydantic Settings.
How:   Values are read from environment variables (or a .env file), coerced
       and range-checked by pydantic, and exposed through a module-level
       `settings` object.
Who:   The application factory, the data client factory, and the views that
       need tunables (feed size, excerpt length).
When:  Loaded once at import; `validate_required()` runs in the lifespan and
       aborts startup when the backend endpoint or key is missing.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from blogspace.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The two backend values have no usable default: an empty string means
    "not configured" and is rejected by `validate_required()`.
    """

    # ── Hosted Backend ────────────────────────────────────────────────────
    # Project URL, e.g. https://xyzcompany.supabase.co
    # REST lives under /rest/v1, auth under /auth/v1
    supabase_url: str = Field(default="", description="Hosted backend project URL")

    # Public (anon) API key; sent as `apikey` and as the bearer token when
    # nobody is signed in
    supabase_anon_key: str = Field(default="", description="Hosted backend anon key")

    # Seconds before an individual backend request is abandoned
    backend_timeout: float = Field(default=30.0, gt=0, le=300)

    # Where the auth session is persisted between restarts (None = memory only)
    session_file: Optional[str] = Field(default=None)

    # ── Content ───────────────────────────────────────────────────────────
    # Number of published posts shown on the home page
    home_feed_limit: int = Field(default=9, ge=1, le=100)

    # Characters of content used for an automatic excerpt
    excerpt_length: int = Field(default=200, ge=1, le=2000)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated list of frontends allowed to call the shell
    cors_origins: str = Field(default="http://localhost:5173")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    # Loopback by default: one process serves one local user
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1024, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("supabase_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def validate_required(self) -> None:
        """
        What:  Checks that both backend values are configured.
        When:  Called at the start of the application lifespan.
        Raises:
            ConfigurationError listing every missing value. Startup does not
            continue past this point.
        """
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL is not set")
        if not self.supabase_anon_key:
            missing.append("SUPABASE_ANON_KEY is not set")
        if missing:
            raise ConfigurationError(
                "Missing backend environment variables:\n"
                + "\n".join(f"  - {m}" for m in missing),
                context={"missing": missing},
            )


# Module-level instance used when the factory is not given explicit settings
settings = Settings()
