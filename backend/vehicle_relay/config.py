"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - The RapidAPI key comes from the environment (or .env) only; there is no
      fallback credential, startup fails without one
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults for every non-secret setting: works out-of-the-box on Railway
      (PORT is injected by the platform)
"""

from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vehicle_relay.core.errors import ConfigurationError

DEFAULT_RAPIDAPI_HOST = "rto-vehicle-details-rc-puc-insurance-mparivahan.p.rapidapi.com"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Upstream registry (RapidAPI mParivahan)
    rapidapi_key: str
    rapidapi_host: str = DEFAULT_RAPIDAPI_HOST
    upstream_url: str = (
        f"https://{DEFAULT_RAPIDAPI_HOST}/api/rc-vehicle/search-data"
    )
    upstream_timeout_seconds: float = Field(120.0, gt=0)
    upstream_max_retries: int = Field(2, ge=0)
    upstream_retry_delay_seconds: float = Field(3.0, ge=0)

    @field_validator("rapidapi_key", "rapidapi_host")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    static_dir: str = "static"

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(loc) for loc in err["loc"]) for err in e.errors()
        )
        raise ConfigurationError(
            f"Invalid or missing configuration: {fields} "
            f"(set RAPIDAPI_KEY in the environment or .env)",
        ) from e
