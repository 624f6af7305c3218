"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# This class uses pydantic-settings to read configuration from TWO
# sources (in priority order):
#
#   1. **Environment variables**, e.g. CACHE_TTL=600
#      (highest priority, always wins)
#   2. **.env file**: key=value lines in the project root .env file
#      (lower priority, used for local development)
#
# The mapping is automatic: field name `data_freshness_days` maps to env
# var `DATA_FRESHNESS_DAYS`.
#
# Default values are used when neither an env var nor .env entry exists.
# Only the store and cache *connection targets* can abort startup, and
# only when they are unreachable (checked in main.py's lifespan).
# ──────────────────────────────────────────────────────────────────────
"""

from urllib.parse import quote

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """IFSC lookup service settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Cache ===
    # "memory" = per-process TTL cache; "redis" = shared Redis instance.
    cache_backend: str = "memory"
    cache_ttl: int = Field(default=300, gt=0)  # seconds
    cache_max_size: int = Field(default=10_000, gt=0)
    cache_key_prefix: str = "ifsc"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0
    redis_timeout: float = Field(default=5.0, gt=0)  # socket connect/read timeout

    # === Durable store ===
    store_db_path: str = "data/ifsc.db"
    store_timeout: float = Field(default=5.0, gt=0)  # SQLite busy timeout

    # === Freshness policy ===
    data_freshness_days: int = Field(default=30, gt=0)

    # === Remote providers ===
    default_ifsc_provider: str = "razorpay"
    razorpay_ifsc_base_url: str = "https://ifsc.razorpay.com"
    provider_timeout: float = Field(default=10.0, gt=0)  # hard cap per fetch

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def redis_url(self) -> str:
        """Build a ``redis://`` URL from the individual Redis settings."""
        auth = f":{quote(self.redis_password, safe='')}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"
