"""Service configuration.

Values come from the process environment (prefix ``SHOP_``) and from an
optional ``.env.<env>`` file, where ``<env>`` is ``SHOP_ENV`` (default
``local``). Variables already present in the environment win over the file.
"""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENV = "local"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SHOP_", extra="ignore")

    env: str = DEFAULT_ENV
    data_dir: Path = Path(".data")
    log_dir: Path = Path(".logs")
    log_level: str | None = None

    token_lifetime_seconds: int = Field(3600, gt=0)
    cart_lifetime_seconds: int = Field(24 * 3600, gt=0)

    workers_enabled: bool = True
    log_rotation_interval_seconds: float = Field(24 * 3600, gt=0)
    gc_interval_seconds: float = Field(3600, gt=0)

    payment_gateway: str = "fake"
    stripe_url: str = "https://api.stripe.com/v1/charges"
    stripe_api_key: str | None = None

    email_channel: str = "fake"
    mailgun_url: str = "https://api.mailgun.net/v3/"
    mailgun_domain: str | None = None
    mailgun_api_key: str | None = None

    http_timeout_seconds: float = Field(10.0, gt=0)

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("production", "staging")


def current_env() -> str:
    env = os.getenv("SHOP_ENV", "").strip().lower()
    return env or DEFAULT_ENV


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    env = current_env()
    return Settings(_env_file=Path.cwd() / f".env.{env}", env=env)
