"""Storefront configuration — environment-driven settings via pydantic-settings.

Every value can be overridden with a ``STORE_``-prefixed environment variable
or a ``.env`` file. ``get_settings()`` is cached, so one instance is shared
per process; tests build their own ``Settings`` and pass it explicitly.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STORE_", env_file=".env", case_sensitive=False, extra="ignore")

    env: str = "development"

    # Database
    database_url: str = "sqlite:///storefront.db"
    database_echo: bool = False

    # Display values supplied to order totals
    store_name: str = "Tailex Store"
    currency_code: str = Field(default="USD", min_length=3, max_length=3)
    currency_symbol: str = "$"
    standard_shipping_price: Decimal = Decimal("9.99")
    free_shipping_threshold: Decimal = Decimal("100")

    # Order lifecycle
    cancellation_window_hours: int = Field(default=24, ge=0)
    order_number_offset: int = Field(default=1000, ge=0)

    # Notifications
    mail_from: str = "orders@tailex.store"

    # Observability
    log_level: str | None = None

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms hand out postgres:// URLs; SQLAlchemy wants postgresql+psycopg2://."""
        if isinstance(v, str):
            if v.startswith("postgres://"):
                return v.replace("postgres://", "postgresql+psycopg2://", 1)
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg2://", 1)
        return v

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("production", "staging")


@lru_cache
def get_settings() -> Settings:
    return Settings()
