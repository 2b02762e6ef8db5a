"""
Function app configuration using Pydantic Settings.

Reads from environment variables and .env file.
"""

from dataclasses import dataclass
from functools import lru_cache

from pydantic_settings import BaseSettings


@dataclass(frozen=True)
class ExchangeRates:
    """Fixed conversion rates injected into the currency server."""

    pln_to_eur: float
    eur_to_pln: float


class Settings(BaseSettings):
    """Application settings."""

    # Upstream holiday API
    holidays_api_base_url: str = "https://date.nager.at/api/v3"
    holidays_api_timeout: float = 5.0

    # Currency conversion
    pln_to_eur_rate: float = 0.23
    eur_to_pln_rate: float = 4.35

    # MCP server identity
    currency_server_name: str = "currency-converter-mcp"
    currency_server_version: str = "1.0.0"
    holidays_server_name: str = "holidays-mcp"
    holidays_server_version: str = "1.0.0"

    # Host routing
    route_prefix: str = ""

    # Host-level function key (disabled when unset)
    function_key: str | None = None

    # CORS: explicit origins, no wildcards
    cors_origins: list[str] = []

    # Logging
    log_level: str = "INFO"

    # Debug
    debug: bool = False

    @property
    def exchange_rates(self) -> ExchangeRates:
        """Build the rate table for the currency server."""
        return ExchangeRates(pln_to_eur=self.pln_to_eur_rate, eur_to_pln=self.eur_to_pln_rate)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
