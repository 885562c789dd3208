"""
Trade Prices: Configuration Management

This module provides centralised configuration management for the trade
price dashboard backend. It loads configuration from environment
variables (optionally via a .env file), with strongly typed access via
Pydantic BaseSettings.

Key responsibilities:
- Load and validate configuration from environment variables
- Provide typed configuration objects for the record source, the
  provider cache, and the external trade-data providers
- Expose a cached global configuration accessor for convenience

External dependencies:
- pydantic: Data validation and settings management
- pydantic-settings: Environment variable integration for settings
- python-dotenv: Optional .env loading for local development

Thread safety: Thread-safe (configuration is immutable after initial load)
"""

# ============================================================================
# Imports
# ============================================================================

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# ============================================================================
# Data Models
# ============================================================================


class RecordSourceConfig(BaseModel):
    """Where the dashboard fetches its price rows from.

    Attributes:
        url: Full URL of the prices endpoint (returns a JSON array).
        poll_interval_seconds: How often a long-running consumer should
            refresh. The derivation itself never polls.
        timeout_seconds: HTTP timeout for a single fetch.
    """

    url: str
    poll_interval_seconds: int = 300
    timeout_seconds: int = 30


class CacheConfig(BaseModel):
    """Provider cache configuration.

    Attributes:
        ttl_seconds: How long aggregated provider rows stay fresh.
        demo_fallback_enabled: Serve the demo rows when no provider
            returned anything.
    """

    ttl_seconds: int = 1800
    demo_fallback_enabled: bool = True


class ProviderConfig(BaseModel):
    """Credentials and query parameters for the external providers.

    A provider is only enabled when its token (or URL for the CSV sheet)
    is set. Empty strings mean "not configured".

    Attributes:
        comtrade_token: UN Comtrade API token.
        comtrade_reporter: Reporting country name.
        comtrade_partner: Partner country name.
        comtrade_hs_code: HS commodity code, e.g. ``"0713"``.
        comtrade_period: Period in ``YYYYMM`` form.
        usda_token: USDA AMS API key.
        usda_commodity: Commodity slug queried on USDA AMS.
        faostat_token: FAOSTAT token. Reserved; no FAOSTAT client yet.
        csv_url: Published CSV sheet URL.
        timeout_seconds: HTTP timeout for provider calls.
    """

    comtrade_token: str = ""
    comtrade_reporter: str = "Nigeria"
    comtrade_partner: str = "India"
    comtrade_hs_code: str = "0713"
    comtrade_period: str = "202501"
    usda_token: str = ""
    usda_commodity: str = "beef"
    faostat_token: str = ""
    csv_url: str = ""
    timeout_seconds: int = 30


class TradePricesConfig(BaseSettings):
    """Main configuration loaded from environment variables.

    Environment variables use the following mapping by default:

    - LOG_LEVEL / LOG_FILE for logging
    - ENVIRONMENT for environment name (development/staging/production)
    - PRICES_* for the record source and the provider cache
    - COMTRADE_* / USDA_* / FAOSTAT_TOKEN for provider credentials

    Environment variables take precedence over any other configuration
    source.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: str = Field(default="tradeprices.log", alias="LOG_FILE")

    # Environment
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Record source
    prices_api_url: str = Field(
        default="http://localhost:8000/api/prices", alias="PRICES_API_URL"
    )
    prices_poll_interval_seconds: int = Field(
        default=300, alias="PRICES_POLL_INTERVAL_SECONDS"
    )
    http_timeout_seconds: int = Field(default=30, alias="HTTP_TIMEOUT_SECONDS")

    # Provider cache
    prices_cache_ttl_seconds: int = Field(default=1800, alias="PRICES_CACHE_TTL_SECONDS")
    demo_fallback_enabled: bool = Field(default=True, alias="DEMO_FALLBACK_ENABLED")

    # Providers (all optional)
    comtrade_token: str = Field(default="", alias="COMTRADE_TOKEN")
    comtrade_reporter: str = Field(default="Nigeria", alias="COMTRADE_REPORTER")
    comtrade_partner: str = Field(default="India", alias="COMTRADE_PARTNER")
    comtrade_hs_code: str = Field(default="0713", alias="COMTRADE_HS_CODE")
    comtrade_period: str = Field(default="202501", alias="COMTRADE_PERIOD")
    usda_token: str = Field(default="", alias="USDA_TOKEN")
    usda_commodity: str = Field(default="beef", alias="USDA_COMMODITY")
    faostat_token: str = Field(default="", alias="FAOSTAT_TOKEN")
    prices_csv_url: str = Field(default="", alias="PRICES_CSV_URL")

    @property
    def record_source(self) -> RecordSourceConfig:
        """Return configuration for the dashboard's record source."""

        return RecordSourceConfig(
            url=self.prices_api_url,
            poll_interval_seconds=self.prices_poll_interval_seconds,
            timeout_seconds=self.http_timeout_seconds,
        )

    @property
    def cache(self) -> CacheConfig:
        """Return configuration for the provider cache.

        Environment variables:
        - PRICES_CACHE_TTL_SECONDS
        - DEMO_FALLBACK_ENABLED
        """

        return CacheConfig(
            ttl_seconds=self.prices_cache_ttl_seconds,
            demo_fallback_enabled=self.demo_fallback_enabled,
        )

    @property
    def providers(self) -> ProviderConfig:
        """Return provider credentials and query parameters."""

        return ProviderConfig(
            comtrade_token=self.comtrade_token,
            comtrade_reporter=self.comtrade_reporter,
            comtrade_partner=self.comtrade_partner,
            comtrade_hs_code=self.comtrade_hs_code,
            comtrade_period=self.comtrade_period,
            usda_token=self.usda_token,
            usda_commodity=self.usda_commodity,
            faostat_token=self.faostat_token,
            csv_url=self.prices_csv_url,
            timeout_seconds=self.http_timeout_seconds,
        )


# ============================================================================
# Public API
# ============================================================================


def load_config(env_file: Optional[Path] = None) -> TradePricesConfig:
    """Load the trade prices configuration.

    For local development this function will attempt to load a `.env` file
    from the current working directory if one is present. Environment
    variables always take precedence over values from `.env`.

    Args:
        env_file: Optional explicit path to a `.env` file. If omitted,
            the function will look for `.env` in the current working
            directory.

    Returns:
        A fully populated :class:`TradePricesConfig` instance.

    Raises:
        FileNotFoundError: If an explicit ``env_file`` is provided but
            does not exist.
    """

    if env_file is not None:
        if not env_file.exists():
            msg = f"Environment file not found: {env_file}"
            raise FileNotFoundError(msg)
        # An explicit env_file overrides existing values so that tests and
        # local runs can reliably control configuration.
        load_dotenv(env_file, override=True)
    else:
        default_env = Path(".env")
        if default_env.exists():
            load_dotenv(default_env)

    return TradePricesConfig()  # type: ignore[call-arg]


_global_config: Optional[TradePricesConfig] = None


def get_config() -> TradePricesConfig:
    """Return the global configuration singleton.

    The configuration is loaded on first access (lazy loading) and cached
    for subsequent calls.

    Returns:
        A cached :class:`TradePricesConfig` instance.
    """

    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config
