"""
Configuration for :mod:`stablefetch`.

All services accept an explicit :class:`Settings` instance. When none is
given, :func:`get_settings` loads one from the environment (and ``.env``),
using the ``STABLEFETCH_`` prefix::

    STABLEFETCH_IS_PROD=true
    STABLEFETCH_CACHE_PATH=/var/cache/stablefetch.sqlite3
    STABLEFETCH_RPC_URLS='{"1": "https://eth.llamarpc.com", "137": "https://polygon-rpc.com"}'
"""

from __future__ import annotations

from functools import lru_cache
from typing import Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PUBLIC_HORIZON_URL = "https://horizon.stellar.org"
TESTNET_HORIZON_URL = "https://horizon-testnet.stellar.org"


class Settings(BaseSettings):
    """
    Process configuration.

    ``is_prod`` gates every network access: with ``is_prod=False``
    :meth:`stablefetch.portfolio.PortfolioService.get_balances` returns a zero
    total without touching the cache or any upstream service, and test chain
    variants are selected.
    """

    model_config = SettingsConfigDict(
        env_prefix="STABLEFETCH_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    is_prod: bool = False
    #: OS path to the sqlite3 cache database
    cache_path: str = "cache.sqlite3"
    #: Horizon endpoint. Empty means "pick by ``is_prod``"
    horizon_url: str = ""
    #: chain id -> http rpc endpoint
    rpc_urls: Dict[int, str] = Field(default_factory=dict)
    #: Timeout for a single upstream request, seconds
    request_timeout: float = 10.0
    #: Upper bound for resolving one chain balance, seconds
    chain_timeout: float = 30.0
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "TRACE"}
        v_up = v.upper()
        if v_up not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v_up

    @property
    def resolved_horizon_url(self) -> str:
        """
        Horizon url with the production / testnet default applied
        """
        if self.horizon_url:
            return self.horizon_url.rstrip("/")
        return PUBLIC_HORIZON_URL if self.is_prod else TESTNET_HORIZON_URL


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings loaded from the environment (cached)."""
    return Settings()
