"""Application settings using Pydantic Settings."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Gateway settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TURKPAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Runtime
    log_level: str = "INFO"
    log_json: bool = False

    # Registry
    default_provider: Literal["iyzico", "parampos"] | None = None

    # Normalization policies
    fallback_currency: Literal["TRY", "USD", "EUR", "GBP"] | None = "TRY"
    installment_rates: dict[int, Decimal] | None = None

    # Iyzico
    iyzico_enabled: bool = False
    iyzico_api_key: str = ""
    iyzico_secret_key: str = ""
    iyzico_base_url: str = "https://sandbox-api.iyzipay.com"
    iyzico_locale: str = "tr"
    iyzico_timeout: float = 30.0

    # Parampos
    parampos_enabled: bool = False
    parampos_client_code: str = ""
    parampos_client_username: str = ""
    parampos_client_password: str = ""
    parampos_guid: str = ""
    # Empty selects the test or production endpoint from parampos_test_mode
    parampos_base_url: str = ""
    parampos_test_mode: bool = True
    parampos_timeout: float = 60.0

    @field_validator("default_provider", "fallback_currency", mode="before")
    @classmethod
    def empty_as_none(cls, v: object) -> object:
        """Treat an empty environment value as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
