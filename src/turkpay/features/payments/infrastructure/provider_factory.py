"""Payment provider factory - Dependency injection."""

from dataclasses import dataclass, field
from functools import lru_cache

import structlog

from turkpay.features.payments.application.ports import PaymentProviderPort
from turkpay.features.payments.domain.enums import ProviderType
from turkpay.features.payments.infrastructure.adapters import (
    IyzicoPaymentAdapter,
    ParamposPaymentAdapter,
)
from turkpay.features.payments.infrastructure.provider_config import (
    IyzicoConfig,
    ParamposConfig,
)
from turkpay.shared.core.settings import Settings, get_settings
from turkpay.shared.domain.exceptions import (
    ProviderConfigurationError,
    ProviderNotEnabledError,
)

logger = structlog.get_logger(__name__)


def create_provider(
    provider_type: ProviderType | str, settings: Settings
) -> PaymentProviderPort:
    """Instantiate one adapter from settings; raises on missing credentials."""
    match ProviderType(provider_type):
        case ProviderType.IYZICO:
            return IyzicoPaymentAdapter(IyzicoConfig.from_settings(settings))
        case ProviderType.PARAMPOS:
            return ParamposPaymentAdapter(ParamposConfig.from_settings(settings))


@dataclass(frozen=True)
class ProviderRegistry:
    """Enabled adapters keyed by provider type, built once at startup."""

    providers: dict[ProviderType, PaymentProviderPort] = field(default_factory=dict)
    default_provider: ProviderType | None = None

    def __post_init__(self) -> None:
        if self.default_provider is not None and self.default_provider not in self.providers:
            raise ProviderConfigurationError(
                self.default_provider.value,
                ["default_provider is set but the provider is not enabled"],
            )

    def enabled_providers(self) -> list[ProviderType]:
        return list(self.providers)

    def is_enabled(self, provider_type: ProviderType | str) -> bool:
        try:
            return ProviderType(provider_type) in self.providers
        except ValueError:
            return False

    def use(self, provider_type: ProviderType | str) -> PaymentProviderPort:
        """Get an enabled provider or raise ProviderNotEnabledError."""
        try:
            return self.providers[ProviderType(provider_type)]
        except (KeyError, ValueError):
            raise ProviderNotEnabledError(
                str(getattr(provider_type, "value", provider_type)),
                [p.value for p in self.providers],
            ) from None

    @property
    def default(self) -> PaymentProviderPort:
        """The default provider; a single enabled provider is the default."""
        if self.default_provider is not None:
            return self.providers[self.default_provider]
        if len(self.providers) == 1:
            return next(iter(self.providers.values()))
        raise ProviderNotEnabledError("default", [p.value for p in self.providers])


def build_provider_registry(settings: Settings) -> ProviderRegistry:
    """Instantiate every enabled provider from settings."""
    enabled = [
        provider_type
        for provider_type, flag in (
            (ProviderType.IYZICO, settings.iyzico_enabled),
            (ProviderType.PARAMPOS, settings.parampos_enabled),
        )
        if flag
    ]
    providers = {
        provider_type: create_provider(provider_type, settings)
        for provider_type in enabled
    }
    default = (
        ProviderType(settings.default_provider) if settings.default_provider else None
    )
    logger.info(
        "payment_providers_initialized",
        providers=[p.value for p in providers],
        default=default.value if default else None,
    )
    return ProviderRegistry(providers=providers, default_provider=default)


@lru_cache
def get_provider_registry() -> ProviderRegistry:
    """
    Get the registry built from environment settings.

    Factory function for dependency injection.
    """
    return build_provider_registry(get_settings())
