"""Per-provider credentials, fixed for the lifetime of an adapter."""

from dataclasses import dataclass, field

from turkpay.features.payments.domain.enums import Currency
from turkpay.features.payments.infrastructure.normalizer import (
    InstallmentFeePolicy,
    TableInstallmentFeePolicy,
)
from turkpay.shared.core.settings import Settings
from turkpay.shared.domain.exceptions import ProviderConfigurationError

PARAMPOS_TEST_URL = "https://testposws.param.com.tr/turkpos.ws/service_turkpos_prod.asmx"
PARAMPOS_PRODUCTION_URL = "https://posws.param.com.tr/turkpos.ws/service_turkpos_prod.asmx"


def _fallback_currency(settings: Settings) -> Currency | None:
    if settings.fallback_currency is None:
        return None
    return Currency(settings.fallback_currency)


def _parampos_base_url(settings: Settings) -> str:
    if settings.parampos_base_url:
        return settings.parampos_base_url
    return PARAMPOS_TEST_URL if settings.parampos_test_mode else PARAMPOS_PRODUCTION_URL


@dataclass(frozen=True)
class IyzicoConfig:
    """Iyzico API credentials."""

    api_key: str
    secret_key: str
    base_url: str = "https://sandbox-api.iyzipay.com"
    locale: str = "tr"
    timeout: float = 30.0
    fallback_currency: Currency | None = Currency.TRY

    # (attribute, environment variable)
    required = (
        ("api_key", "TURKPAY_IYZICO_API_KEY"),
        ("secret_key", "TURKPAY_IYZICO_SECRET_KEY"),
        ("base_url", "TURKPAY_IYZICO_BASE_URL"),
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> "IyzicoConfig":
        return cls(
            api_key=settings.iyzico_api_key,
            secret_key=settings.iyzico_secret_key,
            base_url=settings.iyzico_base_url,
            locale=settings.iyzico_locale,
            timeout=settings.iyzico_timeout,
            fallback_currency=_fallback_currency(settings),
        )

    def missing_fields(self) -> list[str]:
        return [f"{name} ({env})" for name, env in self.required if not getattr(self, name)]

    def validate(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise ProviderConfigurationError("iyzico", missing)


@dataclass(frozen=True)
class ParamposConfig:
    """Parampos (TurkPOS) SOAP credentials."""

    client_code: str
    client_username: str
    client_password: str
    guid: str
    base_url: str = PARAMPOS_TEST_URL
    namespace: str = "https://turkpos.com.tr/"
    timeout: float = 60.0
    fallback_currency: Currency | None = Currency.TRY
    installment_fees: InstallmentFeePolicy = field(
        default_factory=TableInstallmentFeePolicy
    )

    required = (
        ("client_code", "TURKPAY_PARAMPOS_CLIENT_CODE"),
        ("client_username", "TURKPAY_PARAMPOS_CLIENT_USERNAME"),
        ("client_password", "TURKPAY_PARAMPOS_CLIENT_PASSWORD"),
        ("guid", "TURKPAY_PARAMPOS_GUID"),
        ("base_url", "TURKPAY_PARAMPOS_BASE_URL"),
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ParamposConfig":
        return cls(
            client_code=settings.parampos_client_code,
            client_username=settings.parampos_client_username,
            client_password=settings.parampos_client_password,
            guid=settings.parampos_guid,
            base_url=_parampos_base_url(settings),
            timeout=settings.parampos_timeout,
            fallback_currency=_fallback_currency(settings),
            installment_fees=TableInstallmentFeePolicy(settings.installment_rates),
        )

    def missing_fields(self) -> list[str]:
        return [f"{name} ({env})" for name, env in self.required if not getattr(self, name)]

    def validate(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise ProviderConfigurationError("parampos", missing)
