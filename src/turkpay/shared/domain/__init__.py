"""Shared domain module - Exceptions and types."""

from turkpay.shared.domain.exceptions import (
    AmountFormatError,
    PaymentError,
    PaymentProviderError,
    ProviderConfigurationError,
    ProviderNotEnabledError,
    ProviderResponseError,
    ProviderTimeoutError,
    ProviderTransportError,
    SoapResponseError,
    UnsupportedCurrencyError,
    UnsupportedOperationError,
)

__all__ = [
    "AmountFormatError",
    "PaymentError",
    "PaymentProviderError",
    "ProviderConfigurationError",
    "ProviderNotEnabledError",
    "ProviderResponseError",
    "ProviderTimeoutError",
    "ProviderTransportError",
    "SoapResponseError",
    "UnsupportedCurrencyError",
    "UnsupportedOperationError",
]
