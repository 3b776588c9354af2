"""Translate adapter-side exceptions into FAILURE result fields."""

from turkpay.features.payments.domain.enums import ErrorCode
from turkpay.shared.domain.exceptions import (
    AmountFormatError,
    PaymentProviderError,
    ProviderResponseError,
    ProviderTimeoutError,
    UnsupportedCurrencyError,
)

# Exceptions that mean the caller handed us data we cannot put on the wire.
REQUEST_ERRORS = (AmountFormatError, UnsupportedCurrencyError, ValueError)

HANDLED_ERRORS = (PaymentProviderError, *REQUEST_ERRORS)


def failure_fields(exc: Exception) -> dict[str, str]:
    """error_code / error_message for a handled exception."""
    if isinstance(exc, ProviderTimeoutError):
        code = ErrorCode.TIMEOUT
    elif isinstance(exc, ProviderResponseError):
        code = ErrorCode.INVALID_RESPONSE
    elif isinstance(exc, PaymentProviderError):
        code = ErrorCode.TRANSPORT_ERROR
    else:
        code = ErrorCode.INVALID_REQUEST
    return {"error_code": code.value, "error_message": str(exc)}


def invalid_request(reason: str) -> dict[str, str]:
    return {"error_code": ErrorCode.INVALID_REQUEST.value, "error_message": reason}
