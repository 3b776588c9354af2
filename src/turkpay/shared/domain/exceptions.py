"""Domain exceptions for the payment gateway layer."""


class PaymentError(Exception):
    """Base exception for payment errors."""

    pass


class ProviderConfigurationError(PaymentError):
    """Raised when a provider is constructed with missing credentials."""

    def __init__(self, provider: str, missing_fields: list[str]) -> None:
        self.provider = provider
        self.missing_fields = list(missing_fields)
        listing = "\n".join(f"  - {name}" for name in self.missing_fields)
        super().__init__(
            f"Payment provider '{provider}' configuration is missing required fields:\n"
            f"{listing}"
        )


class ProviderNotEnabledError(PaymentError):
    """Raised when a provider is requested that is not enabled."""

    def __init__(self, provider: str, enabled: list[str]) -> None:
        self.provider = provider
        self.enabled = list(enabled)
        available = ", ".join(self.enabled) if self.enabled else "none"
        super().__init__(
            f"Payment provider '{provider}' is not enabled or configured "
            f"(enabled providers: {available})"
        )


class PaymentProviderError(PaymentError):
    """Raised when there's an error talking to the payment provider."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        self.reason = message
        super().__init__(f"Payment provider '{provider}' error: {message}")


class ProviderTransportError(PaymentProviderError):
    """Raised when the provider could not be reached."""

    pass


class ProviderTimeoutError(ProviderTransportError):
    """Raised when the provider did not answer within the configured timeout."""

    def __init__(self, provider: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(provider, f"request timed out after {timeout:g}s")


class ProviderResponseError(PaymentProviderError):
    """Raised when a provider response cannot be decoded."""

    pass


class SoapResponseError(ProviderResponseError):
    """Raised when an expected SOAP result element is absent."""

    def __init__(self, provider: str, tag_name: str, detail: str | None = None) -> None:
        self.tag_name = tag_name
        message = f"could not find {tag_name} in SOAP response"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(provider, message)


class UnsupportedOperationError(PaymentError):
    """Raised when a provider does not offer the requested capability."""

    def __init__(self, provider: str, operation: str) -> None:
        self.provider = provider
        self.operation = operation
        super().__init__(
            f"Operation '{operation}' is not supported by payment provider '{provider}'"
        )


class AmountFormatError(PaymentError, ValueError):
    """Raised when a monetary value cannot be parsed."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid amount: {value!r}")


class UnsupportedCurrencyError(PaymentError, ValueError):
    """Raised in strict mode when a currency has no provider code."""

    def __init__(self, currency: object) -> None:
        self.currency = currency
        super().__init__(f"Unsupported currency: {currency!r}")
