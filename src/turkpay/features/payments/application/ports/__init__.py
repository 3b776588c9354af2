"""Payment application ports."""

from turkpay.features.payments.application.ports.payment_provider_port import (
    PaymentProviderPort,
)

__all__ = ["PaymentProviderPort"]
