"""Payment infrastructure adapters."""

from turkpay.features.payments.infrastructure.adapters.iyzico_adapter import (
    IyzicoPaymentAdapter,
)
from turkpay.features.payments.infrastructure.adapters.parampos_adapter import (
    ParamposPaymentAdapter,
)

__all__ = ["IyzicoPaymentAdapter", "ParamposPaymentAdapter"]
