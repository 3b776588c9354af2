"""Payment infrastructure module."""

from turkpay.features.payments.infrastructure.adapters import (
    IyzicoPaymentAdapter,
    ParamposPaymentAdapter,
)
from turkpay.features.payments.infrastructure.provider_config import (
    IyzicoConfig,
    ParamposConfig,
)

__all__ = [
    "IyzicoConfig",
    "IyzicoPaymentAdapter",
    "ParamposConfig",
    "ParamposPaymentAdapter",
]
