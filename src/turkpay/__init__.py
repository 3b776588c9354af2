"""Unified async adapters for Turkish payment gateways."""

from turkpay.features.payments.application.ports import PaymentProviderPort
from turkpay.features.payments.domain import (
    Address,
    BasketItem,
    BasketItemType,
    BinCheckResponse,
    Buyer,
    CancelRequest,
    CancelResponse,
    Currency,
    InstallmentInfoRequest,
    InstallmentInfoResponse,
    IyzicoCallbackData,
    Operation,
    ParamposCallbackData,
    PaymentCard,
    PaymentRequest,
    PaymentResponse,
    PaymentStatus,
    ProviderType,
    RefundRequest,
    RefundResponse,
    ThreeDSInitResponse,
    ThreeDSPaymentRequest,
)
from turkpay.features.payments.infrastructure import (
    IyzicoConfig,
    IyzicoPaymentAdapter,
    ParamposConfig,
    ParamposPaymentAdapter,
)
from turkpay.features.payments.infrastructure.normalizer import (
    validate_turkish_identity_number,
)
from turkpay.features.payments.infrastructure.provider_factory import (
    ProviderRegistry,
    build_provider_registry,
    get_provider_registry,
)

__version__ = "0.1.0"

__all__ = [
    "Address",
    "BasketItem",
    "BasketItemType",
    "BinCheckResponse",
    "Buyer",
    "CancelRequest",
    "CancelResponse",
    "Currency",
    "InstallmentInfoRequest",
    "InstallmentInfoResponse",
    "IyzicoCallbackData",
    "IyzicoConfig",
    "IyzicoPaymentAdapter",
    "Operation",
    "ParamposCallbackData",
    "ParamposConfig",
    "ParamposPaymentAdapter",
    "PaymentCard",
    "PaymentProviderPort",
    "PaymentRequest",
    "PaymentResponse",
    "PaymentStatus",
    "ProviderRegistry",
    "ProviderType",
    "RefundRequest",
    "RefundResponse",
    "ThreeDSInitResponse",
    "ThreeDSPaymentRequest",
    "build_provider_registry",
    "get_provider_registry",
    "validate_turkish_identity_number",
]
