"""Payment domain value objects and enums."""

from turkpay.features.payments.domain.entities import (
    INVALID_CALLBACK_SIGNATURE,
    Address,
    BasketItem,
    BinCheckResponse,
    Buyer,
    CancelRequest,
    CancelResponse,
    InstallmentDetail,
    InstallmentInfoRequest,
    InstallmentInfoResponse,
    InstallmentPrice,
    IyzicoCallbackData,
    ParamposCallbackData,
    PaymentCard,
    PaymentRequest,
    PaymentResponse,
    RefundRequest,
    RefundResponse,
    ThreeDSInitResponse,
    ThreeDSPaymentRequest,
)
from turkpay.features.payments.domain.enums import (
    CORE_OPERATIONS,
    BasketItemType,
    Currency,
    ErrorCode,
    Operation,
    PaymentStatus,
    ProviderType,
)

__all__ = [
    "INVALID_CALLBACK_SIGNATURE",
    "CORE_OPERATIONS",
    "Address",
    "BasketItem",
    "BasketItemType",
    "BinCheckResponse",
    "Buyer",
    "CancelRequest",
    "CancelResponse",
    "Currency",
    "ErrorCode",
    "InstallmentDetail",
    "InstallmentInfoRequest",
    "InstallmentInfoResponse",
    "InstallmentPrice",
    "IyzicoCallbackData",
    "Operation",
    "ParamposCallbackData",
    "PaymentCard",
    "PaymentRequest",
    "PaymentResponse",
    "PaymentStatus",
    "ProviderType",
    "RefundRequest",
    "RefundResponse",
    "ThreeDSInitResponse",
    "ThreeDSPaymentRequest",
]
