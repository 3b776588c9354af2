"""Payment provider port (interface) - Adapter Pattern."""

from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import urlparse

from turkpay.features.payments.domain.entities import (
    BinCheckResponse,
    CancelRequest,
    CancelResponse,
    InstallmentInfoRequest,
    InstallmentInfoResponse,
    PaymentRequest,
    PaymentResponse,
    RefundRequest,
    RefundResponse,
    ThreeDSInitResponse,
    ThreeDSPaymentRequest,
)
from turkpay.features.payments.domain.enums import (
    CORE_OPERATIONS,
    Operation,
    ProviderType,
)
from turkpay.shared.domain.exceptions import UnsupportedOperationError


class PaymentProviderPort(ABC):
    """
    Abstract interface for payment providers (Adapter Pattern).

    Implementations:
    - IyzicoPaymentAdapter (REST/JSON)
    - ParamposPaymentAdapter (SOAP/XML)

    Business outcomes are returned as result objects with a normalized
    status. Only configuration errors and capability checks raise.
    """

    supported_operations: frozenset[Operation] = CORE_OPERATIONS

    @property
    @abstractmethod
    def provider_type(self) -> ProviderType:
        """Get the provider identifier."""
        pass

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self.provider_type.value

    def is_supported(self, operation: Operation | str) -> bool:
        """Check whether this provider offers an operation."""
        try:
            return Operation(operation) in self.supported_operations
        except ValueError:
            return False

    @abstractmethod
    async def create_payment(self, request: PaymentRequest) -> PaymentResponse:
        """Charge a card directly, without 3-D Secure."""
        pass

    @abstractmethod
    async def init_threeds_payment(
        self, request: ThreeDSPaymentRequest
    ) -> ThreeDSInitResponse:
        """
        Start a 3-D Secure payment.

        A successful start is PENDING, never SUCCESS: the bank has not
        confirmed the payment yet.
        """
        pass

    @abstractmethod
    async def complete_threeds_payment(self, callback_data: Any) -> PaymentResponse:
        """
        Finish a 3-D Secure payment from the bank's callback fields.

        The callback signature is verified before any business field is read.
        """
        pass

    @abstractmethod
    async def refund(self, request: RefundRequest) -> RefundResponse:
        """Refund a captured payment, fully or partially."""
        pass

    @abstractmethod
    async def cancel(self, request: CancelRequest) -> CancelResponse:
        """Void a payment."""
        pass

    @abstractmethod
    async def get_payment(self, payment_id: str) -> PaymentResponse:
        """Query a payment. Safe to retry."""
        pass

    async def bin_check(self, bin_number: str) -> BinCheckResponse:
        """Resolve card attributes from a BIN."""
        raise UnsupportedOperationError(self.provider_name, Operation.BIN_CHECK.value)

    async def installment_info(
        self, request: InstallmentInfoRequest
    ) -> InstallmentInfoResponse:
        """List installment plans for a BIN and amount."""
        raise UnsupportedOperationError(
            self.provider_name, Operation.INSTALLMENT_INFO.value
        )

    @staticmethod
    def validate_payment_request(request: PaymentRequest) -> str | None:
        """Return a reason if required sub-objects are missing."""
        missing = [
            name
            for name in (
                "payment_card",
                "buyer",
                "shipping_address",
                "billing_address",
            )
            if getattr(request, name) is None
        ]
        if not request.basket_items:
            missing.append("basket_items")
        if not request.basket_id:
            missing.append("basket_id")
        if missing:
            return f"Missing required fields: {', '.join(missing)}"
        if request.installment < 1:
            return f"Installment count must be at least 1, got {request.installment}"
        return None

    @classmethod
    def validate_threeds_request(cls, request: ThreeDSPaymentRequest) -> str | None:
        """Like validate_payment_request, plus an absolute callback URL."""
        reason = cls.validate_payment_request(request)
        if reason:
            return reason
        parsed = urlparse(request.callback_url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            return "callback_url must be an absolute http(s) URL"
        return None
