"""Payment request and result value objects.

Every object here is built for a single request/response cycle and is
immutable once constructed. Monetary fields accept decimal strings (the
wire representation) as well as ``Decimal``/``int`` values; adapters format
them to two decimal places before transmission.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from turkpay.features.payments.domain.enums import (
    BasketItemType,
    Currency,
    PaymentStatus,
)

Amount = str | int | Decimal

INVALID_CALLBACK_SIGNATURE = "Invalid callback signature"


@dataclass(frozen=True)
class PaymentCard:
    """Card used for a payment."""

    holder_name: str
    number: str
    expire_month: str
    expire_year: str
    cvc: str
    register_card: bool = False


@dataclass(frozen=True)
class Buyer:
    """Cardholder / customer information."""

    id: str
    name: str
    surname: str
    email: str
    identity_number: str
    registration_address: str
    city: str
    country: str
    ip: str
    gsm_number: str | None = None
    zip_code: str | None = None


@dataclass(frozen=True)
class Address:
    """Shipping or billing address."""

    contact_name: str
    city: str
    country: str
    address: str
    zip_code: str | None = None


@dataclass(frozen=True)
class BasketItem:
    """Single basket line."""

    id: str
    name: str
    category: str
    item_type: BasketItemType
    price: Amount
    sub_category: str | None = None


@dataclass(frozen=True)
class PaymentRequest:
    """Direct (non-3DS) payment request."""

    price: Amount
    paid_price: Amount
    currency: Currency
    basket_id: str
    payment_card: PaymentCard | None
    buyer: Buyer | None
    shipping_address: Address | None
    billing_address: Address | None
    basket_items: tuple[BasketItem, ...] = ()
    conversation_id: str | None = None
    installment: int = 1

    def __post_init__(self) -> None:
        # Accept lists from callers but keep the value object immutable.
        if not isinstance(self.basket_items, tuple):
            object.__setattr__(self, "basket_items", tuple(self.basket_items))


@dataclass(frozen=True)
class ThreeDSPaymentRequest(PaymentRequest):
    """Payment request that goes through a 3-D Secure redirect."""

    callback_url: str = ""


@dataclass(frozen=True)
class RefundRequest:
    """Full or partial refund of a captured payment."""

    payment_id: str
    price: Amount
    currency: Currency = Currency.TRY
    ip: str = "127.0.0.1"
    conversation_id: str | None = None


@dataclass(frozen=True)
class CancelRequest:
    """Void of a payment that has not settled yet."""

    payment_id: str
    ip: str = "127.0.0.1"
    conversation_id: str | None = None


@dataclass(frozen=True)
class PaymentResponse:
    """Result of a payment, 3DS completion or payment query."""

    status: PaymentStatus
    payment_id: str | None = None
    conversation_id: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    raw_response: Any = None

    @property
    def is_success(self) -> bool:
        return self.status == PaymentStatus.SUCCESS


@dataclass(frozen=True)
class ThreeDSInitResponse:
    """Result of a 3DS initialization.

    ``three_ds_html_content`` is opaque: markup or a base64 blob, depending on
    the provider, that the caller renders to send the cardholder to the bank.
    """

    status: PaymentStatus
    three_ds_html_content: str | None = None
    payment_id: str | None = None
    conversation_id: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    raw_response: Any = None


@dataclass(frozen=True)
class RefundResponse:
    """Result of a refund."""

    status: PaymentStatus
    refund_id: str | None = None
    payment_id: str | None = None
    conversation_id: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    raw_response: Any = None


@dataclass(frozen=True)
class CancelResponse:
    """Result of a cancellation."""

    status: PaymentStatus
    payment_id: str | None = None
    conversation_id: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    raw_response: Any = None


@dataclass(frozen=True)
class ParamposCallbackData:
    """Fields posted by Parampos to the 3DS success/fail URL."""

    islem_guid: str
    md: str
    md_status: str
    order_id: str
    hash: str
    guid: str | None = None
    sonuc: str | None = None
    sonuc_str: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ParamposCallbackData":
        """Build from the bank's form fields (native names or snake_case)."""

        def pick(*names: str) -> str | None:
            for name in names:
                value = data.get(name)
                if value is not None:
                    return str(value)
            return None

        return cls(
            islem_guid=pick("islemGUID", "islem_guid") or "",
            md=pick("md", "MD") or "",
            md_status=pick("mdStatus", "md_status") or "",
            order_id=pick("orderId", "order_id") or "",
            hash=pick("hash", "islemHash") or "",
            guid=pick("GUID", "guid"),
            sonuc=pick("Sonuc", "sonuc"),
            sonuc_str=pick("Sonuc_Str", "sonuc_str"),
        )


@dataclass(frozen=True)
class IyzicoCallbackData:
    """Fields posted by Iyzico to the 3DS callback URL."""

    status: str
    payment_id: str
    conversation_id: str
    md_status: str
    signature: str
    conversation_data: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "IyzicoCallbackData":
        """Build from the callback form fields."""
        return cls(
            status=str(data.get("status") or ""),
            payment_id=str(data.get("paymentId") or ""),
            conversation_id=str(data.get("conversationId") or ""),
            md_status=str(data.get("mdStatus") or ""),
            signature=str(data.get("signature") or ""),
            conversation_data=str(data.get("conversationData") or ""),
        )


@dataclass(frozen=True)
class BinCheckResponse:
    """Card attributes resolved from a BIN."""

    status: PaymentStatus
    bin_number: str
    card_type: str = ""
    card_association: str = ""
    card_family: str = ""
    bank_name: str = ""
    bank_code: int | None = None
    commercial: bool = False
    error_code: str | None = None
    error_message: str | None = None
    raw_response: Any = None


@dataclass(frozen=True)
class InstallmentInfoRequest:
    """Installment options query for a card BIN and amount."""

    bin_number: str
    price: Amount
    conversation_id: str | None = None


@dataclass(frozen=True)
class InstallmentPrice:
    """One row of an installment plan."""

    installment_number: int
    installment_price: str
    total_price: str


@dataclass(frozen=True)
class InstallmentDetail:
    """Installment plan offered by one issuing bank / card family."""

    bin_number: str
    bank_name: str
    card_type: str
    card_association: str
    card_family: str
    prices: tuple[InstallmentPrice, ...] = field(default_factory=tuple)
    force_3ds: bool = False
    commercial: bool = False


@dataclass(frozen=True)
class InstallmentInfoResponse:
    """Result of an installment options query."""

    status: PaymentStatus
    details: tuple[InstallmentDetail, ...] = ()
    conversation_id: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    raw_response: Any = None
