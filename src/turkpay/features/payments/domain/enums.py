"""Payment domain enums."""

from enum import Enum


class PaymentStatus(str, Enum):
    """Normalized payment status shared by every provider."""

    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"
    CANCELLED = "cancelled"


class Currency(str, Enum):
    """Supported currencies."""

    TRY = "TRY"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"


class BasketItemType(str, Enum):
    """Basket item type."""

    PHYSICAL = "PHYSICAL"
    VIRTUAL = "VIRTUAL"


class ProviderType(str, Enum):
    """Identifier used to select a provider adapter."""

    IYZICO = "iyzico"
    PARAMPOS = "parampos"


class Operation(str, Enum):
    """Operations a provider adapter may offer."""

    CREATE_PAYMENT = "create_payment"
    INIT_THREEDS_PAYMENT = "init_threeds_payment"
    COMPLETE_THREEDS_PAYMENT = "complete_threeds_payment"
    REFUND = "refund"
    CANCEL = "cancel"
    GET_PAYMENT = "get_payment"
    BIN_CHECK = "bin_check"
    INSTALLMENT_INFO = "installment_info"


CORE_OPERATIONS = frozenset(
    {
        Operation.CREATE_PAYMENT,
        Operation.INIT_THREEDS_PAYMENT,
        Operation.COMPLETE_THREEDS_PAYMENT,
        Operation.REFUND,
        Operation.CANCEL,
        Operation.GET_PAYMENT,
    }
)


class ErrorCode(str, Enum):
    """Error codes produced locally rather than by a provider."""

    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    TIMEOUT = "TIMEOUT"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
