"""Status, currency, amount and installment normalization."""

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Protocol

from turkpay.features.payments.domain.enums import Currency, PaymentStatus
from turkpay.shared.domain.exceptions import (
    AmountFormatError,
    UnsupportedCurrencyError,
)

TWO_PLACES = Decimal("0.01")


def to_decimal(value: object) -> Decimal:
    """Parse a monetary value, rejecting anything non-numeric."""
    if isinstance(value, bool):
        raise AmountFormatError(value)
    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, (int, float)):
            amount = Decimal(str(value))
        elif isinstance(value, str):
            amount = Decimal(value.strip())
        else:
            raise AmountFormatError(value)
    except InvalidOperation as e:
        raise AmountFormatError(value) from e

    if not amount.is_finite():
        raise AmountFormatError(value)
    return amount


def format_amount(value: object) -> str:
    """Format to a two-decimal string using half-up rounding."""
    amount = to_decimal(value)
    try:
        return str(amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))
    except InvalidOperation as e:
        # Too many digits for the decimal context
        raise AmountFormatError(value) from e


class StatusMapper:
    """
    Total mapping from provider status vocabulary to PaymentStatus.

    Unknown or missing codes map to FAILURE so that nothing unrecognized can
    ever be reported as a successful payment.
    """

    def __init__(
        self,
        success: Iterable[str],
        failure: Iterable[str] = (),
        pending: Iterable[str] = (),
        cancelled: Iterable[str] = (),
        case_sensitive: bool = False,
    ) -> None:
        self._case_sensitive = case_sensitive
        self._table: dict[str, PaymentStatus] = {}
        for codes, status in (
            (failure, PaymentStatus.FAILURE),
            (pending, PaymentStatus.PENDING),
            (cancelled, PaymentStatus.CANCELLED),
            (success, PaymentStatus.SUCCESS),
        ):
            for code in codes:
                self._table[self._key(code)] = status

    def _key(self, code: str) -> str:
        code = code.strip()
        return code if self._case_sensitive else code.upper()

    def map(self, raw: object) -> PaymentStatus:
        if raw is None:
            return PaymentStatus.FAILURE
        return self._table.get(self._key(str(raw)), PaymentStatus.FAILURE)


PARAMPOS_RESULT_STATUS = StatusMapper(success=["1"], failure=["0", "-1"])

# Durum field of TP_Islem_Sorgulama
PARAMPOS_INQUIRY_STATUS = StatusMapper(
    success=["SUCCESS", "BASARILI"],
    failure=["FAIL", "FAILURE", "BASARISIZ"],
    pending=["WAITING", "BEKLEMEDE"],
    cancelled=["CANCEL", "CANCELLED", "IPTAL"],
)

IYZICO_RESPONSE_STATUS = StatusMapper(success=["success"], failure=["failure"])

# paymentStatus field of payment detail / checkout retrieval
IYZICO_PAYMENT_STATUS = StatusMapper(
    success=["SUCCESS"],
    failure=["FAILURE"],
    pending=["INIT_THREEDS", "CALLBACK_THREEDS", "BKM_POS_SELECTED", "WAITING"],
    cancelled=["CANCELLED", "CANCEL"],
)

IYZICO_MD_STATUS_MESSAGES = {
    "0": "3-D Secure signature invalid or authentication failed",
    "2": "Card holder or issuer not enrolled in 3-D Secure",
    "3": "Card issuer not enrolled in 3-D Secure",
    "4": "Verification attempt; card holder chose to register later",
    "5": "3-D Secure verification could not be completed",
    "6": "3-D Secure error",
    "7": "System error",
    "8": "Unknown card number",
}


def md_status_message(md_status: str) -> str:
    return IYZICO_MD_STATUS_MESSAGES.get(
        md_status, "3-D Secure verification failed"
    )


class CurrencyMapper:
    """
    Two-way currency code table for one provider.

    ``fallback`` is the currency used for inputs the table does not know.
    Passing ``None`` makes the mapper strict: unknown inputs raise
    UnsupportedCurrencyError instead of silently becoming the fallback.
    """

    def __init__(
        self, table: Mapping[Currency, str], fallback: Currency | None = Currency.TRY
    ) -> None:
        self._to_provider = dict(table)
        self._from_provider = {code: currency for currency, code in table.items()}
        self.fallback = fallback

    def to_provider(self, currency: Currency | str) -> str:
        try:
            return self._to_provider[Currency(currency)]
        except (ValueError, KeyError):
            if self.fallback is None:
                raise UnsupportedCurrencyError(currency) from None
            return self._to_provider[self.fallback]

    def from_provider(self, code: str) -> Currency:
        try:
            return self._from_provider[code]
        except KeyError:
            if self.fallback is None:
                raise UnsupportedCurrencyError(code) from None
            return self.fallback


PARAMPOS_CURRENCIES = {
    Currency.TRY: "TL",
    Currency.USD: "US",
    Currency.EUR: "EU",
    Currency.GBP: "GB",
}

IYZICO_CURRENCIES = {currency: currency.value for currency in Currency}


class InstallmentFeePolicy(Protocol):
    """Source of the fee rate charged for paying in installments."""

    def rate_for(self, installments: int) -> Decimal: ...


# Example-grade schedule; production deployments should plug in the rates
# the provider publishes for the merchant.
DEFAULT_INSTALLMENT_RATES: dict[int, Decimal] = {
    count: Decimal(count) / Decimal(100) for count in range(2, 13)
}


class TableInstallmentFeePolicy:
    """Fixed fee table keyed by installment count; unknown counts are fee-free."""

    def __init__(self, rates: Mapping[int, Decimal | str | float] | None = None) -> None:
        source = DEFAULT_INSTALLMENT_RATES if rates is None else rates
        self.rates = {int(count): to_decimal(rate) for count, rate in source.items()}

    def rate_for(self, installments: int) -> Decimal:
        if installments <= 1:
            return Decimal(0)
        return self.rates.get(installments, Decimal(0))


def calculate_total_amount(
    amount: object, installments: int, policy: InstallmentFeePolicy
) -> str:
    """Total payable amount including the installment fee."""
    base = to_decimal(amount)
    if installments <= 1:
        return format_amount(base)
    return format_amount(base * (1 + policy.rate_for(installments)))


def format_expiry_month(month: str | int) -> str:
    """Normalize an expiry month to MM."""
    text = str(month).strip()
    if not text.isdigit() or not 1 <= int(text) <= 12:
        raise ValueError(f"Invalid month: {month}")
    return text.zfill(2)


def format_expiry_year(year: str | int, today: date | None = None) -> str:
    """Normalize an expiry year to YYYY; two-digit years use the current century."""
    text = str(year).strip()
    if not text.isdigit():
        raise ValueError(f"Invalid year format: {year}")
    if len(text) == 2:
        century = ((today or date.today()).year // 100) * 100
        return str(century + int(text))
    if len(text) == 4:
        if not 2000 <= int(text) <= 2100:
            raise ValueError(f"Invalid year: {year}")
        return text
    raise ValueError(f"Invalid year format: {year}")


def mask_card_number(number: str) -> str:
    """Keep the first and last four digits, e.g. 5528********0008."""
    if len(number) < 10:
        return number
    return f"{number[:4]}{'*' * (len(number) - 8)}{number[-4:]}"


def validate_turkish_identity_number(identity_number: str) -> bool:
    """
    Check a TC Kimlik number: 11 digits, no leading zero, and the two
    trailing checksum digits.
    """
    if len(identity_number) != 11 or not identity_number.isascii():
        return False
    if not identity_number.isdigit():
        return False

    digits = [int(char) for char in identity_number]
    if digits[0] == 0:
        return False

    odd_sum = sum(digits[0:9:2])
    even_sum = sum(digits[1:8:2])
    if (odd_sum * 7 - even_sum) % 10 != digits[9]:
        return False

    return sum(digits[:10]) % 10 == digits[10]
