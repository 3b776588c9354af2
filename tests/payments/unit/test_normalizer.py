"""Tests for status, currency, amount and installment normalization."""

from datetime import date
from decimal import Decimal

import pytest

from turkpay.features.payments.domain.enums import Currency, PaymentStatus
from turkpay.features.payments.infrastructure.normalizer import (
    DEFAULT_INSTALLMENT_RATES,
    IYZICO_PAYMENT_STATUS,
    IYZICO_RESPONSE_STATUS,
    PARAMPOS_CURRENCIES,
    PARAMPOS_INQUIRY_STATUS,
    PARAMPOS_RESULT_STATUS,
    CurrencyMapper,
    StatusMapper,
    TableInstallmentFeePolicy,
    calculate_total_amount,
    format_amount,
    format_expiry_month,
    format_expiry_year,
    mask_card_number,
    md_status_message,
    validate_turkish_identity_number,
)
from turkpay.shared.domain.exceptions import (
    AmountFormatError,
    UnsupportedCurrencyError,
)


class TestFormatAmount:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (1, "1.00"),
            ("99.999", "100.00"),
            ("150.5", "150.50"),
            (99.99, "99.99"),
            (Decimal("0.005"), "0.01"),
            ("  42 ", "42.00"),
        ],
    )
    def test_formats_two_places_half_up(self, value, expected):
        assert format_amount(value) == expected

    @pytest.mark.parametrize("value", ["invalid", "", "NaN", "Infinity", None, True, [1]])
    def test_rejects_non_numeric(self, value):
        with pytest.raises(AmountFormatError, match="Invalid amount"):
            format_amount(value)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            format_amount("1,5")

    @pytest.mark.parametrize("value", ["1e30", "1" * 30, Decimal("9" * 27)])
    def test_rejects_amounts_too_large_to_quantize(self, value):
        with pytest.raises(AmountFormatError):
            format_amount(value)


class TestInstallmentFees:
    @pytest.mark.parametrize(
        "installments, expected",
        [(1, "1000.00"), (6, "1060.00"), (12, "1120.00")],
    )
    def test_default_table(self, installments, expected):
        policy = TableInstallmentFeePolicy()
        assert calculate_total_amount(1000, installments, policy) == expected

    def test_default_table_covers_two_to_twelve(self):
        assert sorted(DEFAULT_INSTALLMENT_RATES) == list(range(2, 13))
        assert DEFAULT_INSTALLMENT_RATES[3] == Decimal("0.03")

    def test_unknown_count_is_fee_free(self):
        assert calculate_total_amount("1000", 13, TableInstallmentFeePolicy()) == "1000.00"

    def test_custom_rates_replace_the_table(self):
        policy = TableInstallmentFeePolicy({3: "0.015"})
        assert calculate_total_amount("200", 3, policy) == "203.00"
        assert calculate_total_amount("200", 6, policy) == "200.00"

    def test_any_object_with_rate_for_is_a_policy(self):
        class FlatFee:
            def rate_for(self, installments):
                return Decimal("0.10")

        assert calculate_total_amount("50", 4, FlatFee()) == "55.00"


class TestStatusMapping:
    def test_parampos_result_codes(self):
        assert PARAMPOS_RESULT_STATUS.map("1") == PaymentStatus.SUCCESS
        assert PARAMPOS_RESULT_STATUS.map("0") == PaymentStatus.FAILURE
        assert PARAMPOS_RESULT_STATUS.map("-1") == PaymentStatus.FAILURE

    @pytest.mark.parametrize("raw", ["2", "", None, "SUCCESS", "true", "01"])
    def test_unknown_codes_never_succeed(self, raw):
        assert PARAMPOS_RESULT_STATUS.map(raw) == PaymentStatus.FAILURE

    def test_iyzico_payment_states(self):
        assert IYZICO_PAYMENT_STATUS.map("SUCCESS") == PaymentStatus.SUCCESS
        assert IYZICO_PAYMENT_STATUS.map("INIT_THREEDS") == PaymentStatus.PENDING
        assert IYZICO_PAYMENT_STATUS.map("CALLBACK_THREEDS") == PaymentStatus.PENDING
        assert IYZICO_PAYMENT_STATUS.map("WAITING") == PaymentStatus.PENDING
        assert IYZICO_PAYMENT_STATUS.map("CANCELLED") == PaymentStatus.CANCELLED
        assert IYZICO_PAYMENT_STATUS.map("MYSTERY") == PaymentStatus.FAILURE

    def test_iyzico_status_is_case_insensitive(self):
        assert IYZICO_RESPONSE_STATUS.map("success") == PaymentStatus.SUCCESS
        assert IYZICO_RESPONSE_STATUS.map("SUCCESS") == PaymentStatus.SUCCESS
        assert IYZICO_RESPONSE_STATUS.map("failure") == PaymentStatus.FAILURE

    def test_parampos_inquiry_states(self):
        assert PARAMPOS_INQUIRY_STATUS.map("IPTAL") == PaymentStatus.CANCELLED
        assert PARAMPOS_INQUIRY_STATUS.map("BEKLEMEDE") == PaymentStatus.PENDING
        assert PARAMPOS_INQUIRY_STATUS.map("SUCCESS") == PaymentStatus.SUCCESS
        assert PARAMPOS_INQUIRY_STATUS.map("???") == PaymentStatus.FAILURE

    def test_case_sensitive_mapper(self):
        mapper = StatusMapper(success=["ok"], case_sensitive=True)
        assert mapper.map("ok") == PaymentStatus.SUCCESS
        assert mapper.map("OK") == PaymentStatus.FAILURE


class TestCurrencyMapping:
    def test_known_currencies(self):
        mapper = CurrencyMapper(PARAMPOS_CURRENCIES)
        assert mapper.to_provider(Currency.TRY) == "TL"
        assert mapper.to_provider(Currency.USD) == "US"
        assert mapper.to_provider("EUR") == "EU"
        assert mapper.to_provider(Currency.GBP) == "GB"

    def test_round_trip_from_provider(self):
        mapper = CurrencyMapper(PARAMPOS_CURRENCIES)
        for currency in Currency:
            assert mapper.from_provider(mapper.to_provider(currency)) == currency

    def test_lenient_default_falls_back_to_try(self):
        mapper = CurrencyMapper(PARAMPOS_CURRENCIES)
        assert mapper.to_provider("UNKNOWN") == "TL"
        assert mapper.from_provider("XX") == Currency.TRY

    def test_fallback_is_configurable(self):
        mapper = CurrencyMapper(PARAMPOS_CURRENCIES, fallback=Currency.EUR)
        assert mapper.to_provider("UNKNOWN") == "EU"

    def test_strict_mode_raises(self):
        mapper = CurrencyMapper(PARAMPOS_CURRENCIES, fallback=None)
        with pytest.raises(UnsupportedCurrencyError):
            mapper.to_provider("UNKNOWN")
        with pytest.raises(UnsupportedCurrencyError):
            mapper.from_provider("XX")


class TestExpiry:
    @pytest.mark.parametrize("month, expected", [(1, "01"), (12, "12"), ("05", "05"), ("7", "07")])
    def test_month(self, month, expected):
        assert format_expiry_month(month) == expected

    @pytest.mark.parametrize("month", [0, 13, "ab", ""])
    def test_invalid_month(self, month):
        with pytest.raises(ValueError, match="Invalid month"):
            format_expiry_month(month)

    def test_two_digit_year_uses_current_century(self):
        assert format_expiry_year("30", today=date(2026, 10, 18)) == "2030"
        assert format_expiry_year(99, today=date(2026, 10, 18)) == "2099"

    def test_four_digit_year(self):
        assert format_expiry_year("2030") == "2030"

    @pytest.mark.parametrize("year", ["1999", "2101", "203", "20300", "yy"])
    def test_invalid_year(self, year):
        with pytest.raises(ValueError):
            format_expiry_year(year)


class TestHelpers:
    def test_mask_card_number(self):
        assert mask_card_number("5528790000000008") == "5528********0008"

    def test_short_numbers_are_left_alone(self):
        assert mask_card_number("552879") == "552879"

    def test_md_status_message(self):
        assert "not enrolled" in md_status_message("2")
        assert md_status_message("42") == "3-D Secure verification failed"


class TestTurkishIdentityNumber:
    def test_valid_number(self):
        assert validate_turkish_identity_number("10000000146") is True

    def test_returns_a_boolean(self):
        assert isinstance(validate_turkish_identity_number("12345678901"), bool)

    @pytest.mark.parametrize("value", ["123", "123456789012", ""])
    def test_rejects_wrong_length(self, value):
        assert validate_turkish_identity_number(value) is False

    @pytest.mark.parametrize("value", ["1234567890a", "1000000014٦"])
    def test_rejects_non_digits(self, value):
        assert validate_turkish_identity_number(value) is False

    def test_rejects_leading_zero(self):
        assert validate_turkish_identity_number("01234567890") is False

    @pytest.mark.parametrize("value", ["10000000156", "10000000147"])
    def test_rejects_bad_checksum_digits(self, value):
        assert validate_turkish_identity_number(value) is False
