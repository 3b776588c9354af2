"""Tests for 3-D Secure callback verification."""

import pytest

from turkpay.features.payments.domain import IyzicoCallbackData, ParamposCallbackData
from turkpay.features.payments.infrastructure.callback_verifier import (
    verify_iyzico_callback,
    verify_parampos_callback,
)
from turkpay.features.payments.infrastructure.signing import (
    generate_iyzico_callback_signature,
    generate_parampos_3ds_hash,
)

MERCHANT_GUID = "test-guid-1234"
SECRET_KEY = "sandbox-secret-key"


def _parampos_callback(**overrides) -> ParamposCallbackData:
    values = {
        "islem_guid": "ISLEM-1",
        "md": "MD-1",
        "md_status": "1",
        "order_id": "ORDER-1",
    }
    values.update(overrides)
    values.setdefault(
        "hash",
        generate_parampos_3ds_hash(
            values["islem_guid"], values["md"], values["md_status"], values["order_id"], MERCHANT_GUID
        ),
    )
    return ParamposCallbackData(**values)


def _iyzico_callback(**overrides) -> IyzicoCallbackData:
    values = {
        "status": "success",
        "payment_id": "PAY-1",
        "conversation_id": "conv-123",
        "md_status": "1",
        "conversation_data": "",
    }
    values.update(overrides)
    values.setdefault(
        "signature",
        generate_iyzico_callback_signature(
            SECRET_KEY,
            values["conversation_data"],
            values["conversation_id"],
            values["md_status"],
            values["payment_id"],
            values["status"],
        ),
    )
    return IyzicoCallbackData(**values)


class TestParamposCallback:
    def test_valid_callback(self):
        result = verify_parampos_callback(_parampos_callback(), MERCHANT_GUID)

        assert result.valid is True
        assert result.reason is None

    def test_matching_guid_in_callback_is_accepted(self):
        callback = _parampos_callback(guid=MERCHANT_GUID)

        assert verify_parampos_callback(callback, MERCHANT_GUID).valid is True

    def test_tampered_md_status_is_rejected(self):
        callback = _parampos_callback()
        tampered = ParamposCallbackData(
            islem_guid=callback.islem_guid,
            md=callback.md,
            md_status="0",
            order_id=callback.order_id,
            hash=callback.hash,
        )

        result = verify_parampos_callback(tampered, MERCHANT_GUID)

        assert result.valid is False
        assert result.reason == "hash mismatch"

    def test_foreign_guid_is_rejected(self):
        callback = _parampos_callback(guid="attacker-guid")

        result = verify_parampos_callback(callback, MERCHANT_GUID)

        assert result.valid is False
        assert "GUID" in result.reason

    def test_hash_made_with_another_guid_is_rejected(self):
        forged = generate_parampos_3ds_hash("ISLEM-1", "MD-1", "1", "ORDER-1", "attacker-guid")
        callback = _parampos_callback(hash=forged)

        assert verify_parampos_callback(callback, MERCHANT_GUID).valid is False

    def test_empty_hash_is_rejected(self):
        callback = ParamposCallbackData(
            islem_guid="ISLEM-1", md="MD-1", md_status="1", order_id="ORDER-1", hash=""
        )

        assert verify_parampos_callback(callback, MERCHANT_GUID).valid is False

    def test_from_mapping_reads_form_names(self):
        callback = _parampos_callback()
        form = {
            "islemGUID": callback.islem_guid,
            "md": callback.md,
            "mdStatus": callback.md_status,
            "orderId": callback.order_id,
            "islemHash": callback.hash,
        }

        parsed = ParamposCallbackData.from_mapping(form)

        assert parsed == callback
        assert verify_parampos_callback(parsed, MERCHANT_GUID).valid is True


class TestIyzicoCallback:
    def test_valid_callback(self):
        assert verify_iyzico_callback(_iyzico_callback(), SECRET_KEY).valid is True

    def test_uppercase_hex_is_accepted(self):
        callback = _iyzico_callback()
        upper = _iyzico_callback(signature=callback.signature.upper())

        assert verify_iyzico_callback(upper, SECRET_KEY).valid is True

    @pytest.mark.parametrize(
        "field, value",
        [("status", "failure"), ("payment_id", "PAY-2"), ("md_status", "0")],
    )
    def test_tampered_field_is_rejected(self, field, value):
        signature = _iyzico_callback().signature
        tampered = _iyzico_callback(signature=signature, **{field: value})

        result = verify_iyzico_callback(tampered, SECRET_KEY)

        assert result.valid is False
        assert result.reason == "signature mismatch"

    def test_wrong_secret_is_rejected(self):
        assert verify_iyzico_callback(_iyzico_callback(), "other-secret").valid is False

    def test_missing_signature_is_rejected(self):
        assert verify_iyzico_callback(_iyzico_callback(signature=""), SECRET_KEY).valid is False
