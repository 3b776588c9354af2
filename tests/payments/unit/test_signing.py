"""Tests for request signing and callback hashes."""

import base64

import pytest

from turkpay.features.payments.infrastructure.signing import (
    build_iyzico_authorization,
    generate_iyzico_callback_signature,
    generate_nonce,
    generate_parampos_3ds_hash,
    generate_parampos_payment_hash,
    generate_rest_signature,
    signatures_match,
)

PAYMENT_FIELDS = ("CLIENT123", "GUID456", 1, "100.00", "100.00", "ORDER789")
THREEDS_FIELDS = ("ISLEM123", "MD456", "1", "ORDER789", "GUID000")


def _mutate(value):
    if isinstance(value, int):
        return value + 1
    return value[:-1] + ("X" if value[-1] != "X" else "Y")


class TestParamposPaymentHash:
    def test_is_deterministic(self):
        assert generate_parampos_payment_hash(*PAYMENT_FIELDS) == generate_parampos_payment_hash(
            *PAYMENT_FIELDS
        )

    def test_is_base64_sha256(self):
        digest = base64.b64decode(generate_parampos_payment_hash(*PAYMENT_FIELDS))
        assert len(digest) == 32

    @pytest.mark.parametrize("index", range(len(PAYMENT_FIELDS)))
    def test_every_field_changes_the_hash(self, index):
        changed = list(PAYMENT_FIELDS)
        changed[index] = _mutate(changed[index])
        assert generate_parampos_payment_hash(*changed) != generate_parampos_payment_hash(
            *PAYMENT_FIELDS
        )

    def test_field_order_matters(self):
        swapped = ("CLIENT123", "GUID456", 1, "100.00", "100.01", "ORDER789")
        reordered = ("CLIENT123", "GUID456", 1, "100.01", "100.00", "ORDER789")
        assert generate_parampos_payment_hash(*swapped) != generate_parampos_payment_hash(
            *reordered
        )


class TestParampos3DSHash:
    def test_is_deterministic(self):
        assert generate_parampos_3ds_hash(*THREEDS_FIELDS) == generate_parampos_3ds_hash(
            *THREEDS_FIELDS
        )

    def test_is_base64_sha1(self):
        digest = base64.b64decode(generate_parampos_3ds_hash(*THREEDS_FIELDS))
        assert len(digest) == 20

    @pytest.mark.parametrize("index", range(len(THREEDS_FIELDS)))
    def test_every_field_changes_the_hash(self, index):
        changed = list(THREEDS_FIELDS)
        changed[index] = _mutate(changed[index])
        assert generate_parampos_3ds_hash(*changed) != generate_parampos_3ds_hash(
            *THREEDS_FIELDS
        )


class TestRestSignature:
    def test_is_deterministic(self):
        first = generate_rest_signature("key", "secret", "nonce-1", '{"a":1}')
        second = generate_rest_signature("key", "secret", "nonce-1", '{"a":1}')
        assert first == second
        assert len(base64.b64decode(first)) == 32

    @pytest.mark.parametrize(
        "changed",
        [
            ("key2", "secret", "nonce-1", '{"a":1}'),
            ("key", "secret2", "nonce-1", '{"a":1}'),
            ("key", "secret", "nonce-2", '{"a":1}'),
            ("key", "secret", "nonce-1", '{"a":2}'),
        ],
    )
    def test_every_input_changes_the_signature(self, changed):
        assert generate_rest_signature(*changed) != generate_rest_signature(
            "key", "secret", "nonce-1", '{"a":1}'
        )

    def test_authorization_header_embeds_signature(self):
        headers = build_iyzico_authorization("key", "secret", '{"a":1}', nonce="n-1")

        assert headers["x-iyzi-rnd"] == "n-1"
        scheme, token = headers["Authorization"].split(" ", 1)
        assert scheme == "IYZWSv2"
        decoded = base64.b64decode(token).decode()
        signature = generate_rest_signature("key", "secret", "n-1", '{"a":1}')
        assert decoded == f"apiKey:key&randomKey:n-1&signature:{signature}"

    def test_nonces_are_unique(self):
        assert len({generate_nonce() for _ in range(50)}) == 50


class TestIyzicoCallbackSignature:
    def test_is_hex_sha256(self):
        signature = generate_iyzico_callback_signature(
            "secret", "data", "conv", "1", "pay-1", "success"
        )
        assert len(signature) == 64
        int(signature, 16)

    def test_status_is_bound(self):
        ok = generate_iyzico_callback_signature("secret", "", "conv", "1", "pay-1", "success")
        bad = generate_iyzico_callback_signature("secret", "", "conv", "1", "pay-1", "failure")
        assert ok != bad


class TestSignaturesMatch:
    def test_equal(self):
        assert signatures_match("abc", "abc") is True

    def test_different(self):
        assert signatures_match("abc", "abd") is False
        assert signatures_match("abc", "") is False
