"""3-D Secure callback verification.

A bank redirect is caller-uncontrolled input. Its hash is recomputed from
its own fields and the merchant's configured credentials, and nothing else
about the callback may be trusted until the two match.
"""

from dataclasses import dataclass

from turkpay.features.payments.domain.entities import (
    IyzicoCallbackData,
    ParamposCallbackData,
)
from turkpay.features.payments.infrastructure.signing import (
    generate_iyzico_callback_signature,
    generate_parampos_3ds_hash,
    signatures_match,
)


@dataclass(frozen=True)
class CallbackVerification:
    """Outcome of a signature check."""

    valid: bool
    reason: str | None = None


VERIFIED = CallbackVerification(valid=True)


def verify_parampos_callback(
    data: ParamposCallbackData, merchant_guid: str
) -> CallbackVerification:
    """Check a Parampos callback against the configured merchant GUID."""
    if not data.hash:
        return CallbackVerification(False, "callback carries no hash")
    if data.guid and data.guid != merchant_guid:
        return CallbackVerification(False, "callback GUID does not match merchant")

    expected = generate_parampos_3ds_hash(
        data.islem_guid, data.md, data.md_status, data.order_id, merchant_guid
    )
    if not signatures_match(expected, data.hash):
        return CallbackVerification(False, "hash mismatch")
    return VERIFIED


def verify_iyzico_callback(
    data: IyzicoCallbackData, secret_key: str
) -> CallbackVerification:
    """Check an Iyzico callback signature with the merchant secret key."""
    if not data.signature:
        return CallbackVerification(False, "callback carries no signature")

    expected = generate_iyzico_callback_signature(
        secret_key,
        data.conversation_data,
        data.conversation_id,
        data.md_status,
        data.payment_id,
        data.status,
    )
    if not signatures_match(expected, data.signature.lower()):
        return CallbackVerification(False, "signature mismatch")
    return VERIFIED
