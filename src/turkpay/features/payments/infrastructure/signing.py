"""Request signing and callback hashing for the supported gateways.

All functions are pure: identical inputs always give identical output.
Canonical strings are plain concatenations in a fixed field order; the
order is part of each gateway's contract.
"""

import base64
import hashlib
import hmac
import secrets
import time


def _b64(digest: bytes) -> str:
    return base64.b64encode(digest).decode("ascii")


def generate_nonce() -> str:
    """Millisecond timestamp followed by random hex, unique per request."""
    return f"{int(time.time() * 1000)}{secrets.token_hex(8)}"


def generate_rest_signature(
    api_key: str, secret_key: str, nonce: str, payload: str
) -> str:
    """
    HMAC-SHA256 signature for JSON gateways.

    canonical = api_key + nonce + sha256_hex(payload)
    signature = base64(hmac_sha256(secret_key, canonical))
    """
    payload_hash = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    canonical = f"{api_key}{nonce}{payload_hash}"
    digest = hmac.new(
        secret_key.encode("utf-8"), canonical.encode("utf-8"), hashlib.sha256
    ).digest()
    return _b64(digest)


def build_iyzico_authorization(
    api_key: str, secret_key: str, payload: str, nonce: str | None = None
) -> dict[str, str]:
    """Build the Authorization and nonce headers for an Iyzico request."""
    nonce = nonce or generate_nonce()
    signature = generate_rest_signature(api_key, secret_key, nonce, payload)
    credentials = f"apiKey:{api_key}&randomKey:{nonce}&signature:{signature}"
    token = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
    return {
        "Authorization": f"IYZWSv2 {token}",
        "x-iyzi-rnd": nonce,
    }


def generate_iyzico_callback_signature(
    secret_key: str,
    conversation_data: str,
    conversation_id: str,
    md_status: str,
    payment_id: str,
    status: str,
) -> str:
    """Hex HMAC-SHA256 over the colon-joined 3DS callback fields."""
    canonical = ":".join(
        [conversation_data, conversation_id, md_status, payment_id, status]
    )
    return hmac.new(
        secret_key.encode("utf-8"), canonical.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def generate_parampos_payment_hash(
    client_code: str,
    guid: str,
    installment: int,
    transaction_amount: str,
    total_amount: str,
    order_id: str,
) -> str:
    """
    SHA-256 payment hash, Base64 encoded.

    canonical = CLIENT_CODE + GUID + Taksit + Islem_Tutar + Toplam_Tutar + Siparis_ID
    """
    canonical = (
        f"{client_code}{guid}{installment}{transaction_amount}{total_amount}{order_id}"
    )
    return _b64(hashlib.sha256(canonical.encode("utf-8")).digest())


def generate_parampos_3ds_hash(
    islem_guid: str, md: str, md_status: str, order_id: str, guid: str
) -> str:
    """
    SHA-1 3DS callback hash, Base64 encoded.

    canonical = islemGUID + md + mdStatus + orderId + GUID
    """
    canonical = f"{islem_guid}{md}{md_status}{order_id}{guid}"
    return _b64(hashlib.sha1(canonical.encode("utf-8")).digest())


def signatures_match(expected: str, received: str) -> bool:
    """Compare two signatures without short-circuiting on the first mismatch."""
    return hmac.compare_digest(expected.encode("utf-8"), received.encode("utf-8"))
