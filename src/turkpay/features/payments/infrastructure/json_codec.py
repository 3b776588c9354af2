"""JSON request bodies and response decoding for the Iyzico REST API."""

import json
from typing import Any, cast

from turkpay.features.payments.domain.entities import (
    Address,
    BasketItem,
    Buyer,
    CancelRequest,
    InstallmentInfoRequest,
    PaymentCard,
    PaymentRequest,
    RefundRequest,
    ThreeDSPaymentRequest,
)
from turkpay.features.payments.infrastructure.normalizer import (
    CurrencyMapper,
    format_amount,
    format_expiry_month,
    format_expiry_year,
)
from turkpay.shared.domain.exceptions import ProviderResponseError


def dumps_payload(body: dict[str, Any]) -> str:
    """Compact JSON, key order preserved; this exact text is what gets signed."""
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


def parse_json_body(text: str, provider: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError as e:
        raise ProviderResponseError(provider, f"response is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise ProviderResponseError(provider, "response JSON is not an object")
    return data


def _without_none(body: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in body.items() if value is not None}


def card_body(card: PaymentCard) -> dict[str, Any]:
    return {
        "cardHolderName": card.holder_name,
        "cardNumber": card.number,
        "expireMonth": format_expiry_month(card.expire_month),
        "expireYear": format_expiry_year(card.expire_year),
        "cvc": card.cvc,
        "registerCard": 1 if card.register_card else 0,
    }


def buyer_body(buyer: Buyer) -> dict[str, Any]:
    return _without_none(
        {
            "id": buyer.id,
            "name": buyer.name,
            "surname": buyer.surname,
            "gsmNumber": buyer.gsm_number,
            "email": buyer.email,
            "identityNumber": buyer.identity_number,
            "registrationAddress": buyer.registration_address,
            "ip": buyer.ip,
            "city": buyer.city,
            "country": buyer.country,
            "zipCode": buyer.zip_code,
        }
    )


def address_body(address: Address) -> dict[str, Any]:
    return _without_none(
        {
            "contactName": address.contact_name,
            "city": address.city,
            "country": address.country,
            "address": address.address,
            "zipCode": address.zip_code,
        }
    )


def basket_item_body(item: BasketItem) -> dict[str, Any]:
    return _without_none(
        {
            "id": item.id,
            "name": item.name,
            "category1": item.category,
            "category2": item.sub_category,
            "itemType": item.item_type.value,
            "price": format_amount(item.price),
        }
    )


def payment_body(
    request: PaymentRequest, locale: str, currencies: CurrencyMapper
) -> dict[str, Any]:
    return _without_none(
        {
            "locale": locale,
            "conversationId": request.conversation_id,
            "price": format_amount(request.price),
            "paidPrice": format_amount(request.paid_price),
            "currency": currencies.to_provider(request.currency),
            "installment": request.installment,
            "basketId": request.basket_id,
            "paymentChannel": "WEB",
            "paymentGroup": "PRODUCT",
            "paymentCard": card_body(cast(PaymentCard, request.payment_card)),
            "buyer": buyer_body(cast(Buyer, request.buyer)),
            "shippingAddress": address_body(cast(Address, request.shipping_address)),
            "billingAddress": address_body(cast(Address, request.billing_address)),
            "basketItems": [basket_item_body(item) for item in request.basket_items],
        }
    )


def threeds_init_body(
    request: ThreeDSPaymentRequest, locale: str, currencies: CurrencyMapper
) -> dict[str, Any]:
    body = payment_body(request, locale, currencies)
    body["callbackUrl"] = request.callback_url
    return body


def threeds_auth_body(
    payment_id: str, conversation_id: str, conversation_data: str, locale: str
) -> dict[str, Any]:
    return _without_none(
        {
            "locale": locale,
            "conversationId": conversation_id or None,
            "paymentId": payment_id,
            "conversationData": conversation_data or None,
        }
    )


def refund_body(
    request: RefundRequest, locale: str, currencies: CurrencyMapper
) -> dict[str, Any]:
    return _without_none(
        {
            "locale": locale,
            "conversationId": request.conversation_id,
            "paymentTransactionId": request.payment_id,
            "price": format_amount(request.price),
            "currency": currencies.to_provider(request.currency),
            "ip": request.ip,
        }
    )


def cancel_body(request: CancelRequest, locale: str) -> dict[str, Any]:
    return _without_none(
        {
            "locale": locale,
            "conversationId": request.conversation_id,
            "paymentId": request.payment_id,
            "ip": request.ip,
        }
    )


def payment_detail_body(payment_id: str, locale: str) -> dict[str, Any]:
    return {"locale": locale, "paymentId": payment_id}


def bin_check_body(bin_number: str, locale: str) -> dict[str, Any]:
    return {"locale": locale, "binNumber": bin_number}


def installment_body(request: InstallmentInfoRequest, locale: str) -> dict[str, Any]:
    return _without_none(
        {
            "locale": locale,
            "conversationId": request.conversation_id,
            "binNumber": request.bin_number,
            "price": format_amount(request.price),
        }
    )
