import json
from dataclasses import fields

import httpx
import pytest

from turkpay.features.payments.domain import (
    Address,
    BasketItem,
    BasketItemType,
    Buyer,
    Currency,
    PaymentCard,
    PaymentRequest,
    ThreeDSPaymentRequest,
)
from turkpay.features.payments.infrastructure import IyzicoConfig, ParamposConfig


class FakeGateway:
    """Records outgoing requests and answers from a queue of canned replies.

    The last queued reply is reused once the queue is down to one entry.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._replies: list[httpx.Response | Exception] = []

    def reply(self, body: str, status_code: int = 200) -> None:
        self._replies.append(httpx.Response(status_code, text=body))

    def reply_json(self, data: dict, status_code: int = 200) -> None:
        self.reply(json.dumps(data), status_code)

    def fail(self, exc: Exception) -> None:
        self._replies.append(exc)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._replies:
            return httpx.Response(500, text="no reply configured")
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    @property
    def last_body(self) -> str:
        return self.requests[-1].content.decode("utf-8")


def soap_result(action: str, **values: str) -> str:
    """A TurkPOS-style SOAP response carrying ``{action}Result`` leaves."""
    leaves = "".join(f"<{tag}>{value}</{tag}>" for tag, value in values.items())
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">'
        "<soap:Body>"
        f'<{action}Response xmlns="https://turkpos.com.tr/">'
        f"<{action}Result>{leaves}</{action}Result>"
        f"</{action}Response>"
        "</soap:Body>"
        "</soap:Envelope>"
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def soap_reply():
    return soap_result


@pytest.fixture
def parampos_config():
    return ParamposConfig(
        client_code="TEST_CLIENT",
        client_username="test_user",
        client_password="test_password",
        guid="test-guid-1234",
        base_url="https://testposws.param.example/service_turkpos_prod.asmx",
    )


@pytest.fixture
def iyzico_config():
    return IyzicoConfig(
        api_key="sandbox-api-key",
        secret_key="sandbox-secret-key",
        base_url="https://sandbox-api.iyzipay.example",
    )


@pytest.fixture
def buyer():
    return Buyer(
        id="BY789",
        name="John",
        surname="Doe",
        email="john.doe@example.com",
        identity_number="10000000146",
        registration_address="Nidakule Göztepe, Merdivenköy Mah. Bora Sok. No:1",
        city="Istanbul",
        country="Turkey",
        ip="85.34.78.112",
        gsm_number="+905350000000",
        zip_code="34732",
    )


@pytest.fixture
def address():
    return Address(
        contact_name="Jane Doe",
        city="Istanbul",
        country="Turkey",
        address="Nidakule Göztepe, Merdivenköy Mah. Bora Sok. No:1",
        zip_code="34742",
    )


@pytest.fixture
def payment_request(buyer, address):
    return PaymentRequest(
        price="100.00",
        paid_price="100.00",
        currency=Currency.TRY,
        basket_id="BASKET123",
        payment_card=PaymentCard(
            holder_name="John Doe",
            number="5528790000000008",
            expire_month="12",
            expire_year="2030",
            cvc="123",
        ),
        buyer=buyer,
        shipping_address=address,
        billing_address=address,
        basket_items=[
            BasketItem(
                id="BI101",
                name="Binocular",
                category="Collectibles",
                item_type=BasketItemType.PHYSICAL,
                price="100.00",
            )
        ],
        conversation_id="conv-123",
    )


@pytest.fixture
def make_threeds_request(payment_request):
    def make(**overrides):
        values = {f.name: getattr(payment_request, f.name) for f in fields(payment_request)}
        values["callback_url"] = "https://example.com/callback"
        values.update(overrides)
        return ThreeDSPaymentRequest(**values)

    return make
