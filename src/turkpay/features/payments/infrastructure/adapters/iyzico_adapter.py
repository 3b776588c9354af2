"""Iyzico Payment Provider Adapter - REST/JSON."""

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

import httpx
import structlog

from turkpay.features.payments.application.ports import PaymentProviderPort
from turkpay.features.payments.domain.entities import (
    INVALID_CALLBACK_SIGNATURE,
    BinCheckResponse,
    CancelRequest,
    CancelResponse,
    InstallmentDetail,
    InstallmentInfoRequest,
    InstallmentInfoResponse,
    InstallmentPrice,
    IyzicoCallbackData,
    PaymentRequest,
    PaymentResponse,
    RefundRequest,
    RefundResponse,
    ThreeDSInitResponse,
    ThreeDSPaymentRequest,
)
from turkpay.features.payments.domain.enums import (
    CORE_OPERATIONS,
    ErrorCode,
    Operation,
    PaymentStatus,
    ProviderType,
)
from turkpay.features.payments.infrastructure import json_codec
from turkpay.features.payments.infrastructure.adapters.errors import (
    HANDLED_ERRORS,
    failure_fields,
    invalid_request,
)
from turkpay.features.payments.infrastructure.callback_verifier import (
    verify_iyzico_callback,
)
from turkpay.features.payments.infrastructure.http_transport import HttpTransport
from turkpay.features.payments.infrastructure.normalizer import (
    IYZICO_CURRENCIES,
    IYZICO_PAYMENT_STATUS,
    IYZICO_RESPONSE_STATUS,
    CurrencyMapper,
    format_amount,
    mask_card_number,
    md_status_message,
)
from turkpay.features.payments.infrastructure.provider_config import IyzicoConfig
from turkpay.features.payments.infrastructure.signing import (
    build_iyzico_authorization,
)
from turkpay.shared.core.settings import get_settings
from turkpay.shared.domain.exceptions import (
    ProviderResponseError,
    ProviderTransportError,
)

logger = structlog.get_logger(__name__)


class IyzicoPaymentAdapter(PaymentProviderPort):
    """
    Iyzico payment provider adapter.

    JSON bodies are signed per request with an HMAC-SHA256 over the API key,
    a fresh nonce and the payload digest. Offers every operation, including
    BIN lookup and installment plans.
    """

    supported_operations = CORE_OPERATIONS | {
        Operation.BIN_CHECK,
        Operation.INSTALLMENT_INFO,
    }

    def __init__(
        self,
        config: IyzicoConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or IyzicoConfig.from_settings(get_settings())
        self._config.validate()
        self._currencies = CurrencyMapper(
            IYZICO_CURRENCIES, self._config.fallback_currency
        )
        self._http = HttpTransport(
            self.provider_name,
            self._config.base_url,
            self._config.timeout,
            default_headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            transport=transport,
        )

    @property
    def provider_type(self) -> ProviderType:
        """Get the provider identifier."""
        return ProviderType.IYZICO

    @property
    def _locale(self) -> str:
        return self._config.locale

    async def _call(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST a signed JSON body and decode the JSON answer."""
        payload = json_codec.dumps_payload(body)
        headers = build_iyzico_authorization(
            self._config.api_key, self._config.secret_key, payload
        )
        logger.info("iyzico_request", path=path)
        response = await self._http.post(path, payload, headers=headers)

        try:
            data = json_codec.parse_json_body(response.text, self.provider_name)
        except ProviderResponseError:
            # An HTTP error without a business body is a transport failure.
            if not response.ok:
                raise ProviderTransportError(
                    self.provider_name, f"HTTP {response.status_code}"
                ) from None
            raise

        logger.info(
            "iyzico_response",
            path=path,
            http_status=response.status_code,
            status=data.get("status"),
        )
        return data

    @staticmethod
    def _error_fields(data: Mapping[str, Any]) -> dict[str, Any]:
        if IYZICO_RESPONSE_STATUS.map(data.get("status")) == PaymentStatus.SUCCESS:
            return {"error_code": None, "error_message": None}
        code = data.get("errorCode")
        return {
            "error_code": str(code) if code is not None else None,
            "error_message": data.get("errorMessage") or "Iyzico request failed",
        }

    def _payment_response(
        self, data: Mapping[str, Any], conversation_id: str | None
    ) -> PaymentResponse:
        return PaymentResponse(
            status=IYZICO_RESPONSE_STATUS.map(data.get("status")),
            payment_id=_as_str(data.get("paymentId")),
            conversation_id=data.get("conversationId") or conversation_id,
            raw_response=dict(data),
            **self._error_fields(data),
        )

    async def create_payment(self, request: PaymentRequest) -> PaymentResponse:
        """Charge a card directly via /payment/auth."""
        reason = self.validate_payment_request(request)
        if reason:
            return PaymentResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **invalid_request(reason),
            )

        try:
            body = json_codec.payment_body(request, self._locale, self._currencies)
            logger.debug(
                "iyzico_payment_prepared",
                basket_id=request.basket_id,
                card=mask_card_number(request.payment_card.number),
            )
            data = await self._call("/payment/auth", body)
        except HANDLED_ERRORS as e:
            return PaymentResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **failure_fields(e),
            )

        return self._payment_response(data, request.conversation_id)

    async def init_threeds_payment(
        self, request: ThreeDSPaymentRequest
    ) -> ThreeDSInitResponse:
        """Start a 3DS payment via /payment/3dsecure/initialize."""
        reason = self.validate_threeds_request(request)
        if reason:
            return ThreeDSInitResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **invalid_request(reason),
            )

        try:
            body = json_codec.threeds_init_body(
                request, self._locale, self._currencies
            )
            data = await self._call("/payment/3dsecure/initialize", body)
        except HANDLED_ERRORS as e:
            return ThreeDSInitResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **failure_fields(e),
            )

        conversation_id = data.get("conversationId") or request.conversation_id
        if IYZICO_RESPONSE_STATUS.map(data.get("status")) != PaymentStatus.SUCCESS:
            return ThreeDSInitResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=conversation_id,
                raw_response=data,
                **self._error_fields(data),
            )

        return ThreeDSInitResponse(
            status=PaymentStatus.PENDING,
            three_ds_html_content=data.get("threeDSHtmlContent"),
            payment_id=_as_str(data.get("paymentId")),
            conversation_id=conversation_id,
            raw_response=data,
        )

    async def complete_threeds_payment(
        self, callback_data: IyzicoCallbackData | Mapping[str, Any]
    ) -> PaymentResponse:
        """Verify the callback signature, then finalize via /payment/3dsecure/auth."""
        raw_callback = callback_data
        if not isinstance(callback_data, IyzicoCallbackData):
            callback_data = IyzicoCallbackData.from_mapping(callback_data)

        verification = verify_iyzico_callback(callback_data, self._config.secret_key)
        if not verification.valid:
            logger.warning(
                "iyzico_callback_rejected",
                conversation_id=callback_data.conversation_id,
                reason=verification.reason,
            )
            return PaymentResponse(
                status=PaymentStatus.FAILURE,
                error_code=ErrorCode.INVALID_SIGNATURE.value,
                error_message=INVALID_CALLBACK_SIGNATURE,
                raw_response=raw_callback,
            )

        if callback_data.status != "success" or callback_data.md_status != "1":
            return PaymentResponse(
                status=PaymentStatus.FAILURE,
                payment_id=callback_data.payment_id or None,
                conversation_id=callback_data.conversation_id or None,
                error_code=callback_data.md_status or None,
                error_message=md_status_message(callback_data.md_status),
                raw_response=raw_callback,
            )

        try:
            body = json_codec.threeds_auth_body(
                callback_data.payment_id,
                callback_data.conversation_id,
                callback_data.conversation_data,
                self._locale,
            )
            data = await self._call("/payment/3dsecure/auth", body)
        except HANDLED_ERRORS as e:
            return PaymentResponse(
                status=PaymentStatus.FAILURE,
                payment_id=callback_data.payment_id,
                conversation_id=callback_data.conversation_id or None,
                **failure_fields(e),
            )

        response = self._payment_response(data, callback_data.conversation_id or None)
        if response.payment_id is None:
            response = replace(response, payment_id=callback_data.payment_id)
        return response

    async def refund(self, request: RefundRequest) -> RefundResponse:
        """Refund via /payment/refund; over-refunds are rejected by Iyzico."""
        if not request.payment_id:
            return RefundResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **invalid_request("payment_id is required"),
            )

        try:
            body = json_codec.refund_body(request, self._locale, self._currencies)
            data = await self._call("/payment/refund", body)
        except HANDLED_ERRORS as e:
            return RefundResponse(
                status=PaymentStatus.FAILURE,
                payment_id=request.payment_id,
                conversation_id=request.conversation_id,
                **failure_fields(e),
            )

        return RefundResponse(
            status=IYZICO_RESPONSE_STATUS.map(data.get("status")),
            refund_id=_as_str(data.get("paymentTransactionId")),
            payment_id=_as_str(data.get("paymentId")) or request.payment_id,
            conversation_id=data.get("conversationId") or request.conversation_id,
            raw_response=data,
            **self._error_fields(data),
        )

    async def cancel(self, request: CancelRequest) -> CancelResponse:
        """Void via /payment/cancel."""
        if not request.payment_id:
            return CancelResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **invalid_request("payment_id is required"),
            )

        try:
            data = await self._call(
                "/payment/cancel", json_codec.cancel_body(request, self._locale)
            )
        except HANDLED_ERRORS as e:
            return CancelResponse(
                status=PaymentStatus.FAILURE,
                payment_id=request.payment_id,
                conversation_id=request.conversation_id,
                **failure_fields(e),
            )

        return CancelResponse(
            status=IYZICO_RESPONSE_STATUS.map(data.get("status")),
            payment_id=_as_str(data.get("paymentId")) or request.payment_id,
            conversation_id=data.get("conversationId") or request.conversation_id,
            raw_response=data,
            **self._error_fields(data),
        )

    async def get_payment(self, payment_id: str) -> PaymentResponse:
        """Read a payment via /payment/detail and map its paymentStatus."""
        if not payment_id:
            return PaymentResponse(
                status=PaymentStatus.FAILURE, **invalid_request("payment_id is required")
            )

        try:
            data = await self._call(
                "/payment/detail",
                json_codec.payment_detail_body(payment_id, self._locale),
            )
        except HANDLED_ERRORS as e:
            return PaymentResponse(
                status=PaymentStatus.FAILURE, payment_id=payment_id, **failure_fields(e)
            )

        if IYZICO_RESPONSE_STATUS.map(data.get("status")) != PaymentStatus.SUCCESS:
            return PaymentResponse(
                status=PaymentStatus.FAILURE,
                payment_id=payment_id,
                conversation_id=data.get("conversationId"),
                raw_response=data,
                **self._error_fields(data),
            )

        payment_status = data.get("paymentStatus")
        status = IYZICO_PAYMENT_STATUS.map(payment_status)
        error_fields: dict[str, Any] = {"error_code": None, "error_message": None}
        if status != PaymentStatus.SUCCESS:
            error_fields = {
                "error_code": str(payment_status) if payment_status else None,
                "error_message": f"Payment state {payment_status or 'unknown'}",
            }

        return PaymentResponse(
            status=status,
            payment_id=_as_str(data.get("paymentId")) or payment_id,
            conversation_id=data.get("conversationId"),
            raw_response=data,
            **error_fields,
        )

    async def bin_check(self, bin_number: str) -> BinCheckResponse:
        """Look up card attributes via /payment/bin/check."""
        try:
            data = await self._call(
                "/payment/bin/check", json_codec.bin_check_body(bin_number, self._locale)
            )
        except HANDLED_ERRORS as e:
            return BinCheckResponse(
                status=PaymentStatus.FAILURE, bin_number=bin_number, **failure_fields(e)
            )

        status = IYZICO_RESPONSE_STATUS.map(data.get("status"))
        if status != PaymentStatus.SUCCESS:
            return BinCheckResponse(
                status=status,
                bin_number=bin_number,
                raw_response=data,
                **self._error_fields(data),
            )

        return BinCheckResponse(
            status=status,
            bin_number=_as_str(data.get("binNumber")) or bin_number,
            card_type=data.get("cardType") or "",
            card_association=data.get("cardAssociation") or "",
            card_family=data.get("cardFamily") or "",
            bank_name=data.get("bankName") or "",
            bank_code=_as_int(data.get("bankCode")),
            commercial=_as_flag(data.get("commercial")),
            raw_response=data,
        )

    async def installment_info(
        self, request: InstallmentInfoRequest
    ) -> InstallmentInfoResponse:
        """List installment plans via /payment/iyzipos/installment."""
        try:
            data = await self._call(
                "/payment/iyzipos/installment",
                json_codec.installment_body(request, self._locale),
            )
        except HANDLED_ERRORS as e:
            return InstallmentInfoResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **failure_fields(e),
            )

        status = IYZICO_RESPONSE_STATUS.map(data.get("status"))
        conversation_id = data.get("conversationId") or request.conversation_id
        if status != PaymentStatus.SUCCESS:
            return InstallmentInfoResponse(
                status=status,
                conversation_id=conversation_id,
                raw_response=data,
                **self._error_fields(data),
            )

        try:
            details = tuple(
                _installment_detail(item)
                for item in data.get("installmentDetails") or []
            )
        except (AttributeError, TypeError, ValueError) as e:
            return InstallmentInfoResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=conversation_id,
                error_code=ErrorCode.INVALID_RESPONSE.value,
                error_message=f"Malformed installment details: {e}",
                raw_response=data,
            )

        return InstallmentInfoResponse(
            status=status,
            details=details,
            conversation_id=conversation_id,
            raw_response=data,
        )


def _installment_detail(item: Mapping[str, Any]) -> InstallmentDetail:
    prices = sorted(
        (
            InstallmentPrice(
                installment_number=int(row.get("installmentNumber", 0)),
                installment_price=format_amount(row.get("installmentPrice", "0")),
                total_price=format_amount(row.get("totalPrice", "0")),
            )
            for row in item.get("installmentPrices") or []
        ),
        key=lambda price: price.installment_number,
    )
    return InstallmentDetail(
        bin_number=_as_str(item.get("binNumber")) or "",
        bank_name=item.get("bankName") or "",
        card_type=item.get("cardType") or "",
        card_association=item.get("cardAssociation") or "",
        card_family=item.get("cardFamilyName") or item.get("cardFamily") or "",
        prices=tuple(prices),
        force_3ds=_as_flag(item.get("force3ds")),
        commercial=_as_flag(item.get("commercial")),
    )


def _as_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_flag(value: Any) -> bool:
    return str(value).lower() in ("1", "true")
