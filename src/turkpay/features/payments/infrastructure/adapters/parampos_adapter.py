"""Parampos (TurkPOS) Payment Provider Adapter - SOAP/XML."""

from collections.abc import Mapping
from typing import Any, cast

import httpx
import structlog

from turkpay.features.payments.application.ports import PaymentProviderPort
from turkpay.features.payments.domain.entities import (
    INVALID_CALLBACK_SIGNATURE,
    BinCheckResponse,
    Buyer,
    CancelRequest,
    CancelResponse,
    ParamposCallbackData,
    PaymentCard,
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
from turkpay.features.payments.infrastructure.adapters.errors import (
    HANDLED_ERRORS,
    failure_fields,
    invalid_request,
)
from turkpay.features.payments.infrastructure.callback_verifier import (
    verify_parampos_callback,
)
from turkpay.features.payments.infrastructure.http_transport import HttpTransport
from turkpay.features.payments.infrastructure.normalizer import (
    PARAMPOS_CURRENCIES,
    PARAMPOS_INQUIRY_STATUS,
    PARAMPOS_RESULT_STATUS,
    CurrencyMapper,
    calculate_total_amount,
    format_amount,
    format_expiry_month,
    format_expiry_year,
    mask_card_number,
)
from turkpay.features.payments.infrastructure.provider_config import ParamposConfig
from turkpay.features.payments.infrastructure.signing import (
    generate_parampos_payment_hash,
)
from turkpay.features.payments.infrastructure.soap_codec import (
    build_body,
    build_card_block,
    build_security_block,
    build_soap_action,
    build_soap_envelope,
    parse_soap_fault,
    parse_soap_result,
)
from turkpay.shared.core.settings import get_settings
from turkpay.shared.domain.exceptions import (
    ProviderTransportError,
    SoapResponseError,
)

logger = structlog.get_logger(__name__)

SUCCESS_CODE = "1"


class ParamposPaymentAdapter(PaymentProviderPort):
    """
    Parampos payment provider adapter.

    Every operation is one SOAP call against the TurkPOS web service. Result
    elements are read with the flat codec; installment plans come back as a
    nested list the flat codec cannot represent, so installment queries are
    not offered.
    """

    supported_operations = CORE_OPERATIONS | {Operation.BIN_CHECK}

    def __init__(
        self,
        config: ParamposConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or ParamposConfig.from_settings(get_settings())
        self._config.validate()
        self._currencies = CurrencyMapper(
            PARAMPOS_CURRENCIES, self._config.fallback_currency
        )
        self._http = HttpTransport(
            self.provider_name,
            self._config.base_url,
            self._config.timeout,
            default_headers={"Content-Type": "text/xml; charset=utf-8"},
            transport=transport,
        )

    @property
    def provider_type(self) -> ProviderType:
        """Get the provider identifier."""
        return ProviderType.PARAMPOS

    def _security_block(self) -> str:
        return build_security_block(
            self._config.client_code,
            self._config.client_username,
            self._config.client_password,
            self._config.guid,
        )

    async def _call(self, action: str, body: str) -> dict[str, str]:
        """Send one SOAP action and return the flat ``{action}Result`` fields."""
        envelope = build_soap_envelope(action, body, self._config.namespace)
        logger.info("parampos_request", action=action)
        response = await self._http.post(
            "",
            envelope,
            headers={"SOAPAction": build_soap_action(self._config.namespace, action)},
        )
        try:
            result = parse_soap_result(
                response.text, f"{action}Result", self.provider_name
            )
        except SoapResponseError:
            # An HTTP error without a SOAP answer or fault is a transport failure.
            if not response.ok and parse_soap_fault(response.text) is None:
                raise ProviderTransportError(
                    self.provider_name, f"HTTP {response.status_code}"
                ) from None
            raise
        logger.info(
            "parampos_response",
            action=action,
            http_status=response.status_code,
            sonuc=result.get("Sonuc"),
        )
        return result

    @staticmethod
    def _error_fields(result: Mapping[str, str]) -> dict[str, Any]:
        """Error code/message for a non-success result, verbatim from Parampos."""
        if result.get("Sonuc") == SUCCESS_CODE:
            return {"error_code": None, "error_message": None}
        return {
            "error_code": result.get("Hata_Kod") or result.get("Sonuc") or None,
            "error_message": result.get("Sonuc_Str") or "Parampos request failed",
        }

    def _payment_body(self, request: PaymentRequest, **extra: str) -> str:
        """Shared body of TP_Islem_Odeme and TP_Islem_Odeme_3D."""
        card = cast(PaymentCard, request.payment_card)
        buyer = cast(Buyer, request.buyer)
        installment = request.installment
        transaction_amount = format_amount(request.price)
        if installment > 1:
            total_amount = calculate_total_amount(
                request.price, installment, self._config.installment_fees
            )
        else:
            total_amount = format_amount(request.paid_price)

        payment_hash = generate_parampos_payment_hash(
            self._config.client_code,
            self._config.guid,
            installment,
            transaction_amount,
            total_amount,
            request.basket_id,
        )
        card_block = build_card_block(
            card.holder_name,
            card.number,
            format_expiry_month(card.expire_month),
            format_expiry_year(card.expire_year),
            card.cvc,
            card.register_card,
        )
        logger.debug(
            "parampos_payment_prepared",
            basket_id=request.basket_id,
            card=mask_card_number(card.number),
            installment=installment,
            total_amount=total_amount,
        )
        return build_body(
            self._security_block(),
            card_block,
            Taksit=installment,
            Islem_Tutar=transaction_amount,
            Toplam_Tutar=total_amount,
            Siparis_ID=request.basket_id,
            Siparis_Aciklama=request.basket_id,
            Islem_Hash=payment_hash,
            IPAdr=buyer.ip,
            **extra,
            Doviz_Kodu=self._currencies.to_provider(request.currency),
        )

    async def create_payment(self, request: PaymentRequest) -> PaymentResponse:
        """Charge a card with TP_Islem_Odeme."""
        reason = self.validate_payment_request(request)
        if reason:
            return PaymentResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **invalid_request(reason),
            )

        try:
            result = await self._call("TP_Islem_Odeme", self._payment_body(request))
        except HANDLED_ERRORS as e:
            return PaymentResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **failure_fields(e),
            )

        return PaymentResponse(
            status=PARAMPOS_RESULT_STATUS.map(result.get("Sonuc")),
            payment_id=result.get("Islem_GUID"),
            conversation_id=request.conversation_id,
            raw_response=result,
            **self._error_fields(result),
        )

    async def init_threeds_payment(
        self, request: ThreeDSPaymentRequest
    ) -> ThreeDSInitResponse:
        """Start a 3DS payment with TP_Islem_Odeme_3D; success is PENDING."""
        reason = self.validate_threeds_request(request)
        if reason:
            return ThreeDSInitResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **invalid_request(reason),
            )

        try:
            body = self._payment_body(
                request,
                SUCCESS_URL=request.callback_url,
                FAIL_URL=request.callback_url,
            )
            result = await self._call("TP_Islem_Odeme_3D", body)
        except HANDLED_ERRORS as e:
            return ThreeDSInitResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **failure_fields(e),
            )

        if PARAMPOS_RESULT_STATUS.map(result.get("Sonuc")) != PaymentStatus.SUCCESS:
            return ThreeDSInitResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                raw_response=result,
                **self._error_fields(result),
            )

        return ThreeDSInitResponse(
            status=PaymentStatus.PENDING,
            three_ds_html_content=result.get("UCD_HTML"),
            payment_id=result.get("Islem_GUID"),
            conversation_id=request.conversation_id,
            raw_response=result,
        )

    async def complete_threeds_payment(
        self, callback_data: ParamposCallbackData | Mapping[str, Any]
    ) -> PaymentResponse:
        """Verify the bank's callback hash, then read mdStatus."""
        raw_callback = callback_data
        if not isinstance(callback_data, ParamposCallbackData):
            callback_data = ParamposCallbackData.from_mapping(callback_data)

        verification = verify_parampos_callback(callback_data, self._config.guid)
        if not verification.valid:
            logger.warning(
                "parampos_callback_rejected",
                order_id=callback_data.order_id,
                reason=verification.reason,
            )
            return PaymentResponse(
                status=PaymentStatus.FAILURE,
                error_code=ErrorCode.INVALID_SIGNATURE.value,
                error_message=INVALID_CALLBACK_SIGNATURE,
                raw_response=raw_callback,
            )

        if callback_data.md_status != SUCCESS_CODE:
            return PaymentResponse(
                status=PaymentStatus.FAILURE,
                payment_id=callback_data.islem_guid,
                conversation_id=callback_data.order_id,
                error_code=callback_data.md_status or None,
                error_message=callback_data.sonuc_str or "3D Secure verification failed",
                raw_response=raw_callback,
            )

        return PaymentResponse(
            status=PaymentStatus.SUCCESS,
            payment_id=callback_data.islem_guid,
            conversation_id=callback_data.order_id,
            raw_response=raw_callback,
        )

    async def refund(self, request: RefundRequest) -> RefundResponse:
        """Refund with TP_Islem_Iade; the amount bound is enforced by Parampos."""
        if not request.payment_id:
            return RefundResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **invalid_request("payment_id is required"),
            )

        try:
            body = build_body(
                self._security_block(),
                Islem_GUID=request.payment_id,
                Iade_Tutar=format_amount(request.price),
                IPAdr=request.ip,
            )
            result = await self._call("TP_Islem_Iade", body)
        except HANDLED_ERRORS as e:
            return RefundResponse(
                status=PaymentStatus.FAILURE,
                payment_id=request.payment_id,
                conversation_id=request.conversation_id,
                **failure_fields(e),
            )

        return RefundResponse(
            status=PARAMPOS_RESULT_STATUS.map(result.get("Sonuc")),
            refund_id=result.get("Iade_Islem_GUID"),
            payment_id=request.payment_id,
            conversation_id=request.conversation_id,
            raw_response=result,
            **self._error_fields(result),
        )

    async def cancel(self, request: CancelRequest) -> CancelResponse:
        """Void with TP_Islem_Iptal."""
        if not request.payment_id:
            return CancelResponse(
                status=PaymentStatus.FAILURE,
                conversation_id=request.conversation_id,
                **invalid_request("payment_id is required"),
            )

        try:
            body = build_body(
                self._security_block(),
                Islem_GUID=request.payment_id,
                IPAdr=request.ip,
            )
            result = await self._call("TP_Islem_Iptal", body)
        except HANDLED_ERRORS as e:
            return CancelResponse(
                status=PaymentStatus.FAILURE,
                payment_id=request.payment_id,
                conversation_id=request.conversation_id,
                **failure_fields(e),
            )

        return CancelResponse(
            status=PARAMPOS_RESULT_STATUS.map(result.get("Sonuc")),
            payment_id=request.payment_id,
            conversation_id=request.conversation_id,
            raw_response=result,
            **self._error_fields(result),
        )

    async def get_payment(self, payment_id: str) -> PaymentResponse:
        """Query a payment with TP_Islem_Sorgulama."""
        if not payment_id:
            return PaymentResponse(
                status=PaymentStatus.FAILURE, **invalid_request("payment_id is required")
            )

        try:
            body = build_body(
                self._security_block(), Islem_GUID=payment_id, IPAdr="127.0.0.1"
            )
            result = await self._call("TP_Islem_Sorgulama", body)
        except HANDLED_ERRORS as e:
            return PaymentResponse(
                status=PaymentStatus.FAILURE, payment_id=payment_id, **failure_fields(e)
            )

        status = PARAMPOS_RESULT_STATUS.map(result.get("Sonuc"))
        error_fields = self._error_fields(result)
        # A successful query may still describe a failed, voided or pending payment.
        if status == PaymentStatus.SUCCESS and "Durum" in result:
            status = PARAMPOS_INQUIRY_STATUS.map(result["Durum"])
            if status != PaymentStatus.SUCCESS:
                error_fields = {
                    "error_code": result["Durum"] or None,
                    "error_message": result.get("Sonuc_Str") or f"Payment state {result['Durum']}",
                }

        return PaymentResponse(
            status=status,
            payment_id=result.get("Islem_GUID") or payment_id,
            conversation_id=result.get("Siparis_ID"),
            raw_response=result,
            **error_fields,
        )

    async def bin_check(self, bin_number: str) -> BinCheckResponse:
        """Look up card attributes with TP_Kart_Bilgi."""
        try:
            body = build_body(self._security_block(), Bin=bin_number)
            result = await self._call("TP_Kart_Bilgi", body)
        except HANDLED_ERRORS as e:
            return BinCheckResponse(
                status=PaymentStatus.FAILURE, bin_number=bin_number, **failure_fields(e)
            )

        status = PARAMPOS_RESULT_STATUS.map(result.get("Sonuc"))
        if status != PaymentStatus.SUCCESS:
            return BinCheckResponse(
                status=status,
                bin_number=bin_number,
                raw_response=result,
                **self._error_fields(result),
            )

        return BinCheckResponse(
            status=status,
            bin_number=bin_number,
            card_type=result.get("Kart_Tip", ""),
            card_association=result.get("Kart_Aile", ""),
            card_family=result.get("Kart_Aile", ""),
            bank_name=result.get("Kart_Banka", ""),
            commercial=result.get("Ticari_Kart") == "1",
            raw_response=result,
        )
