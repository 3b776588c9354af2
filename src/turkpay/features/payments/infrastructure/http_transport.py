"""HTTP transport shared by the provider adapters."""

from dataclasses import dataclass

import httpx
import structlog

from turkpay.shared.domain.exceptions import (
    ProviderTimeoutError,
    ProviderTransportError,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Status code and raw body of a provider response."""

    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport:
    """
    POSTs request bodies to one provider endpoint.

    A new AsyncClient is opened per call, so concurrent calls share nothing
    but the immutable settings captured here. Network failures and timeouts
    are raised as ProviderTransportError / ProviderTimeoutError; HTTP error
    statuses are returned to the caller, which knows whether the body still
    carries a business-level answer.
    """

    def __init__(
        self,
        provider: str,
        base_url: str,
        timeout: float,
        default_headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._provider = provider
        self._base_url = base_url
        self._timeout = timeout
        self._default_headers = default_headers or {}
        self._transport = transport

    @property
    def timeout(self) -> float:
        return self._timeout

    async def post(
        self, path: str, content: str, headers: dict[str, str] | None = None
    ) -> TransportResponse:
        url = f"{self._base_url.rstrip('/')}{path}" if path else self._base_url

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    url,
                    content=content.encode("utf-8"),
                    headers={**self._default_headers, **(headers or {})},
                )
        except httpx.TimeoutException as e:
            logger.warning(
                "provider_request_timeout",
                provider=self._provider,
                path=path,
                timeout=self._timeout,
            )
            raise ProviderTimeoutError(self._provider, self._timeout) from e
        except httpx.RequestError as e:
            logger.warning(
                "provider_request_failed",
                provider=self._provider,
                path=path,
                error=str(e),
            )
            raise ProviderTransportError(
                self._provider, str(e) or e.__class__.__name__
            ) from e

        logger.debug(
            "provider_response_received",
            provider=self._provider,
            path=path,
            status_code=response.status_code,
        )
        return TransportResponse(status_code=response.status_code, text=response.text)
