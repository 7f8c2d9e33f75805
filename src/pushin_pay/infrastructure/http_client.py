import threading
from collections.abc import Iterable, Mapping
from types import TracebackType
from typing import Any, Self, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from pushin_pay.config import settings
from pushin_pay.domain.exceptions import DecodingError, RemoteCallError, TransportFailureError
from pushin_pay.infrastructure.metrics import (
    PUSHIN_PAY_REQUEST_DURATION,
    PUSHIN_PAY_REQUESTS_TOTAL,
    PUSHIN_PAY_TRANSPORT_ERRORS_TOTAL,
)


logger = structlog.get_logger()

M = TypeVar("M", bound=BaseModel)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}

OPERATION_EXTENSION = "pushin_pay.operation"
PASSTHROUGH_EXTENSION = "pushin_pay.passthrough_statuses"


def merge_headers(headers: Mapping[str, Any] | None) -> dict[str, str]:
    """Stringify caller-supplied headers; values are forwarded verbatim."""
    if not headers:
        return {}
    return {str(key): str(value) for key, value in headers.items()}


def request_extensions(operation: str, passthrough_statuses: Iterable[int] = ()) -> dict[str, Any]:
    return {
        OPERATION_EXTENSION: operation,
        PASSTHROUGH_EXTENSION: frozenset(passthrough_statuses),
    }


def ensure_success(response: httpx.Response) -> None:
    """Reject statuses the response hook lets through (1xx, 3xx)."""
    if not response.is_success:
        raise RemoteCallError(
            status_code=response.status_code,
            body=response.text,
            operation=response.request.extensions.get(OPERATION_EXTENSION),
        )


def decode_response(model: type[M], response: httpx.Response) -> M:
    try:
        return model.model_validate_json(response.content)
    except ValidationError as e:
        logger.error(
            "pushin_pay_decoding_error",
            operation=response.request.extensions.get(OPERATION_EXTENSION),
            target=model.__name__,
            error_count=e.error_count(),
        )
        raise DecodingError(model.__name__, str(e)) from e


def _record_response(response: httpx.Response) -> None:
    operation = response.request.extensions.get(OPERATION_EXTENSION, "unknown")
    PUSHIN_PAY_REQUESTS_TOTAL.labels(operation=operation, status_code=str(response.status_code)).inc()


def _translate_error(response: httpx.Response) -> None:
    """Turn 4xx/5xx into RemoteCallError unless the request opted to handle it."""
    passthrough = response.request.extensions.get(PASSTHROUGH_EXTENSION, frozenset())
    if not response.is_error or response.status_code in passthrough:
        return

    operation = response.request.extensions.get(OPERATION_EXTENSION)
    logger.error(
        "pushin_pay_http_error",
        operation=operation,
        status_code=response.status_code,
        body=response.text,
    )
    raise RemoteCallError(status_code=response.status_code, body=response.text, operation=operation)


def _on_response(response: httpx.Response) -> None:
    _record_response(response)
    if response.is_error:
        response.read()
    _translate_error(response)


async def _on_response_async(response: httpx.Response) -> None:
    _record_response(response)
    if response.is_error:
        await response.aread()
    _translate_error(response)


class PushinPayHttpClient:
    """Long-lived httpx transport shared by every Pushin Pay service.

    Holds one blocking and one asyncio client configured with the API base
    URL, the JSON default headers, the configured timeout and the response
    hooks that translate provider errors. Each client is built on first use,
    so a handle only used from one side never opens the other. Both clients
    are safe to share between concurrent calls; this class keeps no per-call
    state.

    ``close()`` releases the blocking client. ``aclose()`` releases both, so
    code that touched the async API should leave through ``async with``.
    Once closed, a client that was never built cannot be requested.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        connect_timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url if base_url is not None else settings.base_url
        self._timeout = httpx.Timeout(
            timeout if timeout is not None else settings.timeout_seconds,
            connect=connect_timeout if connect_timeout is not None else settings.connect_timeout_seconds,
        )
        self._transport = transport
        self._async_transport = async_transport
        self._client: httpx.Client | None = None
        self._async_client: httpx.AsyncClient | None = None
        self._lock = threading.Lock()
        self._closed = False

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> httpx.Timeout:
        return self._timeout

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def client(self) -> httpx.Client:
        with self._lock:
            if self._client is None:
                self._ensure_open("blocking")
                self._client = httpx.Client(
                    base_url=self._base_url,
                    headers=DEFAULT_HEADERS,
                    timeout=self._timeout,
                    transport=self._transport,
                    event_hooks={"response": [_on_response]},
                )
            return self._client

    @property
    def async_client(self) -> httpx.AsyncClient:
        with self._lock:
            if self._async_client is None:
                self._ensure_open("asyncio")
                self._async_client = httpx.AsyncClient(
                    base_url=self._base_url,
                    headers=DEFAULT_HEADERS,
                    timeout=self._timeout,
                    transport=self._async_transport,
                    event_hooks={"response": [_on_response_async]},
                )
            return self._async_client

    def _ensure_open(self, kind: str) -> None:
        if self._closed:
            raise RuntimeError(f"Cannot open the {kind} client, as PushinPayHttpClient has been closed.")

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, Any] | None,
        operation: str,
        passthrough_statuses: Iterable[int] = (),
        json: Any = None,
    ) -> httpx.Response:
        client = self.client
        with PUSHIN_PAY_REQUEST_DURATION.labels(operation=operation).time():
            try:
                response = client.request(
                    method,
                    url,
                    headers=merge_headers(headers),
                    json=json,
                    extensions=request_extensions(operation, passthrough_statuses),
                )
            except httpx.DecodingError as e:
                raise self._decoding_failure(operation, method, url, e) from e
            except httpx.RequestError as e:
                raise self._transport_failure(operation, method, url, e) from e

        logger.debug("pushin_pay_response", operation=operation, status_code=response.status_code)
        return response

    async def send_async(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, Any] | None,
        operation: str,
        passthrough_statuses: Iterable[int] = (),
        json: Any = None,
    ) -> httpx.Response:
        client = self.async_client
        with PUSHIN_PAY_REQUEST_DURATION.labels(operation=operation).time():
            try:
                response = await client.request(
                    method,
                    url,
                    headers=merge_headers(headers),
                    json=json,
                    extensions=request_extensions(operation, passthrough_statuses),
                )
            except httpx.DecodingError as e:
                raise self._decoding_failure(operation, method, url, e) from e
            except httpx.RequestError as e:
                raise self._transport_failure(operation, method, url, e) from e

        logger.debug("pushin_pay_response", operation=operation, status_code=response.status_code)
        return response

    def _transport_failure(
        self, operation: str, method: str, url: str, error: httpx.RequestError
    ) -> TransportFailureError:
        PUSHIN_PAY_TRANSPORT_ERRORS_TOTAL.labels(operation=operation).inc()
        logger.error(
            "pushin_pay_transport_error",
            operation=operation,
            method=method,
            url=url,
            error=str(error),
            error_type=type(error).__name__,
        )
        return TransportFailureError(operation, str(error) or type(error).__name__)

    def _decoding_failure(
        self, operation: str, method: str, url: str, error: httpx.DecodingError
    ) -> DecodingError:
        # Body bytes that do not match the declared Content-Encoding.
        logger.error(
            "pushin_pay_decoding_error",
            operation=operation,
            method=method,
            url=url,
            target="response body",
            error=str(error),
        )
        return DecodingError(f"{operation} response body", str(error) or type(error).__name__)

    def close(self) -> None:
        """Close the blocking client.

        An asyncio client that is still open cannot be closed from here and
        is reported; release it with ``aclose()``.
        """
        self._closed = True
        if self._client is not None:
            self._client.close()
        if self._async_client is not None and not self._async_client.is_closed:
            logger.warning("pushin_pay_async_client_left_open", base_url=self._base_url)

    async def aclose(self) -> None:
        self._closed = True
        if self._client is not None:
            self._client.close()
        if self._async_client is not None:
            await self._async_client.aclose()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
