from types import TracebackType
from typing import Self

import httpx
import structlog

from pushin_pay.application.services import AccountService, ChargeService, TransactionService
from pushin_pay.application.validation import ChargeValidator
from pushin_pay.infrastructure.http_client import PushinPayHttpClient


logger = structlog.get_logger()


class PushinPay:
    """Entry point wiring the Pushin Pay services around one HTTP handle.

    Usage::

        with PushinPay() as pushin_pay:
            charge = pushin_pay.charges.create(
                {"Authorization": f"Bearer {token}"},
                ChargeRequest(value=1000),
            )

    Credentials are supplied per call as headers and are never stored.
    Code that awaits any service should leave through ``async with`` (or
    ``aclose()``), which closes the blocking and the asyncio client alike.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        *,
        http: PushinPayHttpClient | None = None,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.http = http or PushinPayHttpClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            async_transport=async_transport,
        )
        self.accounts = AccountService(self.http)
        self.validator = ChargeValidator(self.accounts)
        self.charges = ChargeService(self.http, self.validator)
        self.transactions = TransactionService(self.http)
        logger.debug("pushin_pay_client_created", base_url=self.http.base_url)

    def close(self) -> None:
        self.http.close()

    async def aclose(self) -> None:
        await self.http.aclose()

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
