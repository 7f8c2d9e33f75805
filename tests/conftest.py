"""Shared pytest fixtures for Pushin Pay client tests."""

from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from urllib.parse import unquote

import httpx
import pytest

from pushin_pay.application.services import AccountService
from pushin_pay.infrastructure.http_client import PushinPayHttpClient


BASE_URL = "https://api.pushinpay.test"

AUTH_HEADERS = {"Authorization": "Bearer test-token"}

CHARGE_PAYLOAD: dict[str, Any] = {
    "id": "9c29870c-9f69-4bb6-90d3-2dce9453bb45",
    "qr_code": "00020101021226770014BR.GOV.BCB.PIX2555api.pushinpay.com.br",
    "status": "created",
    "value": 10000,
    "webhook_url": "https://example.com/webhook",
    "qr_code_base64": "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAA",
    "webhook": {
        "id": "wh-001",
        "url": "https://example.com/webhook",
        "http_status": 200,
        "http_error": None,
        "attempt": 1,
        "complete": True,
        "transaction_id": "9c29870c-9f69-4bb6-90d3-2dce9453bb45",
        "transfer_id": None,
        "account_id": "acc_main",
        "created_at": "2025-01-15T10:30:00-03:00",
        "updated_at": "2025-01-15T10:31:00-03:00",
        "deleted_at": None,
    },
    "split_rules": [
        {
            "id": 42,
            "type": "fixed",
            "amount": 5000,
            "transaction_id": "9c29870c-9f69-4bb6-90d3-2dce9453bb45",
            "account_id": "acc_1",
            "created_at": "2025-01-15T10:30:00-03:00",
            "updated_at": "2025-01-15T10:30:00-03:00",
        }
    ],
    "end_to_end_id": None,
    "payer_name": None,
    "payer_national_registration": None,
}

TRANSACTION_PAYLOAD: dict[str, Any] = {
    "id": "9c29870c-9f69-4bb6-90d3-2dce9453bb45",
    "status": "paid",
    "value": 10000,
    "description": "Pix cash-in",
    "payment_type": "pix",
    "created_at": "2025-01-15T10:30:00.000000Z",
    "updated_at": "2025-01-15T10:45:12.000000Z",
    "webhook_url": "https://example.com/webhook",
    "split_rules": [],
    "end_to_end_id": "E18236120202501151345s0123456789",
    "payer_name": "Maria da Silva",
    "payer_national_registration": "12345678909",
    "webhook": None,
    "pix_details": {
        "id": "pix-001",
        "expiration_date": " 2025-01-16 10:30:00.000 ",
        "emv": "00020101021226770014BR.GOV.BCB.PIX",
        "created_at": "2025-01-15T10:30:00-03:00",
        "updated_at": "2025-01-15T10:30:00-03:00",
    },
    "transaction_product": [{"id": "prod-001"}, {"id": "prod-002"}],
}


class FakePushinPayApi:
    """In-memory stand-in for the provider, served through httpx.MockTransport.

    Accounts answer with the configured status (404 when unknown). Every
    request is recorded for assertions.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.account_statuses: dict[str, int] = {}
        self.charge_status = 200
        self.charge_body: Any = CHARGE_PAYLOAD
        self.transactions: dict[str, tuple[int, Any]] = {}
        self.error: httpx.RequestError | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error

        path = request.url.path
        if path.startswith("/api/accounts/check/"):
            account_id = unquote(path.removeprefix("/api/accounts/check/"))
            status = self.account_statuses.get(account_id, 404)
            body = {"id": account_id} if status == 200 else {"message": f"status {status}"}
            return httpx.Response(status, json=body)
        if path == "/api/pix/cashIn" and request.method == "POST":
            return _response(self.charge_status, self.charge_body)
        if path.startswith("/api/transactions/"):
            transaction_id = unquote(path.removeprefix("/api/transactions/"))
            status, body = self.transactions.get(transaction_id, (404, {"message": "Transaction not found"}))
            return _response(status, body)
        return httpx.Response(404, json={"message": "Not found"})

    def calls_to(self, prefix: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path.startswith(prefix)]


def _response(status: int, body: Any) -> httpx.Response:
    if isinstance(body, bytes | str):
        return httpx.Response(status, content=body)
    return httpx.Response(status, json=body)


@pytest.fixture
def fake_api() -> FakePushinPayApi:
    """Create an empty fake provider."""
    return FakePushinPayApi()


@pytest.fixture
def http_client(fake_api: FakePushinPayApi) -> Generator[PushinPayHttpClient, None, None]:
    """Create PushinPayHttpClient wired to the fake provider."""
    transport = httpx.MockTransport(fake_api.handler)
    client = PushinPayHttpClient(base_url=BASE_URL, transport=transport, async_transport=transport)
    yield client
    client.close()


@pytest.fixture
def mock_account_service() -> MagicMock:
    """Create mock AccountService where every account exists."""
    service = MagicMock(spec=AccountService)
    service.exists_by_account_id = MagicMock(return_value=True)
    service.exists_by_account_id_async = AsyncMock(return_value=True)
    return service
