from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from pushin_pay.application.validation import ChargeValidator
from pushin_pay.domain.exceptions import RemoteCallError
from pushin_pay.domain.models import ChargeRequest, ChargeResponse, TransactionResponse
from pushin_pay.infrastructure.http_client import (
    PushinPayHttpClient,
    decode_response,
    ensure_success,
)


logger = structlog.get_logger()

ACCOUNT_CHECK_PATH = "/api/accounts/check/{account_id}"
CASH_IN_PATH = "/api/pix/cashIn"
TRANSACTION_PATH = "/api/transactions/{transaction_id}"


class AccountService:
    """Account existence checks."""

    OPERATION = "account_check"

    def __init__(self, http: PushinPayHttpClient) -> None:
        self._http = http

    def exists_by_account_id(self, headers: Mapping[str, Any] | None, account_id: str) -> bool:
        response = self._http.send(
            "GET",
            ACCOUNT_CHECK_PATH.format(account_id=quote(account_id, safe="")),
            headers=headers,
            operation=self.OPERATION,
            passthrough_statuses=(httpx.codes.NOT_FOUND,),
        )
        return self._handle_response(account_id, response)

    async def exists_by_account_id_async(self, headers: Mapping[str, Any] | None, account_id: str) -> bool:
        response = await self._http.send_async(
            "GET",
            ACCOUNT_CHECK_PATH.format(account_id=quote(account_id, safe="")),
            headers=headers,
            operation=self.OPERATION,
            passthrough_statuses=(httpx.codes.NOT_FOUND,),
        )
        return self._handle_response(account_id, response)

    def _handle_response(self, account_id: str, response: httpx.Response) -> bool:
        if response.status_code == httpx.codes.OK:
            return True
        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info("account_not_found", account_id=account_id)
            return False
        raise RemoteCallError(
            status_code=response.status_code,
            body=response.text,
            operation=self.OPERATION,
        )


class ChargeService:
    """Pix cash-in charge creation.

    Every request passes through ``ChargeValidator`` first; a rejected
    request never reaches the provider.
    """

    OPERATION = "charge_create"

    def __init__(self, http: PushinPayHttpClient, validator: ChargeValidator) -> None:
        self._http = http
        self._validator = validator

    def create(self, headers: Mapping[str, Any] | None, charge_request: ChargeRequest) -> ChargeResponse:
        self._validator.validate(headers, charge_request)

        response = self._http.send(
            "POST",
            CASH_IN_PATH,
            headers=headers,
            operation=self.OPERATION,
            json=charge_request.to_wire(),
        )
        return self._handle_response(charge_request, response)

    async def create_async(
        self, headers: Mapping[str, Any] | None, charge_request: ChargeRequest
    ) -> ChargeResponse:
        await self._validator.validate_async(headers, charge_request)

        response = await self._http.send_async(
            "POST",
            CASH_IN_PATH,
            headers=headers,
            operation=self.OPERATION,
            json=charge_request.to_wire(),
        )
        return self._handle_response(charge_request, response)

    def _handle_response(self, charge_request: ChargeRequest, response: httpx.Response) -> ChargeResponse:
        ensure_success(response)
        charge = decode_response(ChargeResponse, response)
        logger.info(
            "charge_created",
            charge_id=charge.id,
            status=charge.status.to_wire() if charge.status else None,
            value=charge.value,
            split_rules=len(charge_request.split_rules or ()),
        )
        return charge


class TransactionService:
    """Read-only transaction lookups."""

    OPERATION = "transaction_retrieve"

    def __init__(self, http: PushinPayHttpClient) -> None:
        self._http = http

    def retrieve_by_transaction_id(
        self, headers: Mapping[str, Any] | None, transaction_id: str
    ) -> TransactionResponse:
        response = self._http.send(
            "GET",
            self._path(transaction_id),
            headers=headers,
            operation=self.OPERATION,
        )
        ensure_success(response)
        return decode_response(TransactionResponse, response)

    async def retrieve_by_transaction_id_async(
        self, headers: Mapping[str, Any] | None, transaction_id: str
    ) -> TransactionResponse:
        response = await self._http.send_async(
            "GET",
            self._path(transaction_id),
            headers=headers,
            operation=self.OPERATION,
        )
        ensure_success(response)
        return decode_response(TransactionResponse, response)

    def _path(self, transaction_id: str) -> str:
        if not transaction_id or not transaction_id.strip():
            raise ValueError("transaction_id must not be blank")
        return TRANSACTION_PATH.format(transaction_id=quote(transaction_id, safe=""))
