from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import AnyUrl, TypeAdapter, ValidationError

from pushin_pay.domain.exceptions import InvalidChargeRequestError
from pushin_pay.domain.models import ChargeRequest, SplitRuleRequest
from pushin_pay.infrastructure.metrics import CHARGE_VALIDATION_FAILURES_TOTAL


if TYPE_CHECKING:
    from pushin_pay.application.services import AccountService


logger = structlog.get_logger()

_URL_ADAPTER = TypeAdapter(AnyUrl)


class ChargeValidator:
    """Client-side checks run before a charge is sent to the provider.

    Rules are evaluated in a fixed order and the first violation raises
    ``InvalidChargeRequestError``:

    1. the request is present;
    2. ``value`` is present and positive;
    3. ``webhook_url``, when given, is a valid URL;
    4. each split rule, in order, has a positive value, a non-blank account
       id, and an account that exists (one lookup per rule);
    5. the split values add up to no more than ``value``.

    Account lookups run one at a time, so the reported violation is always
    the first one in iteration order. Lookup failures propagate unchanged.
    """

    def __init__(self, account_service: "AccountService") -> None:
        self._accounts = account_service

    def validate(self, headers: Mapping[str, Any] | None, charge_request: ChargeRequest | None) -> None:
        request = self._check_request(charge_request)

        split_total = 0
        for index, rule in enumerate(request.split_rules or ()):
            account_id = self._check_rule(index, rule)
            if not self._accounts.exists_by_account_id(headers, account_id):
                raise self._account_missing(index, account_id)
            split_total += rule.value or 0

        self._check_split_total(request, split_total)

    async def validate_async(
        self, headers: Mapping[str, Any] | None, charge_request: ChargeRequest | None
    ) -> None:
        request = self._check_request(charge_request)

        split_total = 0
        for index, rule in enumerate(request.split_rules or ()):
            account_id = self._check_rule(index, rule)
            if not await self._accounts.exists_by_account_id_async(headers, account_id):
                raise self._account_missing(index, account_id)
            split_total += rule.value or 0

        self._check_split_total(request, split_total)

    def _check_request(self, charge_request: ChargeRequest | None) -> ChargeRequest:
        if charge_request is None:
            raise _reject("request_present", "charge request must not be null")
        if charge_request.value is None:
            raise _reject("value_present", "value must not be null")
        if charge_request.value <= 0:
            raise _reject("value_positive", f"value must be greater than zero, got {charge_request.value}")
        if charge_request.webhook_url is not None and not _is_valid_url(charge_request.webhook_url):
            raise _reject("webhook_url_valid", f"webhook_url is not a valid URL: {charge_request.webhook_url!r}")
        return charge_request

    def _check_rule(self, index: int, rule: SplitRuleRequest) -> str:
        if rule.value is None or rule.value <= 0:
            raise _reject("split_value_positive", f"split value must be greater than zero, got {rule.value}", index)
        if rule.account_id is None or not rule.account_id.strip():
            raise _reject("split_account_id_present", "split account_id must not be blank", index)
        return rule.account_id

    def _account_missing(self, index: int, account_id: str) -> InvalidChargeRequestError:
        return _reject("split_account_exists", f"account {account_id} does not exist", index)

    def _check_split_total(self, request: ChargeRequest, split_total: int) -> None:
        if split_total > request.value:
            raise _reject(
                "split_total_within_value",
                f"split rules total {split_total} exceeds charge value {request.value}",
            )


def _is_valid_url(candidate: str) -> bool:
    try:
        _URL_ADAPTER.validate_python(candidate)
    except ValidationError:
        return False
    return True


def _reject(rule: str, reason: str, index: int | None = None) -> InvalidChargeRequestError:
    CHARGE_VALIDATION_FAILURES_TOTAL.labels(rule=rule).inc()
    logger.warning("charge_validation_failed", rule=rule, reason=reason, split_index=index)
    return InvalidChargeRequestError(rule, reason, index)
