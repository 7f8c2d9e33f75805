"""Client library for the Pushin Pay payment API."""

from pushin_pay.application import (
    AccountService,
    ChargeService,
    ChargeValidator,
    TransactionService,
)
from pushin_pay.client import PushinPay
from pushin_pay.domain import (
    ChargeRequest,
    ChargeResponse,
    ChargeStatus,
    DecodingError,
    InvalidChargeRequestError,
    PixDetailsResponse,
    PushinPayError,
    RemoteCallError,
    SplitRuleRequest,
    SplitRuleResponse,
    TransactionProductResponse,
    TransactionResponse,
    TransactionStatus,
    TransportFailureError,
    WebhookResponse,
)
from pushin_pay.infrastructure import PushinPayHttpClient


__all__ = [
    "AccountService",
    "ChargeRequest",
    "ChargeResponse",
    "ChargeService",
    "ChargeStatus",
    "ChargeValidator",
    "DecodingError",
    "InvalidChargeRequestError",
    "PixDetailsResponse",
    "PushinPay",
    "PushinPayError",
    "PushinPayHttpClient",
    "RemoteCallError",
    "SplitRuleRequest",
    "SplitRuleResponse",
    "TransactionProductResponse",
    "TransactionResponse",
    "TransactionStatus",
    "TransportFailureError",
    "WebhookResponse",
]
