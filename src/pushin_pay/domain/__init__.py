"""Domain layer - wire models and errors."""

from pushin_pay.domain.exceptions import (
    DecodingError,
    InvalidChargeRequestError,
    PushinPayError,
    RemoteCallError,
    TransportFailureError,
)
from pushin_pay.domain.models import (
    ChargeRequest,
    ChargeResponse,
    ChargeStatus,
    PixDetailsResponse,
    SplitRuleRequest,
    SplitRuleResponse,
    TransactionProductResponse,
    TransactionResponse,
    TransactionStatus,
    WebhookResponse,
)


__all__ = [
    "ChargeRequest",
    "ChargeResponse",
    "ChargeStatus",
    "DecodingError",
    "InvalidChargeRequestError",
    "PixDetailsResponse",
    "PushinPayError",
    "RemoteCallError",
    "SplitRuleRequest",
    "SplitRuleResponse",
    "TransactionProductResponse",
    "TransactionResponse",
    "TransactionStatus",
    "TransportFailureError",
    "WebhookResponse",
]
