"""Application layer - API services and charge validation."""

from pushin_pay.application.services import (
    AccountService,
    ChargeService,
    TransactionService,
)
from pushin_pay.application.validation import ChargeValidator


__all__ = [
    "AccountService",
    "ChargeService",
    "ChargeValidator",
    "TransactionService",
]
