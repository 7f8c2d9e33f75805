import re
from datetime import datetime
from enum import Enum
from typing import Any, Self

from pydantic import AwareDatetime, BaseModel, ConfigDict, field_validator


PIX_EXPIRATION_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
PIX_EXPIRATION_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3}")


class _WireEnum(Enum):
    @classmethod
    def from_wire(cls, value: str | Self | None) -> Self | None:
        """Decode a wire token case-insensitively; ``None`` stays ``None``."""
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.name.casefold() == value.casefold():
                    return member
        raise ValueError(f"Unknown {cls.__name__} value: {value!r}")

    def to_wire(self) -> str:
        return self.name


class ChargeStatus(_WireEnum):
    CREATED = "CREATED"
    PAID = "PAID"


class TransactionStatus(_WireEnum):
    CREATED = "CREATED"
    PAID = "PAID"


class SplitRuleRequest(BaseModel):
    value: int | None = None
    account_id: str | None = None


class ChargeRequest(BaseModel):
    """Pix cash-in request.

    Construction enforces no business rules: absent and non-positive values
    are representable and rejected later by ``ChargeValidator``.
    """

    value: int | None = None
    webhook_url: str | None = None
    split_rules: list[SplitRuleRequest] | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class _Response(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class WebhookResponse(_Response):
    id: str | None = None
    url: str | None = None
    http_status: int | None = None
    http_error: int | None = None
    attempt: int | None = None
    complete: bool | None = None
    transaction_id: str | None = None
    transfer_id: str | None = None
    account_id: str | None = None
    created_at: AwareDatetime | None = None
    updated_at: AwareDatetime | None = None
    deleted_at: AwareDatetime | None = None


class SplitRuleResponse(_Response):
    id: int | None = None
    type: str | None = None
    amount: int | None = None
    transaction_id: str | None = None
    account_id: str | None = None
    created_at: AwareDatetime | None = None
    updated_at: AwareDatetime | None = None


class PixDetailsResponse(_Response):
    id: str | None = None
    # Legacy field: naive timestamp in "yyyy-MM-dd HH:mm:ss.SSS", unlike the
    # ISO-8601 offsets used everywhere else.
    expiration_date: datetime | None = None
    emv: str | None = None
    created_at: AwareDatetime | None = None
    updated_at: AwareDatetime | None = None

    @field_validator("expiration_date", mode="before")
    @classmethod
    def parse_expiration_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            trimmed = value.strip()
            # strptime alone is lenient on digit counts.
            if PIX_EXPIRATION_PATTERN.fullmatch(trimmed) is None:
                raise ValueError(f"expiration_date must match yyyy-MM-dd HH:mm:ss.SSS, got {value!r}")
            return datetime.strptime(trimmed, PIX_EXPIRATION_FORMAT)
        return value


class TransactionProductResponse(_Response):
    id: str | None = None


class ChargeResponse(_Response):
    id: str | None = None
    qr_code: str | None = None
    status: ChargeStatus | None = None
    value: int | None = None
    webhook_url: str | None = None
    qr_code_base64: str | None = None
    webhook: WebhookResponse | None = None
    split_rules: list[SplitRuleResponse] | None = None
    end_to_end_id: str | None = None
    payer_name: str | None = None
    payer_national_registration: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def decode_status(cls, value: Any) -> ChargeStatus | None:
        return ChargeStatus.from_wire(value)

    @property
    def is_paid(self) -> bool:
        return self.status is ChargeStatus.PAID


class TransactionResponse(_Response):
    id: str | None = None
    status: TransactionStatus | None = None
    value: int | None = None
    description: str | None = None
    payment_type: str | None = None
    created_at: AwareDatetime | None = None
    updated_at: AwareDatetime | None = None
    webhook_url: str | None = None
    split_rules: list[SplitRuleResponse] | None = None
    end_to_end_id: str | None = None
    payer_name: str | None = None
    payer_national_registration: str | None = None
    webhook: WebhookResponse | None = None
    pix_details: PixDetailsResponse | None = None
    transaction_product: list[TransactionProductResponse] | None = None

    @field_validator("status", mode="before")
    @classmethod
    def decode_status(cls, value: Any) -> TransactionStatus | None:
        return TransactionStatus.from_wire(value)

    @property
    def is_paid(self) -> bool:
        return self.status is TransactionStatus.PAID
