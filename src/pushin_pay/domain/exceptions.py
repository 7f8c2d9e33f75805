class PushinPayError(Exception):
    """Base exception for all Pushin Pay client errors."""


class InvalidChargeRequestError(PushinPayError):
    """Raised when a charge request fails client-side validation."""

    def __init__(self, rule: str, reason: str, index: int | None = None) -> None:
        self.rule = rule
        self.reason = reason
        self.index = index
        location = f" (split rule {index})" if index is not None else ""
        super().__init__(f"Invalid charge request{location}: {reason}")


class RemoteCallError(PushinPayError):
    """Raised when the Pushin Pay API answers with a non-success status."""

    def __init__(self, status_code: int, body: str, operation: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        self.operation = operation
        super().__init__(f"Pushin Pay API call {operation or 'request'} failed with HTTP {status_code}: {body}")


class TransportFailureError(PushinPayError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Transport failure during {operation}: {reason}")


class DecodingError(PushinPayError):
    """Raised when a response body does not match the expected shape."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"Could not decode {target}: {reason}")
