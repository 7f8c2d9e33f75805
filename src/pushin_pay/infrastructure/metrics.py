from prometheus_client import Counter, Histogram


PUSHIN_PAY_REQUESTS_TOTAL = Counter(
    "pushin_pay_requests_total",
    "Total number of responses received from the Pushin Pay API",
    ["operation", "status_code"],
)

PUSHIN_PAY_REQUEST_DURATION = Histogram(
    "pushin_pay_request_duration_seconds",
    "Pushin Pay API call duration",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

PUSHIN_PAY_TRANSPORT_ERRORS_TOTAL = Counter(
    "pushin_pay_transport_errors_total",
    "Total number of Pushin Pay API calls that failed below HTTP",
    ["operation"],
)

CHARGE_VALIDATION_FAILURES_TOTAL = Counter(
    "pushin_pay_charge_validation_failures_total",
    "Total number of charge requests rejected before submission",
    ["rule"],
)
