from prometheus_client import Counter, Histogram

HTTP_REQUESTS = Counter(
    "medpass_http_requests_total",
    "Requisições HTTP por view e status",
    ["view", "status"],
)

HTTP_LATENCY = Histogram(
    "medpass_http_request_duration_seconds",
    "Latência das views de API",
    ["view"],
)
