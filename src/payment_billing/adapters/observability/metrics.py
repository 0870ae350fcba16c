from prometheus_client import Counter, Histogram

# ─── provedores HTTP (Brevo, Autentique) ───
PROVIDER_LATENCY = Histogram(
    "medpass_provider_request_seconds", "Latência por provedor", ["provider", "channel"]
)
PROVIDER_SUCCESS = Counter(
    "medpass_provider_success_total", "Chamadas bem-sucedidas", ["provider", "channel"]
)
PROVIDER_FAILURE = Counter(
    "medpass_provider_failure_total", "Chamadas com falha", ["provider", "channel"]
)

# ─── fluxo de pagamento ───
CHECKOUT_TOTAL = Counter(
    "medpass_checkout_total",
    "Checkouts processados",
    ["payment_method", "outcome"],
)

CHECKOUT_DURATION = Histogram(
    "medpass_checkout_duration_seconds",
    "Duração do checkout (gateway + persistência)",
    ["payment_method"],
)

WEBHOOK_EVENTS = Counter(
    "medpass_webhook_events_total",
    "Eventos de webhook recebidos",
    ["source", "event_type", "outcome"],
)

# ─── registro externo ───
REGISTRY_CALLS = Counter(
    "medpass_registry_calls_total",
    "Chamadas ao RMS",
    ["operation", "outcome"],
)
