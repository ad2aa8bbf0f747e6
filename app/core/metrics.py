"""Prometheus metrics for the OIDC client.

All metrics live here so there is one inventory of what the service
measures.  HTTP metrics are fed by MetricsMiddleware; the token exchange
metrics are fed by app.services.token_exchange.

Counters only go up, so dashboards derive rates with rate(); the
duration histograms let Prometheus compute percentiles with
histogram_quantile().
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # /callback includes a round-trip to the authorization server, so the
    # upper buckets matter more here than for a pure API.
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Token exchange (back-channel call to the authorization server)
# ---------------------------------------------------------------------------

TOKEN_EXCHANGES = Counter(
    "token_exchanges_total",
    "Authorization code exchanges by outcome",
    ["outcome"],  # "success", "upstream_error", "transport_error"
)

TOKEN_EXCHANGE_DURATION = Histogram(
    "token_exchange_duration_seconds",
    "Time spent waiting on the authorization server's token endpoint",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

MISSING_AUTHORIZATION_CODE = Counter(
    "callback_missing_code_total",
    "Callback requests rejected because no authorization code was present",
)
