"""Prometheus metrics for ledger activity, persistence health, and request latency"""

from prometheus_client import Counter, Histogram

# Ledger metrics
transactions_recorded_counter = Counter(
    "wallet_ledger_transactions_recorded_total",
    "Transactions added to a wallet",
    ["type"],  # income | expense
)

transactions_deleted_counter = Counter(
    "wallet_ledger_transactions_deleted_total",
    "Transactions removed from a wallet",
)

wallets_created_counter = Counter(
    "wallet_ledger_wallets_created_total",
    "Wallets created, including the synthesized default wallet",
    ["origin"],  # user | default
)

# Store metrics
persistence_failures_counter = Counter(
    "wallet_ledger_persistence_failures_total",
    "Store writes that failed and left in-memory state ahead of the store",
    ["operation"],  # load | save | delete
)

storage_resets_counter = Counter(
    "wallet_ledger_storage_resets_total",
    "Startup resets caused by an unreadable or incompatible store",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transaction(tx_type: str) -> None:
    transactions_recorded_counter.labels(type=tx_type).inc()
