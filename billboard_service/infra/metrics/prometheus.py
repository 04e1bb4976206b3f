"""Prometheus metrics for the flag relay and snapshot service."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

# Custom registry keeps test processes and the default registry separate
REGISTRY = CollectorRegistry()

BROADCAST_RECIPIENT_BUCKETS = (0, 1, 5, 10, 50, 100, 500, 1000, 5000, 10000)

# Realtime relay
websocket_connections = Gauge(
    "websocket_connections",
    "Number of open realtime flag channels",
    registry=REGISTRY,
)

websocket_connection_duration_seconds = Histogram(
    "websocket_connection_duration_seconds",
    "Lifetime of realtime flag channels in seconds",
    buckets=(1, 10, 60, 300, 900, 3600, 14400, 86400),
    registry=REGISTRY,
)

flag_broadcasts_total = Counter(
    "flag_broadcasts_total",
    "Flag snapshots broadcast to connected channels",
    registry=REGISTRY,
)

flag_broadcast_deliveries_total = Counter(
    "flag_broadcast_deliveries_total",
    "Per-channel outcome of flag broadcasts",
    ["outcome"],
    registry=REGISTRY,
)

flag_broadcast_recipients = Histogram(
    "flag_broadcast_recipients",
    "Channels that received each flag broadcast",
    buckets=BROADCAST_RECIPIENT_BUCKETS,
    registry=REGISTRY,
)

# Snapshot service
flag_evaluation_failures_total = Counter(
    "flag_evaluation_failures_total",
    "Snapshots answered with defaults because the provider failed",
    registry=REGISTRY,
)

flag_track_events_total = Counter(
    "flag_track_events_total",
    "Tracking events forwarded to the flag provider",
    ["outcome"],
    registry=REGISTRY,
)
