"""Prometheus metrics endpoint for observability.

Endpoints:
    GET /metrics - Prometheus scrape endpoint

Metrics Exposed:
    Realtime relay:
        - websocket_connections - Open flag channels
        - websocket_connection_duration_seconds - Channel lifetime histogram
        - flag_broadcasts_total - Snapshots broadcast to clients
        - flag_broadcast_deliveries_total - Per-channel outcome (sent|skipped|failed)
        - flag_broadcast_recipients - Channels reached per broadcast

    Snapshot service:
        - flag_evaluation_failures_total - Snapshots answered with defaults
        - flag_track_events_total - Tracking events by outcome

Example Prometheus Configuration:
    ```yaml
    scrape_configs:
      - job_name: 'billboard-service'
        static_configs:
          - targets: ['localhost:3000']
        metrics_path: '/metrics'
        scrape_interval: 15s
    ```
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST

from billboard_service.infra.metrics import REGISTRY, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics")
async def metrics() -> Response:
    """Expose Prometheus metrics in text exposition format."""
    data = generate_latest(REGISTRY)
    return Response(
        content=data,
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
