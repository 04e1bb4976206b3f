"""Schemas for the realtime flag channel REST surface."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ConnectionStats(BaseModel):
    """Statistics about the relay's WebSocket channels."""

    enabled: bool = Field(..., description="Whether the flag channel accepts connections")
    total_connections: int = Field(..., ge=0)
    max_connections: int = Field(..., ge=1)
