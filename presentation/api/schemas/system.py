"""System schemas."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field("ok", description="Overall health status")
    database_ok: bool = Field(False, description="User store reachable")
    uptime_seconds: Optional[float] = Field(None, description="Service uptime in seconds")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
