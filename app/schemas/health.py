"""Pydantic schema for the health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus database reachability."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: Literal["dev", "prod"] = Field(description="APP_ENV of this deployment")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a trivial query against the configured database",
    )
