"""Pydantic schemas for health check responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: str = Field(description="APP_ENV the service runs under (dev or prod)")
    database: Literal["connected", "disconnected"] = Field(
        description="Whether a trivial query against the database succeeded",
    )
    timestamp: datetime
