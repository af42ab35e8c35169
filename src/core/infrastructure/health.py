"""Health check result types shared by infrastructure components."""

from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    OK = "ok"
    ERROR = "error"


class RedisHealthResult(BaseModel):
    status: HealthStatus = Field(..., description="Health status")
    connected: bool = Field(..., description="Whether the client is connected")
    version: str | None = Field(None, description="Redis server version")
    error: str | None = Field(None, description="Error message")

    def to_dict(self) -> dict[str, str | bool | None]:
        return self.model_dump(mode="json", exclude_none=False)


class CatalogHealthResult(BaseModel):
    """State of the in-memory stream catalog."""

    status: HealthStatus = Field(..., description="Health status")
    state: str = Field(..., description="Catalog lifecycle state")
    entries: int = Field(0, description="Number of catalog entries")
    live: int = Field(0, description="Number of live entries")
    cache_backend: str = Field(..., description="Configured cache medium")
    refresh_running: bool = Field(False, description="Whether the refresh timer runs")

    def to_dict(self) -> dict[str, str | bool | int]:
        return self.model_dump(mode="json")
