"""Stream catalog domain events."""

from pydantic import Field

from src.core.domain.events import DomainEvent
from src.modules.streams.domain.entities import VideoEntry


class CatalogReadyEvent(DomainEvent):
    """Raised when the catalog finished loading (from cache or source)."""

    entries: list[VideoEntry] = Field(..., description="Catalog snapshot")
    loaded_from: str = Field(..., description="cache or source")


class CatalogRefreshedEvent(DomainEvent):
    """Raised after every live-status refresh cycle."""

    went_live: list[str] = Field(
        default_factory=list, description="Ids that switched from not-live to live"
    )
    entries: list[VideoEntry] = Field(..., description="Catalog snapshot")
