"""Stream catalog domain entities."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class CatalogState(StrEnum):
    """Lifecycle of the in-memory catalog."""

    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"
    REFRESHING = "refreshing"


class LiveStatusUpdate(BaseModel):
    """Fresh status values for one entry, as reported by the source API.

    Only these fields may change on an existing entry between rebuilds.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    live: bool
    start_time: int | None = None


class VideoEntry(BaseModel):
    """One catalog row.

    Attributes are snake_case; the camelCase aliases are the persisted form.
    """

    model_config = ConfigDict(populate_by_name=True)

    index: int = Field(default=0, description="Display order in the current snapshot")
    id: str = Field(..., description="Opaque id from the source")
    url: str = Field(..., description="Scheme-qualified address, e.g. youtube://<id>")
    name: str = Field(..., description="Title")
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")
    live: bool | None = Field(default=None, description="None until first known")
    start_time: int | None = Field(
        default=None, alias="startTime", description="Epoch millis"
    )
    priority: int = Field(default=0, description="Lower sorts first")
    manually_added: bool = Field(default=False, alias="manuallyAdded")

    def apply_status(self, update: LiveStatusUpdate) -> None:
        """Apply a status update in place, leaving index and priority alone."""
        self.name = update.name
        self.live = update.live
        self.start_time = update.start_time

    def starts_within(self, now_ms: int, window_ms: int) -> bool:
        """Whether the start time falls strictly inside now ± window."""
        if self.start_time is None:
            return False
        return now_ms - window_ms < self.start_time < now_ms + window_ms

    def to_cache_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"manually_added"})
