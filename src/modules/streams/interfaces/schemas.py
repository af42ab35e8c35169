"""Streams API schemas."""

from pydantic import BaseModel, Field


class VideoEntryResponse(BaseModel):
    """One catalog entry."""

    index: int = Field(..., description="Display order")
    id: str = Field(..., description="Video id")
    url: str = Field(..., description="Stream address")
    name: str = Field(..., description="Title")
    thumbnail_url: str | None = Field(None, description="Thumbnail URL")
    live: bool | None = Field(None, description="Whether the stream is live")
    start_time: int | None = Field(None, description="Start time, epoch millis")
    priority: int = Field(0, description="Lower sorts first")
    manually_added: bool = Field(False, description="Operator-configured entry")


class CatalogResponse(BaseModel):
    state: str = Field(..., description="Catalog lifecycle state")
    entries: list[VideoEntryResponse] = Field(default_factory=list)


class RefreshResponse(BaseModel):
    went_live: list[str] = Field(
        default_factory=list, description="Ids that switched to live"
    )


class PlaybackResponse(BaseModel):
    """Player-side state for the presentation layer."""

    current: VideoEntryResponse | None = Field(None, description="Selected entry")
    playing_url: str | None = Field(None, description="Active media stream")
    counting_down: bool = Field(False, description="Countdown shown instead of video")
    label: str = Field("", description="Label text (countdown or notice)")
    volume: float = Field(..., description="Volume in [0, 1]")
    flash_ids: list[str] = Field(default_factory=list, description="Buttons to flash")
    chime: bool = Field(False, description="Whether to play the chime")


class SelectResponse(PlaybackResponse):
    action: str = Field(..., description="play, stop, countdown or keep")


class VolumeRequest(BaseModel):
    delta: float = Field(..., ge=-1.0, le=1.0, description="Volume change")

    class Config:
        json_schema_extra = {"example": {"delta": 0.1}}


class VolumeResponse(BaseModel):
    volume: float = Field(..., description="Volume in [0, 1]")
