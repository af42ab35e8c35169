"""Streams API routes."""

from fastapi import APIRouter, Depends, Header

from src.core.interfaces.http.response import ApiResponse
from src.modules.streams.application.channel_manager import ChannelManager
from src.modules.streams.application.dependencies import (
    get_channel_manager,
    get_playback_controller,
)
from src.modules.streams.application.playback import PlaybackDecision
from src.modules.streams.application.playback_controller import PlaybackController
from src.modules.streams.domain.entities import VideoEntry
from src.modules.streams.interfaces.schemas import (
    CatalogResponse,
    PlaybackResponse,
    RefreshResponse,
    SelectResponse,
    VideoEntryResponse,
    VolumeRequest,
    VolumeResponse,
)

router = APIRouter(tags=["streams"])


def _to_entry_response(entry: VideoEntry) -> VideoEntryResponse:
    return VideoEntryResponse(
        index=entry.index,
        id=entry.id,
        url=entry.url,
        name=entry.name,
        thumbnail_url=entry.thumbnail_url,
        live=entry.live,
        start_time=entry.start_time,
        priority=entry.priority,
        manually_added=entry.manually_added,
    )


def _playback_fields(controller: PlaybackController) -> dict:
    current = controller.current
    return {
        "current": _to_entry_response(current) if current else None,
        "playing_url": controller.player.active_url,
        "counting_down": controller.is_counting_down,
        "label": controller.label(),
        "volume": controller.volume,
        "flash_ids": controller.cues.flash_ids,
        "chime": controller.cues.chime,
    }


@router.get(
    "/streams",
    response_model=ApiResponse[CatalogResponse],
    summary="Full stream catalog",
)
async def list_streams(
    manager: ChannelManager = Depends(get_channel_manager),
) -> ApiResponse[CatalogResponse]:
    return ApiResponse.success(
        data=CatalogResponse(
            state=manager.state.value,
            entries=[_to_entry_response(entry) for entry in manager.entries],
        )
    )


@router.get(
    "/streams/live",
    response_model=ApiResponse[list[VideoEntryResponse]],
    summary="Streams that are live right now",
)
async def list_live_streams(
    manager: ChannelManager = Depends(get_channel_manager),
) -> ApiResponse[list[VideoEntryResponse]]:
    return ApiResponse.success(
        data=[_to_entry_response(entry) for entry in manager.live_videos]
    )


@router.get(
    "/streams/buttons",
    response_model=ApiResponse[list[VideoEntryResponse]],
    summary="Streams that get a channel button",
    description="Live streams plus streams starting within the button window",
)
async def list_buttons(
    controller: PlaybackController = Depends(get_playback_controller),
) -> ApiResponse[list[VideoEntryResponse]]:
    return ApiResponse.success(
        data=[_to_entry_response(entry) for entry in controller.buttons()]
    )


@router.post(
    "/streams/refresh",
    response_model=ApiResponse[RefreshResponse],
    summary="Re-poll live status now",
)
async def refresh_streams(
    manager: ChannelManager = Depends(get_channel_manager),
) -> ApiResponse[RefreshResponse]:
    went_live = await manager.refresh()
    return ApiResponse.success(data=RefreshResponse(went_live=went_live))


@router.post(
    "/streams/rebuild",
    response_model=ApiResponse[CatalogResponse],
    summary="Rebuild the catalog from the source, bypassing the cache",
)
async def rebuild_streams(
    x_control_token: str | None = Header(None),
    manager: ChannelManager = Depends(get_channel_manager),
    controller: PlaybackController = Depends(get_playback_controller),
) -> ApiResponse[CatalogResponse]:
    controller.require_control(x_control_token)
    entries = await manager.initialize(force=True)
    return ApiResponse.success(
        data=CatalogResponse(
            state=manager.state.value,
            entries=[_to_entry_response(entry) for entry in entries],
        )
    )


@router.get(
    "/playback",
    response_model=ApiResponse[PlaybackResponse],
    summary="Current playback state",
)
async def get_playback(
    controller: PlaybackController = Depends(get_playback_controller),
) -> ApiResponse[PlaybackResponse]:
    return ApiResponse.success(data=PlaybackResponse(**_playback_fields(controller)))


@router.post(
    "/playback/select/{video_id}",
    response_model=ApiResponse[SelectResponse],
    summary="Click a channel button",
)
async def select_stream(
    video_id: str,
    x_control_token: str | None = Header(None),
    controller: PlaybackController = Depends(get_playback_controller),
) -> ApiResponse[SelectResponse]:
    decision: PlaybackDecision = controller.select(video_id, x_control_token)
    return ApiResponse.success(
        data=SelectResponse(
            action=decision.action.value,
            **_playback_fields(controller),
        )
    )


@router.post(
    "/playback/volume",
    response_model=ApiResponse[VolumeResponse],
    summary="Adjust the volume",
)
async def adjust_volume(
    request: VolumeRequest,
    x_control_token: str | None = Header(None),
    controller: PlaybackController = Depends(get_playback_controller),
) -> ApiResponse[VolumeResponse]:
    volume = controller.adjust_volume(request.delta, x_control_token)
    return ApiResponse.success(data=VolumeResponse(volume=volume))


@router.post(
    "/playback/volume/up",
    response_model=ApiResponse[VolumeResponse],
    summary="Turn the volume up one step",
)
async def volume_up(
    x_control_token: str | None = Header(None),
    controller: PlaybackController = Depends(get_playback_controller),
) -> ApiResponse[VolumeResponse]:
    volume = controller.step_volume(1, x_control_token)
    return ApiResponse.success(data=VolumeResponse(volume=volume))


@router.post(
    "/playback/volume/down",
    response_model=ApiResponse[VolumeResponse],
    summary="Turn the volume down one step",
)
async def volume_down(
    x_control_token: str | None = Header(None),
    controller: PlaybackController = Depends(get_playback_controller),
) -> ApiResponse[VolumeResponse]:
    volume = controller.step_volume(-1, x_control_token)
    return ApiResponse.success(data=VolumeResponse(volume=volume))
