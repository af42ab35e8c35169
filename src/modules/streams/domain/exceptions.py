"""Stream catalog domain exceptions."""

from src.core.domain.exceptions import (
    AuthorizationError,
    DomainException,
    EntityNotFoundError,
    InvalidStateError,
)


class TransientSourceError(DomainException):
    """The external query API failed or returned an unusable payload."""

    error_code = "SOURCE_UNAVAILABLE"

    def __init__(self, message: str):
        super().__init__(f"Source query failed: {message}")


class CacheNotFoundError(DomainException):
    """No blob is stored under the requested key."""

    error_code = "CACHE_NOT_FOUND"

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No cached blob under '{key}'")


class CacheReadError(DomainException):
    """The cache medium could not be read, or held a corrupt payload."""

    error_code = "CACHE_READ_ERROR"


class CacheWriteError(DomainException):
    """The cache medium rejected a write."""

    error_code = "CACHE_WRITE_ERROR"


class CatalogNotReadyError(InvalidStateError):
    """Raised when refreshing a catalog that has not finished loading."""

    error_code = "CATALOG_NOT_READY"

    def __init__(self, state: str):
        super().__init__(f"Catalog is not ready (state: {state})")


class VideoNotFoundError(EntityNotFoundError):
    """Raised when a video id has no channel button in the current catalog."""

    def __init__(self, video_id: str):
        super().__init__("Video", video_id)


class ControlNotAllowedError(AuthorizationError):
    """Raised when a non-moderator tries to change playback controls."""

    error_code = "CONTROL_NOT_ALLOWED"

    def __init__(self, message: str = "Playback controls are restricted"):
        super().__init__(message)
