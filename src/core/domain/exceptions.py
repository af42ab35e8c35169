"""Base domain exceptions.

Every domain exception derives from DomainException and may declare the
http_status_code and error_code class attributes that the HTTP layer uses to
render it.
"""

from fastapi import status


class DomainException(Exception):
    """Base exception for all domain errors."""

    http_status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str = "A domain error occurred"):
        self.message = message
        super().__init__(self.message)


class EntityNotFoundError(DomainException):
    """Raised when an entity is not found."""

    http_status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str | None = None):
        message = f"{entity_type} not found"
        if entity_id:
            message = f"{entity_type} with id '{entity_id}' not found"
        super().__init__(message)


class AuthorizationError(DomainException):
    """Raised when authorization fails."""

    http_status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"


class InvalidStateError(DomainException):
    """Raised when an operation is not allowed in the current state."""

    http_status_code = status.HTTP_409_CONFLICT
    error_code = "INVALID_STATE"


class ConfigurationError(DomainException):
    """Raised at startup when required configuration is missing."""

    http_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "CONFIGURATION_ERROR"
