"""HTTP exception handlers.

Domain exceptions carry their own http_status_code and error_code class
attributes; the handler here only reads them.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from src.core.domain.exceptions import DomainException
from src.core.interfaces.http.response import ApiResponse


async def domain_exception_handler(
    _request: Request, exc: DomainException
) -> JSONResponse:
    """Handle domain exceptions."""
    status_code = getattr(exc, "http_status_code", 400)
    error_code = getattr(exc, "error_code", "DOMAIN_ERROR")

    body = ApiResponse.error(
        message=exc.message,
        code=status_code,
        data={"error_code": error_code},
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    body = ApiResponse.error(
        message="An internal error occurred",
        code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        data={"error_code": "INTERNAL_ERROR"},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )
