import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class APIException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)


class UnauthorizedError(APIException):
    """Every authentication failure, whatever the cause.

    The message never says which check failed so callers cannot probe for
    registered emails or phone numbers.
    """

    def __init__(self):
        super().__init__(status_code=401, detail="Unauthorized")


class ConflictError(APIException):
    def __init__(self, detail: str):
        super().__init__(status_code=409, detail=detail)


class ServiceUnavailableError(APIException):
    """A storage, cache or messaging collaborator failed. Cause goes to the log only."""

    def __init__(self):
        super().__init__(status_code=500, detail="Internal server error")


def create_error_response(error_message: str, status_code: int = 400) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message
    }

async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    headers = getattr(exc, "headers", None)
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.detail, exc.status_code),
        headers=headers,
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.info(f"Validation failed on {request.url.path}: {message}")
    return JSONResponse(
        status_code=422,
        content=create_error_response(message, 422)
    )
