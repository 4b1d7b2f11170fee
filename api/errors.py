"""Translation of pipeline failures into HTTP error responses.

Every failure leaves the service as
``{"error": {"code": ..., "message": ..., "details": ...}}``.

Image and model errors are looked up by family in HTTP_ERROR_TABLE:

    ImageDecodeError       -> 400 INVALID_IMAGE
    TensorValidationError  -> 422 INVALID_INPUT
    TensorEncodeError      -> 422 INVALID_INPUT
    ModelLoadError         -> 500 MODEL_LOAD_FAILED
    InferenceError         -> 500 INFERENCE_FAILED

The pipeline's own code (e.g. DIMENSION_MISMATCH) is kept in
details["reason"]. Anything else becomes 500 INTERNAL_ERROR.
"""

import logging
from typing import Any, Final

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from faceio.errors import ImageDecodeError, TensorEncodeError, TensorValidationError
from model.errors import InferenceError, ModelLoadError

from .schemas import ApiErrorResponse, ErrorDetail


logger = logging.getLogger(__name__)


# Error family -> (HTTP status, API code); first match wins
HTTP_ERROR_TABLE: Final[tuple[tuple[type[Exception], int, str], ...]] = (
    (ImageDecodeError, 400, "INVALID_IMAGE"),
    (TensorValidationError, 422, "INVALID_INPUT"),
    (TensorEncodeError, 422, "INVALID_INPUT"),
    (ModelLoadError, 500, "MODEL_LOAD_FAILED"),
    (InferenceError, 500, "INFERENCE_FAILED"),
)


class ApiError(Exception):
    """An error ready to be sent to the client.

    Attributes:
        status_code: HTTP status code to return.
        code: Machine-readable error code.
        message: Human-readable error message.
        details: Optional additional context.
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details


class InvalidInputError(ApiError):
    """Raised by routes for requests refused before the pipeline runs."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(422, "INVALID_INPUT", message, details)


def map_exception_to_api_error(exc: Exception) -> ApiError:
    """Translate any exception into an ApiError.

    Examples:
        >>> from faceio.errors import TensorValidationError
        >>> err = map_exception_to_api_error(
        ...     TensorValidationError("bad size", code="DIMENSION_MISMATCH"))
        >>> err.status_code, err.code, err.details["reason"]
        (422, 'INVALID_INPUT', 'DIMENSION_MISMATCH')
    """
    if isinstance(exc, ApiError):
        return exc

    for family, status_code, code in HTTP_ERROR_TABLE:
        if isinstance(exc, family):
            return ApiError(
                status_code=status_code,
                code=code,
                message=exc.message,
                details={**exc.details, "reason": exc.code},
            )

    return ApiError(
        status_code=500,
        code="INTERNAL_ERROR",
        message=str(exc) or "An unexpected error occurred",
        details={"exception_type": type(exc).__name__},
    )


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    """Render an exception as a JSON error response tagged with the request ID."""
    request_id = getattr(request.state, "request_id", "unknown")
    api_error = map_exception_to_api_error(exc)
    reason = (api_error.details or {}).get("reason", api_error.code)

    if api_error.code == "INTERNAL_ERROR":
        logger.error(
            "Unhandled error: type=%s message=%s",
            type(exc).__name__,
            api_error.message,
            exc_info=exc,
        )
    else:
        logger.log(
            logging.ERROR if api_error.status_code >= 500 else logging.WARNING,
            "Request failed: status=%d code=%s reason=%s message=%s",
            api_error.status_code,
            api_error.code,
            reason,
            api_error.message,
        )

    body = ApiErrorResponse(
        error=ErrorDetail(
            code=api_error.code,
            message=api_error.message,
            details=api_error.details,
        )
    )
    return JSONResponse(
        status_code=api_error.status_code,
        content=body.model_dump(),
        headers={"X-Request-ID": request_id},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Route ApiError, every tabled error family and the catch-all to handle_error."""
    families = [ApiError, *(family for family, _, _ in HTTP_ERROR_TABLE), Exception]
    for family in families:
        app.add_exception_handler(family, handle_error)
