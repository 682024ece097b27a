# docvault/api/errors.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..exceptions import DocVaultError, UnexpectedError
from ..utils.logging import api_logger


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Map error kinds to status codes; 5xx details stay in the server log"""

    @app.exception_handler(DocVaultError)
    async def handle_docvault_error(request: Request, exc: DocVaultError):
        extra = {
            "method": request.method,
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "error": str(exc)
        }
        if exc.status_code >= 500:
            api_logger.error("Request failed", extra=extra, exc_info=exc)
        else:
            api_logger.warning("Request rejected", extra=extra)
        return _error_response(exc.status_code, exc.client_message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        api_logger.warning("Malformed request", extra={
            "method": request.method,
            "path": request.url.path,
            "errors": exc.errors()
        })
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request.")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        api_logger.error("Unexpected server error", extra={
            "method": request.method,
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "error": str(exc)
        }, exc_info=exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, UnexpectedError.public_message)
