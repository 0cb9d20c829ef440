"""Application error definitions and FastAPI handlers."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError


class AppException(Exception):
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, code: str = "error"):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class NotFoundException(AppException):
    def __init__(self, message: str = "Record not found"):
        super().__init__(message=message, status_code=status.HTTP_404_NOT_FOUND, code="not_found")


class ConflictException(AppException):
    def __init__(self, message: str = "Record already exists"):
        super().__init__(message=message, status_code=status.HTTP_409_CONFLICT, code="conflict")


# Client-side errors raised by the data-access layer


class DataServiceError(Exception):
    """Base class for errors raised below the data service boundary."""


class BackendNotConfigured(DataServiceError):
    def __init__(self, message: str = "No remote endpoint configured"):
        super().__init__(message)


class BackendUnavailable(DataServiceError):
    """Timeout, network failure or non-2xx answer from the remote backend."""

    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)


class WireDecodeError(DataServiceError):
    """A remote payload did not match the expected wire schema."""


class LocalStoreError(DataServiceError):
    """The local document could not be read or written."""


class ImportParseError(Exception):
    """A bulk import file could not be turned into components."""


def _format_error(detail: str, code: str):
    return {"message": detail, "code": code}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        return JSONResponse(status_code=exc.status_code, content=_format_error(exc.message, exc.code))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_format_error("Submitted data could not be validated", "validation_error"),
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_format_error("Submitted data could not be validated", "validation_error"),
        )
