from typing import Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse


class BiteByteError(Exception):
    """Base for errors scoped to a single user interaction."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidInput(BiteByteError):
    """Wrong MIME type, oversized or empty file. Raised before any network call."""

    status_code = 400


class AnalysisFailed(BiteByteError):
    """The external model call failed or returned unusable output."""

    status_code = 502


class AnalysisInProgress(BiteByteError):
    status_code = 409


class StorageDegraded(BiteByteError):
    """Object storage is not configured. Never surfaced to a client."""

    status_code = 503


class StorageFailed(BiteByteError):
    status_code = 502


class RemoteDeleteFailed(BiteByteError):
    status_code = 502


class NotFound(BiteByteError):
    status_code = 404


class CameraError(BiteByteError):
    """Camera could not be acquired or read."""

    status_code = 503


class CameraUnavailable(BiteByteError):
    """Camera operation is not valid in the session's current state."""

    status_code = 409


def create_error_response(error_message: str, status_code: int = 400) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message
    }


def create_success_response(data) -> dict:
    """Create a standardized success response"""
    return {
        "success": True,
        "data": data,
        "error": None
    }


async def bitebyte_exception_handler(request: Request, exc: BiteByteError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.message, exc.status_code)
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail), exc.status_code)
    )
