"""Global exception handlers.

Every failure leaves the API as {"error": {"kind": ..., "message": ...}}.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from booty_hunt.errors import BootyHuntError, StorageError


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(BootyHuntError)
    async def booty_hunt_error_handler(request: Request, exc: BootyHuntError):
        if isinstance(exc, StorageError):
            logging.error(f"{exc.kind} on {request.url.path}: {exc.message}")
        else:
            logging.info(f"{exc.kind} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        logging.info(f"Malformed request on {request.url.path}: {exc.errors()}")
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) for error in exc.errors()
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": {"kind": "validation", "message": f"Invalid request fields: {fields}"}},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logging.exception(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": {"kind": "internal", "message": "Internal error"}},
        )
