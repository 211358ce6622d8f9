# artifact_catalog/middleware/error_handlers.py
from __future__ import annotations
import logging
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..domain.errors import (
    ArtifactNotFound,
    CatalogError,
    CategoryNotFound,
    InvalidArgument,
    InvalidOperation,
    MetadataValidationError,
    OutOfRange,
)

logger = logging.getLogger("artifact_catalog.errors")


def _status_for(exc: CatalogError) -> int:
    if isinstance(exc, (CategoryNotFound, ArtifactNotFound)):
        return 404
    if isinstance(exc, InvalidOperation):
        return 409
    if isinstance(exc, (InvalidArgument, OutOfRange, MetadataValidationError)):
        return 400
    return 400


def add_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(_, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "status_code": exc.status_code},
        )

    @app.exception_handler(CatalogError)
    async def catalog_exception_handler(_, exc: CatalogError):
        status_code = _status_for(exc)
        content = {"detail": str(exc), "error": type(exc).__name__, "status_code": status_code}
        if isinstance(exc, MetadataValidationError):
            content["errors"] = [{"field": f, "message": m} for f, m in exc.errors]
        logger.info("Rejected request: %s (%s)", exc, type(exc).__name__)
        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(_, exc: ValidationError):
        logger.debug("Validation error: %s", exc)
        return JSONResponse(status_code=422, content={"detail": exc.errors(include_url=False)})

    @app.exception_handler(Exception)
    async def generic_exception_handler(_, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
