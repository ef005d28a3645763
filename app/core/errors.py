"""Error types and the JSON handlers that map them onto HTTP responses."""
import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """A persistence call failed; detail is logged, never returned."""


def format_validation_errors(errors: list[dict]) -> str:
    """Render pydantic errors as 'Validation error: <msg> at "<field>"; ...'."""
    parts = []
    for err in errors:
        # drop the "body"/"path"/"query" location prefix
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query")]
        msg = err.get("msg", "Invalid value")
        parts.append(f'{msg} at "{".".join(loc)}"' if loc else msg)
    return "Validation error: " + "; ".join(parts)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": format_validation_errors(exc.errors())})


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
