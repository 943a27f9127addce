"""Exception handlers translating errors into API payloads."""

import logging
from typing import Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.exceptions import NovaFolioError

logger = logging.getLogger(__name__)


def _field_name(loc) -> str:
    parts = [str(part) for part in loc if not isinstance(part, int)]
    # Drop the request section ("body", "query", "path")
    if len(parts) > 1:
        parts = parts[1:]
    return ".".join(parts) or "request"


def validation_payload(errors) -> Dict:
    field_errors: Dict[str, List[str]] = {}
    form_errors: List[str] = []
    for error in errors:
        loc = error.get("loc") or ()
        message = error.get("msg", "invalid")
        if len(loc) <= 1:
            form_errors.append(message)
        else:
            field_errors.setdefault(_field_name(loc), []).append(message)
    return {"error": {"form_errors": form_errors, "field_errors": field_errors}}


async def novafolio_error_handler(request: Request, exc: NovaFolioError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content=validation_payload(exc.errors()))


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(NovaFolioError, novafolio_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
