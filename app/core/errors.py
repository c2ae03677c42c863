import datetime as dt
import logging
import uuid

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import InventoryException

logger = logging.getLogger("app.errors")


def error_body(request: Request, status: int, error: str, message: str, details=None) -> dict:
    return {
        "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
        "status": status,
        "error": error,
        "message": message,
        "details": details,
        "path": request.url.path,
    }


def _field_name(loc: tuple) -> str:
    # Drop the "body"/"query"/"path" marker FastAPI puts first
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


def register_error_handlers(app):
    @app.exception_handler(InventoryException)
    async def inventory_exception(request: Request, exc: InventoryException):
        logger.info("Request rejected code=%s path=%s: %s", exc.code, request.url.path, exc.message)
        body = error_body(request, **exc.to_dict())
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def request_validation(request: Request, exc: RequestValidationError):
        details = {_field_name(tuple(err.get("loc", ()))): err.get("msg", "Invalid value") for err in exc.errors()}
        body = error_body(request, 400, "Bad Request", "Validation failed", details)
        return JSONResponse(status_code=400, content=body)

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception):  # noqa: BLE001
        correlation_id = uuid.uuid4().hex
        logger.exception("Unhandled error cid=%s path=%s method=%s", correlation_id, request.url.path, request.method)
        body = error_body(
            request,
            500,
            "Internal Server Error",
            "An unexpected error occurred",
            {"cid": correlation_id},
        )
        return JSONResponse(status_code=500, content=body)

    return app
