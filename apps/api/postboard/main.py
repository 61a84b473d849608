"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from postboard.core.config import get_settings
from postboard.errors import ApiError, ValidationError
from postboard.repositories.memory import InMemoryStore
from postboard.routes import auth_router, private_posts_router, public_posts_router
from postboard.schemas.envelope import ErrorObject, to_error_envelope
from postboard.seed import seed_from_settings

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES: dict[int, str] = {
    404: "not_found",
    405: "method_not_allowed",
}


def _error_json(status_code: int, code: str, message: str, details: dict | None = None) -> JSONResponse:
    payload = ErrorObject(status=str(status_code), code=code, message=message, details=details)
    return JSONResponse(
        status_code=status_code,
        content=to_error_envelope(payload).model_dump(mode="json", exclude_none=True),
    )


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    seed_from_settings(app.state.store, get_settings())
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Postboard API", version="1.0.0", lifespan=_lifespan)
    app.state.store = InMemoryStore()

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.envelope().model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = [".".join(str(part) for part in error.get("loc", ())) for error in exc.errors()]
        error = ValidationError("Invalid request payload", details={"errors": fields})
        logger.info(
            "request.invalid method=%s path=%s fields=%s",
            request.method,
            request.url.path,
            ",".join(fields),
        )
        return JSONResponse(
            status_code=error.status_code,
            content=error.envelope().model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(_, exc: StarletteHTTPException) -> JSONResponse:
        code = _HTTP_ERROR_CODES.get(exc.status_code, "http_error")
        return _error_json(exc.status_code, code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request.failed method=%s path=%s", request.method, request.url.path, exc_info=exc)
        error = ApiError()
        return JSONResponse(
            status_code=error.status_code,
            content=error.envelope().model_dump(mode="json", exclude_none=True),
        )

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "service": "postboard"}

    api_prefix = "/api/v1"
    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(public_posts_router, prefix=api_prefix)
    app.include_router(private_posts_router, prefix=api_prefix)

    return app


app = create_app()
