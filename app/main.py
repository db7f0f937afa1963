"""Application entrypoint for the ClientHub pipeline API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.v1._authz import map_domain_error
from app.api.v1.router import get_api_router
from app.core.config import get_config
from app.core.exceptions import PortalException
from app.core.startup import bootstrap
from app.schemas.common import ErrorEnvelope

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error_code: str, detail: str) -> JSONResponse:
    body = ErrorEnvelope(error_code=error_code, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app() -> FastAPI:
    cfg = get_config()
    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION)
    app.include_router(get_api_router())

    @app.exception_handler(PortalException)
    async def portal_exception_handler(request: Request, exc: PortalException) -> JSONResponse:
        status_code = map_domain_error(exc)
        logger.warning(
            "api.request.failed",
            extra={
                "event": "api.request.failed",
                "path": request.url.path,
                "error_code": exc.error_code,
                "status_code": status_code,
            },
        )
        return _error_response(status_code, exc.error_code, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        detail = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in exc.errors()
        )
        return _error_response(400, "validation_error", detail or "Invalid request.")

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


# Expose ASGI app for `uvicorn app.main:app`.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    bootstrap()
    cfg = get_config()
    uvicorn.run("app.main:app", host=cfg.API_HOST, port=cfg.API_PORT)
