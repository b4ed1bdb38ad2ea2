import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1 import api_router
from app.core.config import settings
from app.core.errors import CouponError
from app.core.logging_config import configure_logging, request_id_ctx_var
from app.core.sentry import init_sentry
from app.core.startup_checks import validate_production_settings
from app.db.session import init_models
from app.middleware import RequestLoggingMiddleware
from app.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, detail, code: str | None) -> JSONResponse:
    payload = ErrorResponse(detail=detail, code=code, request_id=request_id_ctx_var.get())
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload.model_dump()))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    validate_production_settings()
    if settings.auto_create_tables:
        await init_models()
    yield


def get_application() -> FastAPI:
    configure_logging(settings.log_json, settings.log_level)
    init_sentry()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        openapi_tags=[{"name": "coupons", "description": "Discount coupon lifecycle"}],
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(api_router, prefix="/api/v1")

    @app.exception_handler(CouponError)
    async def coupon_error_handler(request: Request, exc: CouponError):
        logger.info("coupon_error", extra={"error_code": exc.code, "path": request.url.path})
        return _error_response(exc.status_code, exc.detail, exc.code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, exc.detail, None)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error_response(status.HTTP_400_BAD_REQUEST, jsonable_encoder(exc.errors()), "validation_error")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error", extra={"path": request.url.path})
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "internal_error")

    return app


app = get_application()
