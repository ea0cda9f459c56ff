"""FastAPI application and lifecycle."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from src.price_editor.api.http.app_data import ApplicationDependencies
from src.price_editor.api.http.envelope import error_response, failure
from src.price_editor.api.http.middleware.limiter import (
    close_rate_limiter,
    configure_rate_limiter,
)
from src.price_editor.api.http.routers.ajax import router as ajax_router
from src.price_editor.api.http.routers.editor import router as editor_router
from src.price_editor.api.http.routers.health import router as health_router
from src.price_editor.api.http.routers.products import router as products_router
from src.price_editor.api.http.routers.settings import router as settings_router
from src.price_editor.api.utils.app_startup import configure_logging
from src.price_editor.core.errors import PriceEditorError
from src.price_editor.core.security import get_client_ip
from src.price_editor.core.services import (
    DbSessionService,
    ProductService,
    RedisService,
    WooCommerceClient,
    WooCommerceProductStore,
    WordPressIdentityProvider,
)
from src.price_editor.runtime.context import get_config
from src.price_editor.runtime.init_db import init_db

configure_logging()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title="Price Editor",
    lifespan=lifespan,
    docs_url=None if get_config().app.environment == "production" else "/docs",
    redoc_url=None,
)

app.add_middleware(SecurityHeadersMiddleware)

__all__ = ["app", "startup", "shutdown"]

if get_config().app.environment == "production" and "*" in get_config().app.cors.origins:
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().app.cors.origins,
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    # Query strings may carry nonces; only the path is logged.
    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": get_client_ip(request) or "unknown",
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
                user_id=getattr(request.state, "user_id", None),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return failure(
                PriceEditorError.default_message,
                500,
                PriceEditorError.code,
                request_id,
                headers={"X-Request-ID": request_id},
            )


@app.exception_handler(PriceEditorError)
async def handle_editor_error(request: Request, exc: PriceEditorError):
    level = "ERROR" if exc.status_code >= 500 else "WARNING"
    logger.bind(
        status_code=exc.status_code, code=exc.code, **exc.context
    ).log(level, "request.rejected: {}", exc.message)
    return error_response(exc, getattr(request.state, "request_id", None))


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid parameter: {location}" if location else "Invalid request."
    logger.bind(status_code=400, errors=len(errors)).warning("request.invalid")
    return failure(
        message, 400, "invalid_argument", getattr(request.state, "request_id", None)
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException):
    code = "rest_no_route" if exc.status_code == 404 else "http_error"
    return failure(
        str(exc.detail),
        exc.status_code,
        code,
        getattr(request.state, "request_id", None),
        headers=getattr(exc, "headers", None),
    )


api_prefix = get_config().app.api_prefix.rstrip("/")
app.include_router(health_router)
app.include_router(products_router, prefix=api_prefix)
app.include_router(settings_router, prefix=api_prefix)
app.include_router(editor_router, prefix=api_prefix)
app.include_router(ajax_router, prefix=api_prefix)


async def startup() -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    woo_client = WooCommerceClient(config.host)
    product_store = WooCommerceProductStore(woo_client)
    database_service = DbSessionService()
    redis_service = RedisService()

    app.state.app_dependencies = ApplicationDependencies(
        product_store=product_store,
        product_service=ProductService(
            product_store,
            cache_duration=config.editor.cache_duration,
            edit_capability=config.editor.edit_capability,
        ),
        identity_provider=WordPressIdentityProvider(
            woo_client, ttl_seconds=config.host.identity_cache_ttl
        ),
        database_service=database_service,
        redis_service=redis_service,
        woo_client=woo_client,
    )

    init_db(database_service)
    configure_rate_limiter(redis_client=redis_service.get_client())


async def shutdown() -> None:
    logger.info("Shutting down application")
    await close_rate_limiter()

    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is None:
        return
    if app_dependencies.woo_client is not None:
        await app_dependencies.woo_client.aclose()
    if app_dependencies.redis_service is not None:
        await app_dependencies.redis_service.close()
    app_dependencies.database_service.dispose()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,
    )
