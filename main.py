"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.config import settings
from src.core.database import create_tables
from src.core.exceptions import register_exception_handlers
from src.core.logging import configure_logging
from src.core.middleware import AccessLogMiddleware, SecurityHeadersMiddleware
from src.modules.products.router import router as products_router

CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
CORS_ALLOWED_HEADERS = [
    "Content-Type",
    "Content-Length",
    "Accept-Encoding",
    "Authorization",
    "Accept",
    "Origin",
    "Cache-Control",
    "X-Requested-With",
]


@asynccontextmanager
async def lifespan(_: FastAPI):
    await create_tables()
    yield


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version="0.1.0",
        lifespan=lifespan,
    )
    register_exception_handlers(app)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=CORS_ALLOWED_METHODS,
        allow_headers=CORS_ALLOWED_HEADERS,
    )
    app.add_middleware(AccessLogMiddleware)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(products_router)

    return app


app = create_app()
