from __future__ import annotations

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware

from vdfy.api import __version__
from vdfy.api.routers import analysis_router, links_router, meta_router, uploads_router, videos_router
from vdfy.core.config import Settings, get_settings
from vdfy.core.errors import AppError
from vdfy.core.handlers import handle_app_error, handle_unexpected_error, handle_validation_error
from vdfy.core.lifespan import lifespan
from vdfy.core.logging import setup_logging
from vdfy.core.middleware import RateLimiter, log_requests
from vdfy.services.container import ServiceContainer


def create_app(settings: Settings | None = None, services: ServiceContainer | None = None) -> FastAPI:
    """
    Application factory for creating FastAPI instances.

    Args:
        settings: Optional settings override. If None, loads from environment.
        services: Optional prebuilt service container. When given, the lifespan
                  uses it as-is instead of connecting to Supabase, Groq and
                  OpenRouter. Tests pass a container of fakes here.
    """
    if settings is None:
        settings = get_settings()

    middleware: list[Middleware] = []
    if settings.cors_allow_origins:
        middleware.append(
            Middleware(
                CORSMiddleware,
                allow_origins=settings.cors_allow_origins,
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            )
        )

    app = FastAPI(
        title="VDFY",
        description="Screen recording intake, transcription and sharing service",
        version=__version__,
        middleware=middleware,
        lifespan=lifespan,
    )
    app.include_router(meta_router)
    app.include_router(uploads_router)
    app.include_router(videos_router)
    app.include_router(links_router)
    app.include_router(analysis_router)
    app.state.settings = settings
    app.state.services = services
    app.state.rate_limiter = RateLimiter(settings.rate_limit) if settings.rate_limit > 0 else None

    app.add_middleware(BaseHTTPMiddleware, dispatch=log_requests)
    app.add_exception_handler(AppError, handle_app_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app


load_dotenv()
setup_logging()

# Default app instance for uvicorn (uvicorn vdfy.api.app:app)
app = create_app()
