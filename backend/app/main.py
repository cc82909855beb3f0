"""
Leave Management API

Main FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, settings as default_settings
from app.logging_config import configure_logging
from app.middleware import ErrorHandlerMiddleware
from app.routes import admin, balances, leaves
from app.services.auth import AuthProvider, StaticTokenAuthProvider
from app.services.document_storage import DocumentStorage
from app.services.leave_repository import InMemoryLeaveRepository, LeaveRepository
from app.services.leave_service import LeaveService
from app.services.rate_limit_janitor import RateLimitJanitor
from app.services.rate_limiter import RateLimiter

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    app.state.janitor.start()
    yield
    # Shutdown
    app.state.janitor.stop()


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[LeaveRepository] = None,
    auth_provider: Optional[AuthProvider] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    """
    Build the application and its long-lived components.

    Every component is created here and stored on app.state, so separate
    apps (e.g. one per test) never share rate limit or leave state.

    Args:
        settings: Configuration (defaults to environment-derived settings)
        repository: Leave data backend (defaults to an in-memory repository)
        auth_provider: Token resolver (defaults to the AUTH_TOKENS table)
        rate_limiter: Limiter instance (defaults to a fresh limiter)

    Returns:
        FastAPI: Configured application
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Employee leave requests, approvals and balances",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    repository = repository or InMemoryLeaveRepository(seed_leave_types=settings.SEED_LEAVE_TYPES)
    limiter = rate_limiter or RateLimiter()

    app.state.settings = settings
    app.state.rate_limiter = limiter
    app.state.janitor = RateLimitJanitor(
        limiter,
        interval_seconds=settings.RATE_LIMIT_CLEANUP_INTERVAL_SECONDS,
    )
    app.state.auth_provider = auth_provider or StaticTokenAuthProvider(settings.AUTH_TOKENS)
    app.state.leave_service = LeaveService(repository)
    app.state.leave_service.bootstrap_admins(settings.BOOTSTRAP_ADMINS)
    app.state.document_storage = DocumentStorage(settings.STORAGE_PATH)

    # Error handling middleware
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS configuration (outermost)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
            "Retry-After",
        ],
    )

    # Register routers
    app.include_router(leaves.router, prefix="/api", tags=["Leaves"])
    app.include_router(balances.router, prefix="/api", tags=["Balances"])
    app.include_router(admin.router, prefix="/api", tags=["Admin"])

    @app.get("/")
    async def root():
        """Health check endpoint"""
        return {
            "status": "ok",
            "service": settings.APP_NAME,
            "version": VERSION,
        }

    @app.get("/health")
    async def health_check(request: Request):
        """
        Detailed health check endpoint.

        Returns service health status including the rate limit janitor,
        for monitoring and deployment health checks.
        """
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": VERSION,
            "rateLimiter": request.app.state.janitor.status(),
        }

    return app


app = create_app()
