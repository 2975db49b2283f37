"""
GalleryHQ Messaging API - FastAPI application entry point.
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .database import engine, Base
from .limiter import limiter
from .logging_config import api_logger, db_logger
from .messaging.errors import MessagingError
from .middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware
from .responses import api_exception_handler
from .routes import admin_router, auth_router, messages_router
from .worker.retention import get_retention_worker

settings = get_settings()

# Create tables (in production, use migrations instead)
Base.metadata.create_all(bind=engine)
db_logger.debug("Database tables ensured", url=engine.url.render_as_string(hide_password=True))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown"""
    auto_sweeper = os.environ.get("GALLERYHQ_AUTO_SWEEPER", "").lower() in ("1", "true", "yes")

    if auto_sweeper:
        get_retention_worker().start_background()

    yield  # App is running

    worker = get_retention_worker()
    if worker.running:
        worker.stop()
        api_logger.info("Stopped retention sweeper on shutdown")


app = FastAPI(
    title=settings.app_name,
    description="Direct messaging with moderation, read tracking and per-participant deletion",
    version="1.0.0",
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Error envelope for domain, HTTP and validation errors
app.add_exception_handler(MessagingError, api_exception_handler)
app.add_exception_handler(StarletteHTTPException, api_exception_handler)
app.add_exception_handler(RequestValidationError, api_exception_handler)
app.add_exception_handler(Exception, api_exception_handler)

app.add_middleware(SecurityHeadersMiddleware)

# Request logging middleware (only in debug mode)
if settings.debug:
    app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    max_age=3600,  # Cache preflight requests for 1 hour
)

# Routes
app.include_router(auth_router)
app.include_router(messages_router)
app.include_router(admin_router)


@app.get("/api/health")
def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "version": "1.0.0",
        "retention_sweeper": get_retention_worker().get_status(),
    }
