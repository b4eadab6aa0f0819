"""
Vibe Relay API - Main application entry point.
"""
import time
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.asgi import SentryAsgiMiddleware
from structlog.contextvars import bind_contextvars, clear_contextvars

from app.api.router import api_router
from app.core.config import settings
from app.core.exceptions import RelayException, StateMismatchError
from app.core.logging import get_logger, log_error_details, log_request_details, setup_logging
from app.services.oauth import invalid_state_response

# Setup logging
setup_logging()
logger = get_logger(__name__)


# Initialize Sentry if configured
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT or settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    """
    logger.info(
        "Starting Vibe Relay API",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    if settings.ai_api_key:
        logger.info("AI service configured", text_model=settings.AI_MODEL_TEXT)
    else:
        logger.warning("Gemini API key not configured. AI features will be disabled.")

    for provider in ("spotify", "google"):
        if not settings.oauth_provider_configured(provider):
            logger.warning("OAuth provider not configured", provider=provider)

    yield

    logger.info("Shutting down Vibe Relay API")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url=None,
    openapi_url="/openapi.json" if not settings.is_production else None,
    lifespan=lifespan,
)


# Reject oversized bodies before they are read
@app.middleware("http")
async def limit_request_body(request: Request, call_next):
    """Enforce MAX_REQUEST_BODY_MB using the declared Content-Length."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit():
        if int(content_length) > settings.max_request_body_bytes:
            logger.warning(
                "Request body too large",
                path=request.url.path,
                content_length=int(content_length),
            )
            return JSONResponse(status_code=413, content={"error": "Request body too large."})
    return await call_next(request)


# Add request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing information."""
    start_time = time.time()

    logger.info(
        "Request started",
        **log_request_details(
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        ),
    )

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "Request completed",
        status_code=response.status_code,
        duration_ms=round(duration_ms, 2),
    )

    return response


# Add request ID middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add unique request ID to each request."""
    request_id = request.headers.get("X-Request-ID", str(time.time_ns()))

    # Bind request ID to logging context
    clear_contextvars()
    bind_contextvars(request_id=request_id)

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# Outermost of the app middleware; 413 responses carry CORS headers too
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add Sentry middleware if configured
if settings.SENTRY_DSN:
    app.add_middleware(SentryAsgiMiddleware)


@app.exception_handler(StateMismatchError)
async def state_mismatch_handler(request: Request, exc: StateMismatchError):
    """Callbacks are answered with HTML, so the rejection is a page too."""
    logger.warning("OAuth state rejected", path=request.url.path, **exc.details)
    return invalid_state_response()


@app.exception_handler(RelayException)
async def relay_exception_handler(request: Request, exc: RelayException):
    """Map relay errors to their status code and a short message."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "Request failed",
        status_code=exc.status_code,
        path=request.url.path,
        **log_error_details(exc, **exc.details),
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Reject malformed requests with 400 rather than 422."""
    errors = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]
    logger.warning("Request validation failed", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=400,
        content={"error": "Missing parameters.", "details": errors},
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions."""
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        path=request.url.path,
        method=request.method,
    )

    # Don't expose internal errors in production
    if settings.is_production:
        return JSONResponse(
            status_code=500,
            content={"error": "An internal error occurred"},
        )

    return JSONResponse(
        status_code=500,
        content={"error": str(exc)},
    )


# Include API router
app.include_router(api_router)
