"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging import setup_logging
from app.api import health, vapi
from app.services.outbound.errors import OutboundError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    if not settings.vapi_api_key:
        logger.warning("[STARTUP] Missing VAPI_API_KEY - outbound endpoints disabled")
    logger.info(f"[STARTUP] Voice assistant API ready - env: {settings.app_env}")
    yield


app = FastAPI(
    title="Voice Assistant Demo",
    description="Voice assistant demo backend proxying outbound calls to Vapi",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(OutboundError)
async def handle_outbound_error(request: Request, exc: OutboundError):
    """Map outbound call failures to JSON error responses."""
    logger.warning(
        f"[API] {type(exc).__name__} on {request.url.path} - {exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
):
    """Report unparseable request bodies as invalid payloads."""
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid payload",
            "details": {
                "formErrors": [error["msg"] for error in exc.errors()],
                "fieldErrors": {},
            },
        },
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    """Last-resort handler for unhandled errors."""
    logger.error(
        f"[API] Unhandled error on {request.url.path} - "
        f"Error: {type(exc).__name__}: {str(exc)}",
        exc_info=exc,
    )
    message = str(exc) if settings.is_development else "Internal Server Error"
    return JSONResponse(status_code=500, content={"error": message})


# Include routers (must be before the /api fallback to take precedence)
app.include_router(health.router, tags=["health"])
app.include_router(vapi.router, tags=["vapi"])


@app.api_route(
    "/api/{path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def api_not_found(path: str):
    """Unknown API routes."""
    return JSONResponse(status_code=404, content={"error": "Not Found"})
