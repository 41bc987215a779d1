"""
FastAPI application entry point.

Main application setup with CORS, middleware, and route registration.
"""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.clients import ServiceClients
from shared.config import get_settings
from shared.errors import PipelineError, ValidationError, error_code_for
from shared.logging import configure_logging, get_logger
from shared.validation import format_validation_errors

logger = get_logger("api_gateway.main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build client handles once per process and close them on shutdown."""
    configure_logging(settings.log_level, settings.log_format)
    app.state.clients = ServiceClients.from_settings(settings)
    logger.info(
        "Product video API started",
        extra={"environment": settings.environment, "output_path": str(settings.resolve_output_path())}
    )
    try:
        yield
    finally:
        await app.state.clients.aclose()
        logger.info("Product video API stopped")


# Create FastAPI app
app = FastAPI(
    title="Product Video API",
    description="Turns a product photo into a narrated marketing video",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    allow_credentials=True,
    max_age=3600
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add unique request ID to each request."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger.info(
        "Request started",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path
        }
    )

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    return response


def _error_response(request: Request, status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "code": code,
            "request_id": getattr(request.state, "request_id", None)
        }
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies."""
    return _error_response(request, 400, format_validation_errors(exc.errors()), "VALIDATION_ERROR")


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    return _error_response(request, 400, exc.message, error_code_for(exc))


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    """Handle pipeline errors."""
    logger.error(
        f"Request failed: {exc.message}",
        exc_info=exc,
        extra={"request_id": getattr(request.state, "request_id", None)}
    )
    return _error_response(request, 500, exc.message, error_code_for(exc))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={"request_id": getattr(request.state, "request_id", None)}
    )
    return _error_response(request, 500, "Internal server error", "INTERNAL_ERROR")


# Register routes
from api_gateway.routes import generation, health, providers  # noqa: E402

app.include_router(generation.router, prefix="/api/v1", tags=["generation"])
app.include_router(providers.router, prefix="/api/v1", tags=["providers"])
app.include_router(health.router, prefix="/api/v1", tags=["health"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Product Video API", "version": "1.0.0"}
