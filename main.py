"""
PayPal Dashboard API - Main Application Entry Point

This module initializes the FastAPI application and sets up the core routing.
Authenticated users store PayPal API credentials, check balances and recent
transactions, create payments and browse their local transaction log.
"""

import structlog
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from api import routes
from api.middleware import log_api_entry
from core.dependencies import clear_settings, get_settings, init_settings
from core.errors import AppError
from core.logging import configure_logging
from core.metrics import add_metrics_auth_middleware, init_metrics
from core.settings import Settings
from core.tracing import init_tracer
from db.session import init_db

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application startup and shutdown events."""
    # Startup: fails here in production when secrets are missing
    init_settings()
    settings = get_settings()

    init_tracer(settings.OTEL_SERVICE_NAME, settings.OTEL_EXPORTER_OTLP_ENDPOINT)
    init_db(settings)
    log.info(
        "app.started",
        app_name=settings.APP_NAME,
        environment=settings.ENVIRONMENT,
        upstream_failure_policy=settings.PAYPAL_UPSTREAM_FAILURE,
    )

    yield
    # Shutdown
    clear_settings()


app = FastAPI(
    title="PayPal Dashboard API",
    description="""
    ## PayPal Integration Dashboard

    Backend for a small business dashboard on top of the PayPal REST API.

    ### Key Features:
    - **Credential Vault**: PayPal client id/secret pairs encrypted at rest (AES-256-CBC)
    - **Balances**: Account balances plus up to 31 days of recent transactions
    - **Payments**: Create PayPal payments and hand back the approval link
    - **Audit Log**: Every balance check and payment is recorded per user
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Initialize FastAPI instrumentation
FastAPIInstrumentor.instrument_app(app)

# Initialize Prometheus metrics
init_metrics(app)

# Add metrics authentication middleware (for production)
add_metrics_auth_middleware(app)

app.middleware("http")(log_api_entry)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        log.error("api.error", path=request.url.path, code=exc.code, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    log.error("api.unhandled_error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc)},
    )


@app.get("/")
async def root():
    """Root endpoint providing API information."""
    return {
        "name": "PayPal Dashboard API",
        "version": "1.0.0",
        "api_documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_spec": "/openapi.json",
        },
        "endpoints": {
            "auth": "/auth/register, /auth/login",
            "credentials": "/paypal/credentials",
            "balance": "/paypal/balance",
            "payment": "/paypal/payment",
            "history": "/transaction/history",
            "profile": "/user/profile",
            "health": "/health - Health check endpoint",
            "metrics": "/metrics - Prometheus metrics (requires auth)",
        },
    }


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    """Health check endpoint alias."""
    return await health_check(settings)


@app.get("/healthz")
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint to verify API status."""
    db_type = (
        "PostgreSQL" if settings.DATABASE_URL.startswith("postgresql") else "SQLite"
    )
    return {
        "status": "ok",
        "app_name": settings.APP_NAME,
        "database": db_type,
        "environment": settings.ENVIRONMENT,
    }


app.include_router(routes.router)


def main():
    configure_logging()
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
