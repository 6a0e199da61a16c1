"""
Lead CRM API - Main Application
FastAPI application with CORS, error handling, middleware, and logging
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from leadcrm.api.routes import (
    auth_router,
    leads_router,
    site_visits_router,
    tasks_router,
    users_router,
    dashboard_router
)
from leadcrm.core.config import settings
from leadcrm.core.exceptions import (
    CRMError,
    EmptyResultError,
    NotFoundError,
    TwoPhaseWriteError,
    ValidationFailed,
)
from leadcrm.database import close_db_connection, init_db, test_connection


# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ==================== STARTUP & SHUTDOWN ====================


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 70)
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
    logger.info("=" * 70)
    logger.info(f"Environment: {'Production' if not settings.DEBUG else 'Development'}")

    if settings.TESTING:
        logger.info("[TEST] Skipping database bootstrap")
        yield
        return

    # Database problems are logged, not fatal; /health reports them
    if test_connection():
        logger.info("[OK] Database connection successful!")
    else:
        logger.warning("[WARN] Database connection failed - continuing in degraded mode")

    if init_db():
        logger.info("[OK] Database initialization complete!")
    else:
        logger.warning("[WARN] Database init returned False - tables may not exist")

    logger.info("[OK] Application startup complete!")
    yield

    logger.info("Shutting down application...")
    close_db_connection()
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.PROJECT_DESCRIPTION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)


# ==================== MIDDLEWARE ====================


app.add_middleware(GZipMiddleware, minimum_size=1000)

allowed_origins = list(dict.fromkeys([settings.FRONTEND_URL, *settings.ALLOWED_ORIGINS]))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD"],
    allow_headers=["*"],
    expose_headers=["Content-Length", "Content-Disposition", "X-Total-Count"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests"""
    # Skip logging for health checks
    if request.url.path in ["/health", "/status"]:
        return await call_next(request)

    start_time = datetime.now(timezone.utc)
    client = request.client.host if request.client else "-"
    logger.info(f">> {request.method} {request.url.path} - {client}")

    try:
        response = await call_next(request)
        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.info(f"<< {request.method} {request.url.path} - {response.status_code} ({duration:.2f}s)")
        return response
    except Exception as e:
        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.error(f"[ERROR] {request.method} {request.url.path} - Error: {str(e)} ({duration:.2f}s)")
        raise


# ==================== ROUTERS ====================


app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(leads_router, prefix="/api/leads", tags=["Leads"])
app.include_router(site_visits_router, prefix="/api", tags=["Site Visits"])
app.include_router(tasks_router, prefix="/api/tasks", tags=["Tasks"])
app.include_router(users_router, prefix="/api/users", tags=["Users"])
app.include_router(dashboard_router, prefix="/api/dashboard", tags=["Dashboard"])


# ==================== ERROR HANDLERS ====================


_CRM_ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationFailed: status.HTTP_400_BAD_REQUEST,
    EmptyResultError: status.HTTP_400_BAD_REQUEST,
    TwoPhaseWriteError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@app.exception_handler(CRMError)
async def crm_exception_handler(request: Request, exc: CRMError):
    """Controlled failures raised by the services"""
    status_code = next(
        (code for cls, code in _CRM_ERROR_STATUS.items() if isinstance(exc, cls)),
        status.HTTP_400_BAD_REQUEST,
    )
    log = logger.error if status_code >= 500 else logger.info
    log(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "detail": exc.message,
            "error_code": exc.error_code,
            "details": jsonable_encoder(exc.details),
        }
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed response"""
    logger.warning(f"Validation error on {request.url}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "detail": "Validation error",
            "errors": jsonable_encoder(exc.errors())
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.error(f"Unhandled exception: {exc}\n{traceback.format_exc()}")

    # Don't expose internal errors in production
    error_message = str(exc) if settings.DEBUG else "Internal server error"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "detail": error_message,
            "timestamp": _now()
        }
    )


# ==================== HEALTH & STATUS ENDPOINTS ====================


@app.get("/", tags=["System"])
async def root():
    """Root endpoint - API information"""
    return {
        "success": True,
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "app_name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": "/api/docs",
        "status": "operational",
        "environment": "production" if not settings.DEBUG else "development"
    }


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint for monitoring"""
    if test_connection():
        return {
            "success": True,
            "status": "healthy",
            "database": "connected",
            "timestamp": _now(),
        }
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "success": False,
            "status": "degraded",
            "database": "disconnected",
            "timestamp": _now()
        }
    )


@app.get("/status", tags=["System"])
async def status_check():
    """Detailed status check"""
    return {
        "success": True,
        "status": "operational",
        "timestamp": _now(),
        "service": {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "environment": "production" if not settings.DEBUG else "development",
            "debug": settings.DEBUG
        },
        "features": {
            "authentication": "enabled",
            "role_based_access": "enabled",
            "bulk_import": "enabled (.xlsx)",
            "csv_export": "enabled"
        }
    }


@app.get("/api/version", tags=["System"])
async def get_version():
    """Get API version information"""
    return {
        "success": True,
        "api_version": settings.VERSION,
        "app_name": settings.PROJECT_NAME,
    }
