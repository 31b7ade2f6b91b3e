"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from pathlib import Path
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import ValidationError as PydanticValidationError
import logging

from rentals_api.config import settings
from rentals_api.database import get_db, test_database_connection, close_db_connection
from rentals_api.routers import (
    auth_router,
    owners_router,
    admin_router,
    properties_router,
    reservations_router,
    catalog_router,
    upload_router
)
from rentals_api.utils.exceptions import APIException, ServiceUnavailableError
from rentals_api.services.error_handler import ErrorHandlerService
from rentals_api.middleware.validation import ValidationMiddleware

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    db_connected = await test_database_connection()
    if not db_connected:
        logger.error("Failed to connect to database on startup")

    yield

    # Shutdown
    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Seasonal rental listing API for property owners and administrators.

    ## Features

    * **Listings**: a property is written as one aggregate (pricing, location, images,
      amenities, classes, nearby places, apartments, house rules, payment methods)
    * **Catalog**: public search of active listings and homepage curation by property class
    * **Lookups**: amenities and property classes with soft deletion
    * **Availability & reservations**: calendars, stay pricing and a reservation workflow
    * **Uploads**: image upload to local storage served under `/uploads`

    ## Authentication

    Owners sign in at `/api/v1/auth/owners/login`, administrators at `/api/v1/auth/admin/login`.
    Send the returned token in the Authorization header as `Bearer <token>`.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Owner registration, login and token management"},
        {"name": "Owners", "description": "Owner profiles"},
        {"name": "Properties", "description": "Listings, availability and reservation requests"},
        {"name": "Reservations", "description": "Reservation workflow"},
        {"name": "Catalog", "description": "Amenities and property classes"},
        {"name": "Uploads", "description": "Image upload"},
        {"name": "Administration", "description": "Accounts, approval and debug endpoints"},
        {"name": "Health", "description": "System health endpoints"}
    ],
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Process-Time"],
)

# Add validation middleware
app.add_middleware(
    ValidationMiddleware,
    max_request_size=settings.max_request_size,
    enable_request_logging=not settings.is_testing
)

# Include API routers
app.include_router(auth_router, prefix=settings.api_v1_prefix)
app.include_router(owners_router, prefix=settings.api_v1_prefix)
app.include_router(admin_router, prefix=settings.api_v1_prefix)
app.include_router(properties_router, prefix=settings.api_v1_prefix)
app.include_router(reservations_router, prefix=settings.api_v1_prefix)
app.include_router(catalog_router, prefix=settings.api_v1_prefix)
app.include_router(upload_router, prefix=settings.api_v1_prefix)

# Uploaded images
Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
app.mount(settings.upload_url_prefix, StaticFiles(directory=settings.upload_dir), name="uploads")


# Global exception handlers using ErrorHandlerService
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Handle custom API exceptions with structured error responses."""
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors with detailed field information."""
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle database errors; integrity violations become conflicts."""
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with secure error responses."""
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    """Basic API information."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "healthy",
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_v1_prefix
    }


async def _check_database(db: AsyncSession) -> None:
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        raise ServiceUnavailableError("Database connection failed")


@app.get("/health", tags=["Health"])
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint with database connectivity test.
    Used by container health checks and load balancers.
    """
    await _check_database(db)
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected"
    }


@app.get("/health/db", tags=["Health"])
async def database_health_check(db: AsyncSession = Depends(get_db)):
    await _check_database(db)
    return {
        "status": "healthy",
        "database": "connected",
        "database_url": settings.database_url.split("@")[1] if "@" in settings.database_url else "hidden"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "rentals_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
