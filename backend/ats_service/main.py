"""
FastAPI application entry point for the ATS jobs service.

This is the main app that:
- Initializes FastAPI with CORS
- Registers the v2 jobs router and error envelope handlers
- Provides health check endpoint
- Sets up database connection lifecycle
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ats_service.config import settings
from ats_service import database
from ats_service.api import jobs
from ats_service.api.errors import register_exception_handlers

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    On startup: log configuration (engine connects lazily)
    On shutdown: close database connections gracefully
    """
    logger.info("Starting ATS jobs service...")
    logger.info(f"Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else 'configured'}")
    logger.info(f"Events mode: {settings.events_mode}")

    yield

    logger.info("Shutting down ATS jobs service...")
    await database.engine.dispose()


app = FastAPI(
    title="Splits Network ATS API",
    description="Jobs resource with role-scoped access control",
    version="2.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS
# Set ALLOWED_ORIGINS environment variable with comma-separated domains
allowed_origins = [
    "http://localhost:3000",  # Local development
]
if settings.allowed_origins:
    allowed_origins.extend(origin.strip() for origin in settings.allowed_origins.split(','))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return {
        "status": "healthy",
        "service": "ats-service",
        "version": "2.0.0",
    }


@app.get("/")
async def root():
    """API root with basic info."""
    return {
        "message": "Splits Network ATS API",
        "version": "2.0.0",
        "docs": "/docs",
        "health": "/health",
    }


# Register API routers
app.include_router(jobs.router, prefix="/api/v2/jobs", tags=["jobs"])
