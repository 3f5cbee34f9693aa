from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from pymongo.errors import PyMongoError

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.database import db_manager
from app.core.middleware import setup_error_handlers, setup_redirects
from app.core.logging import setup_logging
from app.repositories.indexes import ensure_indexes
from app.services.auth import ensure_admin_user
from app.services.permissions import PermissionService

# Setup logging
logger = setup_logging(
    level=settings.LOG_LEVEL,
    log_file=Path("logs/app.log") if settings.LOG_TO_FILE else None
)

# Initialize FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Enable GZip compression for responses
app.add_middleware(GZipMiddleware, minimum_size=1024)

# Stored URL redirects for renamed products, categories and pages
if settings.REDIRECTS_ENABLED:
    setup_redirects(app)

# Setup error handlers
setup_error_handlers(app)


# Health check endpoint
@app.get("/api/health")
def health():
    return {
        "status": "ok",
        "version": settings.VERSION,
    }


@app.on_event("startup")
def startup():
    """
    Startup tasks: indexes, permission catalogue, bootstrap admin
    """
    try:
        ensure_indexes()
        logger.info("Successfully created MongoDB indexes")
    except PyMongoError as e:
        logger.error(f"Failed to create indexes: {str(e)}")
    PermissionService().initialize_default_permissions()
    admin = ensure_admin_user()
    if admin:
        logger.info(f"Bootstrap admin available: {admin['email']}")


@app.on_event("shutdown")
def shutdown():
    db_manager.close()


# Mount API routes
app.include_router(api_router)
