"""
Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from fintrack import __version__
from fintrack.config import get_settings
from fintrack.api import router as api_router
from fintrack.db.database import init_db

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.app_name} started ({settings.app_env})")
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Personal finance tracking: investments, deposits, loans and budgets",
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": __version__}


def run():
    """Serve the API with uvicorn using configured host and port."""
    import uvicorn

    uvicorn.run(
        "fintrack.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
