"""
FastAPI service for admin recruiter imports.

Exposes the bulk recruiter import endpoint and its run history behind an
admin bearer token, plus an unauthenticated health check.
"""

import logging
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .models import HealthResponse
from .config import settings, validate_config_on_startup
from .routes import recruiter_import_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

# Validate configuration at startup
validate_config_on_startup()

app = FastAPI(title="Recruiter Import Service", version=__version__)

# Configure CORS using validated settings
if settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

app.include_router(recruiter_import_router)


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(status="healthy", timestamp=datetime.utcnow(), version=__version__)
