"""
Health check endpoints.
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from api.dependencies import get_settings
from api.models import HealthResponse
from beadgraph import __version__
from beadgraph.config.settings import Settings

router = APIRouter(tags=["health"])


@router.get("/", response_model=Dict[str, Any])
async def root():
    """Root endpoint - API information"""
    return {
        "name": "beadgraph API",
        "version": __version__,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "insights": "/api/v1/insights",
            "triage": "/api/v1/triage",
            "graph": "/api/v1/graph",
        },
    }


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)):
    """Reports whether the API is up and the issue file is present."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
        beads_file=settings.beads_file,
        source_present=os.path.isfile(settings.beads_file),
    )
