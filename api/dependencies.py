"""
FastAPI dependency injection for API routes.

Provides:
  - ``get_settings``: settings from ``BV_CONFIG`` (YAML, optional) and the
    ``BV_*`` environment variables
  - ``get_analysis_service``: request-scoped AnalysisService whose container
    is closed after the request
"""

import os
from typing import Generator

from fastapi import Depends

from beadgraph.application.container import Container
from beadgraph.application.services.analysis_service import AnalysisService
from beadgraph.config.settings import Settings


def get_settings() -> Settings:
    return Settings.load(os.environ.get("BV_CONFIG") or None)


def get_analysis_service(
    settings: Settings = Depends(get_settings),
) -> Generator[AnalysisService, None, None]:
    """
    Request-scoped analysis service.

    Usage in an endpoint::

        @router.get("/example")
        async def example(service: AnalysisService = Depends(get_analysis_service)):
            return service.insights()
    """
    container = Container.from_settings(settings)
    try:
        yield container.analysis_service()
    finally:
        container.close()
