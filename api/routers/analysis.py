"""
Analysis endpoints: insights, triage and the dependency graph.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_analysis_service
from api.models import TriageResponse
from beadgraph.adapters.outbound.graph_formatter import FORMATS
from beadgraph.application.services.analysis_service import AnalysisService
from beadgraph.core.exceptions import IssueSourceNotFoundError

router = APIRouter(prefix="/api/v1", tags=["analysis"])
logger = logging.getLogger(__name__)


def _not_found(exc: IssueSourceNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(exc))


@router.get("/insights", response_model=Dict[str, Any])
async def get_insights(service: AnalysisService = Depends(get_analysis_service)):
    """Top issues per metric family, cycles and density."""
    try:
        return service.insights()
    except IssueSourceNotFoundError as e:
        raise _not_found(e)
    except Exception as e:
        logger.error(f"Insights failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Analysis failed: {str(e)}")


@router.get("/triage", response_model=TriageResponse)
async def get_triage(service: AnalysisService = Depends(get_analysis_service)):
    """Ranked recommendations, quick wins, blockers to clear and project health."""
    try:
        data = service.triage()
    except IssueSourceNotFoundError as e:
        raise _not_found(e)
    except Exception as e:
        logger.error(f"Triage failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Triage failed: {str(e)}")
    return TriageResponse(
        generated_at=data["generated_at"],
        data_hash=data["data_hash"],
        **data["triage"],
    )


@router.get("/graph", response_model=Dict[str, Any])
async def get_graph(
    format: str = Query("json", description=f"One of: {', '.join(FORMATS)}"),
    root: Optional[str] = Query(None, description="Restrict to this issue's neighbourhood"),
    depth: int = Query(1, ge=0, description="Hops around root"),
    service: AnalysisService = Depends(get_analysis_service),
):
    """Dependency graph as JSON adjacency, DOT or Mermaid."""
    if format not in FORMATS:
        raise HTTPException(status_code=400, detail=f"Unknown format '{format}'")
    try:
        return service.graph(fmt=format, root=root, depth=depth)
    except IssueSourceNotFoundError as e:
        raise _not_found(e)
    except Exception as e:
        logger.error(f"Graph export failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Graph export failed: {str(e)}")
