"""
Pydantic models for API responses.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
    beads_file: str
    source_present: bool = Field(..., description="Whether the issue file exists")


class RecommendationModel(BaseModel):
    id: str
    title: str
    status: str
    priority: int
    score: float
    reasons: List[str] = Field(default_factory=list)
    action: str = ""
    unblocks_ids: List[str] = Field(default_factory=list)
    breakdown: Dict[str, float] = Field(default_factory=dict)


class TriageResponse(BaseModel):
    generated_at: Optional[str] = None
    data_hash: str
    recommendations: List[RecommendationModel]
    quick_wins: List[Dict[str, Any]]
    blockers_to_clear: List[Dict[str, Any]]
    project_health: Dict[str, Any]
