#!/usr/bin/env python3
"""
Relationship endpoints - professional contact health.
"""

from fastapi import APIRouter, Depends

from core.scorer.service import ScoringService
from ..dependencies import get_scoring_service
from ..models.requests import RelationshipHealthRequest
from ..models.responses import RelationshipHealthListResponse

router = APIRouter(prefix="/api", tags=["relationships"])


@router.post("/v1/relationships/health", response_model=RelationshipHealthListResponse)
def relationship_health(
    request: RelationshipHealthRequest,
    service: ScoringService = Depends(get_scoring_service)
):
    """
    Assess relationship health for each contact.

    Health status is one of at_risk, needs_attention, healthy, strong.
    """
    assessments = service.assess_relationships(request.contacts, as_of=request.as_of)
    return RelationshipHealthListResponse(
        success=True,
        count=len(assessments),
        results=[a.to_dict() for a in assessments]
    )
