#!/usr/bin/env python3
"""
Rubric endpoints - inspect the configured scoring rubrics.
"""

from fastapi import APIRouter, Depends

from core.scorer.service import ScoringService
from ..dependencies import get_scoring_service
from ..models.responses import RubricsResponse

router = APIRouter(prefix="/api", tags=["rubrics"])


@router.get("/v1/rubrics", response_model=RubricsResponse)
def get_rubrics(service: ScoringService = Depends(get_scoring_service)):
    """
    Get every rubric's factors, weights and tier bands.
    """
    rubrics = service.rubric_summary()
    return RubricsResponse(success=True, count=len(rubrics), rubrics=rubrics)
