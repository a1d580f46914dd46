#!/usr/bin/env python3
"""
Response library endpoints - suggest saved interview responses for a job.
"""

from fastapi import APIRouter, Depends

from core.scorer.service import ScoringService
from ..dependencies import get_scoring_service
from ..models.requests import ResponseSuggestionRequest
from ..models.responses import ResponseSuggestionListResponse

router = APIRouter(prefix="/api", tags=["responses"])


@router.post("/v1/responses/suggestions", response_model=ResponseSuggestionListResponse)
def response_suggestions(
    request: ResponseSuggestionRequest,
    service: ScoringService = Depends(get_scoring_service)
):
    """
    Rank response-library entries by relevance to the target job.

    Entries with no relevance are left out unless they are favorites.
    """
    suggestions = service.suggest_responses(request.responses, job=request.job, as_of=request.as_of)
    return ResponseSuggestionListResponse(
        success=True,
        count=len(suggestions),
        suggestions=[s.to_dict() for s in suggestions]
    )
