#!/usr/bin/env python3
"""
Offer endpoints - score, rank and compare job offers.
"""

from fastapi import APIRouter, Depends

from core.scorer.service import ScoringService
from ..dependencies import get_scoring_service
from ..models.requests import OfferComparisonRequest
from ..models.responses import OfferComparisonResponse

router = APIRouter(prefix="/api", tags=["offers"])


@router.post("/v1/offers/compare", response_model=OfferComparisonResponse)
def compare_offers(
    request: OfferComparisonRequest,
    service: ScoringService = Depends(get_scoring_service)
):
    """
    Compare job offers.

    Returns every offer's composite score, tier and factor breakdown,
    the ranking (highest first, ties keep request order), the best offer
    per factor and negotiation tips based on the competing offers.
    """
    comparison = service.compare_offers(request.offers, as_of=request.as_of)
    return OfferComparisonResponse(**comparison.to_dict())
