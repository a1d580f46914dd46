#!/usr/bin/env python3
"""
Request models for API endpoints.

Records are accepted as plain objects and validated by the scoring layer,
so malformed records surface as InvalidRecord (422) with the record's error.
"""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class ScoringRequest(BaseModel):
    as_of: Optional[datetime] = Field(
        None,
        description="Instant to score against (defaults to now); all records in the request share it"
    )


class OfferComparisonRequest(ScoringRequest):
    """Offers to score, rank and compare."""
    offers: List[Dict[str, Any]] = Field(..., min_length=1, description="Job offers, each with a unique id")


class RelationshipHealthRequest(ScoringRequest):
    """Contacts to assess."""
    contacts: List[Dict[str, Any]] = Field(..., description="Professional contacts with optional activity logs")


class ResponseSuggestionRequest(ScoringRequest):
    """Response-library entries to rank against a job."""
    responses: List[Dict[str, Any]] = Field(..., description="Saved interview responses")
    job: Optional[Dict[str, Any]] = Field(
        None,
        description="Target job: job_title, company_name, job_description, industry"
    )


class NetworkingBenchmarkRequest(ScoringRequest):
    """Networking metrics to compare against industry averages."""
    metrics: Dict[str, Any] = Field(..., description="Networking metrics with an id and optional industry")
