#!/usr/bin/env python3
"""
Typed record variants validated at the extractor boundary.

Each variant converts to a ScorableRecord whose `kind` tags the rubric it
belongs to, so factor extractors never deal with ad hoc shapes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.scorer.exceptions import InvalidRecord
from core.scorer.extractors import to_datetime
from core.scorer.models import ScorableRecord

ModelT = TypeVar("ModelT", bound="_RecordBase")


class _RecordBase(BaseModel):
    model_config = ConfigDict(extra="allow")

    kind: ClassVar[str] = "generic"

    id: str = Field(min_length=1)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v

    def to_scorable(self) -> ScorableRecord:
        return ScorableRecord.from_mapping(self.model_dump(), kind=self.kind)


class OfferRecord(_RecordBase):
    """A job offer with compensation components and 1-10 subjective ratings."""
    kind: ClassVar[str] = "offer"

    company_name: Optional[str] = None
    position_title: Optional[str] = None
    location: Optional[str] = None
    remote_policy: Optional[str] = None

    base_salary: Optional[float] = Field(None, ge=0)
    signing_bonus: Optional[float] = Field(None, ge=0)
    annual_bonus_percent: Optional[float] = Field(None, ge=0)
    equity_value: Optional[float] = Field(None, ge=0)
    equity_vesting_years: Optional[float] = Field(None, gt=0)
    annual_equity: Optional[float] = Field(None, ge=0)
    health_insurance_value: Optional[float] = Field(None, ge=0)
    retirement_match_percent: Optional[float] = Field(None, ge=0)
    retirement_max_match: Optional[float] = Field(None, ge=0)
    pto_days: Optional[float] = Field(None, ge=0)
    other_benefits_value: Optional[float] = Field(None, ge=0)
    total_compensation: Optional[float] = Field(None, ge=0)
    cost_of_living_index: Optional[float] = Field(None, gt=0)

    culture_fit_score: Optional[float] = Field(None, ge=1, le=10)
    growth_opportunity_score: Optional[float] = Field(None, ge=1, le=10)
    work_life_balance_score: Optional[float] = Field(None, ge=1, le=10)
    job_security_score: Optional[float] = Field(None, ge=1, le=10)
    commute_score: Optional[float] = Field(None, ge=1, le=10)


class ActivityRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    activity_type: str
    created_at: datetime
    notes: Optional[str] = None


class ContactRecord(_RecordBase):
    """A professional contact with its relationship activity log."""
    kind: ClassVar[str] = "contact"

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    current_company: Optional[str] = None
    current_title: Optional[str] = None
    relationship_strength: Optional[str] = None
    last_contacted_at: Optional[datetime] = None
    opportunities_generated: Optional[int] = Field(None, ge=0)
    shared_interests: Optional[List[str]] = None
    activities: Optional[List[ActivityRecord]] = None

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p) or self.id

    def to_scorable(self) -> ScorableRecord:
        data = self.model_dump()
        messages = [a for a in (self.activities or []) if a.activity_type == 'message' and a.notes]
        messages.sort(key=lambda a: to_datetime(a.created_at), reverse=True)
        # Latest five messages give the recommendation prompt something concrete to refer to
        data['recent_message_notes'] = [a.notes for a in messages[:5]]
        return ScorableRecord.from_mapping(data, kind=self.kind)


class JobContext(BaseModel):
    """The job a response-library entry is being matched against."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    job_description: Optional[str] = None
    industry: Optional[str] = None


class ResponseRecord(_RecordBase):
    """An interview response-library entry."""
    kind: ClassVar[str] = "response"

    question: Optional[str] = None
    question_type: Optional[str] = None
    current_response: Optional[str] = None
    tags: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    companies_used_for: Optional[List[str]] = None
    experiences_referenced: Optional[List[str]] = None
    success_count: Optional[int] = Field(None, ge=0)
    usage_count: Optional[int] = Field(None, ge=0)
    effectiveness_score: Optional[float] = Field(None, ge=0, le=100)
    is_favorite: Optional[bool] = None

    def to_scorable(self, job: Optional[JobContext] = None) -> ScorableRecord:
        data = self.model_dump()
        if job is not None:
            data.update(
                job_id=job.id,
                job_title=job.job_title,
                job_company=job.company_name,
                job_description=job.job_description,
                job_industry=job.industry,
            )
        return ScorableRecord.from_mapping(data, kind=self.kind)


class NetworkingMetricsRecord(_RecordBase):
    """
    Aggregate networking metrics for one user.

    Rates may be given directly or derived from the raw campaign/referral
    lists; monthly interactions may be derived from dated interactions.
    """
    kind: ClassVar[str] = "networking_metrics"

    industry: Optional[str] = None
    network_size: Optional[float] = Field(None, ge=0)
    monthly_interactions: Optional[float] = Field(None, ge=0)
    response_rate: Optional[float] = Field(None, ge=0, le=100)
    referral_success_rate: Optional[float] = Field(None, ge=0, le=100)
    interaction_dates: Optional[List[datetime]] = None
    campaigns: Optional[List[Mapping[str, Any]]] = None
    referrals: Optional[List[Mapping[str, Any]]] = None


def parse_record(model: Type[ModelT], data: Union[ModelT, Mapping[str, Any]]) -> ModelT:
    """Validate caller data into a typed record; validation failures become InvalidRecord."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidRecord(f"Invalid {model.kind} record: {e}") from e
