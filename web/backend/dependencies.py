#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from functools import lru_cache

from core.app_context import AppContext
from core.scorer.service import ScoringService
from .config import get_config


@lru_cache()
def get_app_context() -> AppContext:
    """Wire services once per process; rubric configuration errors surface here."""
    return AppContext.build(get_config())


def get_scoring_service() -> ScoringService:
    """
    FastAPI dependency that returns the shared scoring service.

    Usage:
        @router.post("/endpoint")
        def my_endpoint(service: ScoringService = Depends(get_scoring_service)):
            ...

    Tests replace it through `app.dependency_overrides`.
    """
    return get_app_context().scoring_service
