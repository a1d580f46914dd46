#!/usr/bin/env python3
"""
Benchmark endpoints - networking metrics against industry averages.
"""

from fastapi import APIRouter, Depends

from core.scorer.service import ScoringService
from ..dependencies import get_scoring_service
from ..models.requests import NetworkingBenchmarkRequest
from ..models.responses import BenchmarkReportResponse

router = APIRouter(prefix="/api", tags=["benchmarks"])


@router.post("/v1/benchmarks/networking", response_model=BenchmarkReportResponse)
def networking_benchmarks(
    request: NetworkingBenchmarkRequest,
    service: ScoringService = Depends(get_scoring_service)
):
    """
    Compare networking metrics with the benchmarks for the user's industry.

    Unknown industries use the configured default benchmarks.
    """
    report = service.benchmark_networking(request.metrics, as_of=request.as_of)
    return BenchmarkReportResponse(**report.to_dict())
