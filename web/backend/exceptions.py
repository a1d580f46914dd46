#!/usr/bin/env python3
"""
Error handlers for the web application.

Scoring errors map to HTTP status codes by type:
- InvalidRecord (bad caller data): 422
- ConfigurationError (broken rubric or config): 500
- any other ScoringError: 400
"""

import logging
from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.scorer.exceptions import ConfigurationError, InvalidRecord, ScoringError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "type": error_type
        }
    )


async def scoring_exception_handler(
    request: Request,
    exc: ScoringError
) -> JSONResponse:
    """
    Handle scoring layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The scoring exception.

    Returns:
        JSONResponse with error details.
    """
    if isinstance(exc, InvalidRecord):
        status_code = 422
        logger.info(f"Invalid record in {request.url.path}: {exc}")
    elif isinstance(exc, ConfigurationError):
        status_code = 500
        logger.error(f"Configuration error in {request.url.path}: {exc}", exc_info=True)
    else:
        status_code = 400
        logger.warning(f"Scoring error in {request.url.path}: {exc}")

    return _error_response(status_code, str(exc), exc.__class__.__name__)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Request body validation failures, in the same shape as scoring errors."""
    errors = [
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    ]
    return _error_response(422, "; ".join(errors), "RequestValidationError")


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    return _error_response(exc.status_code, exc.detail, "HTTPException")


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.
    """
    logger.exception(f"Unexpected error in {request.url.path}")
    return _error_response(500, "Internal server error", "InternalError")
