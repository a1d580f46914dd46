#!/usr/bin/env python3
"""
Scoring exceptions.

ConfigurationError and InvalidRecord propagate to the caller.
MissingFactorData and ExternalServiceFailure are recovered inside the
engine and only ever show up in logs.
"""


class ScoringError(Exception):
    """Base exception for the scoring engine."""
    pass


class ConfigurationError(ScoringError):
    """Raised at construction time for a malformed rubric."""
    pass


class InvalidRecord(ScoringError):
    """Raised when a record is missing its identifying fields or fails validation."""
    pass


class MissingFactorData(ScoringError):
    """Raised by an extractor when a factor's source data is unavailable."""
    pass


class ExternalServiceFailure(ScoringError):
    """Raised when the text-generation service fails or returns garbage."""
    pass
