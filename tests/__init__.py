#!/usr/bin/env python3
"""
Test suite for the JobTrail scoring engine.

All tests run without external services; the LLM is always replaced by a
stub or a mocked client. Run them with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Only the scoring core
    python -m pytest tests/unit/core -v

    # Using unittest
    python -m unittest discover tests -v
"""
