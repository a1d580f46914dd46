"""
Pytest configuration and fixtures.

Keeps environment overrides from the developer's shell out of the tests.
"""

import pytest

_ENV_OVERRIDES = (
    "LLM_BASE_URL",
    "LLM_API_KEY",
    "LLM_MODEL",
    "AI_RECOMMENDATIONS_ENABLED",
    "WEB_HOST",
    "WEB_PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
