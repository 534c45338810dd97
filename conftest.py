"""Root conftest for pytest configuration and shared fixtures.

Loaded before both testpaths (tests/ and formgate/domains/), making its
fixtures available to centralized tests AND colocated domain tests.
"""

import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables must be set before any formgate module import
# Uses setdefault so real env vars are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("FORMGATE_LOG_LEVEL", "WARNING")


# ---------------------------------------------------------------------------
# Shared fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_event_bus():
    """Fake EventBus that records published events."""
    from formgate.adapters.event_bus.fake import FakeEventBus

    return FakeEventBus()


@pytest.fixture
def test_settings():
    """Fresh Settings instance (defaults plus FORMGATE_* env vars)."""
    from formgate.core.config import Settings

    return Settings(_env_file=None)
