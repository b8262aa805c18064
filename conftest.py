from __future__ import annotations

import os

import pytest

# Keep the module-level engine in formbridge.database off the dev database file.
os.environ.setdefault("FORMBRIDGE_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("FORMBRIDGE_ENVIRONMENT", "test")


@pytest.fixture(autouse=True)
def _fresh_settings():
    from formbridge.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
