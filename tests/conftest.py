"""
Pytest configuration and fixtures for SportBot results tests.
"""

import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Add the repository root to Python path
REPO_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(REPO_ROOT))

from sportbot.config import ValidationConfig
from sportbot.db import create_schema
from sportbot.metrics import metrics


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with the full schema."""
    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def validation_config() -> ValidationConfig:
    """Validation settings with no pause between predictions."""
    return ValidationConfig(request_delay_seconds=0)


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset_all()
    yield
