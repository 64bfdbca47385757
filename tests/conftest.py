"""Pytest configuration and fixtures for dupefinder tests."""

import os
import pytest
from datetime import datetime, timedelta, timezone
from typing import Optional

# Add the project root to the Python path
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import dupefinder.config as config_mod
import dupefinder.metrics as metrics_mod
from dupefinder.dedup.sameness import Thresholds
from dupefinder.models import Indexer, ResultItem

BASE_TIME = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
GIB = 1024 ** 3


@pytest.fixture(autouse=True)
def _fresh_config():
    """Rebuild configuration from the environment for every test."""
    config_mod._config = None
    yield
    config_mod._config = None


@pytest.fixture(autouse=True)
def _noop_metrics():
    """Keep tests from opening a DogStatsD socket."""
    old_client = metrics_mod._client
    metrics_mod._client = metrics_mod._NoOpStatsd()
    yield
    metrics_mod._client = old_client


@pytest.fixture
def thresholds():
    """Age 2 hours, size 10 percent."""
    return Thresholds(age_hours=2, size_percent=10)


@pytest.fixture
def indexers():
    return {
        "alpha": Indexer("alpha"),
        "beta": Indexer("beta"),
        "gamma": Indexer("gamma"),
        "delta": Indexer("delta"),
    }


@pytest.fixture
def make_item():
    """Factory for result items with sensible defaults.

    ``hours_ago`` is relative to a fixed base time; pass ``pub_date=None``
    explicitly to build an undated item.
    """
    _unset = object()

    def _make(
        indexer: Indexer,
        title: str = "Some.Show.S01E01.1080p",
        hours_ago: float = 0,
        size: Optional[int] = GIB,
        group: Optional[str] = None,
        poster: Optional[str] = None,
        pub_date=_unset,
    ) -> ResultItem:
        if pub_date is _unset:
            pub_date = BASE_TIME - timedelta(hours=hours_ago)
        return ResultItem(
            title=title,
            indexer=indexer,
            pub_date=pub_date,
            size=size,
            group=group,
            poster=poster,
        )

    return _make


@pytest.fixture
def temp_env():
    """Temporary environment variables for testing."""
    original_env = os.environ.copy()

    test_env = {
        "DUPLICATE_AGE_THRESHOLD": "3",
        "DUPLICATE_SIZE_THRESHOLD_IN_PERCENT": "2.5",
        "DEDUP_TRACE_COMPARISONS": "false",
        "LOG_LEVEL": "INFO",
    }

    os.environ.update(test_env)

    yield test_env

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)
