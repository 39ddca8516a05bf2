"""Shared fixtures for the insights API test suite."""

import pytest
from datetime import datetime, timezone

from fastapi.testclient import TestClient

from insights.core.config import AnalyticsConfig
from insights.schemas.samples import CheckInEvent, VoiceSample


# ── Time ────────────────────────────────────────────────────────────────

@pytest.fixture
def now():
    """Fixed 'now': 2026-01-05T12:00:00Z (noon UTC on a Monday)."""
    return datetime(2026, 1, 5, 12, 0, 0, tzinfo=timezone.utc)


def utc(year, month, day, hour=12, minute=0, second=0, microsecond=0):
    return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=timezone.utc)


@pytest.fixture
def at():
    """Shorthand for building UTC datetimes inside tests: at(2026, 1, 3, 9)."""
    return utc


# ── Config ──────────────────────────────────────────────────────────────

@pytest.fixture
def config():
    return AnalyticsConfig()


@pytest.fixture
def strict_config():
    return AnalyticsConfig(streak_requires_today=True)


# ── Factories ───────────────────────────────────────────────────────────

@pytest.fixture
def make_sample():
    """Factory for VoiceSample; measurements default to missing.

    Usage:
        s = make_sample(utc(2026, 1, 5, 9), jitter=0.05)
    """
    def _factory(timestamp, jitter=None, shimmer=None):
        return VoiceSample(timestamp=timestamp, jitter=jitter, shimmer=shimmer)

    return _factory


@pytest.fixture
def make_event():
    def _factory(timestamp, emotion=None, intensity=None):
        return CheckInEvent(timestamp=timestamp, emotion=emotion, intensity=intensity)

    return _factory


# ── App ─────────────────────────────────────────────────────────────────

@pytest.fixture
def client(config):
    from insights.main import create_app

    return TestClient(create_app(config=config))


@pytest.fixture
def strict_client(strict_config):
    from insights.main import create_app

    return TestClient(create_app(config=strict_config))
