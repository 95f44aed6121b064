"""Shared fixtures: snapshot builders and JSON fixtures."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from leadmetrics.core.tally import MetricTally
from leadmetrics.core.validator import assess_availability
from leadmetrics.models.snapshot import RawProfile

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Fixed reference time shared by time-dependent tests.
AS_OF = datetime(2024, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def as_of() -> datetime:
    return AS_OF


@pytest.fixture
def tally() -> MetricTally:
    return MetricTally()


@pytest.fixture
def load_snapshot():
    """Load a raw snapshot dict from tests/fixtures."""

    def _load(name: str) -> dict:
        return json.loads((FIXTURES_DIR / f"{name}.json").read_text(encoding="utf-8"))

    return _load


@pytest.fixture
def make_post():
    """Build a raw post dict in the scraper's camelCase shape."""

    def _make(**overrides) -> dict:
        post = {
            "type": "Image",
            "caption": "",
            "likesCount": 100,
            "commentsCount": 10,
            "timestamp": "2024-02-01T00:00:00.000Z",
            "hashtags": [],
            "mentions": [],
        }
        post.update(overrides)
        return post

    return _make


@pytest.fixture
def make_snapshot():
    """Build a raw profile snapshot dict; ``posts`` becomes latestPosts."""

    def _make(posts: list[dict] | None = None, **overrides) -> dict:
        snapshot = {
            "username": "testbrand",
            "fullName": "Test Brand",
            "biography": "",
            "followersCount": 10_000,
            "followsCount": 500,
            "postsCount": 100,
            "private": False,
            "latestPosts": posts or [],
        }
        snapshot.update(overrides)
        return snapshot

    return _make


@pytest.fixture
def make_profile(make_snapshot):
    """Build a parsed RawProfile together with its availability flags."""

    def _make(posts: list[dict] | None = None, **overrides):
        profile = RawProfile.model_validate(make_snapshot(posts, **overrides))
        return profile, assess_availability(profile)

    return _make
