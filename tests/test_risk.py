"""Unit tests for the fake-follower risk heuristic and derived metrics."""

import pytest

from leadmetrics.core.calculators import calculate_engagement_metrics
from leadmetrics.core.risk import (
    RISK_DISCLAIMER,
    activity_status,
    calculate_derived_metrics,
    calculate_risk_scores,
    expected_min_engagement_rate,
    risk_level,
)
from leadmetrics.core.tally import MetricTally
from leadmetrics.models.metrics import (
    DerivedMetrics,
    EngagementMetrics,
    FrequencyMetrics,
    RiskScores,
)


def engagement(rate=None, consistency=None, cv=None) -> EngagementMetrics:
    return EngagementMetrics(
        engagement_rate=rate,
        engagement_consistency=consistency,
        engagement_cv=cv,
    )


class TestExpectedMinimum:
    """Size-tiered minimum engagement rates."""

    @pytest.mark.parametrize(
        "followers, expected",
        [
            (500, 0.015),
            (9_999, 0.015),
            (10_000, 0.010),
            (49_999, 0.010),
            (50_000, 0.0075),
            (499_999, 0.0075),
            (500_000, 0.005),
            (5_000_000, 0.005),
        ],
    )
    def test_tiers(self, followers, expected):
        assert expected_min_engagement_rate(followers) == expected


class TestRiskFactors:
    """Each factor's trigger and points, isolated from the others."""

    @pytest.mark.parametrize(
        "rate, points",
        [(0.002, 35), (0.004, 25), (0.009, 15), (0.010, 0), (0.05, 0)],
    )
    def test_engagement_below_minimum(self, make_profile, tally, rate, points):
        # 20k followers -> minimum 1%
        profile, _ = make_profile(followersCount=20_000, followsCount=1_000, postsCount=1_000)
        risk = calculate_risk_scores(profile, engagement(rate=rate), tally)
        assert risk.engagement_risk_points == points

    @pytest.mark.parametrize(
        "following, points",
        [(100_000, 25), (50_000, 18), (25_000, 10), (20_000, 0), (0, 0)],
    )
    def test_authority_ratio(self, make_profile, tally, following, points):
        profile, _ = make_profile(followersCount=20_000, followsCount=following, postsCount=1_000)
        risk = calculate_risk_scores(profile, engagement(), tally)
        assert risk.authority_risk_points == points

    @pytest.mark.parametrize(
        "followers, posts, points",
        [
            (20_000, 0, 20),
            (20_000, 10, 20),
            (20_000, 30, 10),
            (20_000, 100, 0),
            (200_000, 20, 20),
            (200_000, 50, 10),
            (200_000, 200, 0),
            (9_000, 0, 0),
        ],
    )
    def test_followers_per_post(self, make_profile, tally, followers, posts, points):
        profile, _ = make_profile(followersCount=followers, followsCount=followers, postsCount=posts)
        risk = calculate_risk_scores(profile, engagement(), tally)
        assert risk.follower_post_risk_points == points

    def test_uniform_low_engagement(self, make_profile, tally):
        profile, _ = make_profile(followersCount=20_000, followsCount=1_000, postsCount=1_000)
        risk = calculate_risk_scores(profile, engagement(rate=0.008, consistency=90, cv=0.1), tally)
        assert risk.consistency_risk_points == 20

    def test_uniform_healthy_engagement_is_fine(self, make_profile, tally):
        profile, _ = make_profile(followersCount=20_000, followsCount=1_000, postsCount=1_000)
        risk = calculate_risk_scores(profile, engagement(rate=0.03, consistency=90, cv=0.1), tally)
        assert risk.consistency_risk_points == 0

    def test_volatile_engagement(self, make_profile, tally):
        profile, _ = make_profile(followersCount=20_000, followsCount=1_000, postsCount=1_000)
        risk = calculate_risk_scores(profile, engagement(rate=0.03, consistency=28, cv=2.5), tally)
        assert risk.consistency_risk_points == 12


class TestRiskScore:
    """Total, level, warnings and the null case."""

    def test_all_factors_clamp_to_hundred(self, make_profile, tally):
        profile, _ = make_profile(followersCount=20_000, followsCount=200_000, postsCount=0)
        risk = calculate_risk_scores(profile, engagement(rate=0.001, consistency=95, cv=0.05), tally)
        assert risk.fake_follower_risk_score == 100.0
        assert risk.risk_level == "high"
        assert len(risk.fake_follower_warnings) == 4

    def test_healthy_profile(self, make_profile, tally):
        profile, _ = make_profile(followersCount=20_000, followsCount=500, postsCount=400)
        risk = calculate_risk_scores(profile, engagement(rate=0.04, consistency=60, cv=0.6), tally)
        assert risk.fake_follower_risk_score == 0.0
        assert risk.risk_level == "low"
        assert risk.fake_follower_warnings == []
        assert risk.disclaimer == RISK_DISCLAIMER

    def test_null_engagement_uses_structural_factors_only(self, make_profile, tally):
        profile, _ = make_profile(followersCount=20_000, followsCount=100_000, postsCount=400)
        risk = calculate_risk_scores(profile, EngagementMetrics.null("No posts available"), tally)
        assert risk.engagement_risk_points == 0
        assert risk.consistency_risk_points == 0
        assert risk.fake_follower_risk_score == 25.0
        assert risk.risk_level == "medium"

    def test_zero_followers_is_null_group(self, make_profile, tally):
        profile, _ = make_profile(followersCount=0)
        risk = calculate_risk_scores(profile, engagement(), tally)
        assert risk.reason == "Followers count unavailable"
        assert risk.fake_follower_risk_score is None
        assert tally.skipped == len(RiskScores.metric_fields())

    @pytest.mark.parametrize(
        "score, level",
        [(0, "low"), (20, "low"), (20.5, "medium"), (50, "medium"), (51, "high"), (100, "high")],
    )
    def test_levels(self, score, level):
        assert risk_level(score) == level

    def test_disclaimer_is_not_an_accusation(self):
        assert "heuristic" in RISK_DISCLAIMER
        assert "not proof" in RISK_DISCLAIMER


class TestDerivedMetrics:
    """Density, cadence and sample-based viral posts."""

    def test_density_and_cadence(self, make_profile, tally):
        profile, _ = make_profile(followersCount=10_000, postsCount=50)
        frequency = FrequencyMetrics(posting_frequency=30.0, days_since_last_post=3.0)
        derived = calculate_derived_metrics(profile, EngagementMetrics.null("x"), frequency, tally)
        assert derived.content_density == 5.0
        assert derived.posts_per_week == 7.0
        assert derived.activity_status == "active"
        assert derived.viral_post_count is None

    def test_activity_without_reference_time(self, make_profile, tally):
        profile, _ = make_profile(followersCount=10_000, postsCount=50)
        frequency = FrequencyMetrics(posting_frequency=30.0, days_since_last_post=None)
        derived = calculate_derived_metrics(profile, EngagementMetrics.null("x"), frequency, tally)
        assert derived.activity_status is None
        reasons = {r.reason: r.affected_metrics for r in tally.skipped_reasons}
        assert reasons["No reference time available"] == ["activity_status"]

    @pytest.mark.parametrize(
        "days, status",
        [(0, "active"), (14, "active"), (14.01, "slowing"), (60, "slowing"), (61, "dormant"), (None, None)],
    )
    def test_activity_status(self, days, status):
        assert activity_status(days) == status

    def test_viral_posts_are_sample_based(self, make_profile, make_post, as_of):
        posts = [make_post(likesCount=n, commentsCount=0) for n in (10, 10, 10, 50)]
        profile, flags = make_profile(posts, followersCount=10_000, postsCount=100)
        engagement_metrics = calculate_engagement_metrics(profile, flags, MetricTally(), as_of)

        derived = calculate_derived_metrics(
            profile, engagement_metrics, FrequencyMetrics.null("x"), MetricTally()
        )
        # sample average 20 -> viral threshold 40
        assert derived.viral_post_count == 1
        assert derived.viral_sample_size == 4
        assert derived.sample_viral_post_rate == 25.0
        assert derived.viral_post_rate == 1.0

    def test_all_zero_engagement_has_no_viral_posts(self, make_profile, make_post, as_of):
        posts = [make_post(likesCount=0, commentsCount=0) for _ in range(3)]
        profile, flags = make_profile(posts)
        engagement_metrics = calculate_engagement_metrics(profile, flags, MetricTally(), as_of)
        derived = calculate_derived_metrics(
            profile, engagement_metrics, FrequencyMetrics.null("x"), MetricTally()
        )
        assert derived.viral_post_count == 0

    def test_nothing_available_is_null_group(self, make_profile, tally):
        profile, _ = make_profile(followersCount=0)
        derived = calculate_derived_metrics(
            profile, EngagementMetrics.null("x"), FrequencyMetrics.null("x"), tally
        )
        assert derived.is_null
        assert tally.skipped == len(DerivedMetrics.metric_fields())
