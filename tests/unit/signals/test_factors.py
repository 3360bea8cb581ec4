"""
Unit tests for the sentiment, volume, momentum and confidence factors
"""

import math
import pytest
import numpy as np
from datetime import datetime, timedelta

from marketsense.core.config import EngineConfig
from marketsense.signals.factors import FactorScorer, FactorScores


@pytest.fixture
def scorer():
    return FactorScorer(EngineConfig())


class TestFrame:

    def test_missing_features_default_to_zero(self, scorer, post_factory):
        frame = scorer.to_frame([post_factory()])

        assert frame.loc[0, 'bullish'] == 0
        assert frame.loc[0, 'bearish'] == 0
        assert frame.loc[0, 'engagement'] == 0

    def test_naive_timestamps_are_utc(self, scorer, post_factory, now):
        post = post_factory(now=now.replace(tzinfo=None))
        frame = scorer.to_frame([post])
        assert str(frame['timestamp'].dt.tz) == 'UTC'
        assert frame.loc[0, 'timestamp'].hour == now.hour

    def test_empty_frame_has_columns(self, scorer):
        frame = scorer.to_frame([])
        assert frame.empty
        assert {'author', 'timestamp', 'bullish', 'bearish', 'engagement'} <= set(frame.columns)


class TestSentiment:

    def test_engagement_weighted_mean(self, scorer, post_factory):
        posts = [
            post_factory(bullish=3, bearish=0, engagement=2.5),  # 3 * 1.25 = 3.75
            post_factory(bullish=0, bearish=2),                  # -2 * 1.0 = -2
        ]
        assert scorer.sentiment(posts) == pytest.approx(0.875)

    def test_missing_features_count_as_zero(self, scorer, post_factory):
        posts = [post_factory(), post_factory(bullish=2)]
        assert scorer.sentiment(posts) == pytest.approx(1.0)

    def test_empty_group(self, scorer):
        assert scorer.sentiment([]) == 0.0

    def test_custom_engagement_factor(self, post_factory):
        scorer = FactorScorer(EngineConfig(engagement_sentiment_factor=0.5))
        posts = [post_factory(bullish=1, bearish=0, engagement=2)]
        assert scorer.sentiment(posts) == pytest.approx(2.0)


class TestVolume:

    def test_no_older_posts_is_neutral(self, scorer, post_factory, now):
        posts = [post_factory(minutes_ago=i) for i in range(10)]
        assert scorer.volume(posts, now) == 1.0

    def test_recent_rate_against_older_rate(self, scorer, post_factory, now):
        recent = [post_factory(minutes_ago=i) for i in range(5)]
        older = [post_factory(minutes_ago=120) for _ in range(20)]
        # 20 older posts over 2 hours -> 10 per hour; 5 recent -> 0.5
        assert scorer.volume(recent + older, now) == pytest.approx(0.5)

    def test_average_rate_floored_at_one(self, scorer, post_factory, now):
        recent = [post_factory(minutes_ago=i) for i in range(6)]
        older = [post_factory(minutes_ago=m) for m in (120, 180, 240, 300)]
        # 4 posts over 5 hours = 0.8 per hour, floored to 1
        assert scorer.volume(recent + older, now) == pytest.approx(6.0)

    def test_post_exactly_one_hour_old_counts_as_older(self, scorer, post_factory, now):
        posts = [post_factory(minutes_ago=i) for i in range(3)] + [post_factory(minutes_ago=60)]
        assert scorer.volume(posts, now) == pytest.approx(3.0)

    def test_only_older_posts(self, scorer, post_factory, now):
        posts = [post_factory(minutes_ago=90) for _ in range(4)]
        assert scorer.volume(posts, now) == 0.0

    def test_naive_evaluation_time(self, scorer, post_factory, now):
        posts = [post_factory(minutes_ago=i) for i in range(3)] + [post_factory(minutes_ago=60)]
        assert scorer.volume(posts, now.replace(tzinfo=None)) == pytest.approx(3.0)


class TestMomentum:

    @pytest.mark.parametrize("history", [[], [1.0]])
    def test_short_history_gives_zero(self, scorer, history):
        assert scorer.momentum(2.5, history) == 0.0

    def test_z_score_uses_sample_standard_deviation(self, scorer):
        # mean 2, sample std sqrt(2)
        assert scorer.momentum(4.0, [1.0, 3.0]) == pytest.approx(math.sqrt(2))

    def test_population_standard_deviation_option(self):
        scorer = FactorScorer(EngineConfig(stddev_ddof=0))
        assert scorer.momentum(4.0, [1.0, 3.0]) == pytest.approx(2.0)

    def test_zero_variance_is_floored_and_clipped(self, scorer):
        assert scorer.momentum(1.5, [1.0, 1.0, 1.0]) == 3.0
        assert scorer.momentum(0.5, [1.0, 1.0, 1.0]) == -3.0
        assert scorer.momentum(1.0, [1.0, 1.0, 1.0]) == 0.0

    def test_only_last_ten_entries_are_used(self, scorer):
        history = [100.0] * 5 + [0.0, 1.0] * 5
        assert scorer.momentum(0.5, history) == pytest.approx(0.0)

    def test_non_finite_history_entries_are_ignored(self, scorer):
        # only one finite entry left, not enough history
        assert scorer.momentum(4.0, [1.0, float('nan')]) == 0.0
        assert scorer.momentum(4.0, [1.0, float('inf'), 3.0, float('nan')]) == pytest.approx(math.sqrt(2))

    def test_momentum_always_within_clip(self, scorer):
        rng = np.random.default_rng(7)
        for _ in range(200):
            history = list(rng.normal(0, rng.uniform(0.001, 5), size=rng.integers(0, 30)))
            current = float(rng.normal(0, 10))
            assert -3.0 <= scorer.momentum(current, history) <= 3.0


class TestConfidence:

    def test_scenario_factors(self, scorer, group_factory):
        posts = group_factory(20, engagement=2.5)
        # sample 0.2, engagement 0.5, magnitude 1.0, diversity 1.0
        assert scorer.confidence(posts, 2.075) == pytest.approx(0.675)

    def test_single_author_low_engagement(self, scorer, group_factory):
        posts = group_factory(10, engagement=0, distinct_authors=False)
        # 0.1, 0, 0, 0.1
        assert scorer.confidence(posts, 0.0) == pytest.approx(0.05)

    def test_saturates_at_one(self, scorer, group_factory):
        posts = group_factory(200, engagement=10)
        assert scorer.confidence(posts, -5.0) == pytest.approx(1.0)

    def test_negative_engagement_is_clamped(self, scorer, group_factory):
        posts = group_factory(10, engagement=-5)
        # 0.1, clamped 0, 0.25, 1.0
        assert scorer.confidence(posts, 0.5) == pytest.approx(0.3375)

    def test_empty_group(self, scorer):
        assert scorer.confidence([], 0.0) == 0.0

    def test_always_in_unit_interval(self, scorer, post_factory):
        rng = np.random.default_rng(11)
        for _ in range(50):
            posts = [post_factory(author=f"a{rng.integers(5)}", engagement=float(rng.normal(3, 5)))
                     for _ in range(int(rng.integers(1, 40)))]
            value = scorer.confidence(posts, float(rng.normal(0, 4)))
            assert 0.0 <= value <= 1.0


class TestScore:

    def test_score_bundles_factors(self, scorer, group_factory, now):
        posts = group_factory(20, bullish=3, bearish=0, engagement=2.5)
        factors = scorer.score(posts, [], now)

        assert isinstance(factors, FactorScores)
        assert factors.sentiment == pytest.approx(3.75)
        assert factors.volume == 1.0
        assert factors.momentum == 0.0
