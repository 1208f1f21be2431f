"""Tests for the interval scheduler."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from mneme.application.scheduling.interval_scheduler import (
    EASE_TIERS,
    INTERVAL_TIERS,
    IntervalScheduler,
    round_half_up,
    select_tier,
)
from mneme.application.scheduling.performance_analyzer import PerformanceAnalyzer
from mneme.domain.scheduling.models import ConfidenceTrend, PerformanceAnalysis, ScheduleState
from mneme.domain.scheduling.parameters import DEFAULT_PARAMETERS

NOW = datetime(2025, 9, 20, 12, 0, tzinfo=timezone.utc)


def make_analysis(
    score=0.5,
    trend=ConfidenceTrend.STABLE,
    variance=0.2,
    efficiency=1.0,
):
    return PerformanceAnalysis(
        overall_score=score,
        confidence_trend=trend,
        time_efficiency=efficiency,
        recent_correctness=score,
        average_confidence=3.0,
        performance_variance=variance,
    )


def make_state(interval_days=1, repetitions=1, ease_factor=2.5):
    return ScheduleState(
        user_id="u1",
        concept_id="c1",
        concept_title="Derivatives",
        ease_factor=ease_factor,
        interval_days=interval_days,
        repetitions=repetitions,
        last_reviewed=NOW - timedelta(days=interval_days),
        next_review=NOW,
    )


@pytest.fixture
def scheduler():
    return IntervalScheduler()


class TestTierTables:
    """Boundary scores fall into the upper tier."""

    @pytest.mark.parametrize(
        "score, index",
        [(1.0, 0), (0.8, 0), (0.79, 1), (0.6, 1), (0.59, 2), (0.4, 2), (0.39, 3), (0.0, 3)],
    )
    def test_interval_tier_selection(self, score, index):
        assert select_tier(INTERVAL_TIERS, score) is INTERVAL_TIERS[index][1]

    @pytest.mark.parametrize("score, index", [(0.8, 0), (0.6, 1), (0.4, 2), (0.3, 3)])
    def test_ease_tier_selection(self, score, index):
        assert select_tier(EASE_TIERS, score) is EASE_TIERS[index][1]

    @pytest.mark.parametrize("score, expected", [(0.8, 25), (0.6, 15), (0.4, 10), (0.0, 5)])
    def test_interval_at_boundaries(self, scheduler, score, expected):
        analysis = make_analysis(score=score)
        assert scheduler.compute_interval(analysis, make_state(interval_days=10)) == expected

    @pytest.mark.parametrize("score, expected", [(0.8, 2.8), (0.6, 2.5), (0.4, 2.5), (0.0, 1.7)])
    def test_ease_at_boundaries(self, scheduler, score, expected):
        assert scheduler.compute_ease_factor(make_analysis(score=score)) == pytest.approx(expected)

    def test_ease_tiers_read_shared_constants(self, monkeypatch):
        from mneme.application.scheduling import interval_scheduler

        monkeypatch.setattr(interval_scheduler, "DEFAULT_EASE_FACTOR", 2.0)
        monkeypatch.setattr(interval_scheduler, "EASE_BOUNDS", (1.5, 3.0))

        assert select_tier(EASE_TIERS, 0.6)(0.6) == pytest.approx(2.0)
        assert select_tier(EASE_TIERS, 0.5)(0.5) == 2.0
        assert select_tier(EASE_TIERS, 0.3)(0.3) == pytest.approx(1.8)
        assert select_tier(EASE_TIERS, -1.0)(-1.0) == 1.5


class TestScenarios:
    def test_cold_start(self, scheduler):
        analysis = PerformanceAnalyzer().analyze([])

        interval, ease = scheduler.schedule(analysis, None)

        assert interval == 1
        assert ease == 2.5

    def test_mastery_run_hits_ceiling(self, scheduler):
        analysis = make_analysis(
            score=0.95, trend=ConfidenceTrend.IMPROVING, variance=0.05, efficiency=1.0
        )

        interval, ease = scheduler.schedule(analysis, make_state(interval_days=10))

        # 10 * 2.8 * 1.2 * 1.1 * 1.0 = 36.96 -> 30
        assert interval == 30
        assert ease == pytest.approx(2.975)

    def test_mastery_run_below_ceiling(self, scheduler):
        analysis = make_analysis(
            score=0.95, trend=ConfidenceTrend.IMPROVING, variance=0.05, efficiency=1.0
        )

        # 5 * 2.8 * 1.2 * 1.1 = 18.48
        assert scheduler.compute_interval(analysis, make_state(interval_days=5)) == 18

    def test_struggling(self, scheduler):
        analysis = make_analysis(score=0.2, trend=ConfidenceTrend.DECLINING)

        interval, ease = scheduler.schedule(analysis, make_state(interval_days=5))

        # 5 * (0.5 + 0.2 * 0.5) * 0.8 = 2.4
        assert interval == 2
        # max(1.3, 2.5 - 0.2 * 2) - 0.1
        assert ease == pytest.approx(2.0)

    def test_struggling_never_drops_below_one_day(self, scheduler):
        analysis = make_analysis(
            score=0.1, trend=ConfidenceTrend.DECLINING, variance=0.5, efficiency=0.1
        )

        assert scheduler.compute_interval(analysis, make_state(interval_days=1)) == 1


class TestAdjustments:
    def test_high_variance_is_conservative(self, scheduler):
        steady = make_analysis(score=0.7, variance=0.2)
        erratic = make_analysis(score=0.7, variance=0.35)
        previous = make_state(interval_days=4)

        # 4 * 1.65 = 6.6, then * 0.7 = 4.62
        assert scheduler.compute_interval(steady, previous) == 7
        assert scheduler.compute_interval(erratic, previous) == 5

    def test_low_variance_is_confident(self, scheduler):
        consistent = make_analysis(score=0.5, variance=0.0)

        # 10 * 1.05 * 1.1 = 11.55
        assert scheduler.compute_interval(consistent, make_state(interval_days=10)) == 12

    def test_time_efficiency_factor_is_clamped(self, scheduler):
        previous = make_state(interval_days=4)
        quick = make_analysis(score=0.5, efficiency=2.0)
        slow = make_analysis(score=0.5, efficiency=0.1)

        # 4 * 1.05 * 1.5 = 6.3 and 4 * 1.05 * 0.8 = 3.36
        assert scheduler.compute_interval(quick, previous) == 6
        assert scheduler.compute_interval(slow, previous) == 3

    def test_ease_trend_step(self, scheduler):
        base = scheduler.compute_ease_factor(make_analysis(score=0.7))
        up = scheduler.compute_ease_factor(make_analysis(score=0.7, trend=ConfidenceTrend.IMPROVING))
        down = scheduler.compute_ease_factor(make_analysis(score=0.7, trend=ConfidenceTrend.DECLINING))

        assert up == pytest.approx(base + 0.1)
        assert down == pytest.approx(base - 0.1)

    def test_ease_is_clamped_with_custom_step(self):
        scheduler = IntervalScheduler(replace(DEFAULT_PARAMETERS, ease_trend_step=1.0))

        high = make_analysis(score=0.95, trend=ConfidenceTrend.IMPROVING)
        low = make_analysis(score=0.1, trend=ConfidenceTrend.DECLINING)

        assert scheduler.compute_ease_factor(high) == 3.0
        assert scheduler.compute_ease_factor(low) == 1.3


class TestInvariants:
    def test_outputs_always_in_range(self, scheduler):
        previous_states = [None] + [make_state(interval_days=d) for d in (1, 2, 7, 15, 30)]
        for score in (0.1, 0.2, 0.39, 0.4, 0.5, 0.6, 0.75, 0.8, 0.9, 1.0):
            for trend in ConfidenceTrend:
                for variance in (0.0, 0.2, 0.5):
                    for efficiency in (0.1, 1.0, 2.0):
                        analysis = make_analysis(score, trend, variance, efficiency)
                        for previous in previous_states:
                            interval, ease = scheduler.schedule(analysis, previous)
                            assert isinstance(interval, int)
                            assert 1 <= interval <= 30
                            assert 1.3 <= ease <= 3.0

    def test_better_correctness_never_shortens_interval(self, scheduler, make_history):
        analyzer = PerformanceAnalyzer()
        previous = make_state(interval_days=6)

        intervals = []
        for step in range(21):
            correctness = step / 20
            # Same confidence and timing everywhere: trend, variance and
            # efficiency stay fixed while correctness rises.
            analysis = analyzer.analyze(make_history(*[(correctness, 3, 30)] * 5))
            intervals.append(scheduler.compute_interval(analysis, previous))

        assert intervals == sorted(intervals)


class TestNextState:
    def test_first_review_creates_state(self, scheduler):
        state = scheduler.next_state("u1", "c1", "Derivatives", make_analysis(), None, NOW)

        assert state.repetitions == 1
        assert state.last_reviewed == NOW
        assert state.next_review == NOW + timedelta(days=state.interval_days)
        assert state.concept_title == "Derivatives"

    def test_review_increments_repetitions(self, scheduler):
        previous = make_state(interval_days=3, repetitions=4)

        state = scheduler.next_state("u1", "c1", "Derivatives", make_analysis(score=0.9), previous, NOW)

        assert state.repetitions == 5
        assert state.next_review - state.last_reviewed == timedelta(days=state.interval_days)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(1.4999) == 1
    assert round_half_up(29.5) == 30
