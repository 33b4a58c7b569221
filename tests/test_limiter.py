"""Tests for cfn_metrics_advisor.limiter."""

import logging

import pytest

from cfn_metrics_advisor.config import DEFAULT_MAX_ALARMS, ENV_MAX_ALARMS
from cfn_metrics_advisor.limiter import limit_alarms
from cfn_metrics_advisor.models import (
    Category,
    EvaluationPeriod,
    Importance,
    MetricDefinition,
    Statistic,
    Threshold,
)


def _definition(name: str, importance: Importance, critical: int = 10) -> MetricDefinition:
    return MetricDefinition(
        metric_name=name,
        namespace="AWS/Test",
        unit="Count",
        statistic=Statistic.AVERAGE,
        evaluation_period=EvaluationPeriod.FIVE_MINUTES,
        category=Category.PERFORMANCE,
        importance=importance,
        threshold=Threshold(warning=1, critical=critical),
    )


def _mixed(per_tier: int = 10) -> list[MetricDefinition]:
    defs = []
    for i in range(per_tier):
        defs.append(_definition(f"Low{i}", Importance.LOW, critical=1000 + i))
        defs.append(_definition(f"Medium{i}", Importance.MEDIUM, critical=100 + i))
        defs.append(_definition(f"High{i}", Importance.HIGH, critical=10 + i))
    return defs


class TestLimitAlarms:
    def test_keeps_high_and_medium_over_low(self) -> None:
        kept = limit_alarms(_mixed(), 20)
        assert len(kept) == 20
        assert {d.importance for d in kept} == {Importance.HIGH, Importance.MEDIUM}
        assert all(d.importance is Importance.HIGH for d in kept[:10])

    def test_within_limit_returned_unchanged(self) -> None:
        defs = _mixed(3)
        assert limit_alarms(defs, 9) is defs

    def test_empty_list(self) -> None:
        assert limit_alarms([], 5) == []

    def test_critical_breaks_ties_descending(self) -> None:
        defs = [_definition(f"M{c}", Importance.MEDIUM, critical=c) for c in (5, 50, 20)]
        assert [d.metric_name for d in limit_alarms(defs, 2)] == ["M50", "M20"]

    def test_sort_is_stable(self) -> None:
        defs = [_definition(f"Same{i}", Importance.HIGH, critical=7) for i in range(5)]
        assert [d.metric_name for d in limit_alarms(defs, 3)] == ["Same0", "Same1", "Same2"]

    def test_inputs_not_mutated(self) -> None:
        defs = _mixed()
        before = [d.metric_name for d in defs]
        limit_alarms(defs, 5)
        assert [d.metric_name for d in defs] == before

    @pytest.mark.parametrize("max_count", [0, -3, "abc", "2.5"])
    def test_invalid_cap_uses_default(self, max_count: object) -> None:
        assert len(limit_alarms(_mixed(), max_count)) == DEFAULT_MAX_ALARMS  # type: ignore[arg-type]

    def test_string_cap_is_parsed(self) -> None:
        assert len(limit_alarms(_mixed(), "4")) == 4

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_MAX_ALARMS, "5")
        kept = limit_alarms(_mixed())
        assert len(kept) == 5
        assert all(d.importance is Importance.HIGH for d in kept)

    @pytest.mark.parametrize("raw", ["++3", "²", "1²"])
    def test_non_decimal_env_uses_default(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        monkeypatch.setenv(ENV_MAX_ALARMS, raw)
        assert limit_alarms([]) == []
        assert len(limit_alarms(_mixed())) == DEFAULT_MAX_ALARMS

    def test_explicit_cap_wins_over_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_MAX_ALARMS, "5")
        assert len(limit_alarms(_mixed(), 12)) == 12

    def test_truncation_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="cfn_metrics_advisor.limiter"):
            limit_alarms(_mixed(), 20)
        assert "Limited alarm recommendations from 30 to 20 (10 dropped)" in caplog.text
