"""Property tests for analytics invariants.

Uses hypothesis to verify:
- Rates and scores always land in [0, 100]
- The equity curve has one point per trade and ends at the summed R
- Rules a system never tracked rank at rate 0
- Analyzers are pure: the same input yields the same output
"""

from datetime import timedelta

import pytest
from hypothesis import given, settings, strategies as st

from silence_journal.core.enums import Emotion, TradingSession
from silence_journal.journal.metrics import calculate_metrics
from silence_journal.journal.psychology import analyze_psychology
from silence_journal.journal.rule_violations import analyze_rule_violations
from silence_journal.journal.sessions import classify_session
from silence_journal.journal.system_intelligence import analyze_system_intelligence

from tests.conftest import BASE_TIME, make_system, make_trade

EMOTIONS = [e.value for e in Emotion] + ["Revenge"]

trade_strategy = st.builds(
    lambda result, offset_hours, r1, r2, emotions, risk: make_trade(
        result,
        at=BASE_TIME + timedelta(hours=offset_hours),
        rules={k: v for k, v in (("r1", r1), ("r2", r2)) if v is not None},
        emotions=emotions,
        risk_percent=risk,
    ),
    st.floats(min_value=-5, max_value=10, allow_nan=False).map(lambda x: round(x, 2)),
    st.integers(min_value=0, max_value=24 * 90),
    st.one_of(st.none(), st.booleans()),
    st.one_of(st.none(), st.booleans()),
    st.lists(st.sampled_from(EMOTIONS), max_size=3, unique=True),
    st.one_of(st.none(), st.floats(min_value=0.1, max_value=5)),
)

trades_strategy = st.lists(trade_strategy, max_size=40)


@given(trades=trades_strategy)
@settings(max_examples=60, deadline=None)
def test_metrics_percentages_bounded(trades):
    metrics = calculate_metrics(trades)
    assert 0 <= metrics.win_rate <= 100
    assert 0 <= metrics.rules_followed_percent <= 100
    if trades:
        assert (metrics.win_rate == 100) == all(t.result_r > 0 for t in trades)
    for stats in metrics.emotion_performance.values():
        assert 0 <= stats.win_rate <= 100
        assert 0 < stats.total <= len(trades)


@given(trades=trades_strategy)
@settings(max_examples=60, deadline=None)
def test_equity_curve_accumulates_every_trade(trades):
    curve = calculate_metrics(trades).equity_curve
    assert len(curve) == len(trades)
    if trades:
        assert curve[-1].balance == pytest.approx(sum(t.result_r for t in trades))


@given(trades=trades_strategy)
@settings(max_examples=60, deadline=None)
def test_untracked_rule_has_zero_rate(trades):
    system = make_system(rules=[("r1", "Wait", True), ("r2", "Zones", True), ("r9", "Never", True)])
    stats = {s.rule_id: s for s in analyze_rule_violations(system, trades)}
    assert stats["r9"].times_active == 0
    assert stats["r9"].violation_rate == 0
    for stat in stats.values():
        assert 0 <= stat.violation_rate <= 100
        assert stat.violations <= stat.times_active


@given(trades=trades_strategy)
@settings(max_examples=60, deadline=None)
def test_psychology_scores_clamped(trades):
    score = analyze_psychology(trades, []).score
    for value in (
        score.overall,
        score.rule_adherence,
        score.emotional_stability,
        score.trading_discipline,
        score.consistency,
    ):
        assert 0 <= value <= 100


@given(trades=trades_strategy)
@settings(max_examples=40, deadline=None)
def test_system_intelligence_bounded(trades):
    report = analyze_system_intelligence(trades, make_system())
    assert 0 <= report.overall_win_rate <= 100
    assert 0 <= report.edge_clarity_score <= 100
    assert 0 <= report.consistency_rating <= 100
    assert len(report.recommendations) <= 4


@given(trades=trades_strategy)
@settings(max_examples=30, deadline=None)
def test_analyzers_are_idempotent(trades):
    system = make_system()
    assert calculate_metrics(trades) == calculate_metrics(trades)
    assert analyze_psychology(trades, [system]) == analyze_psychology(trades, [system])
    assert analyze_system_intelligence(trades, system) == analyze_system_intelligence(trades, system)


@given(hour=st.integers(min_value=0, max_value=23))
def test_every_hour_has_a_session(hour):
    assert isinstance(classify_session(hour), TradingSession)
