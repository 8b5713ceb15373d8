"""Tests for the per-system edge diagnostics."""

from datetime import datetime, timedelta

import pytest

from silence_journal.journal.sessions import SessionStats
from silence_journal.journal.system_intelligence import (
    MIN_SYSTEM_TRADES,
    NEUTRAL_SYSTEM_CONSISTENCY,
    analyze_system_intelligence,
    confluence_details,
    sample_size_score,
    system_consistency,
    system_diagnosis,
)

from tests.conftest import make_system, make_trade

RULES = {"r1": True, "r2": True, "r3": False}


@pytest.fixture
def three_rule_system():
    return make_system(
        rules=[
            ("r1", "Wait for HTF", True),
            ("r2", "Killzones only", True),
            ("r3", "Risk 1%", True),
        ]
    )


@pytest.fixture
def london_edge_trades():
    """Six London wins and four New York losses in June."""
    london = [
        make_trade(2.0, at=datetime(2024, 6, 3 + i, 10), rules=RULES, pois=["FVG"],
                   sessions=["London"])
        for i in range(6)
    ]
    new_york = [
        make_trade(-1.0, at=datetime(2024, 6, 10 + i, 14), rules=RULES, pois=["FVG"],
                   sessions=["New York"])
        for i in range(4)
    ]
    return london + new_york


class TestGuard:
    def test_nine_trades_not_enough(self, three_rule_system):
        trades = [make_trade(at=datetime(2024, 6, 3) + timedelta(days=i)) for i in range(9)]
        report = analyze_system_intelligence(trades, three_rule_system)
        assert report.overall_win_rate == 0
        assert report.edge_clarity_score == 0
        assert report.consistency_rating == 0
        assert report.best_setup is None
        assert report.session_analysis == {}
        assert report.diagnosis == [
            "Not enough trades for analysis. Log at least 10 trades with this system."
        ]
        assert len(report.recommendations) == 1

    def test_tenth_trade_lifts_guard(self, three_rule_system):
        trades = [make_trade(at=datetime(2024, 6, 3) + timedelta(days=i)) for i in range(10)]
        report = analyze_system_intelligence(trades, three_rule_system)
        assert report.overall_win_rate == 100.0
        assert report.edge_clarity_score > 0

    def test_only_system_trades_count(self, three_rule_system):
        foreign = [make_trade(system_id="other") for _ in range(MIN_SYSTEM_TRADES)]
        report = analyze_system_intelligence(foreign, three_rule_system)
        assert report.overall_win_rate == 0
        assert len(report.diagnosis) == 1


class TestLondonEdge:
    @pytest.fixture
    def report(self, london_edge_trades, three_rule_system):
        return analyze_system_intelligence(london_edge_trades, three_rule_system)

    def test_headline_numbers(self, report):
        assert report.overall_win_rate == pytest.approx(60.0)
        assert report.consistency_rating == NEUTRAL_SYSTEM_CONSISTENCY
        # 90*0.4 + 50*0.25 + 66.67*0.2 + 40*0.15 = 67.83
        assert report.edge_clarity_score == 68

    def test_best_and_worst_setups(self, report):
        assert report.best_setup.session == "London"
        assert report.best_setup.win_rate == 100.0
        assert report.best_setup.total_trades == 6
        assert report.best_setup.avg_r == pytest.approx(2.0)
        assert report.worst_setup.session == "New York"
        assert report.worst_setup.avg_r == pytest.approx(-1.0)

    def test_confluence_details(self, report):
        details = report.best_setup.confluence_details
        assert details.rules_followed == ["Wait for HTF", "Killzones only"]
        assert details.rules_violated == ["Risk 1%"]
        assert details.key_factors == ["FVG", "London"]
        assert report.worst_setup.confluence_details.key_factors == ["FVG", "New York"]

    def test_diagnosis(self, report):
        assert report.diagnosis == ["Your system shows a strong edge with a 60.0% win rate."]

    def test_recommendations(self, report):
        assert report.recommendations == [
            "Focus on London session where your win rate is 100%. "
            "Consider reducing or eliminating New York trades.",
            "Your system has a clear edge. Focus on consistency and avoiding rule violations.",
            "Continue logging trades. You have 10 trades - aim for 30+ for reliable statistics.",
        ]

    def test_document_uses_camel_case(self, report):
        doc = report.to_document()
        assert doc["bestSetup"]["confluenceDetails"]["keyFactors"] == ["FVG", "London"]
        assert set(doc["scoreExplanations"]) == {"edgeClarity", "consistency"}


class TestSetups:
    def test_single_qualifying_session_has_no_worst(self, three_rule_system):
        trades = [make_trade(at=datetime(2024, 6, 3 + i, 10)) for i in range(10)]
        report = analyze_system_intelligence(trades, three_rule_system)
        assert report.best_setup.session == "London"
        assert report.worst_setup is None

    def test_sessions_under_three_trades_ignored(self, three_rule_system):
        trades = [make_trade(at=datetime(2024, 6, 3 + i, 10)) for i in range(8)]
        trades += [make_trade(-1.0, at=datetime(2024, 6, 20 + i, 3)) for i in range(2)]
        report = analyze_system_intelligence(trades, three_rule_system)
        assert report.worst_setup is None
        assert "Asian" in report.session_analysis

    def test_dangling_rule_ids_skipped(self, three_rule_system):
        trade = make_trade(rules={"ghost": False, "r1": True})
        details = confluence_details([trade], three_rule_system)
        assert details.rules_followed == ["Wait for HTF"]
        assert details.rules_violated == []


class TestSystemConsistency:
    def _months(self, may_wins: int, june_wins: int, per_month: int = 5):
        trades = []
        for month, wins in ((5, may_wins), (6, june_wins)):
            for i in range(per_month):
                result = 1.0 if i < wins else -1.0
                trades.append(make_trade(result, at=datetime(2024, month, 1 + i, 10)))
        return trades

    def test_stable_months(self):
        assert system_consistency(self._months(3, 3)) == 90

    def test_volatile_months(self):
        assert system_consistency(self._months(5, 0)) == 30

    def test_small_months_excluded(self):
        trades = [make_trade(at=datetime(2024, 5, 1 + i, 10)) for i in range(8)]
        trades += [make_trade(at=datetime(2024, 6, 1 + i, 10)) for i in range(2)]
        assert system_consistency(trades) == NEUTRAL_SYSTEM_CONSISTENCY


@pytest.mark.parametrize(
    "n, expected",
    [(0, 20), (9, 20), (10, 40), (29, 40), (30, 60), (50, 80), (99, 80), (100, 100)],
)
def test_sample_size_score(n, expected):
    assert sample_size_score(n) == expected


def _london(results, *, start=datetime(2024, 6, 3, 10), **kwargs):
    return [make_trade(r, at=start + timedelta(days=i), **kwargs) for i, r in enumerate(results)]


class TestDiagnosis:
    def test_session_variance(self, three_rule_system):
        london = _london([1.0, 1.0, 1.0, 1.0, -1.0])
        new_york = _london([1.0, 1.0, -1.0, -1.0, -1.0], start=datetime(2024, 6, 3, 14))
        report = analyze_system_intelligence(london + new_york, three_rule_system)
        assert report.diagnosis == [
            "Your system shows a strong edge with a 60.0% win rate.",
            "Significant session variance detected: London (80%) vs New York (40%).",
        ]

    def test_variance_needs_five_trades_per_session(self):
        sessions = {
            "London": SessionStats(win_rate=100.0, trades=5, avg_r=1.0),
            "New York": SessionStats(win_rate=0.0, trades=4, avg_r=-1.0),
        }
        assert len(system_diagnosis([], 60.0, sessions)) == 1

    def test_variance_gap_must_exceed_fifteen(self):
        sessions = {
            "London": SessionStats(win_rate=60.0, trades=5, avg_r=1.0),
            "New York": SessionStats(win_rate=45.0, trades=5, avg_r=-1.0),
        }
        assert len(system_diagnosis([], 60.0, sessions)) == 1

    def test_marginal_tier_and_costly_violations(self, three_rule_system):
        clean = _london([1.0] * 5, rules={"r1": True})
        broken = _london([-1.0] * 5, start=datetime(2024, 6, 10, 10), rules={"r1": False})
        report = analyze_system_intelligence(clean + broken, three_rule_system)
        assert report.diagnosis == [
            "Your system is marginally profitable at 50.0% win rate. "
            "Focus on improving setup selection.",
            "Rule violations are costly: 100% of trades with violations result in losses.",
        ]
        assert report.recommendations == [
            "Continue logging trades. You have 10 trades - aim for 30+ for reliable statistics."
        ]

    def test_violation_loss_rate_at_sixty_is_not_flagged(self):
        violated = _london([-1.0, -1.0, -1.0, 1.0, 1.0], rules={"r1": False})
        assert not any("costly" in line for line in system_diagnosis(violated, 40.0, {}))


class TestRecommendations:
    def test_underperforming_system(self, three_rule_system):
        report = analyze_system_intelligence(
            _london([1.0] * 3 + [-1.0] * 7), three_rule_system
        )
        assert report.diagnosis == [
            "Your system is currently underperforming at 30.0% win rate. Review your entry criteria."
        ]
        assert report.recommendations == [
            "Review your entry criteria. Consider adding more confluence factors before entering trades.",
            "Continue logging trades. You have 10 trades - aim for 30+ for reliable statistics.",
            "Your average R is negative. Focus on cutting losses quickly and letting winners run.",
        ]

    def test_large_sample_with_strong_average_r(self, three_rule_system):
        trades = _london([2.0] * 100, start=datetime(2024, 1, 1, 10))
        report = analyze_system_intelligence(trades, three_rule_system)
        assert report.recommendations == [
            "Your system has a clear edge. Focus on consistency and avoiding rule violations.",
            "You have a solid sample size. Your statistics are reliable for decision-making.",
            "Excellent risk management with 2.00R average. Maintain your current approach.",
        ]

    def test_capped_at_four(self, three_rule_system):
        london = _london([1.0, 1.0, 1.0])
        new_york = _london([-1.0] * 7, start=datetime(2024, 6, 10, 14))
        report = analyze_system_intelligence(london + new_york, three_rule_system)
        assert len(report.recommendations) == 4
        assert report.recommendations[0].startswith("Focus on London session")
        assert report.recommendations[-1].startswith("Your average R is negative")
