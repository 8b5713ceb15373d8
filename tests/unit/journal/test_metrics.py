"""Tests for the dashboard metrics aggregator."""

from datetime import datetime, timedelta

import pytest

from silence_journal.journal.metrics import (
    DEFAULT_RULE_RESPECT_SCORE,
    TradeMetrics,
    average_rule_respect,
    calculate_metrics,
    emotion_performance,
    equity_curve,
)

from tests.conftest import NOW, make_trade


@pytest.fixture
def trades():
    return [
        make_trade(
            2.0,
            at=datetime(2024, 6, 10, 10),
            risk_reward=3.0,
            rules={"r1": True, "r2": False},
            emotions=["Calm"],
            rule_respect_score=50,
        ),
        make_trade(
            -1.0,
            at=datetime(2024, 6, 5, 10),
            risk_reward=2.0,
            rules={"r1": True},
            emotions=["FOMO"],
        ),
        make_trade(
            1.0,
            at=datetime(2024, 5, 1, 10),
            risk_reward=1.0,
            emotions=["Calm"],
            rule_respect_score=0,
        ),
    ]


class TestEmptyInput:
    def test_all_zero_document(self, clock):
        assert calculate_metrics([], clock=clock).to_document() == {
            "winRate": 0,
            "avgRR": 0,
            "equityCurve": [],
            "rulesFollowedPercent": 0,
            "avgRRS30Days": 0,
            "emotionPerformance": {},
        }

    def test_returns_default_model(self, clock):
        assert calculate_metrics([], clock=clock) == TradeMetrics()


class TestCalculateMetrics:
    def test_win_rate(self, trades, clock):
        assert calculate_metrics(trades, clock=clock).win_rate == pytest.approx(200 / 3)

    @pytest.mark.parametrize(
        "results, expected",
        [([1.0, 0.5, 2.0], 100.0), ([1.0, 0.5, 0.0], pytest.approx(200 / 3)), ([1.0, -0.1], 50.0)],
    )
    def test_full_win_rate_only_when_every_trade_is_positive(self, clock, results, expected):
        trades = [make_trade(r) for r in results]
        assert calculate_metrics(trades, clock=clock).win_rate == expected

    def test_avg_rr_uses_planned_rr_of_winners(self, trades, clock):
        # (3.0 + 1.0) / 2 winners; the loser's planned RR is ignored
        assert calculate_metrics(trades, clock=clock).avg_rr == pytest.approx(2.0)

    def test_avg_rr_without_winners_is_zero(self, clock):
        losers = [make_trade(-1.0, risk_reward=3.0), make_trade(0.0, risk_reward=2.0)]
        assert calculate_metrics(losers, clock=clock).avg_rr == 0.0

    def test_rules_followed_percent_pools_entries(self, trades, clock):
        assert calculate_metrics(trades, clock=clock).rules_followed_percent == pytest.approx(
            200 / 3
        )

    def test_avg_rrs_only_counts_recent_trades(self, trades, clock):
        # 50 and a missing score treated as 100; the May trade is outside the window
        assert calculate_metrics(trades, clock=clock).avg_rrs_30_days == pytest.approx(75.0)

    def test_camel_case_aliases(self, trades, clock):
        doc = calculate_metrics(trades, clock=clock).to_document()
        assert "avgRR" in doc
        assert "avgRRS30Days" in doc


class TestEquityCurve:
    def test_sorted_by_date_with_running_balance(self, trades):
        curve = equity_curve(trades)
        assert [p.date[:10] for p in curve] == ["2024-05-01", "2024-06-05", "2024-06-10"]
        assert [p.balance for p in curve] == [1.0, 0.0, 2.0]

    def test_length_and_final_balance(self, trades):
        curve = equity_curve(trades)
        assert len(curve) == len(trades)
        assert curve[-1].balance == pytest.approx(sum(t.result_r for t in trades))


class TestAverageRuleRespect:
    def test_no_recent_trades(self, clock):
        old = [make_trade(at=NOW - timedelta(days=45), rule_respect_score=80)]
        assert average_rule_respect(old, clock=clock) == 0.0

    def test_window_is_inclusive(self, clock):
        edge = [make_trade(at=NOW - timedelta(days=30), rule_respect_score=80)]
        assert average_rule_respect(edge, clock=clock) == 80.0

    def test_zero_score_is_not_replaced(self, clock):
        recent = [
            make_trade(at=NOW - timedelta(days=1), rule_respect_score=0),
            make_trade(at=NOW - timedelta(days=2)),
        ]
        assert average_rule_respect(recent, clock=clock) == pytest.approx(
            DEFAULT_RULE_RESPECT_SCORE / 2
        )


class TestEmotionPerformance:
    def test_stats_in_tag_order(self, trades):
        result = emotion_performance(trades)
        assert list(result) == ["Calm", "FOMO"]
        calm = result["Calm"]
        assert (calm.wins, calm.total, calm.win_rate, calm.avg_r) == (2, 2, 100.0, 1.5)
        assert result["FOMO"].win_rate == 0.0

    def test_unknown_tags_ignored(self):
        assert emotion_performance([make_trade(emotions=["Bored"])]) == {}
