import pytest

from roster_analytics.trends import (
    TrendStatus,
    classify_trend,
    detect_trends,
    format_trend_status,
    trend_confidence,
)
from roster_analytics.zscores import PlayerZScore


def _z(**totals):
    return {pid: PlayerZScore(pid, pid.upper(), {}, total) for pid, total in totals.items()}


@pytest.mark.parametrize(
    "season, recent, expected",
    [
        (1.0, -1.0, TrendStatus.BUY_LOW),
        (-1.0, 1.0, TrendStatus.SELL_HIGH),
        (0.0, 1.2, TrendStatus.BREAKOUT),
        (2.0, 0.9, TrendStatus.DECLINE),
        (0.2, 0.4, TrendStatus.NEUTRAL),
        # thresholds are strict
        (0.5, -1.5, TrendStatus.NEUTRAL),
        (-0.5, 1.5, TrendStatus.BREAKOUT),
    ],
)
def test_classify_trend(season, recent, expected):
    status, _ = classify_trend(season, recent)
    assert status is expected


def test_first_matching_rule_wins():
    # also satisfies DECLINE (recent < season - 1, season > 0.5)
    status, reasoning = classify_trend(2.0, 0.0)
    assert status is TrendStatus.BUY_LOW
    assert reasoning == "Season Z: 2.00, Recent Z: 0.00 - Underperforming recently"


def test_reasoning_strings():
    assert classify_trend(-1.0, 1.0)[1].endswith("Overperforming recently")
    assert classify_trend(0.0, 1.2)[1] == "Trending up significantly - Recent Z: 1.20"
    assert classify_trend(2.0, 0.9)[1] == "Trending down from strength - Recent Z: 0.90"


def test_custom_thresholds():
    thresholds = {
        "buy_low_min_season": 0.0, "buy_low_max_diff": -0.5,
        "sell_high_max_season": -9, "sell_high_min_diff": 9,
        "breakout_margin": 9, "breakout_max_season": -9,
        "decline_margin": 9, "decline_min_season": 9,
    }
    assert classify_trend(0.2, -0.4, thresholds)[0] is TrendStatus.BUY_LOW


def test_confidence_blends_games_share_and_magnitude():
    assert trend_confidence(-2.0, recent_gp=4, season_gp=20) == pytest.approx(20.0)
    # both components are capped at 100
    assert trend_confidence(50.0, recent_gp=30, season_gp=10) == pytest.approx(100.0)
    # season games floor at 1
    assert trend_confidence(0.0, recent_gp=1, season_gp=0) == pytest.approx(60.0)


def test_detect_trends_records_and_sublists():
    season = _z(a=1.0, b=-1.0, c=0.0, d=2.0, e=0.2, only_season=3.0)
    recent = _z(a=-1.0, b=1.0, c=1.2, d=0.9, e=0.4, only_recent=1.0)
    season_stats = {pid: {"gp": 20} for pid in season}
    recent_stats = {pid: {"gp": 4} for pid in recent}

    analysis = detect_trends(season, recent, season_stats, recent_stats)

    assert [t.player_id for t in analysis.trends] == ["a", "b", "c", "d", "e"]
    assert [t.player_id for t in analysis.buy_low] == ["a"]
    assert [t.player_id for t in analysis.sell_high] == ["b"]
    assert [t.player_id for t in analysis.breakouts] == ["c"]
    assert [t.player_id for t in analysis.declines] == ["d"]

    a = analysis.trends[0]
    assert a.player_name == "A"
    assert a.z_difference == pytest.approx(-2.0)
    assert a.confidence_score == pytest.approx(20.0)


def test_sublist_ordering():
    season = _z(x=1.0, y=1.0, b1=0.0, b2=0.0, d1=3.0, d2=3.0)
    recent = _z(x=-0.6, y=-2.0, b1=1.2, b2=1.5, d1=1.9, d2=1.5)
    stats = {pid: {"gp": 10} for pid in season}

    analysis = detect_trends(season, recent, stats, stats)

    # buy-low by confidence (bigger swing first)
    assert [t.player_id for t in analysis.buy_low] == ["y", "x"]
    # breakout by recent z, descending
    assert [t.player_id for t in analysis.breakouts] == ["b2", "b1"]
    # decline by recent z, ascending
    assert [t.player_id for t in analysis.declines] == ["d2", "d1"]


def test_missing_stats_still_classify():
    analysis = detect_trends(_z(a=1.0), _z(a=-1.0), None, None)
    assert analysis.trends[0].status is TrendStatus.BUY_LOW
    assert analysis.trends[0].confidence_score == pytest.approx(8.0)


def test_to_dict_and_labels():
    analysis = detect_trends(_z(a=1.0), _z(a=-1.0), {}, {})
    data = analysis.to_dict()
    assert data["buy_low"][0]["status"] == "BUY_LOW"
    assert set(data) == {"trends", "buy_low", "sell_high", "breakouts", "declines"}
    assert format_trend_status(TrendStatus.SELL_HIGH) == "Sell High"
    assert format_trend_status("BREAKOUT") == "Breakout"
    assert format_trend_status("weird") == "weird"
