import pytest

from roster_analytics.trades import owner_label, recommend_trades
from roster_analytics.zscores import PlayerZScore


@pytest.fixture
def trade_league():
    rosters = [
        {"roster_id": 1, "players": ["m1"]},
        {"roster_id": 2, "players": ["a", "b", "ghost"]},
        {"roster_id": "3", "players": ["c"]},
    ]
    z = {
        "m1": PlayerZScore("m1", "Mine", {"fg_pct": 5.0, "pts": -5.0}, 0.0),
        "a": PlayerZScore("a", "A", {"fg_pct": 1.0, "pts": 1.0}, 2.0),
        "b": PlayerZScore("b", "B", {"fg_pct": 2.0, "pts": -1.0}, 1.0),
        "c": PlayerZScore("c", "C", {"pts": -0.5}, -0.5),
    }
    return rosters, z


def test_scores_other_rosters_best_first(trade_league):
    rosters, z = trade_league

    recs = recommend_trades(1, rosters, z, "fg_pct", "pts", owner_names={"2": "bob"})

    assert [r.player_id for r in recs] == ["b", "c", "a"]
    b = recs[0]
    assert b.need_category_z == 2.0
    assert b.spare_category_z == -1.0
    assert b.trade_score == pytest.approx(3.0)
    assert b.owner_name == "bob"
    assert b.roster_id == 2


def test_missing_category_counts_as_zero_and_owner_falls_back(trade_league):
    rosters, z = trade_league

    recs = recommend_trades(1, rosters, z, "fg_pct", "pts")

    c = next(r for r in recs if r.player_id == "c")
    assert c.need_category_z == 0.0
    assert c.trade_score == pytest.approx(0.5)
    assert c.owner_name == "Team 3"
    assert c.roster_id == 3


def test_own_roster_and_unscored_players_excluded(trade_league):
    rosters, z = trade_league
    ids = {r.player_id for r in recommend_trades("1", rosters, z, "fg_pct", "pts")}
    assert ids == {"a", "b", "c"}


def test_unknown_roster_returns_empty(trade_league):
    rosters, z = trade_league
    assert recommend_trades(99, rosters, z, "fg_pct", "pts") == []
    assert recommend_trades(1, None, z, "fg_pct", "pts") == []


def test_unparseable_roster_id_returns_empty(trade_league):
    rosters, z = trade_league
    rosters = rosters + [{"players": ["a"]}]
    assert recommend_trades("abc", rosters, z, "fg_pct", "pts") == []
    assert recommend_trades(None, rosters, z, "fg_pct", "pts") == []


def test_ties_keep_roster_order():
    rosters = [{"roster_id": 1, "players": []}, {"roster_id": 2, "players": ["x", "y"]}]
    z = {
        "x": PlayerZScore("x", "X", {"reb": 1.0}, 1.0),
        "y": PlayerZScore("y", "Y", {"reb": 1.0}, 1.0),
    }
    assert [r.player_id for r in recommend_trades(1, rosters, z, "reb", "ast")] == ["x", "y"]


def test_owner_label():
    assert owner_label(4, {"4": "dana"}) == "dana"
    assert owner_label(4, {"4": ""}) == "Team 4"
    assert owner_label(4, None) == "Team 4"
