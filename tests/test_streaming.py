import pytest

from roster_analytics.schedule import build_schedule_window
from roster_analytics.streaming import (
    FREE_AGENT_REASON,
    active_slot_count,
    bench_slot_count,
    build_starter_set,
    build_streaming_plan,
    collect_free_agents,
)
from roster_analytics.zscores import PlayerZScore

POSITIONS = ["PG", "SG", "SF", "PF", "C", "G", "F", "UTIL", "BN", "BN", "IR"]

GAMES = [
    {"gameId": "g1", "date": "2025-11-03", "tipoffUTC": "2025-11-04T00:00:00Z", "homeTeam": "BOS", "awayTeam": "NYK"},
    {"gameId": "g2", "date": "2025-11-04", "tipoffUTC": "2025-11-05T00:00:00Z", "homeTeam": "LAL", "awayTeam": "BOS"},
    {"gameId": "g3", "date": "2025-11-05", "tipoffUTC": "2025-11-06T00:00:00Z", "homeTeam": "NYK", "awayTeam": "BOS"},
    {"gameId": "g4", "date": "2025-11-06", "tipoffUTC": "2025-11-07T00:00:00Z", "homeTeam": "BOS", "awayTeam": "LAL"},
]


@pytest.fixture
def league():
    teams = {
        "m1": "LAL", "m2": "LAL", "o1": "BOS",
        "fa1": "BOS", "fa2": "NYK", "fa3": "BOS", "fa4": "NYK", "fa5": "BOS", "fa6": "NYK",
        "fa8": "LAL",
    }
    totals = {
        "m1": 1.0, "m2": 2.0, "o1": 3.0,
        "fa1": 6.0, "fa2": 5.0, "fa3": 4.0, "fa4": 3.0, "fa5": 2.0, "fa6": 1.0,
        "fa7": 10.0, "fa8": 0.5,
    }
    players = {pid: {"full_name": pid.upper(), "team": team} for pid, team in teams.items()}
    players["fa7"] = {"full_name": "FA7"}
    z_scores = {pid: PlayerZScore(pid, pid.upper(), {}, total) for pid, total in totals.items()}
    mine = {"roster_id": 1, "players": ["m1", "m2"], "starters": ["m1"]}
    rosters = [mine, {"roster_id": 2, "players": ["o1"]}]
    return mine, rosters, players, z_scores


def _plan(league, positions=POSITIONS, **kwargs):
    mine, rosters, players, z_scores = league
    window = build_schedule_window(GAMES, "2025-11-03", days=7)
    return build_streaming_plan(
        mine, rosters, positions, z_scores, players, window.daily, window.team_games, **kwargs,
    )


def test_slot_counts_are_case_insensitive():
    assert active_slot_count(POSITIONS) == 8
    assert bench_slot_count(POSITIONS) == 3
    assert active_slot_count(["pg", "bn", "ir+", "na", ""]) == 1
    assert bench_slot_count(["pg", "bn", "ir+", "na", ""]) == 3
    assert active_slot_count(None) == 0


def test_starters_prefer_matchup_entry():
    matchups = [{"roster_id": 2, "starters": ["x"]}, {"roster_id": "1", "starters": ["m2"]}]
    assert build_starter_set(matchups, 1, ["m1"]) == {"m2"}
    assert build_starter_set([{"roster_id": 1, "starters": []}], 1, ["m1"]) == {"m1"}
    assert build_starter_set(None, 1, ["m1"]) == {"m1"}
    assert build_starter_set(matchups, None, None) == set()


def test_free_agent_pool(league):
    _, rosters, players, z_scores = league
    pool = collect_free_agents(z_scores, players, {"m1", "m2", "o1"}, limit=3)

    # fa7 has no team and is skipped despite the best z
    assert [a.player_id for a in pool] == ["fa1", "fa2", "fa3"]
    assert pool[0].reason == FREE_AGENT_REASON
    assert pool[0].team == "BOS"


def test_day_with_no_own_games_recommends_up_to_five(league):
    plan = _plan(league)
    day = plan.days[0]

    assert day.date == "2025-11-03"
    assert day.nba_games == 1
    assert day.players_available == 0
    assert day.holes == 8
    assert [r.player_id for r in day.recommendations] == ["fa1", "fa2", "fa3", "fa4", "fa5"]
    assert day.recommendations[0].reason == "Plays on 2025-11-03 and ranks among top available z-scores"


def test_recommendations_only_from_teams_playing(league):
    plan = _plan(league)
    day = plan.days[1]  # LAL vs BOS

    assert day.players_available == 2
    assert day.holes == 6
    assert [r.player_id for r in day.recommendations] == ["fa1", "fa3", "fa5", "fa8"]


def test_recommendation_cap_scales_with_holes(league):
    plan = _plan(league, positions=["PG", "SG", "SF", "BN"])
    day = plan.days[1]

    assert day.holes == 1
    assert [r.player_id for r in day.recommendations] == ["fa1", "fa3"]


def test_full_lineup_gets_no_recommendations(league):
    plan = _plan(league, positions=["PG", "BN"])
    day = plan.days[1]
    assert day.holes == 0
    assert day.recommendations == []


def test_own_players_sorted_starters_first(league):
    plan = _plan(league)
    own = plan.days[1].own_players
    # m2 has the higher z, but m1 is the starter
    assert [p.player_id for p in own] == ["m1", "m2"]
    assert own[0].is_starter


def test_matchup_starters_override_roster(league):
    plan = _plan(league, matchups=[{"roster_id": 1, "starters": ["m2"]}])
    assert [p.player_id for p in plan.days[1].own_players] == ["m2", "m1"]


def test_upcoming_game_caps(league):
    plan = _plan(league)

    own = plan.days[1].own_players[0]
    assert [g.game_id for g in own.upcoming_games] == ["g2", "g4"]

    candidate = plan.days[0].recommendations[0]  # fa1, BOS
    assert [g.game_id for g in candidate.upcoming_games] == ["g1", "g2", "g3"]


def test_custom_limits(league):
    plan = _plan(league, limits={"max_recommendations": 1})
    assert [r.player_id for r in plan.days[0].recommendations] == ["fa1"]


def test_plan_metadata(league):
    plan = _plan(league, league_id="L1", generated_at="2025-11-03T12:00:00Z")

    assert plan.roster_id == 1
    assert plan.metadata == {"active_slots": 8, "bench_slots": 3, "total_roster_players": 2}
    assert [d.date for d in plan.days] == ["2025-11-03", "2025-11-04", "2025-11-05", "2025-11-06"]

    data = plan.to_dict()
    assert data["league_id"] == "L1"
    assert data["generated_at"] == "2025-11-03T12:00:00Z"
    assert data["days"][0]["day_label"] == "Mon, Nov 03"
    assert data["days"][0]["recommendations"][0]["upcoming_games"][0]["game_id"] == "g1"


def test_accepts_plain_dict_schedule(league):
    mine, rosters, players, z_scores = league
    daily = [{"date": "2025-11-04", "teamsPlaying": ["LAL", "BOS"], "games": []}]
    plan = build_streaming_plan(mine, rosters, ["PG"], z_scores, players, daily, {})
    assert plan.days[0].players_available == 2
    assert plan.days[0].own_players[0].upcoming_games == ()


def test_empty_schedule(league):
    mine, rosters, players, z_scores = league
    plan = build_streaming_plan(mine, rosters, POSITIONS, z_scores, players, [], None)
    assert plan.days == []
    assert plan.total_roster_players == 2
