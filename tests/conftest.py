"""Shared fixtures: a small two-team league with free agents and a schedule."""

from __future__ import annotations

import json

import pytest


def _line(gp, pts, reb, ast, to, fgm, fga, name=None):
    record = {"gp": gp, "pts": pts, "reb": reb, "ast": ast, "to": to, "fgm": fgm, "fga": fga}
    if name:
        record["player_name"] = name
    return record


@pytest.fixture
def scoring_settings():
    return {"pts": 1, "reb": 1, "ast": 1, "to": -1, "fg_pct": 1, "bonus_pt_40p": 2, "blk": 0}


@pytest.fixture
def rosters():
    return [
        {"roster_id": 1, "players": ["101", "102", "103"], "starters": ["101", "102"]},
        {"roster_id": 2, "players": ["201", "202", "203"], "starters": ["201"]},
    ]


@pytest.fixture
def players():
    return {
        "101": {"full_name": "Ava Guard", "team": "BOS", "fantasy_positions": ["PG", "SG"]},
        "102": {"first_name": "Ben", "last_name": "Wing", "team": "NY", "position": "SF"},
        "103": {"full_name": "Cal Center", "team": "LAL", "fantasy_positions": ["C"],
                "injury_status": "Out", "injury_body_part": "Knee"},
        "201": {"full_name": "Dee Scorer", "team": "GS", "fantasy_positions": ["SG"]},
        "202": {"full_name": "Eli Board", "team": "BOS", "fantasy_positions": ["PF", "C"]},
        "203": {"full_name": "Fay Dimes", "team": "NYK", "fantasy_positions": ["PG"]},
        "301": {"full_name": "Gus Stream", "team": "NYK", "fantasy_positions": ["SF"]},
        "302": {"full_name": "Hal Bench", "team": "LAL", "fantasy_positions": ["PF"]},
        "303": {"full_name": "Ivy Nowhere", "fantasy_positions": ["G"]},
    }


@pytest.fixture
def season_stats():
    return {
        "101": _line(10, 250, 50, 80, 30, 90, 180, "Ava Guard"),
        "102": _line(10, 150, 60, 30, 15, 55, 120),
        "103": _line(10, 120, 110, 20, 20, 50, 80, "Cal Center"),
        "201": _line(10, 280, 40, 40, 35, 100, 220, "Dee Scorer"),
        "202": _line(10, 100, 120, 15, 10, 45, 75, "Eli Board"),
        "203": _line(10, 90, 30, 90, 25, 35, 90, "Fay Dimes"),
        "301": _line(8, 120, 40, 20, 8, 45, 90, "Gus Stream"),
        "302": _line(5, 30, 25, 5, 4, 12, 25, "Hal Bench"),
        "303": _line(6, 60, 10, 10, 5, 20, 50, "Ivy Nowhere"),
        "999": _line(0, 0, 0, 0, 0, 0, 0, "Never Played"),
    }


@pytest.fixture
def recent_stats_weeks():
    return [
        {
            "101": _line(2, 30, 8, 10, 8, 10, 30, "Ava Guard"),
            "102": _line(2, 50, 14, 8, 2, 20, 34),
            "201": _line(2, 60, 8, 8, 6, 22, 44, "Dee Scorer"),
            "202": _line(2, 20, 24, 3, 2, 9, 15, "Eli Board"),
            "203": _line(2, 18, 6, 18, 5, 7, 18, "Fay Dimes"),
        },
        {
            "101": _line(2, 28, 6, 12, 7, 9, 28, "Ava Guard"),
            "102": _line(2, 46, 12, 6, 3, 18, 30),
            "103": _line(2, 24, 22, 4, 4, 10, 16, "Cal Center"),
            "201": _line(2, 54, 10, 6, 7, 20, 42, "Dee Scorer"),
            "202": _line(2, 22, 26, 2, 2, 10, 15, "Eli Board"),
        },
    ]


@pytest.fixture
def games():
    return [
        {"gameId": "g1", "date": "2025-11-03", "tipoffUTC": "2025-11-04T00:30:00Z",
         "homeTeam": "BOS", "awayTeam": "NY"},
        {"gameId": "g2", "date": "2025-11-03", "tipoffUTC": "2025-11-04T03:00:00Z",
         "homeTeam": "GS", "awayTeam": "UTAH"},
        {"gameId": "g3", "date": "2025-11-04", "tipoffUTC": "2025-11-05T00:00:00Z",
         "homeTeam": "LAL", "awayTeam": "BOS"},
        {"gameId": "g4", "date": "2025-11-05", "tipoffUTC": "2025-11-06T00:00:00Z",
         "homeTeam": "NYK", "awayTeam": "LAL"},
        {"gameId": "g5", "date": "2025-11-12", "tipoffUTC": "2025-11-13T00:00:00Z",
         "homeTeam": "BOS", "awayTeam": "LAL"},
        {"gameId": "bad", "date": "not-a-date", "homeTeam": "BOS", "awayTeam": "NYK"},
    ]


@pytest.fixture
def snapshot_data(scoring_settings, rosters, players, season_stats, recent_stats_weeks, games):
    return {
        "league_id": "L-42",
        "scoring_settings": scoring_settings,
        "roster_positions": ["PG", "SG", "G", "UTIL", "BN", "IR"],
        "rosters": rosters,
        "owners": {"1": "alice", "2": "bob"},
        "players": players,
        "season_stats": season_stats,
        "recent_stats_weeks": recent_stats_weeks,
        "games": games,
        "matchups": [{"roster_id": 1, "starters": ["101"]}],
    }


@pytest.fixture
def snapshot_file(tmp_path, snapshot_data):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_data), encoding="utf-8")
    return path
