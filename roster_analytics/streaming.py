"""Day-by-day streaming planner.

For each day in a schedule window, counts how many of your rostered players
actually have a game and compares that with the number of active lineup
slots.  When slots would sit empty ("holes") it recommends the best free
agents whose team plays that day, ranked by season total Z.

Flow:
  1. Build the free-agent pool: z-scored players on no roster with a known
     team, best total Z first, capped.
  2. For each day: which teams play, which of your players are available,
     ``holes = max(0, active_slots − available)``.
  3. Attach upcoming games to your available players and order them
     starters first, then by z-score.
  4. If there are holes, recommend up to ``min(holes × 2, 5)`` free agents
     playing that day.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Iterable, Mapping, Sequence

import config
from roster_analytics.players import resolve_player_meta
from roster_analytics.population import coerce_roster_id, roster_player_ids
from roster_analytics.schedule import (
    DailySchedule,
    GameSummary,
    coerce_daily_schedule,
    coerce_team_games,
    day_label,
)
from roster_analytics.stat_records import coerce_number
from roster_analytics.zscores import PlayerZScores

logger = logging.getLogger(__name__)

FREE_AGENT_REASON = "Top free agent by z-score"


@dataclass(frozen=True)
class StreamingPlayer:
    player_id: str
    name: str
    team: str
    positions: tuple[str, ...] = ()
    is_starter: bool = False
    z_score: float = 0.0
    upcoming_games: tuple[GameSummary, ...] = ()
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["positions"] = list(self.positions)
        data["upcoming_games"] = [g.to_dict() for g in self.upcoming_games]
        return data


@dataclass(frozen=True)
class StreamingDayPlan:
    date: str
    day_label: str
    nba_games: int
    teams_playing: tuple[str, ...]
    active_slots: int
    players_available: int
    holes: int
    own_players: list[StreamingPlayer] = field(default_factory=list)
    recommendations: list[StreamingPlayer] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "day_label": self.day_label,
            "nba_games": self.nba_games,
            "teams_playing": list(self.teams_playing),
            "active_slots": self.active_slots,
            "players_available": self.players_available,
            "holes": self.holes,
            "own_players": [p.to_dict() for p in self.own_players],
            "recommendations": [p.to_dict() for p in self.recommendations],
        }


@dataclass(frozen=True)
class StreamingPlan:
    roster_id: int | None
    league_id: str | None
    generated_at: str | None
    active_slots: int
    bench_slots: int
    total_roster_players: int
    days: list[StreamingDayPlan] = field(default_factory=list)

    @property
    def metadata(self) -> dict[str, int]:
        return {
            "active_slots": self.active_slots,
            "bench_slots": self.bench_slots,
            "total_roster_players": self.total_roster_players,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "roster_id": self.roster_id,
            "league_id": self.league_id,
            "generated_at": self.generated_at,
            "metadata": self.metadata,
            "days": [d.to_dict() for d in self.days],
        }


# ---------------------------------------------------------------------------
# Roster helpers
# ---------------------------------------------------------------------------

def _is_bench(slot: str, bench_codes: frozenset[str]) -> bool:
    return slot.upper() in bench_codes


def active_slot_count(
    roster_positions: Iterable[str] | None,
    bench_codes: frozenset[str] | None = None,
) -> int:
    """Lineup slots that score (anything not a bench code)."""
    codes = bench_codes if bench_codes is not None else config.BENCH_CODES
    return sum(1 for slot in roster_positions or [] if slot and not _is_bench(str(slot), codes))


def bench_slot_count(
    roster_positions: Iterable[str] | None,
    bench_codes: frozenset[str] | None = None,
) -> int:
    codes = bench_codes if bench_codes is not None else config.BENCH_CODES
    return sum(1 for slot in roster_positions or [] if slot and _is_bench(str(slot), codes))


def build_starter_set(
    matchups: Sequence[Mapping[str, Any]] | None,
    roster_id: Any,
    fallback_starters: Iterable[str] | None = None,
) -> set[str]:
    """Current-week starters from the matchup feed, else the stored starters."""
    fallback = {str(p) for p in fallback_starters or [] if p}
    if not matchups or not roster_id:
        return fallback

    target = coerce_number(roster_id)
    for entry in matchups:
        if coerce_number((entry or {}).get("roster_id")) == target:
            starters = [str(p) for p in entry.get("starters") or [] if p]
            if starters:
                return set(starters)
            break
    return fallback


def collect_free_agents(
    z_scores: PlayerZScores,
    players: Mapping[str, Mapping[str, Any]] | None,
    rostered: set[str],
    limit: int | None = None,
) -> list[StreamingPlayer]:
    """Unrostered, z-scored players with a known team, best total Z first."""
    if limit is None:
        limit = config.STREAMING_LIMITS["free_agent_pool"]

    agents: list[StreamingPlayer] = []
    for pid, entry in z_scores.items():
        if pid in rostered:
            continue
        meta = resolve_player_meta(pid, players)
        if not meta["team"]:
            continue
        agents.append(
            StreamingPlayer(
                player_id=pid,
                name=meta["name"],
                team=meta["team"],
                positions=tuple(meta["positions"]),
                z_score=entry.total_z,
                reason=FREE_AGENT_REASON,
            )
        )

    agents.sort(key=lambda a: -a.z_score)
    return agents[:limit]


def with_upcoming_games(
    entries: Iterable[StreamingPlayer],
    team_games: Mapping[str, Sequence[GameSummary]],
    reference_date: str,
    limit: int,
) -> list[StreamingPlayer]:
    """Copies of *entries* carrying up to *limit* games on/after the date."""
    enriched = []
    for entry in entries:
        games = [g for g in team_games.get(entry.team, ()) if g.date >= reference_date]
        enriched.append(replace(entry, upcoming_games=tuple(games[:limit])))
    return enriched


# ---------------------------------------------------------------------------
# Planner
# ---------------------------------------------------------------------------

def build_streaming_plan(
    roster: Mapping[str, Any] | None,
    all_rosters: Sequence[Mapping[str, Any]] | None,
    roster_positions: Sequence[str] | None,
    z_scores: PlayerZScores,
    players: Mapping[str, Mapping[str, Any]] | None,
    daily_schedule: Iterable[DailySchedule | Mapping[str, Any]],
    team_games: Mapping[str, Iterable[GameSummary | Mapping[str, Any]]] | None,
    matchups: Sequence[Mapping[str, Any]] | None = None,
    league_id: str | None = None,
    generated_at: str | None = None,
    limits: Mapping[str, int] | None = None,
) -> StreamingPlan:
    """Build the day-by-day streaming plan for one roster.

    Args:
        roster: The target roster (``roster_id``, ``players``, ``starters``).
        all_rosters: Every roster in the league (defines who is unavailable).
        roster_positions: League lineup template, e.g. ``["PG", ..., "BN"]``.
        z_scores: Season z-scores.
        players: Player metadata (name / positions / team).
        daily_schedule: Chronological days (``date``, ``teamsPlaying``, ``games``).
        team_games: Team → games index sorted by tip-off.
        matchups: Optional current-week matchup entries with ``starters``.
        league_id: Echoed into the plan.
        generated_at: Timestamp echoed into the plan (the planner never
            reads the clock).
        limits: Caps table; defaults to ``config.STREAMING_LIMITS``.

    Returns:
        :class:`StreamingPlan` with one entry per schedule day.
    """
    limits = {**config.STREAMING_LIMITS, **(limits or {})}
    roster = roster or {}
    roster_id = roster.get("roster_id")
    roster_ids = [str(p) for p in roster.get("players") or [] if p]

    active_slots = active_slot_count(roster_positions)
    bench_slots = bench_slot_count(roster_positions)
    starters = build_starter_set(matchups, roster_id, roster.get("starters"))
    rostered = set(roster_player_ids(all_rosters))
    free_agents = collect_free_agents(z_scores, players, rostered, limits["free_agent_pool"])
    games_index = coerce_team_games(team_games)

    roster_players: list[StreamingPlayer] = []
    for pid in roster_ids:
        meta = resolve_player_meta(pid, players)
        entry = z_scores.get(pid)
        roster_players.append(
            StreamingPlayer(
                player_id=pid,
                name=meta["name"],
                team=meta["team"],
                positions=tuple(meta["positions"]),
                is_starter=pid in starters,
                z_score=entry.total_z if entry else 0.0,
            )
        )

    days: list[StreamingDayPlan] = []
    for day in coerce_daily_schedule(daily_schedule):
        day_teams = set(day.teams_playing)
        available = [p for p in roster_players if p.team and p.team in day_teams]
        holes = max(0, active_slots - len(available))

        own = with_upcoming_games(available, games_index, day.date, limits["own_upcoming_games"])
        own.sort(key=lambda p: (not p.is_starter, -p.z_score))

        recommendations: list[StreamingPlayer] = []
        if holes > 0:
            options = [a for a in free_agents if a.team in day_teams]
            cap = min(holes * limits["recs_per_hole"], limits["max_recommendations"])
            reason = f"Plays on {day.date} and ranks among top available z-scores"
            recommendations = [
                replace(candidate, reason=reason)
                for candidate in with_upcoming_games(
                    options[:cap], games_index, day.date, limits["candidate_upcoming_games"],
                )
            ]

        logger.debug(
            "%s: %d teams playing, %d/%d slots covered, %d recommendations",
            day.date, len(day_teams), len(available), active_slots, len(recommendations),
        )
        days.append(
            StreamingDayPlan(
                date=day.date,
                day_label=day_label(day.date),
                nba_games=len(day.games),
                teams_playing=day.teams_playing,
                active_slots=active_slots,
                players_available=len(available),
                holes=holes,
                own_players=own,
                recommendations=recommendations,
            )
        )

    return StreamingPlan(
        roster_id=coerce_roster_id(roster_id),
        league_id=league_id,
        generated_at=generated_at,
        active_slots=active_slots,
        bench_slots=bench_slots,
        total_roster_players=len(roster_ids),
        days=days,
    )
