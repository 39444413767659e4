"""NBA schedule window for streaming decisions.

Turns a flat list of game summaries (as fetched from the NBA.com CDN by the
schedule collaborator) into the two views the streaming planner consumes:

  * a chronological list of :class:`DailySchedule` entries, one per date
    with at least one game, listing the teams that play that day;
  * a ``team -> [GameSummary]`` index with each team's games sorted by
    tip-off time.

Pure: no fetching or caching happens here.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping

import config

logger = logging.getLogger(__name__)

# Alternate abbreviations → NBA.com tricodes
ALT_TO_NBA_ABBR: dict[str, str] = {
    "GS": "GSW",
    "NO": "NOP",
    "NY": "NYK",
    "SA": "SAS",
    "WSH": "WAS",
    "PHO": "PHX",
    "UTAH": "UTA",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def normalize_team_abbr(abbr: str) -> str:
    """Normalize a team abbreviation to NBA.com tricode (uppercase, 3-letter)."""
    upper = abbr.strip().upper()
    return ALT_TO_NBA_ABBR.get(upper, upper)


def parse_game_date(value: Any) -> date | None:
    """Parse ``YYYY-MM-DD`` (or an ISO timestamp) into a date; None if invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def day_label(value: str) -> str:
    """Short label for a schedule date, e.g. ``"Mon, Nov 03"``."""
    parsed = parse_game_date(value)
    if parsed is None:
        return str(value)
    return parsed.strftime("%a, %b %d")


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GameSummary:
    game_id: str
    date: str  # YYYY-MM-DD
    tipoff_utc: str
    home_team: str
    away_team: str

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "GameSummary":
        """Build from either the camelCase collaborator shape or snake_case."""
        game_date = parse_game_date(raw.get("date", raw.get("game_date")))
        return cls(
            game_id=str(raw.get("gameId", raw.get("game_id", "")) or ""),
            date=game_date.isoformat() if game_date else "",
            tipoff_utc=str(raw.get("tipoffUTC", raw.get("tipoff_utc", "")) or ""),
            home_team=normalize_team_abbr(str(raw.get("homeTeam", raw.get("home_team", "")) or "")),
            away_team=normalize_team_abbr(str(raw.get("awayTeam", raw.get("away_team", "")) or "")),
        )

    @property
    def teams(self) -> list[str]:
        return [t for t in (self.home_team, self.away_team) if t]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DailySchedule:
    date: str
    iso_date: str
    games: tuple[GameSummary, ...] = ()
    teams_playing: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "DailySchedule":
        games = tuple(coerce_game(g) for g in raw.get("games") or [])
        teams = raw.get("teamsPlaying", raw.get("teams_playing"))
        if teams is None:
            teams = [t for g in games for t in g.teams]
        day = parse_game_date(raw.get("date"))
        day_str = day.isoformat() if day else str(raw.get("date", ""))
        return cls(
            date=day_str,
            iso_date=str(raw.get("isoDate", raw.get("iso_date", "")) or f"{day_str}T00:00:00Z"),
            games=games,
            teams_playing=tuple(_unique(normalize_team_abbr(str(t)) for t in teams if t)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "iso_date": self.iso_date,
            "games": [g.to_dict() for g in self.games],
            "teams_playing": list(self.teams_playing),
        }


@dataclass(frozen=True)
class ScheduleWindow:
    daily: tuple[DailySchedule, ...] = ()
    team_games: dict[str, tuple[GameSummary, ...]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "daily": [d.to_dict() for d in self.daily],
            "team_games": {
                team: [g.to_dict() for g in games]
                for team, games in self.team_games.items()
            },
        }


def coerce_game(raw: GameSummary | Mapping[str, Any]) -> GameSummary:
    return raw if isinstance(raw, GameSummary) else GameSummary.from_dict(raw)


def coerce_daily_schedule(
    days: Iterable[DailySchedule | Mapping[str, Any]],
) -> list[DailySchedule]:
    return [d if isinstance(d, DailySchedule) else DailySchedule.from_dict(d) for d in days or []]


def coerce_team_games(
    index: Mapping[str, Iterable[GameSummary | Mapping[str, Any]]] | None,
) -> dict[str, tuple[GameSummary, ...]]:
    return {
        normalize_team_abbr(str(team)): tuple(coerce_game(g) for g in games or [])
        for team, games in (index or {}).items()
    }


def _unique(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


# ---------------------------------------------------------------------------
# Window builder
# ---------------------------------------------------------------------------

def build_schedule_window(
    games: Iterable[GameSummary | Mapping[str, Any]],
    start: date | str,
    days: int | None = None,
) -> ScheduleWindow:
    """Group games into a day-by-day window starting at *start*.

    Args:
        games: Flat list of game summaries (dicts or :class:`GameSummary`).
        start: First date of the window (inclusive).
        days: Window length in days (exclusive end).  Defaults to
            ``config.SCHEDULE_WINDOW_DAYS``.

    Returns:
        :class:`ScheduleWindow` with chronological daily entries and a
        team → games index sorted by tip-off.
    """
    if days is None:
        days = config.SCHEDULE_WINDOW_DAYS

    start_date = parse_game_date(start)
    if start_date is None:
        logger.warning("Invalid schedule window start %r; returning empty window", start)
        return ScheduleWindow()
    end_date = start_date + timedelta(days=days)

    by_date: dict[str, list[GameSummary]] = {}
    team_games: dict[str, list[GameSummary]] = {}
    skipped = 0

    for raw in games or []:
        game = coerce_game(raw)
        game_date = parse_game_date(game.date)
        if game_date is None:
            skipped += 1
            continue
        if not (start_date <= game_date < end_date):
            continue

        by_date.setdefault(game.date, []).append(game)
        for team in game.teams:
            team_games.setdefault(team, []).append(game)

    if skipped:
        logger.debug("Skipped %d schedule entries without a parseable date", skipped)

    daily = tuple(
        DailySchedule(
            date=day,
            iso_date=f"{day}T00:00:00Z",
            games=tuple(day_games),
            teams_playing=tuple(_unique(t for g in day_games for t in g.teams)),
        )
        for day, day_games in sorted(by_date.items())
    )

    index = {
        team: tuple(sorted(team_list, key=lambda g: g.tipoff_utc or g.date))
        for team, team_list in team_games.items()
    }

    return ScheduleWindow(daily=daily, team_games=index)
