"""League snapshot loader.

A snapshot is one JSON file holding everything the external collaborators
would otherwise fetch for a league: scoring settings, rosters, player
metadata, season and recent stat windows, and the game schedule.  The CLI
reads one of these instead of talking to the fantasy platform.

Only structural problems (unreadable file, bad JSON, a top-level value that
isn't an object) raise :class:`SnapshotError`.  Individual sections that are
missing or the wrong shape load as empty and are logged.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from roster_analytics.population import coerce_roster_id
from roster_analytics.stat_records import aggregate_stat_windows

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot file can't be read as a league snapshot."""


@dataclass(frozen=True)
class LeagueSnapshot:
    league_id: str | None = None
    scoring_settings: dict[str, Any] = field(default_factory=dict)
    roster_positions: list[str] = field(default_factory=list)
    rosters: list[dict[str, Any]] = field(default_factory=list)
    owners: dict[str, str] = field(default_factory=dict)
    players: dict[str, dict[str, Any]] = field(default_factory=dict)
    season_stats: dict[str, dict[str, Any]] = field(default_factory=dict)
    recent_stats: dict[str, dict[str, Any]] = field(default_factory=dict)
    games: list[dict[str, Any]] = field(default_factory=list)
    matchups: list[dict[str, Any]] = field(default_factory=list)

    def roster(self, roster_id: Any) -> dict[str, Any] | None:
        """The roster with *roster_id*, or None."""
        target = coerce_roster_id(roster_id)
        if target is None:
            return None
        for entry in self.rosters:
            if coerce_roster_id(entry.get("roster_id")) == target:
                return entry
        return None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "LeagueSnapshot":
        recent = _section(raw, "recent_stats", dict)
        if not recent and raw.get("recent_stats_weeks"):
            weeks = _section(raw, "recent_stats_weeks", list)
            recent = aggregate_stat_windows(w for w in weeks if isinstance(w, Mapping))
            logger.debug("Folded %d weekly payloads into the recent window", len(weeks))

        league_id = raw.get("league_id")
        return cls(
            league_id=str(league_id) if league_id is not None else None,
            scoring_settings=_section(raw, "scoring_settings", dict),
            roster_positions=[str(p) for p in _section(raw, "roster_positions", list) if p],
            rosters=[r for r in _section(raw, "rosters", list) if isinstance(r, dict)],
            owners={str(k): str(v) for k, v in _section(raw, "owners", dict).items() if v},
            players={str(k): v for k, v in _section(raw, "players", dict).items() if isinstance(v, dict)},
            season_stats={str(k): v for k, v in _section(raw, "season_stats", dict).items() if isinstance(v, dict)},
            recent_stats={str(k): v for k, v in recent.items() if isinstance(v, dict)},
            games=[g for g in _section(raw, "games", list) if isinstance(g, dict)],
            matchups=[m for m in _section(raw, "matchups", list) if isinstance(m, dict)],
        )


def _section(raw: Mapping[str, Any], key: str, kind: type) -> Any:
    value = raw.get(key)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        logger.warning("Snapshot section %r is not a %s; ignoring it", key, kind.__name__)
        return kind()
    return value


def load_snapshot(path: str | Path) -> LeagueSnapshot:
    """Read and validate a league snapshot file.

    Args:
        path: Path to the snapshot JSON.

    Returns:
        :class:`LeagueSnapshot`.

    Raises:
        SnapshotError: If the file can't be read, isn't valid JSON, or its
            top-level value isn't a JSON object.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"Could not read snapshot {path}: {e}") from e

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot {path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise SnapshotError(f"Snapshot {path} must contain a JSON object, got {type(raw).__name__}")

    snapshot = LeagueSnapshot.from_dict(raw)
    logger.debug(
        "Loaded snapshot %s: %d rosters, %d players, %d season / %d recent stat records, %d games",
        path, len(snapshot.rosters), len(snapshot.players),
        len(snapshot.season_stats), len(snapshot.recent_stats), len(snapshot.games),
    )
    return snapshot
