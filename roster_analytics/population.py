"""League population for baseline computation.

The population is every player rostered anywhere in the league who has at
least one game played in the stat window being evaluated.  Free agents are
deliberately left out so baselines reflect fantasy-relevant players only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from roster_analytics.stat_records import AllStats, StatRecord, has_played


@dataclass(frozen=True)
class Population:
    player_ids: tuple[str, ...] = ()
    records: Mapping[str, StatRecord] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.player_ids)

    def __bool__(self) -> bool:
        return bool(self.player_ids)


def coerce_roster_id(value: Any) -> int | None:
    """Roster ids arrive as ints or numeric strings; None if neither."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def roster_player_ids(rosters: Iterable[Mapping[str, Any]] | None) -> list[str]:
    """Distinct player ids across all rosters, in first-seen order."""
    seen: set[str] = set()
    ids: list[str] = []
    for roster in rosters or []:
        for player_id in (roster or {}).get("players") or []:
            if not player_id:
                continue
            pid = str(player_id)
            if pid not in seen:
                seen.add(pid)
                ids.append(pid)
    return ids


def build_population(
    rosters: Iterable[Mapping[str, Any]] | None,
    stats: AllStats | None,
) -> Population:
    """Rostered players with ``gp > 0`` in *stats*.

    Players missing from *stats* or with no games are silently excluded.
    """
    stats = stats or {}
    qualifying = [pid for pid in roster_player_ids(rosters) if has_played(stats.get(pid))]
    return Population(
        player_ids=tuple(qualifying),
        records={pid: stats[pid] for pid in qualifying},
    )
