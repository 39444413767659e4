"""Raw stat record helpers.

Stat records arrive as loose mappings (one per player per window) from the
stats collaborator.  Everything downstream reads them through
:func:`stat_value`, which never raises: missing keys, ``None``, non-numeric
strings and non-finite numbers all read as ``0.0``.

Also provides the fold that combines several weekly stat payloads into a
single window total (how the trailing ~14-day "recent" window is built from
two Sleeper scoring weeks).
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

StatRecord = Mapping[str, Any]
AllStats = Mapping[str, StatRecord]

# Keys summed when several weekly payloads are merged into one window.
SUMMED_STAT_KEYS: tuple[str, ...] = (
    "gp",
    "pts", "reb", "ast", "stl", "blk", "to",
    "fgm", "fga", "ftm", "fta", "fg3m", "fg3a",
    "tf",
)


def coerce_number(value: Any) -> float:
    """Return *value* as a finite float, or 0.0 if that isn't possible."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def stat_value(record: StatRecord | None, key: str) -> float:
    """Read a numeric stat from a record; unknown keys read as 0."""
    if not record:
        return 0.0
    return coerce_number(record.get(key))


def games_played(record: StatRecord | None) -> float:
    """Games played in the window (0 when absent or malformed)."""
    return stat_value(record, "gp")


def has_played(record: StatRecord | None) -> bool:
    return games_played(record) > 0


def aggregate_stat_windows(
    windows: Iterable[Mapping[str, StatRecord]],
    keys: Iterable[str] = SUMMED_STAT_KEYS,
) -> dict[str, dict[str, Any]]:
    """Sum several per-player stat payloads into one window.

    Each input maps ``player_id -> stat record`` for one scoring week.  The
    result holds a fresh record per player with the summed *keys*; the first
    payload a player appears in also contributes its non-summed fields
    (e.g. ``player_name``).  Inputs are never mutated.

    Args:
        windows: Weekly payloads, oldest or newest first (order only matters
            for which non-summed fields win).
        keys: Stat keys to add together.

    Returns:
        Dict of player_id -> merged stat record.
    """
    keys = tuple(keys)
    merged: dict[str, dict[str, Any]] = {}

    for window in windows:
        for player_id, record in (window or {}).items():
            if not isinstance(record, Mapping):
                continue
            pid = str(player_id)
            previous = merged.get(pid)
            if previous is None:
                base = {k: v for k, v in record.items() if k not in keys}
                base.setdefault("player_name", "")
                totals = {k: stat_value(record, k) for k in keys}
            else:
                base = {k: v for k, v in previous.items() if k not in keys}
                totals = {k: stat_value(previous, k) + stat_value(record, k) for k in keys}
            merged[pid] = {**base, **totals}

    return merged
