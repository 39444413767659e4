"""Consistency (volatility) estimate from season totals.

This is an explicit heuristic, NOT a measured per-game standard deviation:
only season totals are available, so the coefficient of variation is
inferred from how central a player is to their team's offense.  High-usage
players tend to produce steadily night to night; bench players swing.

    usage = ppg + 0.5 × rpg + 0.7 × apg
    cv    = bucket(usage) + |ppg − rpg − apg| / max(usage, 1) × 0.05

Buckets and risk cut-offs live in ``config.CONSISTENCY_TABLE``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

import config
from roster_analytics.stat_records import StatRecord, games_played, stat_value

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class ConsistencyMetrics:
    mean: float  # points per game
    std: float   # reported as the estimated cv
    cv: float
    risk_level: str  # Low / Medium / High / N/A

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _base_cv(usage: float, table: Mapping[str, Any]) -> float:
    for floor, cv in table["cv_buckets"]:
        if usage > floor:
            return cv
    return table["cv_floor_bucket"]


def estimate_consistency(
    season_record: StatRecord | None,
    table: Mapping[str, Any] | None = None,
) -> ConsistencyMetrics:
    """Estimate volatility for one player's season aggregate.

    Args:
        season_record: Season totals (``gp``, ``pts``, ``reb``, ``ast``).
        table: Heuristic table; defaults to ``config.CONSISTENCY_TABLE``.

    Returns:
        :class:`ConsistencyMetrics`.  With no games played the risk level is
        ``"N/A"`` and mean/std/cv are 0.
    """
    t = table or config.CONSISTENCY_TABLE
    gp = games_played(season_record)
    if gp <= 0:
        return ConsistencyMetrics(mean=0.0, std=0.0, cv=0.0, risk_level=NOT_AVAILABLE)

    ppg = stat_value(season_record, "pts") / gp
    rpg = stat_value(season_record, "reb") / gp
    apg = stat_value(season_record, "ast") / gp

    usage = ppg + t["reb_weight"] * rpg + t["ast_weight"] * apg
    spread = abs(ppg - rpg - apg) / max(usage, 1)
    cv = _base_cv(usage, t) + spread * t["spread_factor"]

    if cv > t["high_risk_cv"]:
        risk = "High"
    elif cv > t["medium_risk_cv"]:
        risk = "Medium"
    else:
        risk = "Low"

    return ConsistencyMetrics(
        mean=round(ppg, 2),
        std=round(cv, 2),
        cv=round(cv, 3),
        risk_level=risk,
    )


def format_consistency(cv: float) -> str:
    """Readable label for a coefficient of variation."""
    if cv == 0:
        return NOT_AVAILABLE
    if cv < 0.15:
        return "Very Consistent"
    if cv < 0.25:
        return "Consistent"
    if cv < 0.5:
        return "Moderate"
    return "Highly Volatile"
