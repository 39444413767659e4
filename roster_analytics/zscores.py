"""Weighted z-score engine.

For every qualifying player and every active category::

    raw_z = (value − baseline.mean) / baseline.std
    raw_z = −raw_z            if the league weight is negative (e.g. TO)
    z     = raw_z × |weight|

so a positive z always means "helps you under this league's rules".  The
per-category map stores ``z`` rounded to 2 decimals, while ``total_z`` is the
sum of the *unrounded* values, rounded once at the end.  Summing the rounded
per-category numbers will generally not reproduce ``total_z``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import pandas as pd

from roster_analytics.baselines import (
    CategoryBaseline,
    category_values,
    compute_league_baselines,
    population_frame,
)
from roster_analytics.categories import ActiveCategory, classify_categories
from roster_analytics.players import UNKNOWN_PLAYER, resolve_display_name, resolve_stat_name
from roster_analytics.population import Population, build_population
from roster_analytics.stat_records import AllStats, has_played

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerZScore:
    player_id: str
    name: str
    scores: dict[str, float] = field(default_factory=dict)
    total_z: float = 0.0

    def score(self, setting_key: str) -> float:
        """Category z, 0.0 when the category isn't scored."""
        return self.scores.get(setting_key, 0.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "scores": dict(self.scores),
            "total_z": self.total_z,
        }


PlayerZScores = Mapping[str, PlayerZScore]


def _display_name(
    player_id: str,
    record: Mapping[str, Any] | None,
    players: Mapping[str, Mapping[str, Any]] | None,
) -> str:
    name = resolve_stat_name(record)
    if name:
        return name
    if players and player_id in players:
        return resolve_display_name(players[player_id], UNKNOWN_PLAYER)
    return UNKNOWN_PLAYER


def score_population(
    population: Population,
    categories: Iterable[ActiveCategory],
    baselines: Mapping[str, CategoryBaseline],
    players: Mapping[str, Mapping[str, Any]] | None = None,
) -> dict[str, PlayerZScore]:
    """Z-score every player in *population* against *baselines*.

    Categories without a baseline are skipped.

    Returns:
        Dict of player_id -> :class:`PlayerZScore`, in population order.
    """
    categories = [c for c in categories if c.setting_key in baselines]
    if not categories or not population:
        return {}

    frame = population_frame(population.records, population.player_ids, categories)

    z_columns: dict[str, pd.Series] = {}
    for cat in categories:
        baseline = baselines[cat.setting_key]
        values = category_values(frame, cat, baseline.league_avg_pct or 0.0)
        raw_z = (values - baseline.mean) / baseline.std
        if cat.weight < 0:
            raw_z = -raw_z
        z_columns[cat.setting_key] = raw_z * abs(cat.weight)

    results: dict[str, PlayerZScore] = {}
    for pid in population.player_ids:
        scores: dict[str, float] = {}
        total = 0.0
        for cat in categories:
            z = float(z_columns[cat.setting_key].at[pid])
            scores[cat.setting_key] = round(z, 2)
            total += z
        results[pid] = PlayerZScore(
            player_id=pid,
            name=_display_name(pid, population.records.get(pid), players),
            scores=scores,
            total_z=round(total, 2),
        )

    return results


def compute_z_scores(
    rosters: Iterable[Mapping[str, Any]] | None,
    stats: AllStats | None,
    scoring_settings: Mapping[str, Any] | None,
    *,
    players: Mapping[str, Mapping[str, Any]] | None = None,
    baselines: Mapping[str, CategoryBaseline] | None = None,
    impact_rates: Mapping[str, float] | None = None,
) -> dict[str, PlayerZScore]:
    """Run the full valuation pipeline for one stat window.

    classification → population → baselines → z-scores.

    Args:
        rosters: All league rosters (``{"roster_id", "players", ...}``).
        stats: ``player_id -> stat record`` for the window.
        scoring_settings: League category weights.
        players: Optional player metadata, used for names when the stat
            records don't carry one.
        baselines: Optional precomputed baselines (e.g. from the season
            window) to score against instead of this window's own.
        impact_rates: Optional make-rate overrides for impact categories
            when baselines are computed here.

    Returns:
        Dict of player_id -> :class:`PlayerZScore`.  Empty when no category
        is scored or no rostered player has played.
    """
    categories = classify_categories(scoring_settings)
    if not categories:
        logger.debug("No active scoring categories; nothing to score")
        return {}

    population = build_population(rosters, stats)
    if not population:
        logger.debug("No rostered players with games played; nothing to score")
        return {}

    computed = compute_league_baselines(population, categories, impact_rates=impact_rates)
    if baselines:
        computed.update({k: v for k, v in baselines.items() if k in computed})

    return score_population(population, categories, computed, players=players)


def compute_pool_z_scores(
    rosters: Iterable[Mapping[str, Any]] | None,
    stats: AllStats | None,
    scoring_settings: Mapping[str, Any] | None,
    *,
    players: Mapping[str, Mapping[str, Any]] | None = None,
    impact_rates: Mapping[str, float] | None = None,
) -> dict[str, PlayerZScore]:
    """Z-score every player in *stats*, rostered or not.

    Baselines come from the rostered population exactly as in
    :func:`compute_z_scores`; unrostered players with games played are then
    scored against them.  This is where free agents get the values the
    streaming planner ranks them by.

    Returns:
        Dict of player_id -> :class:`PlayerZScore`: rostered players first
        (population order), then everyone else in *stats* order.
    """
    categories = classify_categories(scoring_settings)
    if not categories:
        return {}

    stats = {str(pid): record for pid, record in (stats or {}).items()}
    league = build_population(rosters, stats)
    if not league:
        return {}

    baselines = compute_league_baselines(league, categories, impact_rates=impact_rates)

    rostered = set(league.player_ids)
    extra = [pid for pid, record in stats.items() if pid not in rostered and has_played(record)]
    pool = Population(
        player_ids=league.player_ids + tuple(extra),
        records={**league.records, **{pid: stats[pid] for pid in extra}},
    )
    logger.debug("Scoring %d rostered + %d unrostered players", len(league), len(extra))
    return score_population(pool, categories, baselines, players=players)


def z_scores_to_frame(z_scores: PlayerZScores) -> pd.DataFrame:
    """Tabular view: one row per player, a column per category plus TOTAL.

    Sorted by total z, best first.
    """
    rows = []
    for pid, entry in z_scores.items():
        rows.append({"player_id": pid, "Player": entry.name, **entry.scores, "TOTAL": entry.total_z})
    if not rows:
        return pd.DataFrame(columns=["player_id", "Player", "TOTAL"])
    df = pd.DataFrame(rows).fillna(0.0)
    return df.sort_values("TOTAL", ascending=False, kind="stable").reset_index(drop=True)
