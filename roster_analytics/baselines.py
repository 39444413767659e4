"""League baselines for z-score normalization.

For every active category the population's per-player values are reduced
to a mean and a population standard deviation.  How a player's value is
computed depends on the category kind:

  * counting stats are per-game averages: ``total / gp``;
  * pure ratios (A/TO, S/TO) are used as reported;
  * shooting percentages use **volume-weighted impact** so that a player's
    value reflects both accuracy and attempt volume::

        league_avg_pct = Σ made / Σ attempted        (whole population)
        impact_i       = made_i / gp_i − (attempted_i / gp_i) × league_avg_pct

    A .650 shooter on 2 attempts a game moves a fantasy team's FG% far less
    than a .520 shooter on 16 attempts; impact captures that, a raw
    percentage does not.

A standard deviation of 0 (e.g. a one-player population) is floored to 1 so
z-scores stay finite.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Mapping

import pandas as pd

from roster_analytics.categories import ActiveCategory, CategoryKind
from roster_analytics.population import Population
from roster_analytics.stat_records import stat_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryBaseline:
    setting_key: str
    stat_key: str
    kind: CategoryKind
    mean: float
    std: float
    league_avg_pct: float | None = None  # impact categories only

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


def required_columns(categories: Iterable[ActiveCategory]) -> list[str]:
    """Stat record keys needed to value *categories* (always includes ``gp``)."""
    columns = ["gp"]
    for cat in categories:
        keys = (cat.made_key, cat.attempted_key) if cat.kind is CategoryKind.IMPACT else (cat.stat_key,)
        for key in keys:
            if key and key not in columns:
                columns.append(key)
    return columns


def population_frame(
    records: Mapping[str, Mapping[str, Any]],
    player_ids: Iterable[str],
    categories: Iterable[ActiveCategory],
) -> pd.DataFrame:
    """One row per player, one float column per required stat key."""
    categories = list(categories)
    columns = required_columns(categories)
    ids = list(player_ids)
    rows = [[stat_value(records.get(pid), col) for col in columns] for pid in ids]
    return pd.DataFrame(rows, index=ids, columns=columns, dtype=float)


def league_make_rate(frame: pd.DataFrame, category: ActiveCategory) -> float:
    """Population make-rate for an impact category (0 when nobody attempted)."""
    attempted = float(frame[category.attempted_key].sum())
    if attempted <= 0:
        return 0.0
    return float(frame[category.made_key].sum()) / attempted


def category_values(
    frame: pd.DataFrame,
    category: ActiveCategory,
    league_avg_pct: float = 0.0,
) -> pd.Series:
    """Per-player value for *category* (see module docstring for the rules)."""
    gp = frame["gp"]
    if category.kind is CategoryKind.IMPACT:
        per_game_made = frame[category.made_key] / gp
        per_game_attempted = frame[category.attempted_key] / gp
        return per_game_made - per_game_attempted * league_avg_pct
    if category.kind is CategoryKind.PURE_RATIO:
        return frame[category.stat_key]
    return frame[category.stat_key] / gp


def _floored_std(values: pd.Series) -> float:
    std = float(values.std(ddof=0))
    if std == 0 or math.isnan(std):
        return 1.0
    return std


def compute_league_baselines(
    population: Population,
    categories: Iterable[ActiveCategory],
    impact_rates: Mapping[str, float] | None = None,
) -> dict[str, CategoryBaseline]:
    """Mean/std (and impact make-rate) per active category.

    Args:
        population: Qualifying players and their stat records.
        categories: Output of :func:`classify_categories`.
        impact_rates: Optional ``setting_key -> make-rate`` overrides for
            impact categories.  When omitted each impact category uses the
            make-rate of *population* itself.

    Returns:
        Dict keyed by settings key, in category order.  Empty when there are
        no categories or no qualifying players.
    """
    categories = list(categories)
    if not categories or not population:
        return {}

    impact_rates = impact_rates or {}
    frame = population_frame(population.records, population.player_ids, categories)
    baselines: dict[str, CategoryBaseline] = {}

    for cat in categories:
        league_avg_pct = None
        if cat.kind is CategoryKind.IMPACT:
            if cat.setting_key in impact_rates:
                league_avg_pct = float(impact_rates[cat.setting_key])
            else:
                league_avg_pct = league_make_rate(frame, cat)
            values = category_values(frame, cat, league_avg_pct)
        else:
            values = category_values(frame, cat)

        baseline = CategoryBaseline(
            setting_key=cat.setting_key,
            stat_key=cat.stat_key,
            kind=cat.kind,
            mean=float(values.mean()),
            std=_floored_std(values),
            league_avg_pct=league_avg_pct,
        )
        baselines[cat.setting_key] = baseline
        logger.debug(
            "Baseline %s: mean=%.4f std=%.4f pct=%s (n=%d)",
            cat.setting_key, baseline.mean, baseline.std, league_avg_pct, len(values),
        )

    return baselines


def impact_rates_from(baselines: Mapping[str, CategoryBaseline]) -> dict[str, float]:
    """Extract ``setting_key -> league make-rate`` for the impact categories."""
    return {
        key: b.league_avg_pct
        for key, b in baselines.items()
        if b.kind is CategoryKind.IMPACT and b.league_avg_pct is not None
    }
