"""Scoring-category classification.

Turns a league's ``scoring_settings`` (category key → signed weight) into the
ordered list of active categories the baseline and z-score stages work from.
Each category is resolved to a canonical stat key once, here, and tagged with
how its per-player value is computed:

  * ``IMPACT``:     shooting percentages (FG%, FT%, 3PT%), valued as
                     volume-weighted impact from made/attempted totals;
  * ``PURE_RATIO``: already-averaged ratios (A/TO, S/TO), used as-is;
  * ``COUNTING``:   everything else, divided by games played.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Mapping

import config
from roster_analytics.stat_records import coerce_number

logger = logging.getLogger(__name__)


class CategoryKind(str, Enum):
    COUNTING = "counting"
    PURE_RATIO = "pure_ratio"
    IMPACT = "impact"


# Sleeper scoring-settings key → stat record key
SETTINGS_TO_STAT_KEY: dict[str, str] = {
    "pts": "pts",
    "reb": "reb",
    "ast": "ast",
    "st": "stl",
    "stl": "stl",
    "blk": "blk",
    "to": "to",
    "turnovers": "to",
    "fg3m": "fg3m",
    "tpm": "fg3m",
    # Percentages map to synthetic impact keys
    "fg_pct": "calculated_fg",
    "ft_pct": "calculated_ft",
    "fg3_pct": "calculated_3pt",
    # Ratios
    "ast_to": "ast_to",
    "stl_to": "stl_to",
}

# Synthetic impact key → (made key, attempted key)
IMPACT_COMPONENTS: dict[str, tuple[str, str]] = {
    "calculated_fg": ("fgm", "fga"),
    "calculated_ft": ("ftm", "fta"),
    "calculated_3pt": ("fg3m", "fg3a"),
}

PURE_RATIO_STATS: frozenset[str] = frozenset(["ast_to", "stl_to"])


@dataclass(frozen=True)
class ActiveCategory:
    """One scoring category with a nonzero weight.

    ``made_key``/``attempted_key`` are only set for impact categories.
    """

    setting_key: str
    stat_key: str
    weight: float
    kind: CategoryKind
    made_key: str | None = None
    attempted_key: str | None = None

    @property
    def lower_is_better(self) -> bool:
        return self.weight < 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


def resolve_stat_key(setting_key: str) -> str:
    """Canonical stat key for a settings key (unknown keys map to themselves)."""
    return SETTINGS_TO_STAT_KEY.get(setting_key, setting_key)


def classify_stat_key(stat_key: str) -> CategoryKind:
    if stat_key in IMPACT_COMPONENTS:
        return CategoryKind.IMPACT
    if stat_key in PURE_RATIO_STATS:
        return CategoryKind.PURE_RATIO
    return CategoryKind.COUNTING


def classify_categories(
    scoring_settings: Mapping[str, Any] | None,
    ignored_keys: frozenset[str] | None = None,
) -> list[ActiveCategory]:
    """Build the ordered list of active categories for a league.

    Args:
        scoring_settings: Category key → weight.  Weights are coerced to
            numbers; zero or non-numeric weights drop the category.
        ignored_keys: Settings keys that never map to a tracked stat.
            Defaults to ``config.IGNORED_SCORING_KEYS``.

    Returns:
        Active categories in settings order.  Empty when nothing is scored,
        which downstream stages treat as "no results", not an error.
    """
    if ignored_keys is None:
        ignored_keys = config.IGNORED_SCORING_KEYS

    categories: list[ActiveCategory] = []
    for setting_key, raw_weight in (scoring_settings or {}).items():
        weight = coerce_number(raw_weight)
        if weight == 0 or setting_key in ignored_keys:
            continue

        stat_key = resolve_stat_key(setting_key)
        kind = classify_stat_key(stat_key)
        made_key, attempted_key = IMPACT_COMPONENTS.get(stat_key, (None, None))
        categories.append(
            ActiveCategory(
                setting_key=setting_key,
                stat_key=stat_key,
                weight=weight,
                kind=kind,
                made_key=made_key,
                attempted_key=attempted_key,
            )
        )

    logger.debug(
        "Active categories: %s",
        ", ".join(f"{c.setting_key}({c.kind.value}, {c.weight:+g})" for c in categories) or "none",
    )
    return categories
