"""Category-swap trade targets.

Ranks every player on the other rosters by how well they fit a swap where
you give up value in a category you can spare and gain value in one you
need::

    trade_score = z[need_category] − z[spare_category]

High in what you need and low in what you'd give up ranks first.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Sequence

from roster_analytics.population import coerce_roster_id
from roster_analytics.zscores import PlayerZScores


@dataclass(frozen=True)
class TradeRecommendation:
    player_id: str
    player_name: str
    roster_id: int | None
    owner_name: str
    need_category_z: float
    spare_category_z: float
    trade_score: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def owner_label(roster_id: Any, owner_names: Mapping[str, str] | None) -> str:
    """Owner display name for a roster, falling back to ``"Team <id>"``."""
    name = (owner_names or {}).get(str(roster_id))
    return name or f"Team {roster_id}"


def recommend_trades(
    my_roster_id: Any,
    rosters: Sequence[Mapping[str, Any]] | None,
    z_scores: PlayerZScores,
    need_category: str,
    spare_category: str,
    owner_names: Mapping[str, str] | None = None,
) -> list[TradeRecommendation]:
    """Score every z-scored player on the other rosters.

    Args:
        my_roster_id: The requesting roster.
        rosters: All league rosters.
        z_scores: Player z-scores (usually the season window).
        need_category: Settings key of the category you want to improve.
        spare_category: Settings key of the category you can give up.
        owner_names: Optional ``str(roster_id) -> owner display name``.

    Returns:
        Recommendations sorted by ``trade_score``, best first (no cap).
        Empty if *my_roster_id* isn't one of *rosters*.  Categories a player
        has no z for count as 0.
    """
    rosters = list(rosters or [])
    mine = coerce_roster_id(my_roster_id)
    if mine is None or not any(coerce_roster_id(r.get("roster_id")) == mine for r in rosters):
        return []

    recommendations: list[TradeRecommendation] = []
    for roster in rosters:
        roster_id = coerce_roster_id(roster.get("roster_id"))
        if roster_id == mine:
            continue

        for player_id in roster.get("players") or []:
            entry = z_scores.get(str(player_id))
            if entry is None:
                continue
            need_z = entry.score(need_category)
            spare_z = entry.score(spare_category)
            recommendations.append(
                TradeRecommendation(
                    player_id=str(player_id),
                    player_name=entry.name,
                    roster_id=roster_id,
                    owner_name=owner_label(roster.get("roster_id"), owner_names),
                    need_category_z=need_z,
                    spare_category_z=spare_z,
                    trade_score=need_z - spare_z,
                )
            )

    recommendations.sort(key=lambda r: -r.trade_score)
    return recommendations
