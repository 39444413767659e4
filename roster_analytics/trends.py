"""Season vs. recent trend detection.

Compares each player's season total Z with their total Z over a short recent
window (≈ last 14 days) and labels the trajectory:

  BUY_LOW:   strong season, slumping recently (acquire while cheap)
  SELL_HIGH: weak season, running hot recently (move while valued)
  BREAKOUT:  recent clearly above a middling/negative season
  DECLINE:   recent clearly below a strong season
  NEUTRAL:   none of the above

Thresholds live in ``config.TREND_THRESHOLDS``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Mapping

import config
from roster_analytics.stat_records import AllStats, games_played
from roster_analytics.zscores import PlayerZScores


class TrendStatus(str, Enum):
    BUY_LOW = "BUY_LOW"
    SELL_HIGH = "SELL_HIGH"
    BREAKOUT = "BREAKOUT"
    DECLINE = "DECLINE"
    NEUTRAL = "NEUTRAL"


_STATUS_LABELS: dict[TrendStatus, str] = {
    TrendStatus.BUY_LOW: "Buy Low",
    TrendStatus.SELL_HIGH: "Sell High",
    TrendStatus.BREAKOUT: "Breakout",
    TrendStatus.DECLINE: "Decline",
    TrendStatus.NEUTRAL: "Neutral",
}


@dataclass(frozen=True)
class TrendRecord:
    player_id: str
    player_name: str
    status: TrendStatus
    season_z: float
    recent_z: float
    z_difference: float
    confidence_score: float  # 0-100
    reasoning: str

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass(frozen=True)
class TrendAnalysis:
    trends: list[TrendRecord] = field(default_factory=list)
    buy_low: list[TrendRecord] = field(default_factory=list)
    sell_high: list[TrendRecord] = field(default_factory=list)
    breakouts: list[TrendRecord] = field(default_factory=list)
    declines: list[TrendRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            name: [t.to_dict() for t in getattr(self, name)]
            for name in ("trends", "buy_low", "sell_high", "breakouts", "declines")
        }


def format_trend_status(status: TrendStatus | str) -> str:
    """Display label for a trend status (``BUY_LOW`` → ``Buy Low``)."""
    try:
        return _STATUS_LABELS[TrendStatus(status)]
    except ValueError:
        return str(status)


def trend_confidence(
    z_difference: float,
    recent_gp: float,
    season_gp: float,
    thresholds: Mapping[str, float] | None = None,
) -> float:
    """0-100 confidence that a trend is real.

    Blends the share of the season's games that fall in the recent window
    with the size of the z swing.
    """
    t = thresholds or config.TREND_THRESHOLDS
    cap = t["confidence_cap"]
    recent_confidence = min(cap, (recent_gp / max(season_gp, 1)) * 100)
    magnitude_confidence = min(cap, abs(z_difference) * t["magnitude_scale"])
    return t["recent_weight"] * recent_confidence + t["magnitude_weight"] * magnitude_confidence


def classify_trend(
    season_z: float,
    recent_z: float,
    thresholds: Mapping[str, float] | None = None,
) -> tuple[TrendStatus, str]:
    """Return ``(status, reasoning)``; first matching rule wins."""
    t = thresholds or config.TREND_THRESHOLDS
    diff = recent_z - season_z
    zs = f"Season Z: {season_z:.2f}, Recent Z: {recent_z:.2f}"

    if season_z > t["buy_low_min_season"] and diff < t["buy_low_max_diff"]:
        return TrendStatus.BUY_LOW, f"{zs} - Underperforming recently"
    if season_z < t["sell_high_max_season"] and diff > t["sell_high_min_diff"]:
        return TrendStatus.SELL_HIGH, f"{zs} - Overperforming recently"
    if recent_z > season_z + t["breakout_margin"] and season_z < t["breakout_max_season"]:
        return TrendStatus.BREAKOUT, f"Trending up significantly - Recent Z: {recent_z:.2f}"
    if recent_z < season_z - t["decline_margin"] and season_z > t["decline_min_season"]:
        return TrendStatus.DECLINE, f"Trending down from strength - Recent Z: {recent_z:.2f}"
    return TrendStatus.NEUTRAL, f"{zs} - In line with season"


def detect_trends(
    season_z: PlayerZScores,
    recent_z: PlayerZScores,
    season_stats: AllStats | None,
    recent_stats: AllStats | None,
    thresholds: Mapping[str, float] | None = None,
) -> TrendAnalysis:
    """Classify every player scored in both windows.

    Args:
        season_z: Z-scores for the full-season window.
        recent_z: Z-scores for the recent window.
        season_stats: Season stat records (for games played).
        recent_stats: Recent stat records (for games played).
        thresholds: Policy table; defaults to ``config.TREND_THRESHOLDS``.

    Returns:
        :class:`TrendAnalysis` with every trend (season map order) and the
        sorted candidate lists.  Players missing from either window get no
        record.
    """
    season_stats = season_stats or {}
    recent_stats = recent_stats or {}
    trends: list[TrendRecord] = []

    for pid, season_entry in season_z.items():
        recent_entry = recent_z.get(pid)
        if season_entry is None or recent_entry is None:
            continue

        season_total = season_entry.total_z
        recent_total = recent_entry.total_z
        diff = recent_total - season_total
        confidence = trend_confidence(
            diff,
            games_played(recent_stats.get(pid)),
            games_played(season_stats.get(pid)),
            thresholds,
        )
        status, reasoning = classify_trend(season_total, recent_total, thresholds)

        trends.append(
            TrendRecord(
                player_id=pid,
                player_name=season_entry.name,
                status=status,
                season_z=round(season_total, 2),
                recent_z=round(recent_total, 2),
                z_difference=round(diff, 2),
                confidence_score=round(confidence, 1),
                reasoning=reasoning,
            )
        )

    def _with(status: TrendStatus) -> list[TrendRecord]:
        return [t for t in trends if t.status is status]

    return TrendAnalysis(
        trends=trends,
        buy_low=sorted(_with(TrendStatus.BUY_LOW), key=lambda t: -t.confidence_score),
        sell_high=sorted(_with(TrendStatus.SELL_HIGH), key=lambda t: -t.confidence_score),
        breakouts=sorted(_with(TrendStatus.BREAKOUT), key=lambda t: -t.recent_z),
        declines=sorted(_with(TrendStatus.DECLINE), key=lambda t: t.recent_z),
    )
