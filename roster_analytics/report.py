"""Terminal reports for the analytics results.

Every ``format_*`` function returns a string (so callers can print, log or
e-mail it) and never mutates its input.  Tables are rendered with
``tabulate``; values are colorized via :mod:`roster_analytics.colors`, which
turns itself off when stdout isn't a TTY or ``NO_COLOR`` is set.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from tabulate import tabulate

import config
from roster_analytics.colors import (
    bold,
    colorize_injury,
    colorize_risk,
    colorize_trend,
    colorize_z_score,
    cyan,
    dim,
)
from roster_analytics.consistency import ConsistencyMetrics, format_consistency
from roster_analytics.players import format_injury_note, get_injury_details
from roster_analytics.streaming import StreamingDayPlan, StreamingPlan, StreamingPlayer
from roster_analytics.trades import TradeRecommendation
from roster_analytics.trends import TrendAnalysis, TrendRecord, format_trend_status
from roster_analytics.zscores import PlayerZScores, z_scores_to_frame

_RULE = "=" * 80

_CATEGORY_LABELS: dict[str, str] = {
    "pts": "PTS",
    "reb": "REB",
    "ast": "AST",
    "st": "STL",
    "stl": "STL",
    "blk": "BLK",
    "to": "TO",
    "turnovers": "TO",
    "fg3m": "3PM",
    "tpm": "3PM",
    "fg_pct": "FG%",
    "ft_pct": "FT%",
    "fg3_pct": "3P%",
    "ast_to": "A/TO",
    "stl_to": "S/TO",
}


def category_label(setting_key: str) -> str:
    """Short column header for a scoring-settings key (``fg_pct`` → ``FG%``)."""
    return _CATEGORY_LABELS.get(setting_key, setting_key.upper())


def _header(title: str) -> list[str]:
    return [cyan(_RULE), cyan(title), cyan(_RULE)]


def _z_cell(value: Any) -> str:
    return colorize_z_score(float(value), f"{float(value):+.2f}")


# ---------------------------------------------------------------------------
# Z-scores
# ---------------------------------------------------------------------------

def format_z_score_table(
    z_scores: PlayerZScores,
    title: str = "PLAYER Z-SCORES",
    player_ids: Iterable[str] | None = None,
    top_n: int | None = None,
) -> str:
    """Ranked z-score table, one column per scored category plus TOTAL.

    Args:
        z_scores: Output of :func:`compute_z_scores`.
        title: Section title.
        player_ids: Restrict the table to these players (e.g. one roster).
        top_n: Max rows; defaults to ``config.TOP_N_RECOMMENDATIONS``.
    """
    if top_n is None:
        top_n = config.TOP_N_RECOMMENDATIONS

    lines = _header(title)
    df = z_scores_to_frame(z_scores)
    if player_ids is not None:
        wanted = {str(p) for p in player_ids}
        df = df[df["player_id"].isin(wanted)]
    if df.empty:
        lines.append("\n  No scored players.")
        return "\n".join(lines)

    df = df.head(top_n).drop(columns=["player_id"]).reset_index(drop=True)
    df.index = df.index + 1
    value_cols = [c for c in df.columns if c != "Player"]
    display = df.copy()
    for col in value_cols:
        display[col] = df[col].apply(_z_cell)
    display = display.rename(columns={c: category_label(c) for c in value_cols if c != "TOTAL"})

    lines.append("")
    lines.append(tabulate(display, headers="keys", tablefmt="simple", showindex=True, numalign="right"))
    lines.append("")
    lines.append("Category z = (value - league mean) / league std, sign-flipped for negative-weight")
    lines.append("             categories and scaled by |weight|.  TOTAL is the unrounded sum, so")
    lines.append("             it can differ from adding the rounded columns by a few hundredths.")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------

def _trend_rows(records: Iterable[TrendRecord]) -> list[dict[str, Any]]:
    rows = []
    for t in records:
        rows.append({
            "Player": bold(t.player_name),
            "Status": colorize_trend(t.status.value, format_trend_status(t.status)),
            "Season Z": _z_cell(t.season_z),
            "Recent Z": _z_cell(t.recent_z),
            "Diff": _z_cell(t.z_difference),
            "Conf": f"{t.confidence_score:.1f}",
        })
    return rows


def format_trend_report(analysis: TrendAnalysis, top_n: int | None = None) -> str:
    """Buy-low / sell-high / breakout / decline sections."""
    if top_n is None:
        top_n = config.TOP_N_RECOMMENDATIONS

    lines = _header(f"TRENDS: SEASON VS. LAST {config.RECENT_WINDOW_DAYS} DAYS")
    sections = [
        ("BUY LOW (strong season, cold recently)", analysis.buy_low),
        ("SELL HIGH (weak season, hot recently)", analysis.sell_high),
        ("BREAKOUTS", analysis.breakouts),
        ("DECLINES", analysis.declines),
    ]
    for title, records in sections:
        lines.append("")
        lines.append(bold(f"  {title}"))
        if not records:
            lines.append(dim("  none"))
            continue
        lines.append(tabulate(_trend_rows(records[:top_n]), headers="keys", tablefmt="simple"))

    neutral = len(analysis.trends) - sum(len(r) for _, r in sections)
    lines.append("")
    lines.append(f"  {len(analysis.trends)} players compared, {neutral} in line with their season.")
    lines.append("  Conf = 0-100, blends recent games share with the size of the swing.")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Streaming
# ---------------------------------------------------------------------------

def _next_games(entry: StreamingPlayer) -> str:
    if not entry.upcoming_games:
        return "-"
    parts = []
    for g in entry.upcoming_games:
        opponent = g.away_team if g.home_team == entry.team else f"@{g.home_team}"
        parts.append(f"{g.date[5:]} {opponent}")
    return ", ".join(parts)


def _streaming_rows(
    entries: Iterable[StreamingPlayer],
    players: Mapping[str, Mapping[str, Any]] | None,
    show_starter: bool,
) -> list[dict[str, Any]]:
    rows = []
    for p in entries:
        row: dict[str, Any] = {
            "Player": bold(p.name),
            "Team": p.team,
            "Pos": "/".join(p.positions) or "-",
        }
        if show_starter:
            row["Start"] = "*" if p.is_starter else ""
        row["Z"] = _z_cell(p.z_score)
        row["Injury"] = colorize_injury(
            format_injury_note(get_injury_details((players or {}).get(p.player_id)))
        )
        row["Next games"] = _next_games(p)
        rows.append(row)
    return rows


def format_streaming_day(
    day: StreamingDayPlan,
    players: Mapping[str, Mapping[str, Any]] | None = None,
) -> str:
    """One day of the streaming plan."""
    covered = f"{day.players_available}/{day.active_slots} slots covered"
    holes = f"{day.holes} open" if day.holes else "full lineup"
    lines = [
        "",
        bold(f"  {day.day_label}  ({day.nba_games} games)  {covered}, {holes}"),
    ]
    if day.own_players:
        lines.append(tabulate(_streaming_rows(day.own_players, players, True), headers="keys", tablefmt="simple"))
    else:
        lines.append(dim("  none of your players have a game"))

    if day.recommendations:
        lines.append("")
        lines.append(cyan("  Stream candidates:"))
        lines.append(tabulate(_streaming_rows(day.recommendations, players, False), headers="keys", tablefmt="simple"))
    elif day.holes:
        lines.append(dim("  no free agents playing today"))
    return "\n".join(lines)


def format_streaming_plan(
    plan: StreamingPlan,
    players: Mapping[str, Mapping[str, Any]] | None = None,
) -> str:
    """Full day-by-day streaming plan."""
    lines = _header(f"STREAMING PLAN: ROSTER {plan.roster_id}")
    lines.append(
        f"  Active slots: {plan.active_slots}  |  Bench slots: {plan.bench_slots}  |  "
        f"Rostered players: {plan.total_roster_players}"
    )
    if not plan.days:
        lines.append("\n  No games in the schedule window.")
        return "\n".join(lines)

    for day in plan.days:
        lines.append(format_streaming_day(day, players))

    total_holes = sum(d.holes for d in plan.days)
    lines.append("")
    lines.append(f"  {total_holes} empty lineup slot-days over {len(plan.days)} game days.")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------

def format_trade_report(
    recommendations: list[TradeRecommendation],
    need_category: str,
    spare_category: str,
    top_n: int | None = None,
) -> str:
    """Ranked trade targets for a need/spare category swap."""
    if top_n is None:
        top_n = config.TOP_N_RECOMMENDATIONS

    need, spare = category_label(need_category), category_label(spare_category)
    lines = _header(f"TRADE TARGETS: GAIN {need}, GIVE UP {spare}")
    if not recommendations:
        lines.append("\n  No trade targets found.")
        return "\n".join(lines)

    rows = []
    for r in recommendations[:top_n]:
        rows.append({
            "Player": bold(r.player_name),
            "Owner": r.owner_name,
            f"{need} z": _z_cell(r.need_category_z),
            f"{spare} z": _z_cell(r.spare_category_z),
            "Score": _z_cell(r.trade_score),
        })
    lines.append("")
    lines.append(tabulate(rows, headers="keys", tablefmt="simple", showindex=range(1, len(rows) + 1)))
    lines.append("")
    lines.append(f"Score = {need} z - {spare} z (high in what you need, low in what you'd give up)")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Consistency
# ---------------------------------------------------------------------------

def format_consistency_report(
    rows: Iterable[tuple[str, ConsistencyMetrics]],
    title: str = "CONSISTENCY (ESTIMATED)",
) -> str:
    """Table of ``(player name, metrics)`` pairs, in the order given."""
    table = []
    for name, m in rows:
        table.append({
            "Player": bold(name),
            "PPG": f"{m.mean:.1f}",
            "Est. Std": f"{m.std:.2f}",
            "CV": f"{m.cv:.3f}",
            "Profile": format_consistency(m.cv),
            "Risk": colorize_risk(m.risk_level),
        })

    lines = _header(title)
    if not table:
        lines.append("\n  No players to rate.")
        return "\n".join(lines)
    lines.append("")
    lines.append(tabulate(table, headers="keys", tablefmt="simple"))
    lines.append("")
    lines.append("Estimated from season totals (usage tiers), not measured game-to-game variance.")
    return "\n".join(lines)
