"""Roster Analytics - fantasy basketball valuation from a league snapshot.

Reads a league snapshot (scoring settings, rosters, player metadata, season
and recent stats, NBA schedule) and prints weighted z-score rankings, trend
signals, a day-by-day streaming plan, trade targets and consistency
estimates.

Usage:
    python main.py                          # Z-scores for your roster
    python main.py --trends                 # Buy-low / sell-high signals
    python main.py --stream                 # Streaming plan for the next 7 days
    python main.py --trade fg_pct pts       # Targets to gain FG%, give up PTS
    python main.py --consistency            # Volatility estimates for your roster
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime, timezone

# Ensure Unicode output works on Windows (cp1252 can't encode diacritics
# in player names like Dončić, Vučević, Nurkić).
if sys.stdout and hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if sys.stderr and hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

import config
from roster_analytics.baselines import compute_league_baselines, impact_rates_from
from roster_analytics.categories import classify_categories
from roster_analytics.consistency import estimate_consistency
from roster_analytics.players import resolve_player_meta
from roster_analytics.population import build_population
from roster_analytics.report import (
    format_consistency_report,
    format_streaming_plan,
    format_trade_report,
    format_trend_report,
    format_z_score_table,
)
from roster_analytics.schedule import build_schedule_window, parse_game_date
from roster_analytics.snapshot import LeagueSnapshot, SnapshotError, load_snapshot
from roster_analytics.streaming import build_streaming_plan
from roster_analytics.trades import owner_label, recommend_trades
from roster_analytics.trends import detect_trends
from roster_analytics.zscores import compute_pool_z_scores, compute_z_scores


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, str(config.LOG_LEVEL).upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fantasy Basketball Roster Analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --snapshot league.json          Z-scores for your roster
  python main.py --zscores --top 40              League-wide z-score ranking
  python main.py --trends                        Season vs. recent trend signals
  python main.py --stream --start-date 2025-11-03 --days 5
  python main.py --trade fg_pct pts              Gain FG%, give up points
  python main.py --consistency --roster 4        Volatility estimates for roster 4
  python main.py --stream --json                 Machine-readable output
        """,
    )
    parser.add_argument(
        "--snapshot",
        type=str,
        default=None,
        help=f"League snapshot JSON file (default: {config.SNAPSHOT_FILE})",
    )
    parser.add_argument(
        "--roster",
        type=int,
        default=None,
        help=f"Roster id to analyze (default: ROSTER_ID from .env, currently {config.DEFAULT_ROSTER_ID})",
    )
    parser.add_argument(
        "--zscores",
        action="store_true",
        help="Show weighted z-scores for your roster and the league leaders",
    )
    parser.add_argument(
        "--trends",
        action="store_true",
        help="Compare season z-scores with the recent window (buy low / sell high / breakouts / declines)",
    )
    parser.add_argument(
        "--stream",
        action="store_true",
        help="Day-by-day streaming plan: open lineup slots and free agents who play that day",
    )
    parser.add_argument(
        "--trade",
        nargs=2,
        metavar=("NEED", "SPARE"),
        default=None,
        help="Rank trade targets that gain NEED and cost SPARE (scoring keys, e.g. fg_pct pts)",
    )
    parser.add_argument(
        "--consistency",
        action="store_true",
        help="Estimated game-to-game volatility for your roster",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help=f"Schedule window length for --stream (default: {config.SCHEDULE_WINDOW_DAYS})",
    )
    parser.add_argument(
        "--start-date",
        type=str,
        default=None,
        help="First day of the --stream window, YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=None,
        help=f"Rows to show per table (default: {config.TOP_N_RECOMMENDATIONS})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON instead of tables",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


# ---------------------------------------------------------------------------
# Analyses
# ---------------------------------------------------------------------------

def run_zscores(snapshot: LeagueSnapshot, roster: dict, top_n: int) -> tuple[dict, str]:
    season_z = compute_z_scores(
        snapshot.rosters, snapshot.season_stats, snapshot.scoring_settings,
        players=snapshot.players,
    )
    mine = [str(p) for p in roster.get("players") or []]
    owner = owner_label(roster.get("roster_id"), snapshot.owners)
    text = "\n\n".join([
        format_z_score_table(season_z, title=f"YOUR ROSTER: {owner}", player_ids=mine, top_n=len(mine) or top_n),
        format_z_score_table(season_z, title="LEAGUE LEADERS (ROSTERED PLAYERS)", top_n=top_n),
    ])
    data = {pid: entry.to_dict() for pid, entry in season_z.items()}
    return data, text


def season_impact_rates(snapshot: LeagueSnapshot) -> dict[str, float]:
    """League make-rates for the percentage categories over the season window."""
    categories = classify_categories(snapshot.scoring_settings)
    population = build_population(snapshot.rosters, snapshot.season_stats)
    if not categories or not population:
        return {}
    return impact_rates_from(compute_league_baselines(population, categories))


def run_trends(snapshot: LeagueSnapshot, top_n: int) -> tuple[dict, str]:
    season_z = compute_z_scores(
        snapshot.rosters, snapshot.season_stats, snapshot.scoring_settings,
        players=snapshot.players,
    )
    # Recent impact z-scores are scaled by the season make-rate
    recent_z = compute_z_scores(
        snapshot.rosters, snapshot.recent_stats, snapshot.scoring_settings,
        players=snapshot.players,
        impact_rates=season_impact_rates(snapshot),
    )
    analysis = detect_trends(season_z, recent_z, snapshot.season_stats, snapshot.recent_stats)
    return analysis.to_dict(), format_trend_report(analysis, top_n=top_n)


def run_streaming(snapshot: LeagueSnapshot, roster: dict, start: date, days: int) -> tuple[dict, str]:
    pool_z = compute_pool_z_scores(
        snapshot.rosters, snapshot.season_stats, snapshot.scoring_settings,
        players=snapshot.players,
    )
    window = build_schedule_window(snapshot.games, start, days)
    plan = build_streaming_plan(
        roster,
        snapshot.rosters,
        snapshot.roster_positions,
        pool_z,
        snapshot.players,
        window.daily,
        window.team_games,
        matchups=snapshot.matchups,
        league_id=snapshot.league_id,
        generated_at=datetime.now(timezone.utc).isoformat(),
    )
    return plan.to_dict(), format_streaming_plan(plan, snapshot.players)


def run_trades(snapshot: LeagueSnapshot, roster: dict, need: str, spare: str, top_n: int) -> tuple[list, str]:
    season_z = compute_z_scores(
        snapshot.rosters, snapshot.season_stats, snapshot.scoring_settings,
        players=snapshot.players,
    )
    recs = recommend_trades(
        roster.get("roster_id"), snapshot.rosters, season_z, need, spare,
        owner_names=snapshot.owners,
    )
    return [r.to_dict() for r in recs], format_trade_report(recs, need, spare, top_n=top_n)


def run_consistency(snapshot: LeagueSnapshot, roster: dict) -> tuple[dict, str]:
    rows = []
    data = {}
    for pid in [str(p) for p in roster.get("players") or [] if p]:
        metrics = estimate_consistency(snapshot.season_stats.get(pid))
        name = resolve_player_meta(pid, snapshot.players)["name"]
        rows.append((name, metrics))
        data[pid] = {"name": name, **metrics.to_dict()}
    rows.sort(key=lambda r: -r[1].mean)
    return data, format_consistency_report(rows)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    top_n = args.top if args.top is not None else config.TOP_N_RECOMMENDATIONS
    days = args.days if args.days is not None else config.SCHEDULE_WINDOW_DAYS
    roster_id = args.roster if args.roster is not None else config.DEFAULT_ROSTER_ID

    # Default to the z-score view when no analysis is requested
    if not (args.zscores or args.trends or args.stream or args.trade or args.consistency):
        args.zscores = True

    start = date.today()
    if args.start_date:
        start = parse_game_date(args.start_date)
        if start is None:
            print(f"ERROR: --start-date must be YYYY-MM-DD, got {args.start_date!r}")
            sys.exit(1)

    if days <= 0:
        print("ERROR: --days must be a positive number of days")
        sys.exit(1)

    if top_n <= 0:
        print("ERROR: --top must be a positive number of rows")
        sys.exit(1)

    try:
        snapshot = load_snapshot(args.snapshot or config.SNAPSHOT_FILE)
    except SnapshotError as e:
        print(f"ERROR: {e}")
        print()
        print("Export your league data to a snapshot JSON file and point")
        print("SNAPSHOT_FILE in .env (or --snapshot) at it.")
        sys.exit(1)

    roster = snapshot.roster(roster_id)
    if roster is None:
        known = ", ".join(str(r.get("roster_id")) for r in snapshot.rosters) or "none"
        print(f"ERROR: roster {roster_id} not found in snapshot (known roster ids: {known})")
        sys.exit(1)

    if not classify_categories(snapshot.scoring_settings):
        print("ERROR: snapshot has no active scoring categories (scoring_settings is empty or all zero)")
        sys.exit(1)

    if args.trade:
        active = {c.setting_key for c in classify_categories(snapshot.scoring_settings)}
        unknown = [k for k in args.trade if k not in active]
        if unknown:
            print(f"ERROR: not a scored category in this league: {', '.join(unknown)}")
            print(f"  Scored categories: {', '.join(sorted(active))}")
            sys.exit(1)

    results: dict = {}
    reports: list[str] = []

    if args.zscores:
        results["zscores"], text = run_zscores(snapshot, roster, top_n)
        reports.append(text)
    if args.trends:
        results["trends"], text = run_trends(snapshot, top_n)
        reports.append(text)
    if args.stream:
        results["streaming"], text = run_streaming(snapshot, roster, start, days)
        reports.append(text)
    if args.trade:
        need, spare = args.trade
        results["trades"], text = run_trades(snapshot, roster, need, spare, top_n)
        reports.append(text)
    if args.consistency:
        results["consistency"], text = run_consistency(snapshot, roster)
        reports.append(text)

    if args.json:
        print(json.dumps(results, indent=2, default=str))
        return

    print()
    print("=" * 70)
    print("  ROSTER ANALYTICS")
    print(f"  League: {snapshot.league_id or '-'} | Roster: {roster_id} "
          f"({owner_label(roster_id, snapshot.owners)})")
    print("=" * 70)
    for text in reports:
        print()
        print(text)


if __name__ == "__main__":
    main()
