"""Configuration settings for the Roster Analytics engine."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
PROJECT_DIR = Path(__file__).parent
ENV_FILE = PROJECT_DIR / ".env"
load_dotenv(ENV_FILE)

# League snapshot settings
# SNAPSHOT_FILE: JSON file holding the materialized league data (rosters,
# season/recent stats, player metadata, schedule).
SNAPSHOT_FILE = Path(os.environ.get("SNAPSHOT_FILE", str(PROJECT_DIR / "snapshot.json")))
DEFAULT_ROSTER_ID = int(os.environ.get("ROSTER_ID", "1"))

# Logging level for the core library (DEBUG shows per-category baselines).
LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")

# Window settings
RECENT_WINDOW_DAYS = 14       # trailing window used for "recent" stats
SCHEDULE_WINDOW_DAYS = 7      # days of schedule the streaming planner looks at
TOP_N_RECOMMENDATIONS = 15    # rows shown in CLI tables

# Scoring settings keys that never map to a tracked stat.
IGNORED_SCORING_KEYS = frozenset([
    "bonus_ast_15p",
    "bonus_pt_40p",
    "bonus_pt_50p",
    "bonus_reb_20p",
    "qd",
])

# Roster slot codes that do not count as an active lineup slot.
# Compared case-insensitively.
BENCH_CODES = frozenset(["BN", "IR", "IR+", "NA"])

# Trend detection policy
# A player is compared against their own season total Z.  zDifference is
# recent_z - season_z.  Rules are checked in this order; first match wins:
#   BUY_LOW:   season > buy_low_min_season and diff < buy_low_max_diff
#   SELL_HIGH: season < sell_high_max_season and diff > sell_high_min_diff
#   BREAKOUT:  recent > season + breakout_margin and season < breakout_max_season
#   DECLINE:   recent < season - decline_margin and season > decline_min_season
TREND_THRESHOLDS: dict[str, float] = {
    "buy_low_min_season": 0.5,
    "buy_low_max_diff": -1.5,
    "sell_high_max_season": -0.5,
    "sell_high_min_diff": 1.5,
    "breakout_margin": 1.0,
    "breakout_max_season": 0.5,
    "decline_margin": 1.0,
    "decline_min_season": 0.5,
    # Confidence = recent_weight * games-share + magnitude_weight * |diff| * scale
    "recent_weight": 0.6,
    "magnitude_weight": 0.4,
    "magnitude_scale": 10.0,
    "confidence_cap": 100.0,
}

# Consistency heuristic
# usage = ppg + reb_weight * rpg + ast_weight * apg, then the first bucket
# whose floor the usage score exceeds gives the base coefficient of variation.
CONSISTENCY_TABLE: dict = {
    "reb_weight": 0.5,
    "ast_weight": 0.7,
    "cv_buckets": [
        (20.0, 0.15),  # all-star usage
        (12.0, 0.22),  # key contributor
        (6.0, 0.35),   # role player
    ],
    "cv_floor_bucket": 0.5,  # bench / limited minutes
    "spread_factor": 0.05,
    "high_risk_cv": 0.4,
    "medium_risk_cv": 0.25,
}

# Streaming planner caps
STREAMING_LIMITS: dict[str, int] = {
    "free_agent_pool": 200,       # top free agents kept after sorting by z
    "recs_per_hole": 2,           # recommendations per empty lineup slot
    "max_recommendations": 5,     # hard cap per day
    "own_upcoming_games": 2,      # upcoming games attached to own players
    "candidate_upcoming_games": 3,
}
