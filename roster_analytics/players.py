"""Player metadata helpers.

Resolves display name, positions and NBA team from the Sleeper players map
(``player_id -> metadata dict``), and reads injury status from the same
records.  Every lookup has a documented fallback chain so a sparse or
missing metadata entry never raises.
"""

from __future__ import annotations

from typing import Any, Mapping

from roster_analytics.schedule import normalize_team_abbr

UNKNOWN_PLAYER = "Unknown Player"


def resolve_display_name(meta: Mapping[str, Any] | None, fallback: str) -> str:
    """Pick a display name: full name → first + last → search name → fallback."""
    meta = meta or {}
    if meta.get("full_name"):
        return str(meta["full_name"])
    if meta.get("first_name") and meta.get("last_name"):
        return f"{meta['first_name']} {meta['last_name']}"
    if meta.get("search_full_name"):
        return str(meta["search_full_name"])
    return fallback


def resolve_positions(meta: Mapping[str, Any] | None) -> list[str]:
    """Fantasy positions, falling back to the single ``position`` field."""
    meta = meta or {}
    positions = meta.get("fantasy_positions")
    if positions:
        return [str(p) for p in positions if p]
    if meta.get("position"):
        return [str(meta["position"])]
    return []


def resolve_player_meta(
    player_id: str,
    players: Mapping[str, Mapping[str, Any]] | None,
) -> dict[str, Any]:
    """Return ``{"name", "positions", "team"}`` for *player_id*.

    The name falls back to the raw id; the team is normalized to an NBA.com
    tricode and is ``""`` when unknown.
    """
    meta = (players or {}).get(player_id) or {}
    team = meta.get("team") or ""
    return {
        "name": resolve_display_name(meta, player_id),
        "positions": resolve_positions(meta),
        "team": normalize_team_abbr(str(team)) if team else "",
    }


def resolve_stat_name(record: Mapping[str, Any] | None) -> str | None:
    """Name carried on a stat record (``player_name`` or first + last), if any."""
    record = record or {}
    if record.get("player_name"):
        return str(record["player_name"])
    if record.get("first_name") and record.get("last_name"):
        return f"{record['first_name']} {record['last_name']}"
    return None


def get_injury_status(meta: Mapping[str, Any] | None) -> str | None:
    """Injury status for a player metadata record, or None if healthy.

    Checks, in order: an explicit ``injury_status``, an ``active`` flag set
    to False ("Inactive"), and an ``injury_start_date`` ("Injured").
    """
    if not meta:
        return None
    if meta.get("injury_status"):
        return str(meta["injury_status"])
    if meta.get("active") is False:
        return "Inactive"
    if meta.get("injury_start_date"):
        return "Injured"
    return None


def get_injury_details(meta: Mapping[str, Any] | None) -> dict[str, str] | None:
    """Injury status plus body-part details, or None if healthy."""
    status = get_injury_status(meta)
    if not status:
        return None
    details = (
        meta.get("injury")
        or meta.get("injury_details")
        or meta.get("injury_body_part")
        or "No details available"
    )
    return {"status": status, "details": str(details)}


def format_injury_note(injury: Mapping[str, str] | None, max_len: int = 40) -> str:
    """One-line injury note like ``"Out (Knee)"``; ``"-"`` when healthy."""
    if not injury:
        return "-"
    note = f"{injury.get('status', '?')} ({injury.get('details', '?')})"
    if len(note) > max_len:
        note = note[:max_len - 3] + "..."
    return note
