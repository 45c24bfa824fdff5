"""Global leaderboard of users by participation metric."""

from __future__ import annotations

import os
from typing import Any, Dict, Iterable, List, Tuple

from . import datastore as ds
from .errors import ValidationError
from .stats import completed_totals, stats_by_user

METRIC_COMPETITIONS = "competitions"
METRIC_KM = "km"
METRIC_ELEVATION = "elevation"
METRICS = (METRIC_COMPETITIONS, METRIC_KM, METRIC_ELEVATION)


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


def extended_metrics_enabled() -> bool:
    return os.environ.get("RANKING_EXTENDED_METRICS", "0").lower() in ("1", "true", "yes", "on")


def display_name(user: Dict[str, Any]) -> str:
    full = f"{user.get('firstName') or ''} {user.get('lastName') or ''}".strip()
    return full or (user.get("username") or "")


def _public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": user.get("id"),
        "username": user.get("username"),
        "name": display_name(user),
        "country": user.get("country"),
    }


def build_ranking(entries: Iterable[Tuple[Dict[str, Any], Any]], offset: int = 0) -> List[Dict[str, Any]]:
    """Number already-ordered ``(user, value)`` pairs from ``offset + 1``."""
    return [
        {"rank": offset + idx, "user": _public_user(user), "count": value}
        for idx, (user, value) in enumerate(entries, start=1)
    ]


def parse_limit(value: Any) -> int:
    default = _env_int("RANKING_DEFAULT_LIMIT", 20)
    maximum = _env_int("RANKING_MAX_LIMIT", 100)
    if value in (None, ""):
        return default
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid limit '{value}'; expected a positive integer")
    if limit <= 0:
        raise ValidationError(f"Invalid limit '{value}'; expected a positive integer")
    return min(limit, maximum)


def parse_offset(value: Any) -> int:
    if value in (None, ""):
        return 0
    try:
        offset = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid offset '{value}'; expected a non-negative integer")
    if offset < 0:
        raise ValidationError(f"Invalid offset '{value}'; expected a non-negative integer")
    return offset


def _rank_by_totals(metric: str, limit: int, offset: int) -> List[Dict[str, Any]]:
    key = "totalKm" if metric == METRIC_KM else "totalElevation"
    grouped = stats_by_user(ds.list_completed_ledger())
    totals = [(uid, completed_totals(rows)[key]) for uid, rows in grouped.items()]
    totals.sort(key=lambda t: t[1], reverse=True)
    page = totals[offset:offset + limit]
    users = ds.list_users([uid for uid, _ in page])
    entries = [(users.get(uid) or {"id": uid}, value) for uid, value in page]
    return build_ranking(entries, offset=offset)


def get_global_ranking(metric: str = METRIC_COMPETITIONS, limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
    """Leaderboard rows ``{rank, user, count}`` for ``metric``.

    ``km`` and ``elevation`` return an empty list unless
    RANKING_EXTENDED_METRICS is enabled.
    """
    if metric not in METRICS:
        raise ValidationError(f"Invalid ranking type '{metric}'. Expected one of: {', '.join(METRICS)}")
    if metric == METRIC_COMPETITIONS:
        return build_ranking(ds.rank_users_by_completed(limit, offset=offset), offset=offset)
    if not extended_metrics_enabled():
        return []
    return _rank_by_totals(metric, limit, offset)
