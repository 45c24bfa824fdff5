"""Per-user participation statistics."""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional

from . import datastore as ds
from .lifecycle import ParticipationStatus
from .resolution import resolve
from .timing import format_time

_STATUS_KEYS = {
    ParticipationStatus.INTERESTED.value: "interested",
    ParticipationStatus.REGISTERED.value: "registered",
    ParticipationStatus.CONFIRMED.value: "confirmed",
    ParticipationStatus.COMPLETED.value: "completed",
    ParticipationStatus.DNF.value: "dnf",
    ParticipationStatus.DNS.value: "dns",
}


def _number(value: Any) -> float:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def completed_totals(rows: Iterable[Dict[str, Any]]) -> Dict[str, float]:
    """Sum resolved distance and elevation over COMPLETED rows."""
    total_km = 0.0
    total_elevation = 0
    for row in rows:
        if row.get("status") != ParticipationStatus.COMPLETED.value:
            continue
        view = resolve(row.get("edition"), row.get("competition"), row.get("event"))
        total_km += _number(view["resolvedDistance"])
        total_elevation += _number(view["resolvedElevation"])
    return {"totalKm": math.floor(total_km * 10 + 0.5) / 10, "totalElevation": total_elevation}


def compute_user_stats(rows: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Aggregate ledger rows into the stats payload.

    Args:
        rows: Ledger rows carrying ``status``, ``finishTime``,
            ``finishTimeSeconds`` and ``edition``/``competition``/``event``
            sections for resolution.

    Returns:
        ``{"totalCompetitions", "byStatus", "completedStats"}``. The
        ``averageTime`` and ``fastestRace`` keys are left out when no
        completed row carries a time.
    """
    rows = list(rows)
    by_status = {key: 0 for key in _STATUS_KEYS.values()}
    for row in rows:
        key = _STATUS_KEYS.get(row.get("status"))
        if key:
            by_status[key] += 1

    completed = [r for r in rows if r.get("status") == ParticipationStatus.COMPLETED.value]
    completed_stats: Dict[str, Any] = {"totalCompleted": len(completed)}
    completed_stats.update(completed_totals(completed))

    timed = [r for r in completed if r.get("finishTimeSeconds")]
    if timed:
        total_seconds = sum(int(r["finishTimeSeconds"]) for r in timed)
        completed_stats["averageTime"] = format_time(math.floor(total_seconds / len(timed) + 0.5))
        fastest = min(timed, key=lambda r: int(r["finishTimeSeconds"]))
        seconds = int(fastest["finishTimeSeconds"])
        competition = fastest.get("competition") or {}
        completed_stats["fastestRace"] = {
            "competitionId": fastest.get("competitionId"),
            "editionId": fastest.get("editionId"),
            "name": competition.get("name") or "",
            "time": fastest.get("finishTime") or format_time(seconds),
            "timeSeconds": seconds,
        }

    return {
        "totalCompetitions": len(rows),
        "byStatus": by_status,
        "completedStats": completed_stats,
    }


def get_user_stats(user_id: str) -> Dict[str, Any]:
    return compute_user_stats(ds.list_user_ledger(user_id))


def stats_by_user(rows: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for row in rows:
        uid: Optional[str] = row.get("userId")
        if uid is None:
            continue
        grouped.setdefault(uid, []).append(row)
    return grouped
