"""Participation ledger: a user's relationship to a competition or edition.

Rows are keyed by (user, competition) or (user, edition). Writes go through
the datastore's single-statement upsert, so a repeated "mark" updates the
existing row instead of creating a second one.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from . import datastore as ds
from .errors import NotFound, ValidationError
from .lifecycle import CategoryType, ParticipationStatus, parse_enum
from .timing import parse_time

logger = logging.getLogger(__name__)

MAX_NOTES = 1000
MAX_BIB = 20
MAX_CATEGORY_NAME = 100


def _positive_int(payload: Dict[str, Any], key: str) -> Optional[int]:
    val = payload.get(key)
    if val is None:
        return None
    error = ValidationError(f"Invalid {key} '{val}'; expected a positive integer")
    if isinstance(val, bool) or (isinstance(val, float) and not val.is_integer()):
        raise error
    try:
        num = int(val)
    except (TypeError, ValueError):
        raise error
    if num <= 0:
        raise error
    return num


def _rating(payload: Dict[str, Any]) -> Optional[int]:
    val = payload.get("personalRating")
    if val is None:
        return None
    if isinstance(val, bool) or not isinstance(val, int) or not 1 <= val <= 5:
        raise ValidationError(f"Invalid personalRating '{val}'; expected an integer from 1 to 5")
    return val


def _text(payload: Dict[str, Any], key: str, max_len: int) -> Optional[str]:
    val = payload.get(key)
    if val is None:
        return None
    text = str(val)
    if len(text) > max_len:
        raise ValidationError(f"{key} must be at most {max_len} characters")
    return text


def _utc_naive(ts: datetime) -> datetime:
    # completed_at is TIMESTAMP without time zone and holds UTC
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(timezone.utc).replace(tzinfo=None)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _timestamp(val: Any) -> datetime:
    if isinstance(val, datetime):
        return _utc_naive(val)
    try:
        parsed = datetime.fromisoformat(str(val).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid completedAt '{val}'; expected an ISO-8601 timestamp")
    return _utc_naive(parsed)


def _result_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Validated result fields, only for keys the caller supplied."""
    fields: Dict[str, Any] = {}
    if "finishTime" in payload:
        finish = payload.get("finishTime")
        fields["finishTime"] = str(finish).strip() if finish else None
        fields["finishTimeSeconds"] = parse_time(fields["finishTime"]) if fields["finishTime"] else None
    if "position" in payload:
        fields["position"] = _positive_int(payload, "position")
    if "categoryPosition" in payload:
        fields["categoryPosition"] = _positive_int(payload, "categoryPosition")
    if "notes" in payload:
        fields["notes"] = _text(payload, "notes", MAX_NOTES)
    if "personalRating" in payload:
        fields["personalRating"] = _rating(payload)
    return fields


def _require_competition(competition_id: str) -> None:
    if not ds.find_competition(competition_id):
        raise NotFound("Competition not found")


# ---------------------------------------------------------------------------
# Competition scope
# ---------------------------------------------------------------------------

def mark_competition(user_id: str, competition_id: str, status: Any = None) -> Dict[str, Any]:
    st = parse_enum(ParticipationStatus, status or ParticipationStatus.INTERESTED)
    _require_competition(competition_id)
    row = ds.upsert_ledger(ds.COMPETITION_LEDGER, user_id, competition_id, {"status": st.value})
    logger.info("User %s marked competition %s as %s", user_id, competition_id, st.value)
    return row


def add_result(
    user_id: str,
    competition_id: str,
    payload: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Record a finish: status becomes COMPLETED and completedAt is stamped."""
    fields = _result_fields(payload or {})
    fields["status"] = ParticipationStatus.COMPLETED.value
    completed_at = (payload or {}).get("completedAt")
    fields["completedAt"] = _timestamp(completed_at) if completed_at else _timestamp(now or _utcnow())
    _require_competition(competition_id)
    row = ds.upsert_ledger(ds.COMPETITION_LEDGER, user_id, competition_id, fields)
    logger.info("User %s added result for competition %s", user_id, competition_id)
    return row


def update_competition(user_id: str, competition_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    payload = payload or {}
    fields = _result_fields(payload)
    if payload.get("status") is not None:
        fields["status"] = parse_enum(ParticipationStatus, payload["status"]).value
    if payload.get("completedAt"):
        fields["completedAt"] = _timestamp(payload["completedAt"])
    row = ds.update_ledger(ds.COMPETITION_LEDGER, user_id, competition_id, fields)
    if row is None:
        raise NotFound("User competition not found")
    logger.info("User %s updated competition %s", user_id, competition_id)
    return row


def unmark_competition(user_id: str, competition_id: str) -> Dict[str, str]:
    if not ds.delete_ledger(ds.COMPETITION_LEDGER, user_id, competition_id):
        raise NotFound("User competition not found")
    logger.info("User %s unmarked competition %s", user_id, competition_id)
    return {"message": "Competition unmarked successfully"}


def get_competition_status(user_id: str, competition_id: str) -> Optional[Dict[str, Any]]:
    return ds.get_ledger(ds.COMPETITION_LEDGER, user_id, competition_id)


def list_user_competitions(user_id: str, status: Any = None) -> List[Dict[str, Any]]:
    st = parse_enum(ParticipationStatus, status).value if status else None
    return ds.list_user_competitions(user_id, status=st)


# ---------------------------------------------------------------------------
# Edition scope
# ---------------------------------------------------------------------------

def upsert_edition_participation(
    user_id: str,
    edition_id: str,
    payload: Dict[str, Any],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Create or fully replace a user's participation in one edition."""
    payload = payload or {}
    if not ds.find_edition(edition_id):
        raise NotFound("Edition not found")
    st = parse_enum(ParticipationStatus, payload.get("status"))
    category_type = payload.get("categoryType")
    ctype = parse_enum(CategoryType, category_type, "categoryType") if category_type else None
    finish = payload.get("finishTime")
    finish = str(finish).strip() if finish else None

    fields: Dict[str, Any] = {
        "status": st.value,
        "finishTime": finish,
        "finishTimeSeconds": parse_time(finish) if finish else None,
        "position": _positive_int(payload, "position"),
        "categoryPosition": _positive_int(payload, "categoryPosition"),
        "categoryType": ctype.value if ctype else None,
        "categoryName": _text(payload, "categoryName", MAX_CATEGORY_NAME) if ctype is CategoryType.CATEGORY else None,
        "bibNumber": _text(payload, "bibNumber", MAX_BIB),
        "notes": _text(payload, "notes", MAX_NOTES),
        "personalRating": _rating(payload),
        "completedAt": _timestamp(now or _utcnow()) if st is ParticipationStatus.COMPLETED else None,
    }
    row = ds.upsert_ledger(ds.EDITION_LEDGER, user_id, edition_id, fields)
    logger.info("User %s recorded %s for edition %s", user_id, st.value, edition_id)
    return row


def get_edition_participation(user_id: str, edition_id: str) -> Dict[str, Any]:
    row = ds.get_ledger(ds.EDITION_LEDGER, user_id, edition_id)
    if row is None:
        raise NotFound("Participation not found")
    return row


def delete_edition_participation(user_id: str, edition_id: str) -> Dict[str, str]:
    if not ds.delete_ledger(ds.EDITION_LEDGER, user_id, edition_id):
        raise NotFound("Participation not found")
    logger.info("User %s deleted participation in edition %s", user_id, edition_id)
    return {"message": "Participation deleted successfully"}
