"""Normalise the two wire shapes of an edition record.

Editions reach the resolver either with their parents nested::

    {"id": ..., "distance": None, "competition": {"baseDistance": 171, "event": {"city": ...}}}

or flattened, with parent attributes carried under prefixed names::

    {"id": ..., "distance": None, "competitionName": ..., "baseDistance": 171, "eventName": ...}

:func:`normalize_edition` turns either into ``{"edition", "competition",
"event"}`` sections so resolution never has to look at the input shape.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

EDITION_FIELDS = (
    "id",
    "competitionId",
    "year",
    "slug",
    "distance",
    "elevation",
    "maxParticipants",
    "city",
    "currentParticipants",
    "status",
    "registrationStatus",
    "registrationOpenDate",
    "registrationCloseDate",
    "startDate",
    "endDate",
)

_NUMERIC_EDITION = ("distance", "elevation", "maxParticipants")
_NUMERIC_COMPETITION = ("baseDistance", "baseElevation", "baseMaxParticipants")

DEFAULT_COMPETITION_TYPE = "TRAIL"


def coerce_number(value: Any, field: str = "") -> Optional[float]:
    """Return ``value`` as an int/float, or ``None`` when unset or unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        num = float(text)
    except ValueError:
        logger.warning("Ignoring non-numeric %s value %r", field or "field", value)
        return None
    return int(num) if num.is_integer() else num


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _edition_section(raw: Mapping[str, Any]) -> Dict[str, Any]:
    edition = {name: raw.get(name) for name in EDITION_FIELDS}
    for name in _NUMERIC_EDITION:
        edition[name] = coerce_number(raw.get(name), name)
    city = raw.get("city")
    edition["city"] = city if city not in ("", None) else None
    edition["currentParticipants"] = coerce_number(raw.get("currentParticipants"), "currentParticipants") or 0
    return edition


def _nested(raw: Mapping[str, Any], comp: Mapping[str, Any]) -> Dict[str, Any]:
    event = _mapping(comp.get("event"))
    competition = {
        "id": comp.get("id") or raw.get("competitionId") or "",
        "slug": _text(comp.get("slug")),
        "name": _text(comp.get("name")),
        "type": comp.get("type") or DEFAULT_COMPETITION_TYPE,
        "status": comp.get("status"),
    }
    for name in _NUMERIC_COMPETITION:
        competition[name] = coerce_number(comp.get(name), name)
    return {
        "edition": _edition_section(raw),
        "competition": competition,
        "event": {
            "id": _text(event.get("id")),
            "slug": _text(event.get("slug")),
            "name": _text(event.get("name")),
            "country": _text(event.get("country")),
            "city": _text(event.get("city")),
        },
    }


def _flattened(raw: Mapping[str, Any]) -> Dict[str, Any]:
    competition = {
        "id": raw.get("competitionId") or "",
        "slug": _text(raw.get("competitionSlug")),
        "name": _text(raw.get("competitionName")),
        "type": raw.get("competitionType") or DEFAULT_COMPETITION_TYPE,
        "status": raw.get("competitionStatus"),
    }
    for name in _NUMERIC_COMPETITION:
        competition[name] = coerce_number(raw.get(name), name)
    return {
        "edition": _edition_section(raw),
        "competition": competition,
        "event": {
            "id": _text(raw.get("eventId")),
            "slug": _text(raw.get("eventSlug")),
            "name": _text(raw.get("eventName")),
            "country": _text(raw.get("eventCountry")),
            # flattened rows may only carry the already-inherited city
            "city": _text(raw.get("eventCity") or raw.get("city")),
        },
    }


def is_nested(raw: Any) -> bool:
    return isinstance(raw, Mapping) and isinstance(raw.get("competition"), Mapping)


def normalize_edition(raw: Any) -> Dict[str, Any]:
    """Return the canonical ``{"edition", "competition", "event"}`` sections.

    Never raises: a missing or malformed parent degrades to empty strings
    and ``None`` numbers.
    """
    if not isinstance(raw, Mapping):
        logger.warning("Edition record is %s, not a mapping; using empty defaults", type(raw).__name__)
        raw = {}
    if is_nested(raw):
        return _nested(raw, raw["competition"])
    return _flattened(raw)
