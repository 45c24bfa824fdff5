"""Edition reads (resolved views), the year index and edition creation."""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from . import datastore as ds
from .errors import Conflict, NotFound, ValidationError
from .lifecycle import (
    EditionStatus,
    RegistrationStatus,
    check_status_pair,
    parse_enum,
)
from .normalize import coerce_number, normalize_edition
from .resolution import resolve_normalized

logger = logging.getLogger(__name__)

MIN_YEAR = 1900
MAX_YEAR = 2100

_VIEW_FIELDS = (
    "id",
    "competitionId",
    "year",
    "slug",
    "status",
    "registrationStatus",
    "currentParticipants",
    "registrationOpenDate",
    "registrationCloseDate",
    "startDate",
    "endDate",
)


def resolved_view(raw: Any) -> Dict[str, Any]:
    """Build the resolved wire view for a raw edition in either shape."""
    sections = normalize_edition(raw)
    edition = sections["edition"]
    view: Dict[str, Any] = {name: edition.get(name) for name in _VIEW_FIELDS}
    view.update(resolve_normalized(sections))
    findings = check_status_pair(edition.get("status"), edition.get("registrationStatus"))
    if findings:
        logger.warning("Edition %s has incoherent statuses: %s", edition.get("id"), "; ".join(findings))
    view["statusCoherent"] = not findings
    view["competition"] = sections["competition"]
    view["event"] = sections["event"]
    return view


def _require_competition(competition_id: str) -> Dict[str, Any]:
    competition = ds.find_competition(competition_id)
    if not competition:
        raise NotFound("Competition not found")
    return competition


def get_edition(edition_id: str) -> Dict[str, Any]:
    edition = ds.find_edition(edition_id)
    if not edition:
        raise NotFound("Edition not found")
    return edition


def get_resolved_edition(edition_id: str) -> Dict[str, Any]:
    return resolved_view(get_edition(edition_id))


def get_resolved_edition_by_slug(slug: str) -> Dict[str, Any]:
    edition = ds.find_edition_by_slug(slug)
    if not edition:
        raise NotFound("Edition not found")
    return resolved_view(edition)


def get_resolved_edition_by_year(competition_id: str, year: int) -> Dict[str, Any]:
    edition = ds.find_edition_by_year(competition_id, year)
    if not edition:
        raise NotFound(f"Edition for year {year} not found")
    return resolved_view(edition)


def list_resolved_editions(competition_id: str, descending: bool = True) -> List[Dict[str, Any]]:
    _require_competition(competition_id)
    return [resolved_view(e) for e in ds.list_competition_editions(competition_id, descending=descending)]


def available_years(competition_id: str) -> List[int]:
    """Distinct edition years of a competition, newest first."""
    _require_competition(competition_id)
    return sorted({int(y) for y in ds.list_edition_years(competition_id)}, reverse=True)


def validate_years(years: Any) -> List[int]:
    """Return ``years`` as ints, rejecting malformed lists and duplicates."""
    if not isinstance(years, list) or not years:
        raise ValidationError("'years' must be a non-empty list of integers")
    out: List[int] = []
    for y in years:
        if isinstance(y, bool) or not isinstance(y, int):
            raise ValidationError(f"Invalid year {y!r}; expected an integer")
        if y < MIN_YEAR or y > MAX_YEAR:
            raise ValidationError(f"Year {y} out of range {MIN_YEAR}-{MAX_YEAR}")
        out.append(y)
    dups = sorted({y for y in out if out.count(y) > 1})
    if dups:
        raise Conflict("Duplicate years in request: " + ", ".join(str(y) for y in dups))
    return out


def default_statuses(year: int, today: Optional[date] = None) -> Dict[str, str]:
    """Past years are FINISHED/CLOSED; the current and later years UPCOMING/COMING_SOON."""
    current = (today or date.today()).year
    if year < current:
        return {"status": EditionStatus.FINISHED.value, "registrationStatus": RegistrationStatus.CLOSED.value}
    return {"status": EditionStatus.UPCOMING.value, "registrationStatus": RegistrationStatus.COMING_SOON.value}


def edition_slug(competition_slug: str, year: int) -> str:
    return f"{competition_slug}-{year}"


def create_bulk(competition_id: str, years: Iterable[Any], today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Create one edition per year, all or nothing."""
    requested = validate_years(years)
    competition = _require_competition(competition_id)
    existing = set(ds.list_edition_years(competition_id))
    clashes = sorted(existing.intersection(requested))
    if clashes:
        raise Conflict("Editions already exist for years: " + ", ".join(str(y) for y in clashes))
    rows = []
    for year in requested:
        row = {"year": year, "slug": edition_slug(competition["slug"], year)}
        row.update(default_statuses(year, today))
        rows.append(row)
    created = ds.create_editions_bulk(competition_id, rows)
    logger.info("Bulk created %d editions for competition %s", len(created), competition_id)
    return created


def _optional_int(payload: Dict[str, Any], key: str) -> Optional[int]:
    val = payload.get(key)
    if val is None:
        return None
    num = coerce_number(val, key)
    if num is None or not math.isfinite(num) or num < 0 or int(num) != num:
        raise ValidationError(f"Invalid {key} '{val}'; expected a non-negative integer")
    return int(num)


def create_edition(competition_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Create a single edition; override fields left out are inherited later."""
    year = payload.get("year")
    validate_years([year])
    competition = _require_competition(competition_id)
    if int(year) in set(ds.list_edition_years(competition_id)):
        raise Conflict(f"Edition for year {year} already exists")

    fields: Dict[str, Any] = {"year": int(year), "slug": edition_slug(competition["slug"], int(year))}
    distance = payload.get("distance")
    if distance is not None:
        num = coerce_number(distance, "distance")
        if num is None or not math.isfinite(num) or num < 0:
            raise ValidationError(f"Invalid distance '{distance}'")
        fields["distance"] = num
    for key in ("elevation", "maxParticipants", "currentParticipants"):
        val = _optional_int(payload, key)
        if val is not None:
            fields[key] = val
    if payload.get("city"):
        fields["city"] = str(payload["city"]).strip()
    fields["status"] = parse_enum(EditionStatus, payload.get("status") or EditionStatus.UPCOMING).value
    fields["registrationStatus"] = parse_enum(
        RegistrationStatus,
        payload.get("registrationStatus") or RegistrationStatus.COMING_SOON,
        "registrationStatus",
    ).value
    for key in ("registrationOpenDate", "registrationCloseDate", "startDate", "endDate"):
        if payload.get(key):
            fields[key] = payload[key]

    findings = check_status_pair(fields["status"], fields["registrationStatus"])
    if findings:
        logger.warning("Creating edition %s %s with incoherent statuses: %s", competition_id, year, "; ".join(findings))
    edition = ds.create_edition(competition_id, fields)
    logger.info("Edition created: %s %s (%s)", competition.get("name"), year, edition.get("id"))
    return edition


def status_check(edition_id: str) -> Dict[str, Any]:
    edition = get_edition(edition_id)
    findings = check_status_pair(edition.get("status"), edition.get("registrationStatus"))
    return {
        "id": edition.get("id"),
        "status": edition.get("status"),
        "registrationStatus": edition.get("registrationStatus"),
        "coherent": not findings,
        "findings": findings,
    }
