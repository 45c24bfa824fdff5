"""Effective values of the inheritable edition attributes.

Each field has its own fallback chain. The athletic numbers fall back to
the competition's base values and never consult the event; the city falls
back to the event and never consults the competition.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

SOURCE_EDITION = "edition"
SOURCE_COMPETITION = "competition"
SOURCE_EVENT = "event"
SOURCE_NONE = "none"

# resolved field -> (edition key, (parent level, parent key), display default)
FIELD_RULES: Dict[str, Tuple[str, Tuple[str, str], Any]] = {
    "distance": ("distance", (SOURCE_COMPETITION, "baseDistance"), 0),
    "elevation": ("elevation", (SOURCE_COMPETITION, "baseElevation"), 0),
    "maxParticipants": ("maxParticipants", (SOURCE_COMPETITION, "baseMaxParticipants"), 0),
    "city": ("city", (SOURCE_EVENT, "city"), ""),
}

WIRE_NAMES = {
    "distance": "resolvedDistance",
    "elevation": "resolvedElevation",
    "maxParticipants": "resolvedMaxParticipants",
    "city": "resolvedCity",
}


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _get(section: Any, key: str) -> Any:
    if isinstance(section, Mapping):
        return section.get(key)
    return None


def resolve_field(
    field: str,
    edition: Optional[Mapping[str, Any]],
    competition: Optional[Mapping[str, Any]],
    event: Optional[Mapping[str, Any]],
) -> Tuple[Any, str]:
    """Return ``(value, source)`` for ``field``; value is ``None`` if unset."""
    edition_key, (level, parent_key), _default = FIELD_RULES[field]
    value = _get(edition, edition_key)
    if _present(value):
        return value, SOURCE_EDITION
    parent = competition if level == SOURCE_COMPETITION else event
    value = _get(parent, parent_key)
    if _present(value):
        return value, level
    return None, SOURCE_NONE


def resolve_optional(edition, competition, event) -> Dict[str, Dict[str, Any]]:
    """Resolve every field keeping unset values as ``None``."""
    out: Dict[str, Dict[str, Any]] = {}
    for field in FIELD_RULES:
        value, source = resolve_field(field, edition, competition, event)
        out[field] = {"value": value, "source": source}
    return out


def resolve(edition, competition, event) -> Dict[str, Any]:
    """Return display values (``resolvedDistance`` ...) plus their sources.

    Unset fields resolve to ``0`` or ``""``. Inputs are never mutated.
    """
    view: Dict[str, Any] = {}
    sources: Dict[str, str] = {}
    for field, (_key, _parent, default) in FIELD_RULES.items():
        value, source = resolve_field(field, edition, competition, event)
        view[WIRE_NAMES[field]] = default if value is None else value
        sources[field] = source
    view["resolvedSources"] = sources
    return view


def resolve_normalized(sections: Mapping[str, Any]) -> Dict[str, Any]:
    return resolve(sections.get("edition"), sections.get("competition"), sections.get("event"))
