"""Edition lifecycle and participation enumerations.

Edition ``status`` and ``registrationStatus`` are set independently by
organisers. Nothing moves them automatically; :func:`check_status_pair`
reports combinations that contradict each other without correcting them.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Type, TypeVar

from .errors import ValidationError


class EditionStatus(str, Enum):
    UPCOMING = "UPCOMING"
    ONGOING = "ONGOING"
    FINISHED = "FINISHED"
    REGISTRATION_CLOSED = "REGISTRATION_CLOSED"
    CANCELLED = "CANCELLED"


class RegistrationStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    FULL = "FULL"
    COMING_SOON = "COMING_SOON"


class ParticipationStatus(str, Enum):
    INTERESTED = "INTERESTED"
    REGISTERED = "REGISTERED"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    DNF = "DNF"
    DNS = "DNS"


class CategoryType(str, Enum):
    GENERAL = "GENERAL"
    MALE = "MALE"
    FEMALE = "FEMALE"
    CATEGORY = "CATEGORY"


# Registration states each edition status is expected to travel with
COMPATIBLE_REGISTRATION: Dict[EditionStatus, FrozenSet[RegistrationStatus]] = {
    EditionStatus.UPCOMING: frozenset({RegistrationStatus.COMING_SOON, RegistrationStatus.OPEN}),
    EditionStatus.ONGOING: frozenset({RegistrationStatus.CLOSED}),
    EditionStatus.FINISHED: frozenset({RegistrationStatus.CLOSED}),
    EditionStatus.REGISTRATION_CLOSED: frozenset({RegistrationStatus.CLOSED, RegistrationStatus.FULL}),
    EditionStatus.CANCELLED: frozenset({RegistrationStatus.CLOSED}),
}

E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: Type[E], value, field: str = "status") -> E:
    """Return the member of ``enum_cls`` named by ``value`` (case-insensitive).

    Raises :class:`ValidationError` for anything unrecognised.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().upper())
        except ValueError:
            pass
    allowed = ", ".join(m.value for m in enum_cls)
    raise ValidationError(f"Invalid {field} '{value}'. Expected one of: {allowed}")


def check_status_pair(status, registration_status) -> List[str]:
    """Return human-readable findings for an incoherent status pair.

    An empty list means the combination is one of the documented ones.
    Unknown values are reported as findings rather than raised.
    """
    findings: List[str] = []
    st: Optional[EditionStatus] = None
    reg: Optional[RegistrationStatus] = None
    try:
        st = parse_enum(EditionStatus, status)
    except ValidationError:
        findings.append(f"unknown status {status!r}")
    try:
        reg = parse_enum(RegistrationStatus, registration_status, "registrationStatus")
    except ValidationError:
        findings.append(f"unknown registrationStatus {registration_status!r}")
    if st is not None and reg is not None:
        allowed = COMPATIBLE_REGISTRATION[st]
        if reg not in allowed:
            expected = "/".join(sorted(a.value for a in allowed))
            findings.append(
                f"status {st.value} with registrationStatus {reg.value} (expected {expected})"
            )
    return findings


def is_coherent(status, registration_status) -> bool:
    return not check_status_pair(status, registration_status)
