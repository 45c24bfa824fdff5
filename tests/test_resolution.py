import copy

from trailhub.resolution import resolve, resolve_field, resolve_optional


COMPETITION = {"baseDistance": 171, "baseElevation": 10000, "baseMaxParticipants": 2300, "city": "Courmayeur"}
EVENT = {"city": "Chamonix"}


def test_distance_falls_back_to_competition():
    out = resolve({"distance": None}, COMPETITION, EVENT)
    assert out["resolvedDistance"] == 171
    assert out["resolvedSources"]["distance"] == "competition"


def test_edition_override_wins():
    out = resolve({"distance": 145}, COMPETITION, EVENT)
    assert out["resolvedDistance"] == 145
    assert out["resolvedSources"]["distance"] == "edition"


def test_explicit_zero_is_an_override():
    value, source = resolve_field("elevation", {"elevation": 0}, COMPETITION, EVENT)
    assert (value, source) == (0, "edition")


def test_city_never_comes_from_competition():
    out = resolve({"city": None}, COMPETITION, {})
    assert out["resolvedCity"] == ""
    assert out["resolvedSources"]["city"] == "none"

    out = resolve({"city": ""}, COMPETITION, EVENT)
    assert out["resolvedCity"] == "Chamonix"
    assert out["resolvedSources"]["city"] == "event"


def test_numbers_never_come_from_event():
    out = resolve({}, {}, {"baseDistance": 50, "distance": 50})
    assert out["resolvedDistance"] == 0
    assert out["resolvedSources"]["distance"] == "none"


def test_missing_parents_never_raise():
    out = resolve(None, None, None)
    assert out["resolvedDistance"] == 0
    assert out["resolvedElevation"] == 0
    assert out["resolvedMaxParticipants"] == 0
    assert out["resolvedCity"] == ""


def test_inputs_are_not_mutated():
    edition = {"distance": None, "city": None}
    comp = copy.deepcopy(COMPETITION)
    resolve(edition, comp, EVENT)
    assert edition == {"distance": None, "city": None}
    assert comp == COMPETITION


def test_resolve_optional_keeps_none():
    out = resolve_optional({"maxParticipants": None}, {}, {})
    assert out["maxParticipants"] == {"value": None, "source": "none"}
