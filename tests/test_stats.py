from trailhub import ledger
from trailhub.stats import completed_totals, compute_user_stats, get_user_stats


def _row(status, distance=None, base=171, seconds=None, finish=None, cid="c-1", name="Race"):
    return {
        "userId": "u-1",
        "competitionId": cid,
        "editionId": None,
        "status": status,
        "finishTime": finish,
        "finishTimeSeconds": seconds,
        "edition": {"distance": distance} if distance is not None else None,
        "competition": {"name": name, "baseDistance": base, "baseElevation": 1000},
        "event": {},
    }


def test_totals_use_resolved_distance():
    rows = [
        _row("COMPLETED", base=171),
        _row("COMPLETED", distance=125, base=171),
        _row("DNF", base=300),
    ]
    stats = compute_user_stats(rows)
    assert stats["totalCompetitions"] == 3
    assert stats["completedStats"]["totalCompleted"] == 2
    assert stats["completedStats"]["totalKm"] == 296.0
    assert stats["completedStats"]["totalElevation"] == 2000
    assert stats["byStatus"]["completed"] == 2
    assert stats["byStatus"]["dnf"] == 1
    assert stats["byStatus"]["interested"] == 0


def test_total_km_rounds_to_one_decimal():
    rows = [_row("COMPLETED", base=10.04), _row("COMPLETED", base=10.02)]
    assert completed_totals(rows)["totalKm"] == 20.1


def test_average_and_fastest():
    rows = [
        _row("COMPLETED", seconds=36000, finish="10:00:00", cid="c-a", name="A"),
        _row("COMPLETED", seconds=18001, finish="05:00:01", cid="c-b", name="B"),
        _row("COMPLETED", seconds=None, cid="c-c", name="C"),
        _row("COMPLETED", seconds=0, cid="c-d", name="D"),
    ]
    completed = compute_user_stats(rows)["completedStats"]
    # untimed rows are left out of both figures
    assert completed["averageTime"] == "07:30:01"
    assert completed["fastestRace"] == {
        "competitionId": "c-b",
        "editionId": None,
        "name": "B",
        "time": "05:00:01",
        "timeSeconds": 18001,
    }


def test_no_timed_results_omits_time_keys():
    completed = compute_user_stats([_row("COMPLETED"), _row("DNS")])["completedStats"]
    assert "averageTime" not in completed
    assert "fastestRace" not in completed


def test_empty_user():
    stats = compute_user_stats([])
    assert stats["totalCompetitions"] == 0
    assert stats["completedStats"] == {"totalCompleted": 0, "totalKm": 0.0, "totalElevation": 0}


def test_user_stats_span_both_ledgers(seed):
    seed.event()
    seed.competition()
    seed.competition(id="c-125", slug="ccc", name="CCC", base_distance=100)
    seed.edition("ed-ccc", competition_id="c-125", year=2024, distance=125)
    seed.user("u-1")
    ledger.add_result("u-1", "c-171", {"finishTime": "40:00:00"})
    ledger.upsert_edition_participation("u-1", "ed-ccc", {"status": "COMPLETED", "finishTime": "20:00:00"})
    ledger.mark_competition("u-9", "c-125", "DNF")
    stats = get_user_stats("u-1")
    assert stats["completedStats"]["totalKm"] == 296.0
    assert stats["completedStats"]["averageTime"] == "30:00:00"
    assert stats["completedStats"]["fastestRace"]["editionId"] == "ed-ccc"
