import random

from campcheck.services.engagement_aggregator import compute_demographics, compute_engagement
from campcheck.services.live_aggregator import compute_live_occupancy
from campcheck.services.report_composer import compose_report, matches_search
from tests.conftest import snap_activity, snap_entry, snap_participant

A1, A2, A3, A4 = 101, 102, 103, 104


def build(roster, activities, ledger, search=""):
    live = compute_live_occupancy(roster, activities)
    return compose_report(
        activities,
        live,
        compute_engagement(ledger, activities),
        compute_demographics(roster),
        search=search,
    )


def sample():
    activities = [
        snap_activity(A1, "canoeing"),
        snap_activity(A2, "Archery"),
        snap_activity(A3, "Bible Study"),
        snap_activity(A4, "Crafts"),
    ]
    roster = [
        snap_participant(1, "Grace Lee", church="Oakview", category="student", location=A1),
        snap_participant(2, "Sam Cho", church="Grace Chapel", category="leader", location=A1),
        snap_participant(3, "Ana Diaz", church="Oakview", category="student", location=A2),
        snap_participant(4, "Ben Ortiz", church="Riverside", category="student", location=A3),
        snap_participant(5, "Lia Park", church="Riverside", category="leader", location=None),
        snap_participant(6, "Tom Hale", church="Hillcrest", category="student", location=None),
    ]
    ledger = [
        snap_entry(1, 1, A4, minutes=1),
        snap_entry(2, 1, A1, minutes=2),
        snap_entry(3, 2, A1, minutes=3),
        snap_entry(4, 3, A2, minutes=4),
        snap_entry(5, 4, A3, minutes=5),
        snap_entry(6, 5, A4, minutes=6),
        snap_entry(7, 5, None, minutes=7),
        snap_entry(8, 6, A3, minutes=8),
        snap_entry(9, 6, None, minutes=9),
    ]
    return roster, activities, ledger


def test_search_matches_name_or_church():
    grace = snap_participant(1, "Grace Lee", church="Oakview")
    sam = snap_participant(2, "Sam Cho", church="Grace Chapel")
    ben = snap_participant(3, "Ben Ortiz", church="Riverside")

    assert [p.id for p in (grace, sam, ben) if matches_search(p, "grace")] == [1, 2]
    assert matches_search(ben, "  RIVER ")
    assert not matches_search(ben, "oak")


def test_blank_search_matches_everyone():
    ben = snap_participant(3, "Ben Ortiz", church="Riverside")
    assert matches_search(ben, "")
    assert matches_search(ben, "   ")
    assert matches_search(ben, None)


def test_activity_rows_sorted_by_live_count_then_name():
    roster, activities, ledger = sample()

    report = build(roster, activities, ledger)

    assert [row.name for row in report.activity_rows] == ["canoeing", "Archery", "Bible Study", "Crafts"]
    assert [row.total_count for row in report.activity_rows] == [2, 1, 1, 0]
    assert [p.id for p in report.activity_rows[0].members] == [1, 2]


def test_filter_applies_to_activity_rows_and_unassigned():
    roster, activities, ledger = sample()

    report = build(roster, activities, ledger, search="grace")

    canoeing = report.activity_rows[0]
    assert canoeing.filtered_count == 2
    assert canoeing.total_count == 2
    archery = report.activity_rows[1]
    assert archery.filtered_count == 0
    assert archery.total_count == 1
    assert report.unassigned.filtered_count == 0
    assert report.unassigned.total_count == 2
    # Filtering never reorders the activity rows
    assert [row.name for row in report.activity_rows] == ["canoeing", "Archery", "Bible Study", "Crafts"]


def test_engagement_ranking_orders_by_count_then_name():
    roster, activities, ledger = sample()

    report = build(roster, activities, ledger)

    assert [(row.name, row.count) for row in report.engagement_ranking] == [
        ("Bible Study", 2),
        ("canoeing", 2),
        ("Crafts", 2),
        ("Archery", 1),
    ]


def test_group_ranking_and_totals():
    roster, activities, ledger = sample()

    report = build(roster, activities, ledger)

    assert [(row.name, row.count) for row in report.group_ranking] == [
        ("Oakview", 2),
        ("Riverside", 2),
        ("Grace Chapel", 1),
        ("Hillcrest", 1),
    ]
    assert report.totals.participants == 6
    assert report.totals.students == 4
    assert report.totals.leaders == 2
    assert report.totals.unassigned == 2
    assert [p.id for p in report.unassigned.members] == [5, 6]


def test_repeated_composition_is_identical():
    roster, activities, ledger = sample()

    first = build(roster, activities, ledger, search="o").model_dump_json()
    second = build(roster, activities, ledger, search="o").model_dump_json()

    assert first == second


def test_output_order_does_not_depend_on_input_order():
    roster, activities, ledger = sample()
    expected = build(roster, activities, ledger).model_dump_json()

    rng = random.Random(7)
    for _ in range(10):
        shuffled_roster = roster[:]
        shuffled_activities = activities[:]
        rng.shuffle(shuffled_roster)
        rng.shuffle(shuffled_activities)
        assert build(shuffled_roster, shuffled_activities, ledger).model_dump_json() == expected


def test_tied_activities_with_same_name_fall_back_to_id():
    activities = [snap_activity(A2, "Hike"), snap_activity(A1, "Hike")]

    report = build([], activities, [])

    assert [row.activity_id for row in report.activity_rows] == [A1, A2]
    assert [row.activity_id for row in report.engagement_ranking] == [A1, A2]
