from campcheck.services.engagement_aggregator import compute_demographics, compute_engagement
from tests.conftest import snap_activity, snap_entry, snap_participant

A1, A2, A3 = 101, 102, 103


def test_scenario_counts_two_visits():
    ledger = [
        snap_entry(1, participant_id=2, activity_id=A1, minutes=1),
        snap_entry(2, participant_id=3, activity_id=A1, minutes=2),
    ]

    assert compute_engagement(ledger) == {A1: 2}


def test_unvisited_activities_have_zero():
    activities = [snap_activity(A1, "Archery"), snap_activity(A2, "Canoeing")]
    ledger = [snap_entry(1, participant_id=2, activity_id=A1)]

    assert compute_engagement(ledger, activities) == {A1: 1, A2: 0}


def test_checkouts_are_not_counted():
    ledger = [
        snap_entry(1, participant_id=1, activity_id=A1, minutes=1),
        snap_entry(2, participant_id=1, activity_id=None, minutes=2),
        snap_entry(3, participant_id=1, activity_id=A1, minutes=3),
    ]

    assert compute_engagement(ledger) == {A1: 2}


def test_appending_an_entry_increments_only_its_activity():
    activities = [snap_activity(A1, "Archery"), snap_activity(A2, "Canoeing"), snap_activity(A3, "Crafts")]
    ledger = [
        snap_entry(1, participant_id=1, activity_id=A1),
        snap_entry(2, participant_id=2, activity_id=A2),
    ]
    before = compute_engagement(ledger, activities)

    for next_id, target in enumerate([A3, A1, None, A1, A2], start=3):
        ledger.append(snap_entry(next_id, participant_id=1, activity_id=target, minutes=next_id))
        after = compute_engagement(ledger, activities)
        for activity_id in before:
            expected = before[activity_id] + (1 if activity_id == target else 0)
            assert after[activity_id] == expected
        before = after


def test_demographics_by_category_and_group():
    roster = [
        snap_participant(1, "Grace Lee", church="Oakview", category="student"),
        snap_participant(2, "Sam Cho", church="Grace Chapel", category="leader"),
        snap_participant(3, "Ana Diaz", church=" Oakview ", category="student"),
        snap_participant(3, "Ana Diaz", church="Oakview", category="student"),
    ]

    demographics = compute_demographics(roster)

    assert demographics.total == 3
    assert demographics.by_category == {"student": 2, "leader": 1}
    assert demographics.by_group == {"Oakview": 2, "Grace Chapel": 1}


def test_demographics_of_empty_roster_keeps_both_categories():
    demographics = compute_demographics([])
    assert demographics.by_category == {"student": 0, "leader": 0}
    assert demographics.by_group == {}
    assert demographics.total == 0
