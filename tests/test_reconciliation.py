import pytest

from campcheck import crud
from campcheck.core.exceptions import Conflict, NotFound
from campcheck.services.transition_processor import (
    find_divergences, latest_entries, reconcile_roster, record_transition
)
from tests.conftest import at, snap_entry, snap_participant


def checkin_everyone(db, camp):
    record_transition(db, event_id=camp.event.id, participant_id=camp.grace.id,
                      activity_id=camp.archery.id, timestamp=at(1))
    record_transition(db, event_id=camp.event.id, participant_id=camp.sam.id,
                      activity_id=camp.canoeing.id, timestamp=at(2))
    record_transition(db, event_id=camp.event.id, participant_id=camp.grace.id,
                      activity_id=camp.crafts.id, timestamp=at(3))


def test_consistent_roster_reports_nothing(db, camp):
    checkin_everyone(db, camp)

    report = reconcile_roster(db, event_id=camp.event.id, repair=False)

    assert report.checked == 4
    assert report.divergences == []
    assert report.repaired is False


def test_divergence_without_repair_raises_conflict(db, camp):
    checkin_everyone(db, camp)
    camp.sam.current_activity_id = camp.archery.id
    db.commit()

    with pytest.raises(Conflict) as exc_info:
        reconcile_roster(db, event_id=camp.event.id, repair=False)

    divergences = exc_info.value.details["divergences"]
    assert [d["participant_id"] for d in divergences] == [camp.sam.id]
    assert divergences[0]["roster_activity_id"] == camp.archery.id
    assert divergences[0]["ledger_activity_id"] == camp.canoeing.id

    db.refresh(camp.sam)
    assert camp.sam.current_activity_id == camp.archery.id


def test_repair_heals_roster_and_is_idempotent(db, camp):
    checkin_everyone(db, camp)
    camp.sam.current_activity_id = None
    camp.ben.current_activity_id = camp.crafts.id
    db.commit()

    report = reconcile_roster(db, event_id=camp.event.id, repair=True)

    assert report.repaired is True
    assert sorted(d.participant_id for d in report.divergences) == sorted([camp.sam.id, camp.ben.id])

    db.refresh(camp.sam)
    db.refresh(camp.ben)
    assert camp.sam.current_activity_id == camp.canoeing.id
    assert camp.sam.location_timestamp == at(2)
    assert camp.ben.current_activity_id is None
    assert camp.ben.location_timestamp is None

    second = reconcile_roster(db, event_id=camp.event.id, repair=True)
    assert second.divergences == []


def test_unknown_event_is_not_found(db, camp):
    with pytest.raises(NotFound):
        reconcile_roster(db, event_id=4242)


def test_latest_entry_uses_timestamp_then_sequence():
    ledger = [
        snap_entry(1, participant_id=1, activity_id=10, minutes=30),
        snap_entry(2, participant_id=1, activity_id=11, minutes=5),
        snap_entry(3, participant_id=1, activity_id=12, minutes=30),
    ]
    assert latest_entries(ledger)[1].activity_id == 12


def test_find_divergences_on_snapshots():
    ledger = [
        snap_entry(1, participant_id=1, activity_id=10, minutes=0),
        snap_entry(2, participant_id=2, activity_id=None, minutes=1),
    ]
    roster = [
        snap_participant(1, "Ada", location=10).model_copy(
            update={"location_timestamp": ledger[0].timestamp, "location_sequence": 1}
        ),
        snap_participant(2, "Bo", location=10),
        snap_participant(3, "Cy"),
    ]

    divergences = find_divergences(roster, ledger)

    assert [d.participant_id for d in divergences] == [2]
    assert divergences[0].ledger_activity_id is None


def test_repair_does_not_undo_transition_committed_after_ledger_read(db, session_factory, camp, monkeypatch):
    grace_id = camp.grace.id
    canoeing_id = camp.canoeing.id
    record_transition(db, event_id=camp.event.id, participant_id=grace_id,
                      activity_id=camp.archery.id, timestamp=at(5))
    camp.grace.current_activity_id = camp.crafts.id
    db.commit()

    read_ledger = crud.attendance_log.get_by_event

    def read_while_station_commits(session, *, event_id):
        ledger = read_ledger(session, event_id=event_id)
        other = session_factory()
        try:
            record_transition(other, event_id=event_id, participant_id=grace_id,
                              activity_id=canoeing_id, timestamp=at(9))
        finally:
            other.close()
        return ledger

    monkeypatch.setattr(crud.attendance_log, "get_by_event", read_while_station_commits)
    report = reconcile_roster(db, event_id=camp.event.id, repair=True)
    monkeypatch.undo()

    assert report.repaired is True
    db.refresh(camp.grace)
    assert camp.grace.current_activity_id == canoeing_id
    assert camp.grace.location_timestamp == at(9)
    assert camp.grace.location_sequence == 2
    assert reconcile_roster(db, event_id=camp.event.id, repair=False).divergences == []
