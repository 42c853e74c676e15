# File: campcheck/services/transition_processor.py
"""
Applies check-in transitions to the roster and the ledger.

A transition appends one ledger entry and, when it is the latest transition
for the participant by (timestamp, sequence), moves the participant's roster
pointer. Both writes happen in a single database transaction.
"""
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campcheck import crud
from campcheck.core.exceptions import AttendanceError, Conflict, InvalidEvent, NotFound, TransientIO
from campcheck.models.attendance_log import AttendanceLogEntry
from campcheck.models.participant import Participant
from campcheck.schemas.attendance import UNASSIGNED, Divergence, ReconciliationReport

logger = logging.getLogger(__name__)


def normalize_timestamp(timestamp: Optional[datetime]) -> datetime:
    """Server time when missing; aware datetimes become naive UTC"""
    if timestamp is None:
        return datetime.utcnow()
    if timestamp.tzinfo is not None:
        return timestamp.astimezone(timezone.utc).replace(tzinfo=None)
    return timestamp


def supersedes(timestamp: datetime, sequence: int, participant: Participant) -> bool:
    """True when (timestamp, sequence) is later than the participant's current location key"""
    if participant.location_timestamp is None:
        return True
    current = (participant.location_timestamp, participant.location_sequence or 0)
    return (timestamp, sequence) > current


def latest_entries(ledger: Iterable) -> Dict[int, object]:
    """Most recent ledger entry per participant, ordered by (timestamp, sequence)"""
    latest = {}
    for entry in ledger:
        current = latest.get(entry.participant_id)
        if current is None or (entry.timestamp, entry.sequence) > (current.timestamp, current.sequence):
            latest[entry.participant_id] = entry
    return latest


def record_transition(
    db: Session,
    *,
    event_id: int,
    participant_id: int,
    activity_id: Optional[int] = UNASSIGNED,
    timestamp: Optional[datetime] = None,
    recorded_by: Optional[str] = None
) -> AttendanceLogEntry:
    """
    Record that a participant moved to an activity (or to unassigned).

    Re-scanning a participant into the activity they already occupy is
    accepted and logged as a re-confirmation. A transition older than the
    one currently holding the roster pointer is logged but does not move it.
    """
    timestamp = normalize_timestamp(timestamp)

    try:
        if not crud.event.get(db, event_id):
            raise NotFound(f"Event {event_id} not found")

        participant = crud.participant.get_in_event(
            db, event_id=event_id, participant_id=participant_id, lock=True
        )
        if not participant:
            raise NotFound(f"Participant {participant_id} not found in event {event_id}")

        if activity_id is not UNASSIGNED:
            activity = crud.activity.get(db, activity_id)
            if not activity:
                raise NotFound(f"Activity {activity_id} not found")
            if activity.event_id != participant.event_id:
                raise InvalidEvent(
                    f"Activity {activity_id} belongs to event {activity.event_id}, "
                    f"participant {participant_id} to event {participant.event_id}"
                )

        sequence = crud.event.next_sequence(db, event_id=event_id)
        entry = crud.attendance_log.append(
            db,
            event_id=event_id,
            participant_id=participant.id,
            activity_id=activity_id,
            timestamp=timestamp,
            sequence=sequence,
            recorded_by=recorded_by
        )

        if supersedes(timestamp, sequence, participant):
            participant.current_activity_id = activity_id
            participant.location_timestamp = timestamp
            participant.location_sequence = sequence
        else:
            logger.info(
                f"Late transition for participant {participant.id} "
                f"(ts={timestamp.isoformat()}, seq={sequence}) logged without moving roster"
            )

        db.commit()
        db.refresh(entry)

    except AttendanceError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to record transition for participant {participant_id}: {str(e)}")
        raise TransientIO("Attendance store unavailable, transition not recorded") from e

    logger.info(
        f"Participant {participant_id} -> "
        f"{'unassigned' if activity_id is UNASSIGNED else f'activity {activity_id}'} "
        f"(event {event_id}, seq {entry.sequence}, by {recorded_by or 'unknown'})"
    )
    return entry


def record_scan(
    db: Session,
    *,
    event_id: int,
    qr_code: str,
    activity_id: Optional[int] = UNASSIGNED,
    timestamp: Optional[datetime] = None,
    recorded_by: Optional[str] = None
) -> AttendanceLogEntry:
    """Resolve a scanned code to a participant and record the transition"""
    try:
        participant = crud.participant.get_by_qr_code(db, event_id=event_id, qr_code=qr_code)
    except SQLAlchemyError as e:
        db.rollback()
        raise TransientIO("Attendance store unavailable, scan not recorded") from e

    if not participant:
        raise NotFound(f"No participant with code '{qr_code}' in event {event_id}")

    return record_transition(
        db,
        event_id=event_id,
        participant_id=participant.id,
        activity_id=activity_id,
        timestamp=timestamp,
        recorded_by=recorded_by
    )


def find_divergences(participants: Iterable, ledger: Iterable) -> list:
    """Compare roster pointers with each participant's latest ledger entry"""
    latest = latest_entries(ledger)
    divergences = []

    for participant in participants:
        entry = latest.get(participant.id)
        expected = entry.activity_id if entry else UNASSIGNED
        location_drift = participant.current_activity_id != expected
        ordering_drift = entry is not None and (
            participant.location_timestamp != entry.timestamp
            or participant.location_sequence != entry.sequence
        )
        if location_drift or ordering_drift:
            divergences.append(Divergence(
                participant_id=participant.id,
                roster_activity_id=participant.current_activity_id,
                ledger_activity_id=expected,
                latest_sequence=entry.sequence if entry else None
            ))

    return divergences


def reconcile_roster(db: Session, *, event_id: int, repair: bool = True) -> ReconciliationReport:
    """
    Recompute every roster pointer from the ledger.

    Participant rows are locked before the ledger is read, so a transition
    that is in flight either lands before the read or waits for the repair.
    With repair=True divergent participants are healed in one transaction,
    each from their latest ledger entry as it stands at write time.
    With repair=False any divergence raises Conflict carrying the report.
    Running it again after a repair finds nothing.
    """
    try:
        if not crud.event.get(db, event_id):
            raise NotFound(f"Event {event_id} not found")

        participants = crud.participant.get_by_event(db, event_id=event_id, lock=True)
        ledger = crud.attendance_log.get_by_event(db, event_id=event_id)
        divergences = find_divergences(participants, ledger)

        report = ReconciliationReport(
            event_id=event_id,
            checked=len(participants),
            divergences=divergences
        )

        if not divergences:
            db.rollback()  # release row locks
            return report

        if not repair:
            raise Conflict(
                f"{len(divergences)} roster entries disagree with the ledger in event {event_id}",
                details=report.model_dump()
            )

        by_id = {p.id: p for p in participants}
        for divergence in divergences:
            participant = by_id[divergence.participant_id]
            entry = crud.attendance_log.get_latest_for_participant(db, participant_id=participant.id)
            participant.current_activity_id = entry.activity_id if entry else UNASSIGNED
            participant.location_timestamp = entry.timestamp if entry else None
            participant.location_sequence = entry.sequence if entry else None
            logger.warning(
                f"Repaired participant {participant.id}: roster "
                f"{divergence.roster_activity_id} -> {participant.current_activity_id}"
            )

        db.commit()
        report.repaired = True
        return report

    except AttendanceError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Reconciliation failed for event {event_id}: {str(e)}")
        raise TransientIO("Attendance store unavailable, reconciliation aborted") from e
