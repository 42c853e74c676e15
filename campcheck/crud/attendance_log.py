# File: campcheck/crud/attendance_log.py
from typing import List, Optional
from datetime import datetime
from sqlalchemy.orm import Session
from campcheck.models.attendance_log import AttendanceLogEntry

class CRUDAttendanceLog:
    """Append-only access to the ledger; nothing here commits"""

    def get_by_event(self, db: Session, *, event_id: int) -> List[AttendanceLogEntry]:
        return (
            db.query(AttendanceLogEntry)
            .filter(AttendanceLogEntry.event_id == event_id)
            .order_by(AttendanceLogEntry.timestamp, AttendanceLogEntry.sequence)
            .all()
        )

    def get_latest_for_participant(self, db: Session, *, participant_id: int) -> Optional[AttendanceLogEntry]:
        return (
            db.query(AttendanceLogEntry)
            .filter(AttendanceLogEntry.participant_id == participant_id)
            .order_by(AttendanceLogEntry.timestamp.desc(), AttendanceLogEntry.sequence.desc())
            .first()
        )

    def append(
        self,
        db: Session,
        *,
        event_id: int,
        participant_id: int,
        activity_id: Optional[int],
        timestamp: datetime,
        sequence: int,
        recorded_by: Optional[str] = None
    ) -> AttendanceLogEntry:
        entry = AttendanceLogEntry(
            event_id=event_id,
            participant_id=participant_id,
            activity_id=activity_id,
            timestamp=timestamp,
            sequence=sequence,
            recorded_by=recorded_by
        )
        db.add(entry)
        db.flush()
        return entry

    def delete_by_activity(self, db: Session, *, activity_id: int) -> int:
        return (
            db.query(AttendanceLogEntry)
            .filter(AttendanceLogEntry.activity_id == activity_id)
            .delete(synchronize_session=False)
        )

    def delete_by_participant(self, db: Session, *, participant_id: int) -> int:
        return (
            db.query(AttendanceLogEntry)
            .filter(AttendanceLogEntry.participant_id == participant_id)
            .delete(synchronize_session=False)
        )

attendance_log = CRUDAttendanceLog()
