# File: campcheck/services/activity_cleanup_service.py
from datetime import datetime
from typing import Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campcheck import crud
from campcheck.core.exceptions import AttendanceError, NotFound, TransientIO
from campcheck.models.activity import Activity
from campcheck.schemas.attendance import UNASSIGNED, ActivityDeletionResult

logger = logging.getLogger(__name__)

class ActivityCleanupService:
    """Cascading deletes that keep the roster and the ledger pointing at live rows"""

    @staticmethod
    def delete_activity(
        db: Session,
        *,
        event_id: int,
        activity_id: int,
        recorded_by: Optional[str] = None
    ) -> ActivityDeletionResult:
        """
        Delete an activity together with everything that references it.

        Steps, all in one transaction:
        1. check out every participant currently in the activity
        2. delete the activity's ledger entries
        3. delete the activity

        On failure nothing is changed and the call can be retried.
        """
        try:
            activity = crud.activity.get_in_event(db, event_id=event_id, activity_id=activity_id)
            if not activity:
                raise NotFound(f"Activity {activity_id} not found in event {event_id}")

            displaced = ActivityCleanupService._unassign_participants(db, activity, recorded_by)
            deleted_entries = crud.attendance_log.delete_by_activity(db, activity_id=activity.id)
            db.delete(activity)
            db.commit()

        except AttendanceError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to delete activity {activity_id}: {str(e)}")
            raise TransientIO("Attendance store unavailable, activity not deleted") from e

        logger.info(
            f"Deleted activity {activity_id} from event {event_id}: "
            f"{deleted_entries} ledger entries removed, {len(displaced)} participants unassigned"
        )
        return ActivityDeletionResult(
            event_id=event_id,
            activity_id=activity_id,
            ledger_entries_deleted=deleted_entries,
            participants_unassigned=displaced
        )

    @staticmethod
    def _unassign_participants(db: Session, activity: Activity, recorded_by: Optional[str]) -> list:
        """Move everyone out of the activity with a checkout entry that stays the latest one"""
        now = datetime.utcnow()
        displaced = []

        for participant in crud.participant.get_pointing_at(db, activity_id=activity.id):
            checkout_at = now
            if participant.location_timestamp and participant.location_timestamp > now:
                checkout_at = participant.location_timestamp

            sequence = crud.event.next_sequence(db, event_id=participant.event_id)
            crud.attendance_log.append(
                db,
                event_id=participant.event_id,
                participant_id=participant.id,
                activity_id=UNASSIGNED,
                timestamp=checkout_at,
                sequence=sequence,
                recorded_by=recorded_by
            )
            participant.current_activity_id = UNASSIGNED
            participant.location_timestamp = checkout_at
            participant.location_sequence = sequence
            displaced.append(participant.id)

        db.flush()
        return displaced

    @staticmethod
    def delete_participant(db: Session, *, event_id: int, participant_id: int) -> int:
        """Delete a participant and their ledger history; returns the number of entries removed"""
        try:
            participant = crud.participant.get_in_event(
                db, event_id=event_id, participant_id=participant_id, lock=True
            )
            if not participant:
                raise NotFound(f"Participant {participant_id} not found in event {event_id}")

            deleted_entries = crud.attendance_log.delete_by_participant(db, participant_id=participant.id)
            db.delete(participant)
            db.commit()

        except AttendanceError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to delete participant {participant_id}: {str(e)}")
            raise TransientIO("Attendance store unavailable, participant not deleted") from e

        logger.info(f"Deleted participant {participant_id} and {deleted_entries} ledger entries")
        return deleted_entries


activity_cleanup_service = ActivityCleanupService()
