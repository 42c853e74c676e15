# File: campcheck/crud/participant.py
from typing import List, Optional
from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from campcheck.crud.base import CRUDBase
from campcheck.models.activity import Activity
from campcheck.models.participant import Participant
from campcheck.schemas.participant import ParticipantCreate, member_sort_key

class CRUDParticipant(CRUDBase[Participant, ParticipantCreate, ParticipantCreate]):

    def get_by_event(self, db: Session, *, event_id: int, lock: bool = False) -> List[Participant]:
        query = (
            db.query(Participant)
            .filter(Participant.event_id == event_id)
            .order_by(Participant.id)
        )
        if lock:
            query = query.with_for_update().populate_existing()
        return query.all()

    def get_in_event(self, db: Session, *, event_id: int, participant_id: int, lock: bool = False) -> Optional[Participant]:
        query = db.query(Participant).filter(
            Participant.id == participant_id,
            Participant.event_id == event_id
        )
        if lock:
            # Re-read the row even if an earlier unlocked lookup already loaded it
            query = query.with_for_update().populate_existing()
        return query.first()

    def get_by_qr_code(self, db: Session, *, event_id: int, qr_code: str) -> Optional[Participant]:
        return db.query(Participant).filter(
            Participant.event_id == event_id,
            Participant.qr_code == qr_code.strip()
        ).first()

    def create_for_event(self, db: Session, *, event_id: int, obj_in: ParticipantCreate) -> Participant:
        participant_data = obj_in.model_dump()
        participant_data["event_id"] = event_id
        return self.create(db, obj_in=participant_data)

    def get_by_activity(self, db: Session, *, event_id: int, activity_id: int) -> List[Participant]:
        participants = (
            db.query(Participant)
            .join(Activity, Participant.current_activity_id == Activity.id)
            .filter(
                Participant.event_id == event_id,
                Activity.event_id == event_id,
                Activity.id == activity_id
            )
            .all()
        )
        return sorted(participants, key=member_sort_key)

    def get_unassigned(self, db: Session, *, event_id: int) -> List[Participant]:
        """Participants with no location, or pointing at an activity outside this event"""
        event_activity_ids = select(Activity.id).where(Activity.event_id == event_id)
        participants = (
            db.query(Participant)
            .filter(
                Participant.event_id == event_id,
                or_(
                    Participant.current_activity_id.is_(None),
                    Participant.current_activity_id.notin_(event_activity_ids)
                )
            )
            .all()
        )
        return sorted(participants, key=member_sort_key)

    def get_pointing_at(self, db: Session, *, activity_id: int) -> List[Participant]:
        return (
            db.query(Participant)
            .filter(Participant.current_activity_id == activity_id)
            .order_by(Participant.id)
            .with_for_update()
            .populate_existing()
            .all()
        )

participant = CRUDParticipant(Participant)
