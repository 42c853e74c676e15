# File: campcheck/crud/event.py
from typing import List, Optional
from sqlalchemy.orm import Session
from campcheck.crud.base import CRUDBase
from campcheck.models.event import Event
from campcheck.schemas.event import EventCreate

class CRUDEvent(CRUDBase[Event, EventCreate, EventCreate]):

    def get_active(self, db: Session) -> List[Event]:
        return (
            db.query(Event)
            .filter(Event.active == True)
            .order_by(Event.start_date.desc(), Event.id.desc())
            .all()
        )

    def get_current(self, db: Session) -> Optional[Event]:
        """Most recently started active event"""
        active = self.get_active(db)
        return active[0] if active else None

    def next_sequence(self, db: Session, *, event_id: int) -> Optional[int]:
        """Take the next ledger sequence number; the event row stays locked until commit"""
        event = (
            db.query(Event)
            .filter(Event.id == event_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if not event:
            return None
        event.last_sequence = (event.last_sequence or 0) + 1
        db.flush()
        return event.last_sequence

event = CRUDEvent(Event)
