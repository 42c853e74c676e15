# File: campcheck/crud/activity.py
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from campcheck.core.exceptions import Conflict
from campcheck.crud.base import CRUDBase
from campcheck.models.activity import Activity
from campcheck.schemas.activity import ActivityCreate, ActivityUpdate

class CRUDActivity(CRUDBase[Activity, ActivityCreate, ActivityUpdate]):

    def get_by_event(self, db: Session, *, event_id: int) -> List[Activity]:
        return (
            db.query(Activity)
            .filter(Activity.event_id == event_id)
            .order_by(Activity.id)
            .all()
        )

    def get_in_event(self, db: Session, *, event_id: int, activity_id: int) -> Optional[Activity]:
        return db.query(Activity).filter(
            Activity.id == activity_id,
            Activity.event_id == event_id
        ).first()

    def get_by_name(self, db: Session, *, event_id: int, name: str) -> Optional[Activity]:
        return db.query(Activity).filter(
            Activity.event_id == event_id,
            func.lower(Activity.name) == name.strip().lower()
        ).first()

    def create_for_event(self, db: Session, *, event_id: int, obj_in: ActivityCreate) -> Activity:
        if self.get_by_name(db, event_id=event_id, name=obj_in.name):
            raise Conflict(f"Activity '{obj_in.name}' already exists in event {event_id}")

        activity_data = obj_in.model_dump()
        activity_data["event_id"] = event_id
        try:
            return self.create(db, obj_in=activity_data)
        except IntegrityError as e:
            db.rollback()
            raise Conflict(f"Activity '{obj_in.name}' already exists in event {event_id}") from e

    def update_in_event(self, db: Session, *, db_obj: Activity, obj_in: ActivityUpdate) -> Activity:
        if obj_in.name is not None:
            existing = self.get_by_name(db, event_id=db_obj.event_id, name=obj_in.name)
            if existing and existing.id != db_obj.id:
                raise Conflict(f"Activity '{obj_in.name}' already exists in event {db_obj.event_id}")
        return self.update(db, db_obj=db_obj, obj_in=obj_in)

activity = CRUDActivity(Activity)
