import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from campcheck import crud
from campcheck.core.deps import CallerContext, get_caller_context
from campcheck.core.exceptions import NotFound
from campcheck.db.database import get_db
from campcheck.schemas.activity import ActivityCreate, ActivitySnapshot, ActivityUpdate
from campcheck.schemas.attendance import ActivityDeletionResult
from campcheck.services.activity_cleanup_service import activity_cleanup_service

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/{event_id}/activities", response_model=ActivitySnapshot, status_code=201)
def create_activity(event_id: int, activity_in: ActivityCreate, db: Session = Depends(get_db)):
    if not crud.event.get(db, event_id):
        raise NotFound(f"Event {event_id} not found")
    return crud.activity.create_for_event(db, event_id=event_id, obj_in=activity_in)

@router.put("/{event_id}/activities/{activity_id}", response_model=ActivitySnapshot)
def update_activity(
    event_id: int,
    activity_id: int,
    activity_in: ActivityUpdate,
    db: Session = Depends(get_db)
):
    activity = crud.activity.get_in_event(db, event_id=event_id, activity_id=activity_id)
    if not activity:
        raise NotFound(f"Activity {activity_id} not found in event {event_id}")
    return crud.activity.update_in_event(db, db_obj=activity, obj_in=activity_in)

@router.delete("/{event_id}/activities/{activity_id}", response_model=ActivityDeletionResult)
def delete_activity(
    event_id: int,
    activity_id: int,
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller_context)
):
    """Delete an activity, its ledger entries, and check out everyone inside it"""
    logger.info(f"Delete activity - Event: {event_id}, Activity: {activity_id}, User: {caller.email}, Role: {caller.role}")
    return activity_cleanup_service.delete_activity(
        db, event_id=event_id, activity_id=activity_id, recorded_by=caller.email
    )
