from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from campcheck import crud
from campcheck.core.exceptions import NotFound, TransientIO
from campcheck.db.database import get_db
from campcheck.schemas.event import Event as EventSchema
from campcheck.schemas.participant import ParticipantSnapshot
from campcheck.schemas.report import DashboardState, ReportView
from campcheck.services.report_composer import compose_report
from campcheck.services.snapshot_service import snapshot_service

router = APIRouter()

def _current_state(db: Session, event_id: int) -> DashboardState:
    state = snapshot_service.refresh(event_id, db=db)
    if state is None:
        raise TransientIO(f"No attendance snapshot available for event {event_id}")
    return state

@router.get("/current", response_model=EventSchema)
def get_current_event(db: Session = Depends(get_db)):
    """Most recently started active event"""
    current = snapshot_service.get_current_event(db)
    if not current:
        raise NotFound("No active event")
    return current

@router.get("/{event_id}/live", response_model=DashboardState, response_model_exclude={"snapshot"})
def get_live_view(event_id: int, db: Session = Depends(get_db)):
    return _current_state(db, event_id)

@router.get("/{event_id}/report", response_model=ReportView)
def get_report(event_id: int, search: Optional[str] = "", db: Session = Depends(get_db)):
    """Live occupancy, engagement and group breakdown, filtered by name or church"""
    state = _current_state(db, event_id)
    return compose_report(
        state.snapshot.activities,
        state.live,
        state.engagement,
        state.demographics,
        search=search
    )

@router.get("/{event_id}/activities/{activity_id}/participants", response_model=List[ParticipantSnapshot])
def get_activity_participants(event_id: int, activity_id: int, db: Session = Depends(get_db)):
    if not crud.activity.get_in_event(db, event_id=event_id, activity_id=activity_id):
        raise NotFound(f"Activity {activity_id} not found in event {event_id}")
    return crud.participant.get_by_activity(db, event_id=event_id, activity_id=activity_id)

@router.get("/{event_id}/unassigned", response_model=List[ParticipantSnapshot])
def get_unassigned_participants(event_id: int, db: Session = Depends(get_db)):
    if not crud.event.get(db, event_id):
        raise NotFound(f"Event {event_id} not found")
    return crud.participant.get_unassigned(db, event_id=event_id)
