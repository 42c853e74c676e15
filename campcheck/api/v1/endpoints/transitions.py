import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from campcheck.core.deps import CallerContext, get_caller_context
from campcheck.db.database import get_db
from campcheck.schemas.attendance import (
    AttendanceLogSnapshot, ReconciliationReport, ScanCreate, TransitionCreate
)
from campcheck.services.transition_processor import reconcile_roster, record_scan, record_transition

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/{event_id}/transitions", response_model=AttendanceLogSnapshot, status_code=201)
def create_transition(
    event_id: int,
    transition: TransitionCreate,
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller_context)
):
    """Move a participant into an activity, or out to unassigned when activity_id is null"""
    logger.info(f"Transition - Event: {event_id}, Participant: {transition.participant_id}, User: {caller.email}, Role: {caller.role}")
    return record_transition(
        db,
        event_id=event_id,
        participant_id=transition.participant_id,
        activity_id=transition.activity_id,
        timestamp=transition.timestamp,
        recorded_by=caller.email
    )

@router.post("/{event_id}/scans", response_model=AttendanceLogSnapshot, status_code=201)
def create_scan(
    event_id: int,
    scan: ScanCreate,
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(get_caller_context)
):
    """Scanning station entry point: participant identified by their QR code"""
    logger.info(f"Scan - Event: {event_id}, User: {caller.email}, Role: {caller.role}")
    return record_scan(
        db,
        event_id=event_id,
        qr_code=scan.qr_code,
        activity_id=scan.activity_id,
        timestamp=scan.timestamp,
        recorded_by=caller.email
    )

@router.post("/{event_id}/reconcile", response_model=ReconciliationReport)
def reconcile(
    event_id: int,
    repair: bool = True,
    db: Session = Depends(get_db)
):
    """Check the roster against the ledger; repair=false reports divergence as 409"""
    return reconcile_roster(db, event_id=event_id, repair=repair)
