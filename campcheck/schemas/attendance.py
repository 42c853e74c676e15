# File: campcheck/schemas/attendance.py
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

# Roster value meaning "not currently in any activity"
UNASSIGNED: Optional[int] = None

class TransitionCreate(BaseModel):
    participant_id: int
    activity_id: Optional[int] = UNASSIGNED
    timestamp: Optional[datetime] = None

class ScanCreate(BaseModel):
    qr_code: str
    activity_id: Optional[int] = UNASSIGNED
    timestamp: Optional[datetime] = None

class AttendanceLogSnapshot(BaseModel):
    id: int
    participant_id: int
    activity_id: Optional[int] = None
    event_id: int
    timestamp: datetime
    sequence: int
    recorded_by: Optional[str] = None

    class Config:
        from_attributes = True
        frozen = True

class Divergence(BaseModel):
    participant_id: int
    roster_activity_id: Optional[int] = None
    ledger_activity_id: Optional[int] = None
    latest_sequence: Optional[int] = None

class ReconciliationReport(BaseModel):
    event_id: int
    checked: int
    divergences: List[Divergence] = []
    repaired: bool = False

class ActivityDeletionResult(BaseModel):
    event_id: int
    activity_id: int
    ledger_entries_deleted: int
    participants_unassigned: List[int] = []
