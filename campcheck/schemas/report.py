# File: campcheck/schemas/report.py
from pydantic import BaseModel
from typing import Optional, Dict, List, Tuple
from datetime import datetime

from campcheck.schemas.participant import ParticipantSnapshot
from campcheck.schemas.event import EventSnapshot

class LiveOccupancy(BaseModel):
    per_activity: Dict[int, Tuple[ParticipantSnapshot, ...]] = {}
    unassigned: Tuple[ParticipantSnapshot, ...] = ()
    # Participants whose roster pointer names an activity missing from the snapshot
    dangling: Tuple[int, ...] = ()

    class Config:
        frozen = True

class Demographics(BaseModel):
    by_category: Dict[str, int] = {}
    by_group: Dict[str, int] = {}
    total: int = 0

    class Config:
        frozen = True

class MemberList(BaseModel):
    members: List[ParticipantSnapshot] = []
    filtered_count: int = 0
    total_count: int = 0

class ActivityRow(MemberList):
    activity_id: int
    name: str
    description: Optional[str] = None
    location: Optional[str] = None

class EngagementRow(BaseModel):
    activity_id: int
    name: str
    count: int

class GroupRow(BaseModel):
    name: str
    count: int

class ReportTotals(BaseModel):
    participants: int = 0
    students: int = 0
    leaders: int = 0
    unassigned: int = 0

class ReportView(BaseModel):
    search: str = ""
    totals: ReportTotals
    activity_rows: List[ActivityRow] = []
    unassigned: MemberList
    engagement_ranking: List[EngagementRow] = []
    group_ranking: List[GroupRow] = []

class DashboardState(BaseModel):
    """Last-known-good computed view of one event"""
    snapshot: EventSnapshot
    live: LiveOccupancy
    engagement: Dict[int, int] = {}
    demographics: Demographics
    refreshed_at: datetime
    stale: bool = False
    last_error: Optional[str] = None
