# File: campcheck/schemas/event.py
from pydantic import BaseModel, validator
from typing import Optional, Tuple
from datetime import datetime

from campcheck.schemas.activity import ActivitySnapshot
from campcheck.schemas.participant import ParticipantSnapshot
from campcheck.schemas.attendance import AttendanceLogSnapshot

class EventBase(BaseModel):
    name: str
    start_date: datetime
    end_date: datetime
    active: bool = False

class EventCreate(EventBase):

    @validator('end_date')
    def validate_dates(cls, v, values):
        start = values.get('start_date')
        if start is not None and v < start:
            raise ValueError('end_date must not be before start_date')
        return v

class Event(EventBase):
    id: int

    class Config:
        from_attributes = True
        frozen = True

class EventSnapshot(BaseModel):
    """Point-in-time copy of one event's roster, activities and ledger"""
    event: Event
    participants: Tuple[ParticipantSnapshot, ...] = ()
    activities: Tuple[ActivitySnapshot, ...] = ()
    ledger: Tuple[AttendanceLogSnapshot, ...] = ()
    fetched_at: datetime

    class Config:
        frozen = True
