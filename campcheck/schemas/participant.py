# File: campcheck/schemas/participant.py
from pydantic import BaseModel, validator
from typing import Optional
from datetime import datetime

from campcheck.models.participant import ParticipantCategory

class ParticipantBase(BaseModel):
    name: str
    church: str = ""
    category: str = ParticipantCategory.STUDENT.value
    qr_code: str

    @validator('category')
    def validate_category(cls, v):
        allowed = [c.value for c in ParticipantCategory]
        if v not in allowed:
            raise ValueError(f'category must be one of {allowed}')
        return v

class ParticipantCreate(ParticipantBase):
    pass

class ParticipantSnapshot(ParticipantBase):
    id: int
    event_id: int
    current_activity_id: Optional[int] = None
    location_timestamp: Optional[datetime] = None
    location_sequence: Optional[int] = None

    class Config:
        from_attributes = True
        frozen = True

def member_sort_key(participant):
    """Roster ordering: display name case-insensitively, then id"""
    return (participant.name.lower(), participant.id)
