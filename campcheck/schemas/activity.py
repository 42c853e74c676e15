# File: campcheck/schemas/activity.py
from pydantic import BaseModel, validator
from typing import Optional

class ActivityBase(BaseModel):
    name: str
    description: Optional[str] = None
    location: Optional[str] = None

    @validator('name')
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Activity name must not be blank')
        return v.strip() if v is not None else v

class ActivityCreate(ActivityBase):
    pass

class ActivityUpdate(ActivityBase):
    name: Optional[str] = None

class ActivitySnapshot(ActivityBase):
    id: int
    event_id: int

    class Config:
        from_attributes = True
        frozen = True
