# File: campcheck/models/activity.py
from sqlalchemy import Column, String, Text, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from campcheck.models.base import BaseModel

class Activity(BaseModel):
    __tablename__ = "activities"
    __table_args__ = (
        UniqueConstraint("event_id", "name", name="uq_activities_event_name"),
    )

    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    location = Column(String(255))

    # Relationships
    event = relationship("Event", back_populates="activities")
