# File: campcheck/models/event.py
from sqlalchemy import Column, String, Boolean, DateTime, Integer
from sqlalchemy.orm import relationship
from campcheck.models.base import BaseModel

class Event(BaseModel):
    __tablename__ = "events"

    name = Column(String(255), nullable=False, unique=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    active = Column(Boolean, default=False, nullable=False)

    # Event-scoped counter handing out ledger sequence numbers
    last_sequence = Column(Integer, default=0, nullable=False)

    # Relationships
    activities = relationship("Activity", back_populates="event")
    participants = relationship("Participant", back_populates="event")
