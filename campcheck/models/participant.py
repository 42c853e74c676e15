# File: campcheck/models/participant.py
from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from campcheck.models.base import BaseModel
import enum

class ParticipantCategory(enum.Enum):
    STUDENT = "student"
    LEADER = "leader"

class Participant(BaseModel):
    __tablename__ = "participants"
    __table_args__ = (
        UniqueConstraint("event_id", "qr_code", name="uq_participants_event_qr_code"),
    )

    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    church = Column(String(255), nullable=False, default="")  # Affiliation group
    category = Column(String(20), nullable=False, default=ParticipantCategory.STUDENT.value)
    qr_code = Column(String(255), nullable=False)

    # Roster: NULL means unassigned (not in any activity)
    current_activity_id = Column(Integer, ForeignKey("activities.id"), nullable=True, index=True)
    # Ordering key of the transition that last moved the roster pointer
    location_timestamp = Column(DateTime, nullable=True)
    location_sequence = Column(Integer, nullable=True)

    # Relationships
    event = relationship("Event", back_populates="participants")
    current_activity = relationship("Activity", foreign_keys=[current_activity_id])
