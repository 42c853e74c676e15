# File: campcheck/models/attendance_log.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from campcheck.models.base import BaseModel

class AttendanceLogEntry(BaseModel):
    """One accepted check-in transition. Rows are never updated."""

    __tablename__ = "attendance_logs"
    __table_args__ = (
        UniqueConstraint("event_id", "sequence", name="uq_attendance_logs_event_sequence"),
        Index("idx_attendance_logs_participant_order", "participant_id", "timestamp", "sequence"),
    )

    participant_id = Column(Integer, ForeignKey("participants.id"), nullable=False)
    activity_id = Column(Integer, ForeignKey("activities.id"), nullable=True, index=True)  # NULL = checkout
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    timestamp = Column(DateTime, nullable=False)
    sequence = Column(Integer, nullable=False)
    recorded_by = Column(String(255), nullable=True)  # Scanner/station identity

    # Relationships
    participant = relationship("Participant")
    activity = relationship("Activity")
    event = relationship("Event")
