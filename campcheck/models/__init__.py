from .base import BaseModel
from .event import Event
from .activity import Activity
from .participant import Participant, ParticipantCategory
from .attendance_log import AttendanceLogEntry

__all__ = [
    "BaseModel", "Event", "Activity", "Participant", "ParticipantCategory",
    "AttendanceLogEntry",
]
