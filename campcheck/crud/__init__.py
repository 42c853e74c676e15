from .event import event
from .activity import activity
from .participant import participant
from .attendance_log import attendance_log

__all__ = ["event", "activity", "participant", "attendance_log"]
