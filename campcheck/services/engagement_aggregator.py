# File: campcheck/services/engagement_aggregator.py
from typing import Dict, Optional, Sequence

from campcheck.models.participant import ParticipantCategory
from campcheck.schemas.activity import ActivitySnapshot
from campcheck.schemas.attendance import AttendanceLogSnapshot
from campcheck.schemas.participant import ParticipantSnapshot
from campcheck.schemas.report import Demographics


def compute_engagement(
    ledger: Sequence[AttendanceLogSnapshot],
    activities: Optional[Sequence[ActivitySnapshot]] = None
) -> Dict[int, int]:
    """
    Lifetime visit count per activity.

    Checkout entries (no activity) are not counted. When `activities` is
    given, every activity appears in the result, with 0 if never visited.
    """
    counts: Dict[int, int] = {a.id: 0 for a in activities} if activities is not None else {}

    for entry in ledger:
        if entry.activity_id is None:
            continue
        counts[entry.activity_id] = counts.get(entry.activity_id, 0) + 1

    return counts


def compute_demographics(participants: Sequence[ParticipantSnapshot]) -> Demographics:
    """Roster head count by category and by affiliation group"""
    by_category: Dict[str, int] = {c.value: 0 for c in ParticipantCategory}
    by_group: Dict[str, int] = {}
    seen = set()

    for participant in participants:
        if participant.id in seen:
            continue
        seen.add(participant.id)

        by_category[participant.category] = by_category.get(participant.category, 0) + 1

        group = (participant.church or "").strip()
        by_group[group] = by_group.get(group, 0) + 1

    return Demographics(by_category=by_category, by_group=by_group, total=len(seen))
