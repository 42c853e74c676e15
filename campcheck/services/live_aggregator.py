# File: campcheck/services/live_aggregator.py
from typing import Dict, List, Optional, Sequence

from campcheck.schemas.activity import ActivitySnapshot
from campcheck.schemas.participant import ParticipantSnapshot, member_sort_key
from campcheck.schemas.report import LiveOccupancy


def compute_live_occupancy(
    participants: Sequence[ParticipantSnapshot],
    activities: Sequence[ActivitySnapshot]
) -> LiveOccupancy:
    """
    Partition the roster into one bucket per activity plus the unassigned list.

    Every participant lands in exactly one bucket. A pointer at an activity
    that is not in `activities` is treated as unassigned and reported in
    `dangling` so it can be reconciled later.
    """
    buckets: Dict[int, List[ParticipantSnapshot]] = {a.id: [] for a in activities}
    unassigned: List[ParticipantSnapshot] = []
    dangling: List[int] = []
    seen = set()

    for participant in participants:
        if participant.id in seen:
            continue
        seen.add(participant.id)

        location = participant.current_activity_id
        if location is None:
            unassigned.append(participant)
        elif location in buckets:
            buckets[location].append(participant)
        else:
            unassigned.append(participant)
            dangling.append(participant.id)

    return LiveOccupancy(
        per_activity={
            activity_id: tuple(sorted(members, key=member_sort_key))
            for activity_id, members in buckets.items()
        },
        unassigned=tuple(sorted(unassigned, key=member_sort_key)),
        dangling=tuple(sorted(dangling))
    )


def participants_by_activity(
    participants: Sequence[ParticipantSnapshot],
    activities: Sequence[ActivitySnapshot],
    activity_id: int
) -> List[ParticipantSnapshot]:
    live = compute_live_occupancy(participants, activities)
    return list(live.per_activity.get(activity_id, ()))


def unassigned_participants(
    participants: Sequence[ParticipantSnapshot],
    activities: Sequence[ActivitySnapshot]
) -> List[ParticipantSnapshot]:
    return list(compute_live_occupancy(participants, activities).unassigned)


def occupancy_counts(live: LiveOccupancy) -> Dict[Optional[int], int]:
    """Head count per activity id; the unassigned count is keyed by None"""
    counts: Dict[Optional[int], int] = {
        activity_id: len(members) for activity_id, members in live.per_activity.items()
    }
    counts[None] = len(live.unassigned)
    return counts
