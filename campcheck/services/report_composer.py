# File: campcheck/services/report_composer.py
from typing import Dict, List, Optional, Sequence

from campcheck.models.participant import ParticipantCategory
from campcheck.schemas.activity import ActivitySnapshot
from campcheck.schemas.participant import ParticipantSnapshot
from campcheck.schemas.report import (
    ActivityRow, Demographics, EngagementRow, GroupRow, LiveOccupancy,
    MemberList, ReportTotals, ReportView
)


def normalize(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def matches_search(participant: ParticipantSnapshot, search: Optional[str]) -> bool:
    """Case-insensitive substring match on name or church; blank search matches all"""
    needle = normalize(search)
    if not needle:
        return True
    return needle in normalize(participant.name) or needle in normalize(participant.church)


def filter_members(members: Sequence[ParticipantSnapshot], search: Optional[str]) -> MemberList:
    filtered = [p for p in members if matches_search(p, search)]
    return MemberList(members=filtered, filtered_count=len(filtered), total_count=len(members))


def activity_rows(
    activities: Sequence[ActivitySnapshot],
    live: LiveOccupancy,
    search: Optional[str] = ""
) -> List[ActivityRow]:
    """Busiest activity first, then by name"""
    rows = []
    for activity in activities:
        members = filter_members(live.per_activity.get(activity.id, ()), search)
        rows.append(ActivityRow(
            activity_id=activity.id,
            name=activity.name,
            description=activity.description,
            location=activity.location,
            members=members.members,
            filtered_count=members.filtered_count,
            total_count=members.total_count
        ))

    rows.sort(key=lambda r: (-r.total_count, r.name.lower(), r.name, r.activity_id))
    return rows


def engagement_ranking(
    activities: Sequence[ActivitySnapshot],
    engagement: Dict[int, int]
) -> List[EngagementRow]:
    rows = [
        EngagementRow(activity_id=a.id, name=a.name, count=engagement.get(a.id, 0))
        for a in activities
    ]
    rows.sort(key=lambda r: (-r.count, r.name.lower(), r.name, r.activity_id))
    return rows


def group_ranking(demographics: Demographics) -> List[GroupRow]:
    rows = [GroupRow(name=name, count=count) for name, count in demographics.by_group.items()]
    rows.sort(key=lambda r: (-r.count, r.name.lower(), r.name))
    return rows


def compose_report(
    activities: Sequence[ActivitySnapshot],
    live: LiveOccupancy,
    engagement: Dict[int, int],
    demographics: Demographics,
    search: Optional[str] = ""
) -> ReportView:
    """Build the display-ready report; output order depends only on the input values"""
    return ReportView(
        search=search or "",
        totals=ReportTotals(
            participants=demographics.total,
            students=demographics.by_category.get(ParticipantCategory.STUDENT.value, 0),
            leaders=demographics.by_category.get(ParticipantCategory.LEADER.value, 0),
            unassigned=len(live.unassigned)
        ),
        activity_rows=activity_rows(activities, live, search),
        unassigned=filter_members(live.unassigned, search),
        engagement_ranking=engagement_ranking(activities, engagement),
        group_ranking=group_ranking(demographics)
    )
