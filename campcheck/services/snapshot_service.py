# File: campcheck/services/snapshot_service.py
from datetime import datetime
from typing import Callable, Dict, Optional
import itertools
import logging
import threading

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campcheck import crud
from campcheck.core.exceptions import NotFound, TransientIO
from campcheck.db.database import SessionLocal
from campcheck.schemas.activity import ActivitySnapshot
from campcheck.schemas.attendance import AttendanceLogSnapshot
from campcheck.schemas.event import Event as EventSchema, EventSnapshot
from campcheck.schemas.participant import ParticipantSnapshot
from campcheck.schemas.report import DashboardState
from campcheck.services.engagement_aggregator import compute_demographics, compute_engagement
from campcheck.services.live_aggregator import compute_live_occupancy

logger = logging.getLogger(__name__)


def fetch_event_snapshot(db: Session, event_id: int) -> EventSnapshot:
    """Read roster, activities and ledger of one event as immutable values"""
    try:
        if (
            db.bind is not None
            and db.bind.dialect.name == "postgresql"
            and not db.in_transaction()
        ):
            # One consistent view across the three reads
            db.connection(execution_options={"isolation_level": "REPEATABLE READ"})

        event = crud.event.get(db, event_id)
        if not event:
            raise NotFound(f"Event {event_id} not found")

        snapshot = EventSnapshot(
            event=EventSchema.model_validate(event),
            participants=tuple(
                ParticipantSnapshot.model_validate(p)
                for p in crud.participant.get_by_event(db, event_id=event_id)
            ),
            activities=tuple(
                ActivitySnapshot.model_validate(a)
                for a in crud.activity.get_by_event(db, event_id=event_id)
            ),
            ledger=tuple(
                AttendanceLogSnapshot.model_validate(e)
                for e in crud.attendance_log.get_by_event(db, event_id=event_id)
            ),
            fetched_at=datetime.utcnow()
        )
        db.rollback()  # end the read transaction
        return snapshot

    except SQLAlchemyError as e:
        db.rollback()
        raise TransientIO(f"Could not read attendance data for event {event_id}") from e


def build_dashboard_state(snapshot: EventSnapshot) -> DashboardState:
    live = compute_live_occupancy(snapshot.participants, snapshot.activities)
    if live.dangling:
        logger.warning(
            f"Event {snapshot.event.id}: participants {list(live.dangling)} point at "
            f"missing activities, shown as unassigned"
        )

    return DashboardState(
        snapshot=snapshot,
        live=live,
        engagement=compute_engagement(snapshot.ledger, snapshot.activities),
        demographics=compute_demographics(snapshot.participants),
        refreshed_at=datetime.utcnow()
    )


class SnapshotService:
    """
    Holds the last-known-good dashboard state per event.

    Refreshes may overlap (manual refresh plus the scheduler). Each refresh
    takes a ticket when it starts; a result is installed only if no refresh
    with a newer ticket has been installed already, so an older refresh
    finishing late never overwrites newer data. A failed refresh keeps the
    previous state and flags it stale.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        fetcher: Callable[[Session, int], EventSnapshot] = fetch_event_snapshot
    ):
        self._session_factory = session_factory
        self._fetcher = fetcher
        self._lock = threading.Lock()
        self._tickets = itertools.count(1)
        self._installed: Dict[int, int] = {}
        self._states: Dict[int, DashboardState] = {}

    def get(self, event_id: int) -> Optional[DashboardState]:
        with self._lock:
            return self._states.get(event_id)

    def refresh(self, event_id: int, db: Optional[Session] = None) -> Optional[DashboardState]:
        """
        Fetch and install a new state for the event.

        Returns the state now displayed: the new one, the newer one that
        beat it, or the previous one marked stale if the read failed.
        Unknown events raise NotFound.
        """
        with self._lock:
            ticket = next(self._tickets)

        own_session = db is None
        if own_session:
            db = self._session_factory()
        try:
            state = build_dashboard_state(self._fetcher(db, event_id))
        except TransientIO as e:
            logger.error(f"Refresh {ticket} of event {event_id} failed: {e.message}")
            return self._mark_stale(event_id, ticket, e.message)
        finally:
            if own_session:
                db.close()

        return self._install(event_id, ticket, state)

    def _install(self, event_id: int, ticket: int, state: DashboardState) -> DashboardState:
        with self._lock:
            if ticket < self._installed.get(event_id, 0):
                logger.info(f"Discarding refresh {ticket} of event {event_id}: a newer one already completed")
                return self._states[event_id]
            self._installed[event_id] = ticket
            self._states[event_id] = state
            return state

    def _mark_stale(self, event_id: int, ticket: int, error: str) -> Optional[DashboardState]:
        with self._lock:
            current = self._states.get(event_id)
            if current is None or ticket < self._installed.get(event_id, 0):
                return current
            stale = current.model_copy(update={"stale": True, "last_error": error})
            self._states[event_id] = stale
            return stale

    @staticmethod
    def get_current_event(db: Session):
        return crud.event.get_current(db)

    def refresh_current_event(self) -> Optional[DashboardState]:
        """Scheduler job: refresh whichever event is current right now"""
        db = self._session_factory()
        try:
            current = self.get_current_event(db)
            if not current:
                logger.debug("No active event, skipping snapshot refresh")
                return None
            event_id = current.id
            db.rollback()
            return self.refresh(event_id, db=db)
        except (NotFound, SQLAlchemyError) as e:
            logger.error(f"Scheduled snapshot refresh failed: {str(e)}")
            return None
        finally:
            db.close()


snapshot_service = SnapshotService()
