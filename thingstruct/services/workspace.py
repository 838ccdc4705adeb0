"""
Workspace - the process-wide store and stream manager

Everything runs on the event loop thread; the core is synchronous and is
never called from worker threads.
"""
from datetime import datetime
from typing import List, Optional
import logging

from ..database import database
from ..models import RoutineItem, RoutineTemplate, StateItem, StateTemplate
from .persistence import save_store
from .store import InMemoryStore
from .stream import StreamManager

logger = logging.getLogger(__name__)


class Workspace:
    """Store snapshot queries plus the stream manager that writes into it"""

    def __init__(self, store: InMemoryStore, stream: StreamManager):
        self.store = store
        self.stream = stream

    # ============ QUERIES ============

    def state_templates(self) -> List[StateTemplate]:
        return self.store.query(StateTemplate, sort_by="created_at")

    def routine_templates(self) -> List[RoutineTemplate]:
        """All routine templates in creation order (the recurrence tie-break)"""
        return self.store.query(RoutineTemplate, sort_by="created_at")

    def states(self) -> List[StateItem]:
        return self.store.query(StateItem, sort_by="order")

    def states_for_day(self, day: Optional[datetime] = None) -> List[StateItem]:
        return StreamManager.states_for_day(self.states(), day or self.stream.today())

    def routines_for_day(self, day: Optional[datetime] = None) -> List[RoutineItem]:
        day = day or self.stream.today()
        return self.store.query(RoutineItem, where=lambda r: r.date.date() == day.date())

    # ============ STREAM ============

    def initialize(self) -> List[StateItem]:
        created = self.stream.initialize_stream(self.routine_templates(), self.states(), self.store)
        logger.info(f"Stream initialized, {len(created)} states generated")
        return created

    def observe(self) -> List[StateItem]:
        """Observation point: cheap no-op unless the day has changed"""
        return self.stream.refresh_if_needed(self.routine_templates(), self.states(), self.store)

    async def persist(self) -> None:
        if database.is_connected():
            await save_store(self.store)


_workspace: Optional[Workspace] = None


def init_workspace(store: Optional[InMemoryStore] = None, stream: Optional[StreamManager] = None) -> Workspace:
    """Initialize the global workspace"""
    global _workspace
    _workspace = Workspace(store or InMemoryStore(), stream or StreamManager())
    return _workspace


def get_workspace() -> Workspace:
    """Get the workspace instance"""
    if _workspace is None:
        raise RuntimeError("Workspace not initialized. Call init_workspace() first.")
    return _workspace


async def observed_workspace() -> Workspace:
    """Dependency for handlers that read or write today's list.

    Runs the observation point first, so a write made right after midnight
    cannot pre-empt the day's generated states.
    """
    ws = get_workspace()
    if ws.observe():
        await ws.persist()
    return ws
