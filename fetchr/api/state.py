"""
Shared API state.

The service keeps one RecordStore, one SearchEngine over it, and the open
pick sessions. Routes reach them through the dependency functions below so
tests can override them.
"""

import logging
import uuid

from fetchr.config import MAX_OPEN_PICKS
from fetchr.db.database import async_session_factory
from fetchr.services.loaders import (
    DatabaseLoader,
    DefaultCommandersLoader,
    FallbackLoader,
    JsonFileLoader,
    StoreLoader,
)
from fetchr.services.record_store import RecordStore
from fetchr.services.search_engine import SearchEngine
from fetchr.services.selection_session import SelectionSession

logger = logging.getLogger(__name__)


class PickRegistry:
    """
    Open pick sessions by id.

    Finished sessions are removed by the routes. Abandoned ones are dropped
    oldest first once `capacity` sessions are open.
    """

    def __init__(self, capacity: int = MAX_OPEN_PICKS) -> None:
        self.capacity = capacity
        self._sessions: dict[str, SelectionSession] = {}

    def open(self, engine: SearchEngine) -> tuple[str, SelectionSession]:
        while self._sessions and len(self._sessions) >= self.capacity:
            oldest = next(iter(self._sessions))
            del self._sessions[oldest]
            logger.info("Dropped abandoned pick %s", oldest)

        pick_id = uuid.uuid4().hex
        session = SelectionSession(engine)
        self._sessions[pick_id] = session
        return pick_id, session

    def get(self, pick_id: str) -> SelectionSession | None:
        return self._sessions.get(pick_id)

    def discard(self, pick_id: str) -> None:
        self._sessions.pop(pick_id, None)

    def __len__(self) -> int:
        return len(self._sessions)


store = RecordStore()
engine = SearchEngine(store)
store_loader = StoreLoader(
    store,
    FallbackLoader(
        DatabaseLoader(async_session_factory),
        JsonFileLoader(),
        DefaultCommandersLoader(),
    ),
)
picks = PickRegistry()


def get_store() -> RecordStore:
    return store


def get_engine() -> SearchEngine:
    return engine


def get_store_loader() -> StoreLoader:
    return store_loader


def get_picks() -> PickRegistry:
    return picks
