from fetchr.services.loaders import (
    CommanderDataError,
    CommanderLoader,
    DatabaseLoader,
    DefaultCommandersLoader,
    FallbackLoader,
    JsonFileLoader,
    StoreLoader,
)
from fetchr.services.partner_resolver import (
    NoPartnerNeeded,
    OpenChoiceRequired,
    PartnerDecision,
    SuggestFixed,
    classify,
    partner_options,
)
from fetchr.services.record_store import RecordStore
from fetchr.services.search_cache import SearchCache
from fetchr.services.search_engine import SearchEngine
from fetchr.services.selection_session import SelectionSession, SessionPhase, SessionStateError

__all__ = [
    "CommanderDataError",
    "CommanderLoader",
    "DatabaseLoader",
    "DefaultCommandersLoader",
    "FallbackLoader",
    "JsonFileLoader",
    "NoPartnerNeeded",
    "OpenChoiceRequired",
    "PartnerDecision",
    "RecordStore",
    "SearchCache",
    "SearchEngine",
    "SelectionSession",
    "SessionPhase",
    "SessionStateError",
    "StoreLoader",
    "SuggestFixed",
    "classify",
    "partner_options",
]
