from fetchr.db.database import get_session, init_db
from fetchr.db.operations import (
    commander_to_model,
    count_commanders,
    get_all_commanders,
    get_commander,
    save_commanders,
    upsert_commander,
)

__all__ = [
    "commander_to_model",
    "count_commanders",
    "get_all_commanders",
    "get_commander",
    "get_session",
    "init_db",
    "save_commanders",
    "upsert_commander",
]
