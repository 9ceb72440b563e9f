"""
Batch store for Disaster Data Platform.
"""

from disaster_data.db.connection import check_connection, dispose_engines, get_engine, init_db, session_scope
from disaster_data.db.models import Base, IngestionLog, StoredEvent
from disaster_data.db.store import count_events, latest_batch, load_events, replace_events, table_stats

__all__ = [
    "Base",
    "IngestionLog",
    "StoredEvent",
    "check_connection",
    "dispose_engines",
    "get_engine",
    "init_db",
    "session_scope",
    "count_events",
    "latest_batch",
    "load_events",
    "replace_events",
    "table_stats",
]
