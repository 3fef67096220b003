from fantasy_tier_board.persistence.debounce import Debouncer
from fantasy_tier_board.persistence.gateway import PersistenceGateway
from fantasy_tier_board.persistence.store import KeyValueStore, SqliteKeyValueStore

__all__ = ["Debouncer", "KeyValueStore", "PersistenceGateway", "SqliteKeyValueStore"]
