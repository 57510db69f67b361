"""Process-lifetime cache of full game records keyed by catalog id."""
import logging
import threading
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

from ..models import GameRecord

logger = logging.getLogger('gamevision.game_cache')


class GameCacheService:
    """Cache-or-fetch lookup of :class:`GameRecord` objects, shared by every
    screen that shows game metadata.

    Rules
    -----
    * Once an id is cached, :meth:`resolve` returns the same object without
      another catalog call.
    * Failed fetches are not cached, so the next :meth:`resolve` retries.
    * Concurrent misses for the same id are not de-duplicated; both fetch and
      the last write wins.  Records are immutable, so either result is fine.
    * Without *max_entries* the cache is unbounded; with it, the least
      recently used entry is evicted first.
    """

    def __init__(self, catalog_client, max_entries: Optional[int] = None) -> None:
        """
        Args:
            catalog_client: Object with a ``fetch_by_id(id)`` method
                (typically :class:`gamevision.clients.CatalogClient`).
            max_entries:    Optional LRU bound; ``None`` means unbounded.
        """
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be None or a positive integer")
        self._catalog = catalog_client
        self._max_entries = max_entries
        self._entries: 'OrderedDict[int, GameRecord]' = OrderedDict()
        self._lock = threading.Lock()
        self._subscribers: List[Callable[[int, GameRecord], None]] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, game_id) -> Optional[GameRecord]:
        """Return the cached record for *game_id* without fetching."""
        key = self._key(game_id)
        if key is None:
            return None
        with self._lock:
            record = self._entries.get(key)
            if record is not None:
                self._entries.move_to_end(key)
            return record

    def resolve(self, game_id) -> Optional[GameRecord]:
        """Return the record for *game_id*, fetching it on a cache miss.

        Returns:
            The cached or freshly fetched record, or ``None`` when the id is
            invalid or the catalog call produced nothing.
        """
        cached = self.get(game_id)
        if cached is not None:
            return cached
        key = self._key(game_id)
        if key is None:
            return None

        record = self._catalog.fetch_by_id(key)
        if record is None:
            logger.debug("No details available for game %s", key)
            return None
        self.put(key, record)
        return record

    def put(self, game_id, record: GameRecord) -> None:
        key = self._key(game_id)
        if key is None:
            return
        with self._lock:
            self._entries[key] = record
            self._entries.move_to_end(key)
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug("Evicted game %s from cache", evicted)
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(key, record)
            except Exception:
                logger.exception("Cache subscriber %r failed", callback)

    def remove(self, game_id) -> None:
        key = self._key(game_id)
        with self._lock:
            self._entries.pop(key, None)

    def snapshot(self) -> Dict[int, GameRecord]:
        with self._lock:
            return dict(self._entries)

    def subscribe(self, callback: Callable[[int, GameRecord], None]) -> Callable[[], None]:
        """Call ``callback(id, record)`` after every insert; returns an unsubscribe function."""
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def __contains__(self, game_id) -> bool:
        key = self._key(game_id)
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @staticmethod
    def _key(game_id) -> Optional[int]:
        try:
            return int(game_id)
        except (TypeError, ValueError):
            return None
