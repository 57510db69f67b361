"""Business logic for the game-list screens: fetch, resolve and sort."""
import enum
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Tuple

from ..models import GameList, GameRecord
from ..state import Observable, SessionContext, TaskScope
from .game_cache_service import GameCacheService
from .game_list_service import GameListService


class SortOption(str, enum.Enum):
    """Display orderings for a game list."""

    ALPHABETICAL = 'alphabetical'
    RATING_ASC = 'rating_asc'
    RATING_DESC = 'rating_desc'
    RECOMMENDED_ASC = 'recommended_asc'
    RECOMMENDED_DESC = 'recommended_desc'

    @classmethod
    def from_label(cls, label: str) -> 'SortOption':
        """Accept a member value, a member name or a menu label."""
        if isinstance(label, cls):
            return label
        text = str(label).strip()
        if text in _LABELS:
            return _LABELS[text]
        try:
            return cls(text.lower())
        except ValueError:
            pass
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"Unknown sort option {label!r}") from None


_LABELS: Dict[str, SortOption] = {
    'Alfabético': SortOption.ALPHABETICAL,
    'Rating (Asc.)': SortOption.RATING_ASC,
    'Rating (Desc.)': SortOption.RATING_DESC,
    'Recomendado (Asc.)': SortOption.RECOMMENDED_ASC,
    'Recomendado (Desc.)': SortOption.RECOMMENDED_DESC,
}

# (key function over an optional record, descending?)
_SORT_KEYS: Dict[SortOption, Tuple[Callable[[Optional[GameRecord]], object], bool]] = {
    SortOption.ALPHABETICAL: (lambda g: g.name if g else '', False),
    SortOption.RATING_ASC: (lambda g: g.rating if g else 0.0, False),
    SortOption.RATING_DESC: (lambda g: g.rating if g else 0.0, True),
    SortOption.RECOMMENDED_ASC: (lambda g: g.ratings_count if g else 0, False),
    SortOption.RECOMMENDED_DESC: (lambda g: g.ratings_count if g else 0, True),
}


class LibraryService:
    """Produces the ordered, display-ready contents of one user list.

    :meth:`load` fetches the id set, resolves every id through the shared
    :class:`GameCacheService` in parallel and waits for all of them.
    Sorting works on the id list; ids whose record is still missing use a
    default key (``''``/``0``) instead of being dropped.

    ``max_history_items`` caps the ``history`` list to its most recently
    added entries before resolution.  ``None`` disables the cap.
    """

    DEFAULT_MAX_HISTORY_ITEMS = 20

    def __init__(self, game_lists: GameListService, game_cache: GameCacheService,
                 max_history_items: Optional[int] = DEFAULT_MAX_HISTORY_ITEMS,
                 max_workers: int = 16) -> None:
        self._lists = game_lists
        self._cache = game_cache
        self.max_history_items = max_history_items
        self.max_workers = max_workers
        self._log = logging.getLogger('gamevision.library')

        # None until the first load completes; then the unsorted id list.
        self.game_ids: Observable[Optional[List[str]]] = Observable(None)
        self.is_loading: Observable[bool] = Observable(False)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def fetch_ids(self, session: SessionContext, list_name) -> List[str]:
        """Return the (possibly capped) id list for *list_name*."""
        collection = GameList.parse(list_name)
        if not session.email:
            return []
        ids = self._lists.list_games(session.email, collection)
        if collection is GameList.HISTORY and self.max_history_items is not None:
            ids = ids[-self.max_history_items:] if self.max_history_items > 0 else []
        return ids

    def resolve_all(self, ids: List[str]) -> Dict[str, Optional[GameRecord]]:
        """Resolve every id through the cache concurrently; wait for all."""
        results: Dict[str, Optional[GameRecord]] = {}
        if not ids:
            return results

        max_workers = max(1, min(len(ids), self.max_workers))
        with ThreadPoolExecutor(max_workers=max_workers,
                                thread_name_prefix='gamevision_resolve') as executor:
            future_map = {executor.submit(self._cache.resolve, game_id): game_id
                          for game_id in ids}
            for future in as_completed(future_map):
                game_id = future_map[future]
                try:
                    results[game_id] = future.result()
                except Exception as exc:
                    self._log.warning("Detail fetch for %s failed: %s", game_id, exc)
                    results[game_id] = None
        return results

    def load(self, session: SessionContext, list_name,
             scope: Optional[TaskScope] = None) -> List[str]:
        """Fetch and resolve *list_name* for *session*, publish and return the ids.

        Nothing is published to :attr:`game_ids` if *scope* was closed while
        the fetch was in flight.
        """
        self.is_loading.set(True)
        try:
            ids = self.fetch_ids(session, list_name)
            self.resolve_all(ids)
        finally:
            self.is_loading.set(False)
        if scope is not None and scope.cancelled:
            self._log.debug("Scope closed; discarding %s load", list_name)
            return ids
        self.game_ids.set(list(ids))
        return ids

    def load_in(self, scope: TaskScope, session: SessionContext, list_name):
        """Run :meth:`load` in the background inside *scope*."""
        return scope.submit(self.load, session, list_name, scope)

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def sort_ids(self, ids: List[str], sort_option=SortOption.ALPHABETICAL) -> List[str]:
        """Return *ids* ordered by *sort_option*.

        The sort is stable in both directions: equal keys keep their
        original (fetch) order.
        """
        option = SortOption.from_label(sort_option)
        key_fn, descending = _SORT_KEYS[option]
        return sorted(ids, key=lambda game_id: key_fn(self._cache.get(game_id)),
                      reverse=descending)

    def sorted_games(self, ids: List[str],
                     sort_option=SortOption.ALPHABETICAL) -> List[Tuple[str, Optional[GameRecord]]]:
        """Return ``(id, record-or-None)`` pairs in display order."""
        return [(game_id, self._cache.get(game_id))
                for game_id in self.sort_ids(ids, sort_option)]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, session: SessionContext, game_id, list_name) -> None:
        if not session.email:
            return
        self._lists.add_game(session.email, game_id, list_name)

    def remove(self, session: SessionContext, ids: List[str], game_id,
               list_name=GameList.PLAYED) -> List[str]:
        """Delete *game_id* from the store and return *ids* without it."""
        game_id = str(game_id)
        remaining = [i for i in ids if i != game_id]
        if session.email:
            self._lists.remove_game(session.email, game_id, list_name)
        current = self.game_ids.value
        if current is not None and game_id in current:
            self.game_ids.set([i for i in current if i != game_id])
        return remaining
