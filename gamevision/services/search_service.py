"""Business logic for catalog search and the game-detail screen."""
import logging
from typing import List, Optional

from ..models import GameRecord
from ..state import Observable
from .game_cache_service import GameCacheService

SORT_CRITERIA = ('name', 'rating', 'release')


class SearchService:
    """Keyword search over the catalog plus detail lookup through the shared
    :class:`GameCacheService`.

    State is exposed as observables (``games``, ``is_loading``, ``error``,
    ``game_details``, ``is_loading_details``, ``error_details``).  A failed
    search and an empty one look the same: ``games`` is ``[]``.
    """

    def __init__(self, catalog_client, game_cache: GameCacheService) -> None:
        self._catalog = catalog_client
        self._cache = game_cache
        self._log = logging.getLogger('gamevision.search')

        self.games: Observable[List[GameRecord]] = Observable([])
        self.is_loading: Observable[bool] = Observable(False)
        self.error: Observable[Optional[str]] = Observable(None)
        self.game_details: Observable[Optional[GameRecord]] = Observable(None)
        self.is_loading_details: Observable[bool] = Observable(False)
        self.error_details: Observable[Optional[str]] = Observable(None)

    def search(self, keyword: str) -> List[GameRecord]:
        self.is_loading.set(True)
        self.error.set(None)
        try:
            results = self._catalog.search(keyword)
            self.games.set(results)
            return results
        finally:
            self.is_loading.set(False)

    @staticmethod
    def sort_results(games: List[GameRecord], criteria: str = 'rating',
                     ascending: bool = False) -> List[GameRecord]:
        """Order search results by ``name``, ``rating`` or ``release`` date."""
        if criteria == 'name':
            key = lambda g: g.name
        elif criteria == 'rating':
            key = lambda g: g.rating
        elif criteria == 'release':
            key = lambda g: g.released or ''
        else:
            raise ValueError(f"Unknown sort criteria {criteria!r}; expected one of "
                             f"{', '.join(SORT_CRITERIA)}")
        return sorted(games, key=key, reverse=not ascending)

    def details(self, game_id) -> Optional[GameRecord]:
        """Resolve *game_id* for the detail screen."""
        self.is_loading_details.set(True)
        self.error_details.set(None)
        try:
            record = self._cache.resolve(game_id)
            if record is None:
                self.error_details.set("Could not load game details")
            self.game_details.set(record)
            return record
        finally:
            self.is_loading_details.set(False)
