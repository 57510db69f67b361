"""Business logic for the per-user game lists (wishlist, played, history)."""
import logging
from typing import List

from ..exceptions import DocumentStoreError
from ..models import GameList
from .profile_service import user_path


class GameListService:
    """Manages ``users/<email>/<list>/<gameId>`` membership documents.

    Each membership document is ``{"gameId": "<id>"}`` keyed by the game id,
    so adding the same game twice leaves a single entry.  Failures are
    logged and surface as an empty list / no-op.
    """

    def __init__(self, store) -> None:
        self._store = store
        self._log = logging.getLogger('gamevision.game_lists')

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_games(self, email: str, list_name) -> List[str]:
        """Return the game ids stored in *list_name*, in insertion order."""
        collection = GameList.parse(list_name)
        if not email:
            return []
        try:
            docs = self._store.list(user_path(email, collection.value))
        except DocumentStoreError as e:
            self._log.error("Error fetching %s for %s: %s", collection.value, email, e)
            return []
        return [str(doc['gameId']) for _, doc in docs if doc and doc.get('gameId') is not None]

    def add_game(self, email: str, game_id, list_name) -> None:
        """Upsert *game_id* into *list_name* for *email*."""
        collection = GameList.parse(list_name)
        if not email:
            self._log.warning("Attempt to add game %s without an authenticated user", game_id)
            return
        game_id = str(game_id)
        try:
            self._store.set(user_path(email, collection.value, game_id), {'gameId': game_id})
            self._log.debug("Game added to %s: %s", collection.value, game_id)
        except DocumentStoreError as e:
            self._log.error("Error adding game %s to %s: %s", game_id, collection.value, e)

    def add_to_history(self, email: str, game_id) -> None:
        """Record that *email* opened the detail page of *game_id*."""
        self.add_game(email, game_id, GameList.HISTORY)

    def remove_game(self, email: str, game_id, list_name=GameList.PLAYED) -> None:
        """Delete *game_id* from *list_name* (the played list by default)."""
        collection = GameList.parse(list_name)
        if not email:
            return
        try:
            self._store.delete(user_path(email, collection.value, str(game_id)))
            self._log.debug("Game removed from %s: %s, %s", collection.value, email, game_id)
        except DocumentStoreError as e:
            self._log.error("Error removing game %s: %s", game_id, e)
