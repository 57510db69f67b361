"""Integration object that wires configuration, clients, repository and services."""
import logging
from functools import cached_property
from typing import Any, Dict, Optional

from .clients import CatalogClient, NewsClient
from .config import load_config, require_api_key, setup_logging
from .repositories import DocumentRepository
from .services import (
    FormStateService, FriendService, GameCacheService, GameListService,
    LibraryService, MessageService, NewsService, ProfileService, SearchService,
    TimelineService,
)
from .state import SessionContext


class GameVision:
    """Main application object.

    Store-backed services are built eagerly.  Services that need the catalog
    or news API are built on first access, so a missing API key only fails
    (with :class:`~gamevision.exceptions.ConfigError`) for the features that
    actually need it.
    """

    DEFAULT_API_TIMEOUT = 10

    def __init__(self, config_path: str = 'config.json',
                 config: Optional[Dict[str, Any]] = None,
                 store=None, catalog_client=None, news_client=None) -> None:
        self._log = logging.getLogger('gamevision.app')
        self.config = config if config is not None else load_config(config_path)

        # Re-apply log level from config (allows "log_level": "DEBUG" in config.json)
        setup_logging(self.config.get('log_level', 'WARNING'))

        self.API_TIMEOUT = int(self.config.get('api_timeout_seconds', self.DEFAULT_API_TIMEOUT))
        self.store = store if store is not None else DocumentRepository(
            self.config.get('data_file', '.gamevision_store.json'))
        self._catalog_client = catalog_client
        self._news_client = news_client

        self.profile_service = ProfileService(self.store)
        self.game_list_service = GameListService(self.store)
        self.friend_service = FriendService(self.store, self.profile_service)
        self.message_service = MessageService(self.store)
        self.timeline_service = TimelineService(self.friend_service, self.message_service)
        self.form_state = FormStateService()

    # ------------------------------------------------------------------
    # API clients
    # ------------------------------------------------------------------

    @property
    def catalog_client(self) -> CatalogClient:
        if self._catalog_client is None:
            self._catalog_client = CatalogClient(
                require_api_key(self.config, 'rawg_api_key'), timeout=self.API_TIMEOUT)
        return self._catalog_client

    @property
    def news_client(self) -> NewsClient:
        if self._news_client is None:
            self._news_client = NewsClient(
                require_api_key(self.config, 'news_api_key'), timeout=self.API_TIMEOUT)
        return self._news_client

    # ------------------------------------------------------------------
    # Catalog/news-backed services
    # ------------------------------------------------------------------

    @cached_property
    def game_cache(self) -> GameCacheService:
        return GameCacheService(self.catalog_client,
                                max_entries=self.config.get('game_cache_max_entries'))

    @cached_property
    def library_service(self) -> LibraryService:
        return LibraryService(self.game_list_service, self.game_cache,
                              max_history_items=self.config.get('max_history_items', 20),
                              max_workers=int(self.config.get('max_workers', 16)))

    @cached_property
    def search_service(self) -> SearchService:
        return SearchService(self.catalog_client, self.game_cache)

    @cached_property
    def news_service(self) -> NewsService:
        return NewsService(self.news_client,
                           max_articles=int(self.config.get('max_news_articles', 25)))

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def session(self, email: Optional[str] = None, guest: bool = False) -> SessionContext:
        """Build the explicit session context passed to orchestrator calls."""
        return SessionContext(email=None if guest else (email or None), is_guest=guest)

    def open_game_detail(self, session: SessionContext, game_id):
        """Resolve *game_id* for the detail screen and record it in history."""
        record = self.search_service.details(game_id)
        if session.is_authenticated:
            self.game_list_service.add_to_history(session.email, game_id)
        return record
