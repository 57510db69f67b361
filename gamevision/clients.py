"""
REST clients for the two read-only metadata APIs.

* :class:`CatalogClient`: the RAWG game catalog (``games`` search and
  ``games/{id}`` details).
* :class:`NewsClient`: NewsAPI ``v2/everything`` keyword search.

Both are plain request/response wrappers: no retry, no backoff.  A failed
call is logged and surfaces as an empty result (``[]`` or ``None``), which
callers treat exactly like "no results".
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

from .models import Article, GameRecord


class RestClient(ABC):
    """Shared session, timeout and API-key handling for the metadata APIs."""

    BASE_URL = ''
    KEY_PARAM = 'key'

    def __init__(self, api_key: str, base_url: Optional[str] = None,
                 timeout: int = 10) -> None:
        self.api_key = api_key
        self.base_url = (base_url or self.BASE_URL).rstrip('/') + '/'
        self.timeout = timeout
        self.session = requests.Session()
        self._log = logging.getLogger(f'gamevision.{self.get_api_name()}')

    @abstractmethod
    def get_api_name(self) -> str:
        """Return the short API name used in log records (e.g. ``'catalog'``)."""

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """GET ``base_url + path`` with the API key attached.

        Returns:
            Decoded JSON body, or ``None`` on any HTTP, network or decode error.
        """
        query = dict(params or {})
        query[self.KEY_PARAM] = self.api_key
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            self._log.error("Request to %s failed: %s", path, e)
            return None
        except ValueError as e:
            self._log.error("Invalid JSON from %s: %s", path, e)
            return None


class CatalogClient(RestClient):
    """Client for the RAWG game catalog."""

    BASE_URL = 'https://api.rawg.io/api/'
    KEY_PARAM = 'key'

    def get_api_name(self) -> str:
        return 'catalog'

    @staticmethod
    def clean_query(keyword: str) -> str:
        """Trim *keyword* and strip double quotes before sending it upstream."""
        return (keyword or '').strip().replace('"', '')

    def search(self, keyword: str) -> List[GameRecord]:
        """Search games by keyword; returns summaries in API order."""
        data = self._get_json('games', {'search': self.clean_query(keyword)})
        if not isinstance(data, dict):
            return []

        games: List[GameRecord] = []
        for raw in data.get('results') or []:
            try:
                games.append(GameRecord.from_api(raw))
            except (KeyError, TypeError, ValueError) as e:
                self._log.warning("Skipping malformed search result: %s", e)
        return games

    def fetch_by_id(self, game_id) -> Optional[GameRecord]:
        """Fetch the full record for *game_id*, or ``None`` if unavailable."""
        try:
            game_id_int = int(game_id)
        except (ValueError, TypeError):
            self._log.warning("Invalid game id %r", game_id)
            return None

        data = self._get_json(f'games/{game_id_int}')
        if not isinstance(data, dict):
            return None
        try:
            return GameRecord.from_api(data)
        except (KeyError, TypeError, ValueError) as e:
            self._log.warning("Malformed details for game %s: %s", game_id_int, e)
            return None


class NewsClient(RestClient):
    """Client for NewsAPI keyword search."""

    BASE_URL = 'https://newsapi.org/'
    KEY_PARAM = 'apiKey'

    def get_api_name(self) -> str:
        return 'news'

    def search(self, keyword: str) -> List[Article]:
        """Return the raw (unfiltered) article list for *keyword*."""
        data = self._get_json('v2/everything', {'q': keyword})
        if not isinstance(data, dict):
            return []
        if data.get('status') not in (None, 'ok'):
            self._log.warning("News API returned status %s: %s",
                              data.get('status'), data.get('message', ''))
            return []
        return [Article.from_api(raw) for raw in data.get('articles') or []
                if isinstance(raw, dict)]
