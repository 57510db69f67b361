"""Business logic for the news feed."""
import datetime
import logging
from typing import List

from ..models import Article

REMOVED_MARKER = '[removed]'


class NewsService:
    """Filters, orders and truncates the raw NewsAPI results.

    Rules
    -----
    * Articles whose title contains ``[Removed]`` (any case) are dropped.
    * Articles without an image URL are dropped.
    * The rest are sorted by ``publishedAt`` descending (the ISO-8601 strings
      sort chronologically) and truncated to *max_articles*.
    """

    def __init__(self, news_client, max_articles: int = 25) -> None:
        self._client = news_client
        self.max_articles = max_articles
        self._log = logging.getLogger('gamevision.news')

    def search(self, keyword: str) -> List[Article]:
        articles = self._client.search(keyword)
        kept = [a for a in articles
                if REMOVED_MARKER not in (a.title or '').lower() and a.url_to_image]
        self._log.debug("News %r: %d of %d articles kept", keyword, len(kept), len(articles))
        kept.sort(key=lambda a: a.published_at or '', reverse=True)
        return kept[:self.max_articles]

    @staticmethod
    def format_published_at(value: str) -> str:
        """Convert ``2023-10-05T14:30:00Z`` to ``14:30 05-10-2023``; ``''`` if invalid."""
        try:
            moment = datetime.datetime.strptime(value, '%Y-%m-%dT%H:%M:%SZ')
        except (TypeError, ValueError):
            return ''
        return moment.strftime('%H:%M %d-%m-%Y')
