"""Business logic for the social timeline (own + friends' messages)."""
import datetime
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from ..models import Message
from ..state import Observable, SessionContext, TaskScope
from .friend_service import FriendService
from .message_service import MessageService

TIMESTAMP_FORMAT = '%H:%M %d/%m/%Y'
MAX_MESSAGE_LENGTH = 280


def parse_timestamp(value: str) -> Optional[datetime.datetime]:
    """Parse an ``HH:mm dd/MM/yyyy`` timestamp; ``None`` if malformed."""
    try:
        return datetime.datetime.strptime(str(value).strip(), TIMESTAMP_FORMAT)
    except (TypeError, ValueError):
        return None


def format_timestamp(moment: datetime.datetime) -> str:
    return moment.strftime(TIMESTAMP_FORMAT)


def sort_feed(messages: List[Message]) -> List[Message]:
    """Newest first; messages with unparsable timestamps go last, in input order."""
    dated = []
    undated = []
    for message in messages:
        parsed = parse_timestamp(message.timestamp)
        if parsed is None:
            undated.append(message)
        else:
            dated.append((parsed, message))
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [m for _, m in dated] + undated


class TimelineService:
    """Merges the current user's messages with every friend's messages into
    one reverse-chronological feed.

    Mutations (:meth:`post`, :meth:`delete`) never edit the feed locally;
    they bump :attr:`refresh` and the feed is rebuilt from the store.
    """

    def __init__(self, friends: FriendService, messages: MessageService,
                 max_workers: int = 8) -> None:
        self._friends = friends
        self._messages = messages
        self.max_workers = max_workers
        self._log = logging.getLogger('gamevision.timeline')

        self.feed: Observable[List[Message]] = Observable([])
        self.refresh: Observable[int] = Observable(0)
        self.is_loading: Observable[bool] = Observable(False)

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def aggregate(self, session: SessionContext,
                  scope: Optional[TaskScope] = None) -> List[Message]:
        """Fetch, tag, merge and sort every message visible to *session*.

        The result is published to :attr:`feed` unless *scope* has been
        closed in the meantime.
        """
        if not session.email:
            return []
        self.is_loading.set(True)
        try:
            authors = [f.email for f in self._friends.list_friends(session.email)]
            authors.append(session.email)

            def _fetch(author: str) -> List[Message]:
                return [m.tagged(author) for m in self._messages.list_messages(author)]

            merged: List[Message] = []
            with ThreadPoolExecutor(max_workers=max(1, min(len(authors), self.max_workers)),
                                    thread_name_prefix='gamevision_timeline') as executor:
                for author_messages in executor.map(_fetch, authors):
                    merged.extend(author_messages)

            unparsable = [m for m in merged if parse_timestamp(m.timestamp) is None]
            if unparsable:
                self._log.warning("%d message(s) with unparsable timestamps sorted last",
                                  len(unparsable))
            ordered = sort_feed(merged)
        finally:
            self.is_loading.set(False)

        if scope is not None and scope.cancelled:
            self._log.debug("Scope closed; discarding timeline for %s", session.email)
            return ordered
        self.feed.set(ordered)
        return ordered

    def auto_refresh(self, session: SessionContext, scope: TaskScope) -> Callable[[], None]:
        """Re-run :meth:`aggregate` in *scope* whenever :attr:`refresh` changes.

        Triggers one aggregation immediately.  Returns the unsubscribe function.
        """
        def _on_refresh(_count: int) -> None:
            scope.submit(self.aggregate, session, scope)

        unsubscribe = self.refresh.subscribe(_on_refresh)
        scope.submit(self.aggregate, session, scope)
        return unsubscribe

    def request_refresh(self) -> int:
        return self.refresh.update(lambda count: count + 1)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def post(self, session: SessionContext, text: str,
             now: Optional[datetime.datetime] = None) -> bool:
        """Publish *text* (capped to 280 characters) as the current user.

        Returns:
            ``False`` for guests or blank text, ``True`` once written.
        """
        if not session.is_authenticated or not text or not text.strip():
            return False
        text = text[:MAX_MESSAGE_LENGTH]
        timestamp = format_timestamp(now or datetime.datetime.now())
        self._messages.post_message(session.email, text, timestamp)
        self.request_refresh()
        return True

    def can_delete(self, session: SessionContext, message: Message) -> bool:
        return bool(session.email) and message.author == session.email

    def delete(self, session: SessionContext, author: str, message_id: str) -> bool:
        """Delete *message_id* if it belongs to the current user."""
        if not session.email or author != session.email:
            self._log.warning("Refusing to delete message %s of %s", message_id, author)
            return False
        self._messages.delete_message(author, message_id)
        self.request_refresh()
        return True
