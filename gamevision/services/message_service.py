"""Business logic for per-user timeline messages."""
import logging
from typing import List

from ..exceptions import DocumentStoreError
from ..models import Message
from .profile_service import user_path

MESSAGES_COLLECTION = 'messages'


class MessageService:
    """Stores messages under ``users/<email>/messages/<autoId>`` as
    ``{"texto": <text>, "hora": <HH:mm dd/MM/yyyy>}``.

    Messages are never edited; only their author deletes them.
    """

    def __init__(self, store) -> None:
        self._store = store
        self._log = logging.getLogger('gamevision.messages')

    def post_message(self, email: str, text: str, timestamp: str) -> None:
        if not email:
            return
        try:
            message_id = self._store.add(user_path(email, MESSAGES_COLLECTION),
                                         {'texto': text, 'hora': timestamp})
            self._log.debug("Message %s published for %s", message_id, email)
        except DocumentStoreError as e:
            self._log.error("Error publishing message for %s: %s", email, e)

    def delete_message(self, email: str, message_id: str) -> None:
        if not email or not message_id:
            return
        try:
            self._store.delete(user_path(email, MESSAGES_COLLECTION, message_id))
            self._log.debug("Message deleted: %s", message_id)
        except DocumentStoreError as e:
            self._log.error("Error deleting message %s: %s", message_id, e)

    def list_messages(self, email: str) -> List[Message]:
        """Return the messages stored for *email* (untagged, store order)."""
        if not email:
            return []
        try:
            docs = self._store.list(user_path(email, MESSAGES_COLLECTION))
        except DocumentStoreError as e:
            self._log.error("Error fetching messages of %s: %s", email, e)
            return []
        return [
            Message(id=doc_id,
                    text=str(doc.get('texto', '')),
                    timestamp=str(doc.get('hora', '')))
            for doc_id, doc in docs
        ]
