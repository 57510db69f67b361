"""Repository for the per-user document tree."""
import copy
import threading
import uuid
from typing import Dict, List, Optional, Tuple

from ..exceptions import DocumentNotFoundError, InvalidPathError
from .base import BaseRepository


class DocumentRepository(BaseRepository):
    """Document/sub-collection store persisted to a single JSON file.

    Documents are addressed by slash-separated paths made of alternating
    collection and document ids, e.g. ``users/a@x.com`` or
    ``users/a@x.com/messages/4f1c...``.  Collections are implicit: a
    collection exists while at least one document lives directly under it.

    Schema::

        {
            "users/<email>":                       {"username": "<str>", ...},
            "users/<email>/wishlist/<gameId>":     {"gameId": "<str>"},
            "users/<email>/friends/<friendEmail>": {},
            "users/<email>/messages/<autoId>":     {"texto": "<str>",
                                                    "hora": "<HH:mm dd/MM/yyyy>"}
        }

    Listing a collection returns documents in insertion order; re-setting an
    existing document keeps its position.  Any object exposing the same six
    methods (``get``/``set``/``update``/``delete``/``list``/``add``) can be
    used in place of this class, e.g. an adapter for a managed backend.
    """

    def __init__(self, file_path: Optional[str] = '.gamevision_store.json') -> None:
        super().__init__(file_path)
        self._lock = threading.RLock()
        self.data: Dict[str, Dict] = self._load({})

    # ------------------------------------------------------------------
    # Path helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _segments(path: str) -> List[str]:
        segments = (path or '').split('/')
        if not segments or any(not s for s in segments):
            raise InvalidPathError(f"Invalid document path {path!r}")
        return segments

    @classmethod
    def _document_path(cls, path: str) -> str:
        segments = cls._segments(path)
        if len(segments) % 2:
            raise InvalidPathError(f"{path!r} is a collection path, not a document path")
        return '/'.join(segments)

    @classmethod
    def _collection_path(cls, path: str) -> str:
        segments = cls._segments(path)
        if not len(segments) % 2:
            raise InvalidPathError(f"{path!r} is a document path, not a collection path")
        return '/'.join(segments)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, path: str) -> Optional[Dict]:
        """Return a copy of the document at *path*, or ``None`` if absent."""
        key = self._document_path(path)
        with self._lock:
            doc = self.data.get(key)
            return copy.deepcopy(doc) if doc is not None else None

    def set(self, path: str, data: Dict) -> None:
        """Create or overwrite the document at *path*."""
        key = self._document_path(path)
        with self._lock:
            self.data[key] = copy.deepcopy(dict(data))
            self.save()

    def update(self, path: str, fields: Dict) -> None:
        """Merge *fields* into an existing document.

        Raises:
            DocumentNotFoundError: No document exists at *path*.
        """
        key = self._document_path(path)
        with self._lock:
            if key not in self.data:
                raise DocumentNotFoundError(f"No document at {key}")
            self.data[key].update(copy.deepcopy(dict(fields)))
            self.save()

    def delete(self, path: str) -> None:
        """Delete the document at *path*; deleting a missing document is a no-op."""
        key = self._document_path(path)
        with self._lock:
            if self.data.pop(key, None) is not None:
                self.save()

    def list(self, collection_path: str) -> List[Tuple[str, Dict]]:
        """Return ``(doc_id, document)`` pairs directly under *collection_path*."""
        prefix = self._collection_path(collection_path) + '/'
        with self._lock:
            return [
                (key[len(prefix):], copy.deepcopy(doc))
                for key, doc in self.data.items()
                if key.startswith(prefix) and '/' not in key[len(prefix):]
            ]

    def add(self, collection_path: str, data: Dict) -> str:
        """Store *data* under a new generated id and return that id."""
        collection = self._collection_path(collection_path)
        doc_id = uuid.uuid4().hex
        self.set(f"{collection}/{doc_id}", data)
        return doc_id

    def save(self) -> None:
        with self._lock:
            self._save(self.data)
