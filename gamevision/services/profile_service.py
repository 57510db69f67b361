"""Business logic for user profiles, registration and credential checks."""
import logging
from typing import Dict, Mapping, Optional

from ..exceptions import DocumentStoreError, InvalidPathError
from ..models import Profile

USERS_COLLECTION = 'users'


def user_path(email: str, *parts: str) -> str:
    """Return the document/collection path ``users/<email>[/<part>...]``.

    Raises:
        InvalidPathError: *email* or a part is empty or contains ``/``, which
            would otherwise address a different document.
    """
    segments = [str(s) for s in (email,) + tuple(parts)]
    for segment in segments:
        if not segment or '/' in segment:
            raise InvalidPathError(f"Invalid path segment {segment!r}")
    return '/'.join([USERS_COLLECTION] + segments)


class ProfileService:
    """Reads and writes ``users/<email>`` profile documents.

    Rules
    -----
    * Every method swallows :class:`DocumentStoreError`, logs it, and returns
      ``None``/``False`` (or does nothing).  Callers therefore cannot tell
      "no such user" from "the store is unreachable".
    * Passwords are stored and compared verbatim (plaintext).
    * :meth:`update_profile` never overwrites a field with ``None``.
    """

    PROFILE_FIELDS = ('nameSurname', 'username', 'description', 'country', 'imageUri')

    def __init__(self, store) -> None:
        """
        Args:
            store: A :class:`~gamevision.repositories.DocumentRepository` (or
                any object with the same ``get``/``set``/``update`` methods).
        """
        self._store = store
        self._log = logging.getLogger('gamevision.profile')

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch_profile_fields(self, email: str) -> Optional[Dict[str, str]]:
        """Return the raw profile document with every value stringified.

        ``None`` values are dropped.  Returns ``None`` when the document does
        not exist or the read fails.
        """
        if not email:
            return None
        try:
            doc = self._store.get(user_path(email))
        except DocumentStoreError as e:
            self._log.error("Error fetching user %s: %s", email, e)
            return None
        if doc is None:
            return None
        return {k: str(v) for k, v in doc.items() if v is not None}

    def fetch_profile(self, email: str) -> Optional[Profile]:
        """Return the :class:`Profile` for *email*, or ``None``."""
        if not email:
            return None
        try:
            doc = self._store.get(user_path(email))
        except DocumentStoreError as e:
            self._log.error("Error fetching user %s: %s", email, e)
            return None
        return Profile.from_document(email, doc) if doc is not None else None

    def check_email_exists(self, email: str) -> bool:
        if not email:
            return False
        try:
            return self._store.get(user_path(email)) is not None
        except DocumentStoreError as e:
            self._log.error("Error checking email %s: %s", email, e)
            return False

    def register_profile(self, email: str, fields: Mapping[str, str]) -> bool:
        """Create the profile document for *email*.

        Args:
            email:  Primary key of the new profile.
            fields: Form fields; ``nameSurname``, ``username`` and
                    ``password`` are stored.

        Returns:
            ``True`` when the document was written; ``False`` if *email* is
            empty, already registered, or the write failed.
        """
        if not email or self.check_email_exists(email):
            return False
        doc = {
            'nameSurname': fields.get('nameSurname'),
            'username': fields.get('username'),
            'password': fields.get('password'),
            'description': None,
            'country': None,
        }
        try:
            self._store.set(user_path(email), doc)
        except DocumentStoreError as e:
            self._log.error("Error registering user %s: %s", email, e)
            return False
        self._log.info("User registered: %s", email)
        return True

    def update_profile(self, email: str, fields: Mapping[str, Optional[str]]) -> None:
        """Merge the non-``None`` entries of *fields* into the profile."""
        updates = {k: v for k, v in fields.items() if v is not None}
        if not email or not updates:
            return
        try:
            self._store.update(user_path(email), updates)
            self._log.info("User updated: %s", email)
        except DocumentStoreError as e:
            self._log.error("Error updating user %s: %s", email, e)

    def check_credentials(self, email: str, password: str) -> bool:
        """Return ``True`` only if the profile exists and the password matches.

        A missing profile, a wrong password and a failed read all return
        ``False`` with nothing to tell them apart.
        """
        if not email:
            return False
        try:
            doc = self._store.get(user_path(email))
        except DocumentStoreError as e:
            self._log.error("Error during login for %s: %s", email, e)
            return False
        return doc is not None and doc.get('password') == password

    # ------------------------------------------------------------------
    # Profile image reference
    # ------------------------------------------------------------------

    def fetch_profile_image(self, email: str) -> Optional[str]:
        """Return the stored profile-image URI for *email*, or ``None``."""
        if not email:
            return None
        try:
            doc = self._store.get(user_path(email))
        except DocumentStoreError as e:
            self._log.error("Error recovering profile image for %s: %s", email, e)
            return None
        return (doc or {}).get('imageUri') or None

    def update_profile_image(self, email: str, uri: str) -> None:
        if not email or not uri:
            return
        try:
            self._store.update(user_path(email), {'imageUri': str(uri)})
            self._log.info("Profile image updated for %s", email)
        except DocumentStoreError as e:
            self._log.error("Error updating profile image for %s: %s", email, e)

    def profile_image_reference(self, email: str, uri: Optional[str] = None) -> Optional[str]:
        """Store *uri* when given, then return the current image reference."""
        if uri:
            self.update_profile_image(email, uri)
        return self.fetch_profile_image(email)
