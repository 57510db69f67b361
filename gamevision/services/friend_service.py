"""Business logic for the friends list."""
import logging
from typing import List

from ..exceptions import DocumentStoreError
from ..models import Friend
from .profile_service import ProfileService, user_path

FRIENDS_COLLECTION = 'friends'


class FriendService:
    """Manages directed friend relationships stored as empty marker
    documents under ``users/<email>/friends/<friendEmail>``.

    Relationships are one-way: adding A→B does not create B→A.
    """

    PLACEHOLDER_USERNAME = 'No username'

    def __init__(self, store, profiles: ProfileService) -> None:
        """
        Args:
            store:    Document repository.
            profiles: Used to resolve each friend's username.
        """
        self._store = store
        self._profiles = profiles
        self._log = logging.getLogger('gamevision.friends')

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add_friend(self, email: str, friend_email: str) -> None:
        """Create the relationship unless it already exists."""
        if not email or not friend_email:
            return
        try:
            path = user_path(email, FRIENDS_COLLECTION, friend_email)
            if self._store.get(path) is not None:
                self._log.warning("%s is already a friend of %s", friend_email, email)
                return
            self._store.set(path, {})
            self._log.info("Friend added: %s -> %s", email, friend_email)
        except DocumentStoreError as e:
            self._log.error("Error adding friend %s: %s", friend_email, e)

    def add_friend_by_email(self, email: str, friend_email: str) -> bool:
        """Add *friend_email* only if that user is registered.

        Returns:
            ``True`` if the target exists (the relationship now exists too),
            ``False`` otherwise.
        """
        friend_email = (friend_email or '').strip()
        if not self._profiles.check_email_exists(friend_email):
            self._log.info("User %s does not exist", friend_email)
            return False
        self.add_friend(email, friend_email)
        return True

    def remove_friend(self, email: str, friend_email: str) -> None:
        if not email or not friend_email:
            return
        try:
            self._store.delete(user_path(email, FRIENDS_COLLECTION, friend_email))
            self._log.info("Friend removed: %s -> %s", email, friend_email)
        except DocumentStoreError as e:
            self._log.error("Error removing friend %s: %s", friend_email, e)

    def list_friends(self, email: str) -> List[Friend]:
        """Return every friend of *email* with a resolved username.

        A friend whose profile cannot be read is still listed, with
        :attr:`PLACEHOLDER_USERNAME` as username.
        """
        if not email:
            return []
        try:
            docs = self._store.list(user_path(email, FRIENDS_COLLECTION))
        except DocumentStoreError as e:
            self._log.error("Error fetching friends of %s: %s", email, e)
            return []

        friends: List[Friend] = []
        for friend_email, _ in docs:
            fields = self._profiles.fetch_profile_fields(friend_email) or {}
            friends.append(Friend(email=friend_email,
                                  username=fields.get('username') or self.PLACEHOLDER_USERNAME))
        self._log.debug("Friends of %s: %s", email, friends)
        return friends
