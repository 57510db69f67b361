#!/usr/bin/env python3
"""
Unit tests for the document-store services: profiles, game lists, friends
and messages.

Run with:
    python -m pytest tests/test_store_services.py
"""
import os
import sys
import unittest
from unittest.mock import MagicMock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gamevision.exceptions import DocumentStoreError, InvalidPathError
from gamevision.models import Friend, GameList, Profile
from gamevision.repositories import DocumentRepository
from gamevision.services import (
    FriendService, GameListService, MessageService, ProfileService,
)
from gamevision.services.profile_service import user_path

REGISTRATION = {
    'username': 'alice',
    'nameSurname': 'Alice Liddell',
    'email': 'a@x.com',
    'password': 'pw',
    'confirmPassword': 'pw',
}


def failing_store():
    """A store whose every operation raises DocumentStoreError."""
    store = MagicMock()
    for name in ('get', 'set', 'update', 'delete', 'list', 'add'):
        getattr(store, name).side_effect = DocumentStoreError('backend unavailable')
    return store


# ===========================================================================
# ProfileService
# ===========================================================================

class TestProfileService(unittest.TestCase):

    def setUp(self):
        self.store = DocumentRepository(None)
        self.svc = ProfileService(self.store)

    def test_register_writes_profile(self):
        self.assertTrue(self.svc.register_profile('a@x.com', REGISTRATION))
        doc = self.store.get('users/a@x.com')
        self.assertEqual(doc['username'], 'alice')
        self.assertEqual(doc['password'], 'pw')
        self.assertIsNone(doc['description'])
        self.assertIsNone(doc['country'])
        self.assertNotIn('confirmPassword', doc)

    def test_register_twice_returns_false_and_keeps_first(self):
        self.assertTrue(self.svc.register_profile('a@x.com', REGISTRATION))
        second = dict(REGISTRATION, username='mallory', password='other')
        self.assertFalse(self.svc.register_profile('a@x.com', second))
        doc = self.store.get('users/a@x.com')
        self.assertEqual(doc['username'], 'alice')
        self.assertEqual(doc['password'], 'pw')

    def test_register_empty_email_returns_false(self):
        self.assertFalse(self.svc.register_profile('', REGISTRATION))

    def test_fetch_profile(self):
        self.svc.register_profile('a@x.com', REGISTRATION)
        profile = self.svc.fetch_profile('a@x.com')
        self.assertEqual(profile, Profile(email='a@x.com', name_surname='Alice Liddell',
                                          username='alice'))

    def test_fetch_missing_profile_returns_none(self):
        self.assertIsNone(self.svc.fetch_profile('nobody@x.com'))

    def test_fetch_profile_fields_drops_nulls(self):
        self.svc.register_profile('a@x.com', REGISTRATION)
        fields = self.svc.fetch_profile_fields('a@x.com')
        self.assertEqual(fields['username'], 'alice')
        self.assertNotIn('country', fields)

    def test_update_never_writes_none(self):
        self.svc.register_profile('a@x.com', REGISTRATION)
        self.svc.update_profile('a@x.com', {'country': 'ES', 'username': None})
        doc = self.store.get('users/a@x.com')
        self.assertEqual(doc['country'], 'ES')
        self.assertEqual(doc['username'], 'alice')

    def test_update_missing_profile_is_swallowed(self):
        self.svc.update_profile('nobody@x.com', {'country': 'ES'})
        self.assertIsNone(self.store.get('users/nobody@x.com'))

    def test_check_credentials(self):
        self.svc.register_profile('a@x.com', REGISTRATION)
        self.assertTrue(self.svc.check_credentials('a@x.com', 'pw'))

    def test_missing_user_and_wrong_password_look_the_same(self):
        self.svc.register_profile('real@x.com', dict(REGISTRATION, email='real@x.com'))
        missing = self.svc.check_credentials('missing@x.com', 'pw')
        wrong = self.svc.check_credentials('real@x.com', 'wrongpw')
        self.assertIs(missing, False)
        self.assertIs(wrong, False)

    def test_check_email_exists(self):
        self.svc.register_profile('a@x.com', REGISTRATION)
        self.assertTrue(self.svc.check_email_exists('a@x.com'))
        self.assertFalse(self.svc.check_email_exists('b@x.com'))

    def test_profile_image_reference(self):
        self.svc.register_profile('a@x.com', REGISTRATION)
        self.assertIsNone(self.svc.profile_image_reference('a@x.com'))
        self.assertEqual(self.svc.profile_image_reference('a@x.com', 'file:///img.png'),
                         'file:///img.png')
        self.assertEqual(self.svc.fetch_profile('a@x.com').image_uri, 'file:///img.png')

    def test_store_failures_become_absence(self):
        svc = ProfileService(failing_store())
        self.assertIsNone(svc.fetch_profile('a@x.com'))
        self.assertIsNone(svc.fetch_profile_fields('a@x.com'))
        self.assertFalse(svc.check_email_exists('a@x.com'))
        self.assertFalse(svc.check_credentials('a@x.com', 'pw'))
        self.assertFalse(svc.register_profile('a@x.com', REGISTRATION))
        self.assertIsNone(svc.fetch_profile_image('a@x.com'))
        svc.update_profile('a@x.com', {'country': 'ES'})
        svc.update_profile_image('a@x.com', 'file:///img.png')


# ===========================================================================
# GameListService
# ===========================================================================

class TestGameListService(unittest.TestCase):

    def setUp(self):
        self.store = DocumentRepository(None)
        self.svc = GameListService(self.store)

    def test_add_and_list(self):
        self.svc.add_game('a@x.com', 4200, 'wishlist')
        self.svc.add_game('a@x.com', '3498', GameList.WISHLIST)
        self.assertEqual(self.svc.list_games('a@x.com', 'wishlist'), ['4200', '3498'])
        self.assertEqual(self.store.get('users/a@x.com/wishlist/4200'), {'gameId': '4200'})

    def test_add_is_upsert(self):
        self.svc.add_game('a@x.com', 4200, 'playedlist')
        self.svc.add_game('a@x.com', 4200, 'playedlist')
        self.assertEqual(self.svc.list_games('a@x.com', 'playedlist'), ['4200'])

    def test_lists_are_independent(self):
        self.svc.add_game('a@x.com', 1, 'wishlist')
        self.svc.add_to_history('a@x.com', 2)
        self.assertEqual(self.svc.list_games('a@x.com', 'wishlist'), ['1'])
        self.assertEqual(self.svc.list_games('a@x.com', 'history'), ['2'])
        self.assertEqual(self.svc.list_games('a@x.com', 'playedlist'), [])

    def test_remove_defaults_to_played_list(self):
        self.svc.add_game('a@x.com', 1, 'playedlist')
        self.svc.add_game('a@x.com', 1, 'wishlist')
        self.svc.remove_game('a@x.com', 1)
        self.assertEqual(self.svc.list_games('a@x.com', 'playedlist'), [])
        self.assertEqual(self.svc.list_games('a@x.com', 'wishlist'), ['1'])

    def test_add_without_user_is_noop(self):
        self.svc.add_game('', 1, 'wishlist')
        self.assertEqual(self.store.data, {})

    def test_unknown_list_raises(self):
        with self.assertRaises(ValueError):
            self.svc.list_games('a@x.com', 'favourites')

    def test_store_failure_returns_empty(self):
        svc = GameListService(failing_store())
        self.assertEqual(svc.list_games('a@x.com', 'wishlist'), [])
        svc.add_game('a@x.com', 1, 'wishlist')
        svc.remove_game('a@x.com', 1)


# ===========================================================================
# FriendService
# ===========================================================================

class TestFriendService(unittest.TestCase):

    def setUp(self):
        self.store = DocumentRepository(None)
        self.profiles = ProfileService(self.store)
        self.svc = FriendService(self.store, self.profiles)
        self.profiles.register_profile('b@x.com', dict(REGISTRATION, username='bob'))

    def test_add_friend_twice_keeps_one_relationship(self):
        self.svc.add_friend('a@x.com', 'b@x.com')
        self.svc.add_friend('a@x.com', 'b@x.com')
        self.assertEqual(len(self.store.list('users/a@x.com/friends')), 1)
        self.assertEqual(self.svc.list_friends('a@x.com'),
                         [Friend(email='b@x.com', username='bob')])

    def test_relationship_is_directed(self):
        self.svc.add_friend('a@x.com', 'b@x.com')
        self.assertEqual(self.svc.list_friends('b@x.com'), [])

    def test_unknown_friend_gets_placeholder_username(self):
        self.svc.add_friend('a@x.com', 'ghost@x.com')
        self.assertEqual(self.svc.list_friends('a@x.com'),
                         [Friend(email='ghost@x.com', username='No username')])

    def test_add_friend_by_email_validates_target(self):
        self.assertFalse(self.svc.add_friend_by_email('a@x.com', 'ghost@x.com'))
        self.assertEqual(self.svc.list_friends('a@x.com'), [])
        self.assertTrue(self.svc.add_friend_by_email('a@x.com', ' b@x.com '))
        self.assertEqual([f.email for f in self.svc.list_friends('a@x.com')], ['b@x.com'])

    def test_remove_friend(self):
        self.svc.add_friend('a@x.com', 'b@x.com')
        self.svc.remove_friend('a@x.com', 'b@x.com')
        self.assertEqual(self.svc.list_friends('a@x.com'), [])

    def test_profile_failure_does_not_fail_the_list(self):
        store = MagicMock()
        store.list.return_value = [('b@x.com', {})]
        store.get.side_effect = DocumentStoreError('timeout')
        svc = FriendService(store, ProfileService(store))
        self.assertEqual(svc.list_friends('a@x.com'),
                         [Friend(email='b@x.com', username='No username')])

    def test_store_failure_returns_empty(self):
        store = failing_store()
        svc = FriendService(store, ProfileService(store))
        self.assertEqual(svc.list_friends('a@x.com'), [])
        svc.add_friend('a@x.com', 'b@x.com')
        svc.remove_friend('a@x.com', 'b@x.com')


# ===========================================================================
# MessageService
# ===========================================================================

class TestMessageService(unittest.TestCase):

    def setUp(self):
        self.store = DocumentRepository(None)
        self.svc = MessageService(self.store)

    def test_post_and_list(self):
        self.svc.post_message('a@x.com', 'hello', '10:00 01/01/2024')
        messages = self.svc.list_messages('a@x.com')
        self.assertEqual(len(messages), 1)
        self.assertEqual(messages[0].text, 'hello')
        self.assertEqual(messages[0].timestamp, '10:00 01/01/2024')
        self.assertIsNone(messages[0].author)
        doc = self.store.get(f'users/a@x.com/messages/{messages[0].id}')
        self.assertEqual(doc, {'texto': 'hello', 'hora': '10:00 01/01/2024'})

    def test_delete(self):
        self.svc.post_message('a@x.com', 'hello', '10:00 01/01/2024')
        message_id = self.svc.list_messages('a@x.com')[0].id
        self.svc.delete_message('a@x.com', message_id)
        self.assertEqual(self.svc.list_messages('a@x.com'), [])

    def test_store_failure_returns_empty(self):
        svc = MessageService(failing_store())
        self.assertEqual(svc.list_messages('a@x.com'), [])
        svc.post_message('a@x.com', 'hello', '10:00 01/01/2024')
        svc.delete_message('a@x.com', 'id')


# ===========================================================================
# Path safety
# ===========================================================================

class TestPathSafety(unittest.TestCase):
    """Emails and ids containing '/' must never raise or address another document."""

    def setUp(self):
        self.store = DocumentRepository(None)
        self.profiles = ProfileService(self.store)
        self.friends = FriendService(self.store, self.profiles)
        self.lists = GameListService(self.store)
        self.messages = MessageService(self.store)

    def test_user_path_rejects_slashes(self):
        self.assertEqual(user_path('a@x.com', 'wishlist', '5'), 'users/a@x.com/wishlist/5')
        with self.assertRaises(InvalidPathError):
            user_path('a/b@x.com')
        with self.assertRaises(InvalidPathError):
            user_path('a@x.com', 'playedlist', '12/3')
        with self.assertRaises(InvalidPathError):
            user_path('')

    def test_invalid_path_is_a_store_error(self):
        self.assertTrue(issubclass(InvalidPathError, DocumentStoreError))

    def test_slash_in_email_returns_absent_values(self):
        self.assertFalse(self.profiles.check_credentials('a/b@x.com', 'pw'))
        self.assertFalse(self.profiles.check_email_exists('a/b@x.com'))
        self.assertIsNone(self.profiles.fetch_profile('a/b@x.com'))
        self.assertFalse(self.profiles.register_profile('a/b@x.com', REGISTRATION))
        self.assertFalse(self.friends.add_friend_by_email('a@x.com', 'bob/evil@x.com'))
        self.assertEqual(self.friends.list_friends('a/b@x.com'), [])
        self.assertEqual(self.messages.list_messages('a/b@x.com'), [])
        self.assertEqual(self.store.data, {})

    def test_slash_in_game_id_is_a_noop(self):
        self.lists.add_game('a@x.com', 12, 'playedlist')
        self.lists.remove_game('a@x.com', '12/3')
        self.lists.add_game('a@x.com', '12/3', 'playedlist')
        self.assertEqual(self.lists.list_games('a@x.com', 'playedlist'), ['12'])

    def test_cannot_befriend_another_users_subcollection(self):
        self.lists.add_game('b@x.com', 5, 'wishlist')
        self.assertFalse(self.profiles.check_email_exists('b@x.com/wishlist/5'))
        self.assertFalse(self.friends.add_friend_by_email('me@x.com', 'b@x.com/wishlist/5'))
        self.friends.add_friend('me@x.com', 'b@x.com/wishlist/5')
        self.assertEqual(self.friends.list_friends('me@x.com'), [])
        self.assertEqual(list(self.store.data), ['users/b@x.com/wishlist/5'])


if __name__ == '__main__':
    unittest.main()
