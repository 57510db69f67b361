#!/usr/bin/env python3
"""
Tests for the catalog and news REST clients and the record parsers.

Run with:
    python -m pytest tests/test_clients.py
"""
import os
import sys
import unittest
from unittest.mock import MagicMock, patch

import requests

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gamevision.clients import CatalogClient, NewsClient
from gamevision.models import Article, GameRecord


# ===========================================================================
# Helpers
# ===========================================================================

def _ok_resp(body):
    resp = MagicMock()
    resp.status_code = 200
    resp.json.return_value = body
    resp.raise_for_status.return_value = None
    return resp


def _err_resp():
    resp = MagicMock()
    resp.status_code = 500
    resp.raise_for_status.side_effect = requests.HTTPError(response=resp)
    return resp


RAW_PORTAL = {
    'id': 4200,
    'slug': 'portal-2',
    'name': 'Portal 2',
    'released': '2011-04-18',
    'rating': 4.61,
    'ratings_count': 5300,
    'metacritic': 95,
    'background_image': 'https://media.rawg.io/portal2.jpg',
    'playtime': 11,
    'genres': [{'id': 2, 'name': 'Shooter'}, {'id': 7, 'name': 'Puzzle'}],
    'platforms': [{'platform': {'id': 4, 'name': 'PC'}}],
    'tags': [{'id': 31, 'name': 'Singleplayer'}],
    'stores': [{'store': {'id': 1, 'name': 'Steam'}}],
    'esrb_rating': {'id': 2, 'name': 'Everyone 10+'},
}


# ===========================================================================
# Models
# ===========================================================================

class TestGameRecord(unittest.TestCase):

    def test_from_api_flattens_nested_lists(self):
        game = GameRecord.from_api(RAW_PORTAL)
        self.assertEqual(game.id, 4200)
        self.assertEqual(game.genres, ['Shooter', 'Puzzle'])
        self.assertEqual(game.platforms, ['PC'])
        self.assertEqual(game.stores, ['Steam'])
        self.assertEqual(game.esrb_rating, 'Everyone 10+')

    def test_nullable_fields(self):
        game = GameRecord.from_api({'id': '7', 'name': 'X', 'metacritic': None,
                                    'background_image': None, 'rating': None})
        self.assertEqual(game.id, 7)
        self.assertIsNone(game.metacritic)
        self.assertIsNone(game.background_image)
        self.assertEqual(game.rating, 0.0)

    def test_release_year(self):
        self.assertEqual(GameRecord(id=1, released='2011-04-18').release_year, 2011)
        self.assertIsNone(GameRecord(id=1, released='').release_year)
        self.assertIsNone(GameRecord(id=1, released='TBA').release_year)

    def test_missing_id_raises(self):
        with self.assertRaises(KeyError):
            GameRecord.from_api({'name': 'No id'})


class TestArticle(unittest.TestCase):

    def test_from_api(self):
        art = Article.from_api({
            'source': {'id': None, 'name': 'IGN'},
            'author': None,
            'title': 'Big news',
            'description': 'd',
            'url': 'https://ign.com/a',
            'urlToImage': 'https://ign.com/a.jpg',
            'publishedAt': '2024-01-02T10:00:00Z',
            'content': 'c',
        })
        self.assertEqual(art.source_name, 'IGN')
        self.assertEqual(art.url_to_image, 'https://ign.com/a.jpg')
        self.assertIsNone(art.author)

    def test_missing_source(self):
        art = Article.from_api({'title': 't', 'source': None})
        self.assertEqual(art.source_name, '')


# ===========================================================================
# CatalogClient
# ===========================================================================

class TestCatalogClient(unittest.TestCase):

    def _client(self):
        return CatalogClient(api_key='rawg_key', timeout=3)

    def test_search_returns_records(self):
        c = self._client()
        body = {'count': 1, 'next': None, 'previous': None, 'results': [RAW_PORTAL]}
        with patch.object(c.session, 'get', return_value=_ok_resp(body)) as mock_get:
            games = c.search('  "portal"  ')
        self.assertEqual([g.name for g in games], ['Portal 2'])
        url = mock_get.call_args[0][0]
        params = mock_get.call_args[1]['params']
        self.assertEqual(url, 'https://api.rawg.io/api/games')
        self.assertEqual(params['search'], 'portal')
        self.assertEqual(params['key'], 'rawg_key')
        self.assertEqual(mock_get.call_args[1]['timeout'], 3)

    def test_search_http_error_returns_empty(self):
        c = self._client()
        with patch.object(c.session, 'get', return_value=_err_resp()):
            self.assertEqual(c.search('portal'), [])

    def test_search_network_error_returns_empty(self):
        c = self._client()
        with patch.object(c.session, 'get', side_effect=requests.ConnectionError('down')):
            self.assertEqual(c.search('portal'), [])

    def test_search_skips_malformed_results(self):
        c = self._client()
        body = {'results': [{'name': 'no id'}, RAW_PORTAL]}
        with patch.object(c.session, 'get', return_value=_ok_resp(body)):
            games = c.search('portal')
        self.assertEqual([g.id for g in games], [4200])

    def test_fetch_by_id(self):
        c = self._client()
        with patch.object(c.session, 'get', return_value=_ok_resp(RAW_PORTAL)) as mock_get:
            game = c.fetch_by_id('4200')
        self.assertEqual(game.name, 'Portal 2')
        self.assertTrue(mock_get.call_args[0][0].endswith('games/4200'))

    def test_fetch_by_id_invalid_id(self):
        c = self._client()
        with patch.object(c.session, 'get') as mock_get:
            self.assertIsNone(c.fetch_by_id('abc'))
        mock_get.assert_not_called()

    def test_fetch_by_id_invalid_json(self):
        c = self._client()
        resp = _ok_resp(None)
        resp.json.side_effect = ValueError('not json')
        with patch.object(c.session, 'get', return_value=resp):
            self.assertIsNone(c.fetch_by_id(1))

    def test_custom_base_url_gets_trailing_slash(self):
        c = CatalogClient('k', base_url='http://localhost:9000/api')
        self.assertEqual(c.base_url, 'http://localhost:9000/api/')


# ===========================================================================
# NewsClient
# ===========================================================================

class TestNewsClient(unittest.TestCase):

    def test_search_sends_api_key_param(self):
        c = NewsClient(api_key='news_key')
        body = {'status': 'ok', 'totalResults': 1,
                'articles': [{'title': 'A', 'source': {'name': 'S'}}]}
        with patch.object(c.session, 'get', return_value=_ok_resp(body)) as mock_get:
            articles = c.search('games')
        self.assertEqual(len(articles), 1)
        self.assertEqual(mock_get.call_args[0][0], 'https://newsapi.org/v2/everything')
        params = mock_get.call_args[1]['params']
        self.assertEqual(params, {'q': 'games', 'apiKey': 'news_key'})

    def test_error_status_returns_empty(self):
        c = NewsClient(api_key='news_key')
        body = {'status': 'error', 'message': 'apiKeyInvalid'}
        with patch.object(c.session, 'get', return_value=_ok_resp(body)):
            self.assertEqual(c.search('games'), [])

    def test_http_error_returns_empty(self):
        c = NewsClient(api_key='news_key')
        with patch.object(c.session, 'get', return_value=_err_resp()):
            self.assertEqual(c.search('games'), [])


if __name__ == '__main__':
    unittest.main()
