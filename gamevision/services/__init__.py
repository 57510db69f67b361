"""Services package: expose all concrete services from one import."""
from .profile_service import ProfileService
from .game_list_service import GameListService
from .friend_service import FriendService
from .message_service import MessageService
from .game_cache_service import GameCacheService
from .library_service import LibraryService, SortOption
from .timeline_service import TimelineService
from .news_service import NewsService
from .search_service import SearchService
from .form_state_service import FormStateService

__all__ = [
    'ProfileService',
    'GameListService',
    'FriendService',
    'MessageService',
    'GameCacheService',
    'LibraryService',
    'SortOption',
    'TimelineService',
    'NewsService',
    'SearchService',
    'FormStateService',
]
