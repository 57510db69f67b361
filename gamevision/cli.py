#!/usr/bin/env python3
"""
GameVision command-line front end.

Examples:
  gamevision news "elden ring"
  gamevision search zelda --sort rating --asc
  gamevision list me@x.com wishlist --sort rating_desc
  gamevision add me@x.com 3498 playedlist
  gamevision friends me@x.com --add friend@x.com
  gamevision timeline me@x.com
  gamevision post me@x.com "Finally beat it"
"""
import argparse
import sys
from typing import List, Optional

from colorama import Fore, Style, init

from .app import GameVision
from .config import setup_logging
from .exceptions import ConfigError
from .models import GameList
from .services.library_service import SortOption
from .services.news_service import NewsService
from .services.search_service import SORT_CRITERIA

# Initialize colorama for cross-platform colored terminal output
init(autoreset=True)

LIST_CHOICES = [g.value for g in GameList]
SORT_CHOICES = [s.value for s in SortOption]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gamevision',
        description='GameVision - game news, catalog search, lists and friends',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split('Examples:', 1)[1] if __doc__ else None,
    )
    parser.add_argument('--config', '-c', default='config.json',
                        help='Path to config file (default: config.json)')
    parser.add_argument('--log-level', default=None,
                        help='Override the configured log level (DEBUG, INFO, ...)')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('news', help='Search game news')
    p.add_argument('query')

    p = sub.add_parser('search', help='Search the game catalog')
    p.add_argument('query')
    p.add_argument('--sort', choices=SORT_CRITERIA, default='rating')
    p.add_argument('--asc', action='store_true', help='Ascending order (default: descending)')

    p = sub.add_parser('list', help='Show one of your game lists')
    p.add_argument('email')
    p.add_argument('list_name', choices=LIST_CHOICES)
    p.add_argument('--sort', choices=SORT_CHOICES, default=SortOption.ALPHABETICAL.value)

    p = sub.add_parser('add', help='Add a game to a list')
    p.add_argument('email')
    p.add_argument('game_id')
    p.add_argument('list_name', choices=LIST_CHOICES)

    p = sub.add_parser('remove', help='Remove a game from a list')
    p.add_argument('email')
    p.add_argument('game_id')
    p.add_argument('--list', dest='list_name', choices=LIST_CHOICES,
                   default=GameList.PLAYED.value)

    p = sub.add_parser('friends', help='List, add or remove friends')
    p.add_argument('email')
    group = p.add_mutually_exclusive_group()
    group.add_argument('--add', metavar='EMAIL')
    group.add_argument('--remove', metavar='EMAIL')

    p = sub.add_parser('timeline', help='Show your and your friends\' messages')
    p.add_argument('email')

    p = sub.add_parser('post', help='Post a message to your timeline')
    p.add_argument('email')
    p.add_argument('text')
    return parser


def _print_news(vision: GameVision, query: str) -> None:
    articles = vision.news_service.search(query)
    if not articles:
        print(f"{Fore.YELLOW}No news found.")
    for article in articles:
        when = NewsService.format_published_at(article.published_at)
        print(f"{Fore.CYAN}{when}{Style.RESET_ALL}  {Style.BRIGHT}{article.title}")
        print(f"    {Fore.WHITE}{article.source_name} - {article.url}")


def _print_search(vision: GameVision, query: str, sort: str, ascending: bool) -> None:
    games = vision.search_service.search(query)
    if not games:
        print(f"{Fore.YELLOW}No games found.")
    for game in vision.search_service.sort_results(games, sort, ascending):
        year = game.release_year or '----'
        print(f"{Fore.GREEN}{game.id:>7}{Style.RESET_ALL}  {game.name} ({year})  "
              f"{Fore.CYAN}★ {game.rating:.2f}")


def _print_list(vision: GameVision, email: str, list_name: str, sort: str) -> None:
    session = vision.session(email)
    ids = vision.library_service.load(session, list_name)
    if not ids:
        print(f"{Fore.YELLOW}No games yet.")
    for game_id, game in vision.library_service.sorted_games(ids, sort):
        if game is None:
            print(f"{Fore.RED}{game_id:>7}{Style.RESET_ALL}  (details unavailable)")
            continue
        year = game.release_year or '----'
        print(f"{Fore.GREEN}{game_id:>7}{Style.RESET_ALL}  {game.name} ({year})  "
              f"{Fore.CYAN}★ {game.rating:.2f}{Style.RESET_ALL}  "
              f"{game.ratings_count} ratings")


def _print_friends(vision: GameVision, email: str,
                   add: Optional[str], remove: Optional[str]) -> int:
    if add:
        if not vision.friend_service.add_friend_by_email(email, add):
            print(f"{Fore.RED}User {add} does not exist.")
            return 1
    if remove:
        vision.friend_service.remove_friend(email, remove)
    friends = vision.friend_service.list_friends(email)
    if not friends:
        print(f"{Fore.YELLOW}No friends yet.")
    for friend in friends:
        print(f"{Fore.GREEN}{friend.username}{Style.RESET_ALL}  {friend.email}")
    return 0


def _print_timeline(vision: GameVision, email: str) -> None:
    session = vision.session(email)
    feed = vision.timeline_service.aggregate(session)
    if not feed:
        print(f"{Fore.YELLOW}No messages yet.")
    for message in feed:
        colour = Fore.GREEN if message.author == email else Fore.CYAN
        print(f"{colour}{message.author}{Style.RESET_ALL}  {message.timestamp}")
        print(f"    {message.text}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    try:
        vision = GameVision(config_path=args.config)
        if args.log_level:
            setup_logging(args.log_level)

        if args.command == 'news':
            _print_news(vision, args.query)
        elif args.command == 'search':
            _print_search(vision, args.query, args.sort, args.asc)
        elif args.command == 'list':
            _print_list(vision, args.email, args.list_name, args.sort)
        elif args.command == 'add':
            vision.game_list_service.add_game(args.email, args.game_id, args.list_name)
            print(f"{Fore.GREEN}Added {args.game_id} to {args.list_name}.")
        elif args.command == 'remove':
            vision.game_list_service.remove_game(args.email, args.game_id, args.list_name)
            print(f"{Fore.GREEN}Removed {args.game_id} from {args.list_name}.")
        elif args.command == 'friends':
            return _print_friends(vision, args.email, args.add, args.remove)
        elif args.command == 'timeline':
            _print_timeline(vision, args.email)
        elif args.command == 'post':
            if not vision.timeline_service.post(vision.session(args.email), args.text):
                print(f"{Fore.RED}Nothing to post.")
                return 1
            print(f"{Fore.GREEN}Posted.")
    except ConfigError as e:
        print(f"{Fore.RED}Error: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
