"""Typed records for games, news articles, profiles, friends and messages."""
import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class GameList(str, enum.Enum):
    """Named per-user game collections."""

    WISHLIST = 'wishlist'
    PLAYED = 'playedlist'
    HISTORY = 'history'

    @classmethod
    def parse(cls, value) -> 'GameList':
        """Return the member for *value* (member or raw collection name).

        Raises:
            ValueError: *value* is not one of the known list names.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            raise ValueError(
                f"Unknown game list {value!r}; expected one of "
                f"{', '.join(m.value for m in cls)}"
            ) from None


FORM_FIELDS = ('username', 'password', 'confirmPassword', 'country',
               'email', 'nameSurname', 'description')


def _names(items: Any, nested: Optional[str] = None) -> List[str]:
    """Flatten RAWG ``[{"name": ..}]`` / ``[{nested: {"name": ..}}]`` lists to names."""
    names: List[str] = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        if nested and isinstance(item.get(nested), dict):
            item = item[nested]
        name = item.get('name')
        if name:
            names.append(name)
    return names


@dataclass
class GameRecord:
    """A game as returned by the catalog.

    Search results carry a subset of the fields (a "summary"); the
    ``games/{id}`` endpoint fills in the rest.
    """

    id: int
    name: str = ''
    slug: str = ''
    released: str = ''
    rating: float = 0.0
    ratings_count: int = 0
    metacritic: Optional[int] = None
    background_image: Optional[str] = None
    playtime: int = 0
    genres: List[str] = field(default_factory=list)
    platforms: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    stores: List[str] = field(default_factory=list)
    esrb_rating: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'GameRecord':
        """Build a record from a RAWG ``games`` JSON object.

        Raises:
            KeyError / ValueError / TypeError: *data* has no usable ``id``.
        """
        esrb = data.get('esrb_rating')
        return cls(
            id=int(data['id']),
            name=data.get('name') or '',
            slug=data.get('slug') or '',
            released=data.get('released') or '',
            rating=float(data.get('rating') or 0.0),
            ratings_count=int(data.get('ratings_count') or 0),
            metacritic=data.get('metacritic'),
            background_image=data.get('background_image'),
            playtime=int(data.get('playtime') or 0),
            genres=_names(data.get('genres')),
            platforms=_names(data.get('platforms'), nested='platform'),
            tags=_names(data.get('tags')),
            stores=_names(data.get('stores'), nested='store'),
            esrb_rating=esrb.get('name') if isinstance(esrb, dict) else None,
        )

    @property
    def release_year(self) -> Optional[int]:
        """Year taken from the ``YYYY-MM-DD`` prefix of :attr:`released`."""
        prefix = (self.released or '')[:4]
        return int(prefix) if prefix.isdigit() and len(prefix) == 4 else None


@dataclass
class Article:
    """A news article from the ``v2/everything`` endpoint."""

    title: str
    url: str = ''
    source_name: str = ''
    author: Optional[str] = None
    description: str = ''
    url_to_image: Optional[str] = None
    published_at: str = ''
    content: str = ''

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Article':
        source = data.get('source')
        if not isinstance(source, dict):
            source = {}
        return cls(
            title=data.get('title') or '',
            url=data.get('url') or '',
            source_name=source.get('name') or '',
            author=data.get('author'),
            description=data.get('description') or '',
            url_to_image=data.get('urlToImage'),
            published_at=data.get('publishedAt') or '',
            content=data.get('content') or '',
        )


@dataclass
class Profile:
    """A user profile.  The stored password is deliberately not carried here."""

    email: str
    name_surname: str = ''
    username: str = ''
    description: str = ''
    country: str = ''
    image_uri: Optional[str] = None

    @classmethod
    def from_document(cls, email: str, doc: Dict[str, Any]) -> 'Profile':
        return cls(
            email=email,
            name_surname=doc.get('nameSurname') or '',
            username=doc.get('username') or '',
            description=doc.get('description') or '',
            country=doc.get('country') or '',
            image_uri=doc.get('imageUri'),
        )


@dataclass
class Friend:
    email: str
    username: str


@dataclass
class Message:
    """A timeline message.

    ``author`` is not stored in the document; it is the email of the user
    whose message collection the message was read from.
    """

    id: str
    text: str
    timestamp: str
    author: Optional[str] = None

    def tagged(self, author: str) -> 'Message':
        return Message(id=self.id, text=self.text, timestamp=self.timestamp,
                       author=author)
