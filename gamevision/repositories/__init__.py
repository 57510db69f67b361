"""Repository package: expose all concrete repositories from one import."""
from .base import BaseRepository
from .document_repository import DocumentRepository

__all__ = [
    'BaseRepository',
    'DocumentRepository',
]
