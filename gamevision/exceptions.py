"""Exception hierarchy shared by the GameVision packages."""


class GameVisionError(Exception):
    """Base class for every error raised by GameVision."""


class ConfigError(GameVisionError):
    """Raised when the configuration file is malformed or a required key is missing."""


class DocumentStoreError(GameVisionError):
    """Raised by the document backend when a read or write cannot be completed."""


class DocumentNotFoundError(DocumentStoreError):
    """Raised when an update targets a document that does not exist."""


class InvalidPathError(DocumentStoreError, ValueError):
    """Raised when a document or collection path (or one of its ids) is malformed."""
