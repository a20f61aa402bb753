"""Exception hierarchy for Grove."""

from typing import Iterable


class GroveError(Exception):
    """Base class for all Grove errors."""


class NotFoundError(GroveError):
    """Raised when no object exists for a hash."""


class InvalidHashError(GroveError):
    """Raised when a hash is empty or malformed."""


class ObjectCorruptError(GroveError):
    """Raised when a stored object cannot be parsed as the expected kind."""


class NoCommonAncestorError(GroveError):
    """Raised when two commits share no history."""


class IndexCorruptError(GroveError):
    """Raised when the index file fails validation."""


class RefError(GroveError):
    """Raised when a reference cannot be resolved or used."""


class BareRepositoryError(GroveError):
    """Raised when an operation needs a working copy in a bare repository."""


class RepositoryExistsError(GroveError):
    """Raised when initializing over an existing repository."""


class MergeInProgressError(GroveError):
    """Raised when starting a merge while another one is unresolved."""


class NothingToCommitError(GroveError):
    """Raised when the staged tree matches HEAD."""


class ConfigError(GroveError):
    """Raised when a configuration value is malformed or cannot be written."""


class _PathsError(GroveError):
    """Error carrying the list of paths that caused it."""

    def __init__(self, message: str, paths: Iterable[str]):
        self.paths = sorted(set(paths))
        super().__init__(message + '\n' + '\n'.join(self.paths))


class UnmergedPathsError(_PathsError):
    """
    Raised when committing while conflicts remain in the index.

    Attributes:
        paths: Sorted paths still holding conflict stages.
    """

    def __init__(self, paths: Iterable[str]):
        super().__init__("Cannot commit because you have unmerged files:", paths)


class LocalChangesError(_PathsError):
    """
    Raised when uncommitted changes would be overwritten.

    Attributes:
        paths: Sorted paths with local changes in the way.
    """

    def __init__(self, paths: Iterable[str], operation: str = 'merge'):
        self.operation = operation
        super().__init__(
            f"Your local changes to the following files would be overwritten by {operation}:",
            paths,
        )
