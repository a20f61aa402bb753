"""Core data structures for Grove.

This module contains:
- Grove objects (Blob, Tree, Commit)
- Repository handle and object store
- Index/staging area
- Reference management
- Configuration management
- Hashing utilities
- The error hierarchy

For diff, merge, commit and checkout logic, see grove.operations
"""

from grove.core.objects import GroveObject, Blob, Tree, TreeEntry, Commit
from grove.core.repository import Repository
from grove.core.hash import hash_object
from grove.core.index import Index, IndexEntry
from grove.core.refs import RefManager
from grove.core.config import Config, get_config
from grove.core.errors import (
    GroveError,
    NotFoundError,
    InvalidHashError,
    ObjectCorruptError,
    NoCommonAncestorError,
    ConfigError,
)

__all__ = [
    'GroveObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'Commit',
    'Repository',
    'Index',
    'IndexEntry',
    'RefManager',
    'Config',
    'get_config',
    'hash_object',
    'GroveError',
    'NotFoundError',
    'InvalidHashError',
    'ObjectCorruptError',
    'NoCommonAncestorError',
    'ConfigError',
]
