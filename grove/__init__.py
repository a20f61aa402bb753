"""Grove - a local version-control engine with three-way merging."""

__version__ = '0.1.0'

from grove.core.repository import Repository
from grove.core.objects import GroveObject, Blob, Tree, Commit

__all__ = [
    'Repository',
    'GroveObject',
    'Blob',
    'Tree',
    'Commit',
]
