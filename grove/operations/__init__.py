"""Operations module for high-level Grove operations.

This module contains the logic built on top of grove.core:
- Diff computation (two- and three-way TOC diffs)
- Merge algorithms and merge state
- Working copy synchronisation
- Commit, checkout and status
"""

from grove.operations.diff import DiffEngine, DiffEntry, FileStatus, file_status, toc_diff, name_status
from grove.operations.merge import MergeEngine, MergeResult
from grove.operations.working_copy import WorkingCopy
from grove.operations.commit import build_tree_from_index, create_commit
from grove.operations.checkout import checkout
from grove.operations.status import StatusReport, compute_status

__all__ = [
    'DiffEngine', 'DiffEntry', 'FileStatus', 'file_status', 'toc_diff', 'name_status',
    'MergeEngine', 'MergeResult',
    'WorkingCopy',
    'build_tree_from_index', 'create_commit',
    'checkout',
    'StatusReport', 'compute_status',
]
