"""Diff engine for comparing tables of contents.

A diff maps every file path to a DiffEntry that says what change is needed
to get from the receiver version of the file to the giver version, e.g.:

    {
        'file1': DiffEntry(status=ADD, receiver=None, base=None, giver='3b18e5...'),
        'file2': DiffEntry(status=CONFLICT, receiver='a1f2...', base='9c0d...', giver='77e4...'),
    }

The base version (the common ancestor) is only supplied for merges, which
is the only time the CONFLICT status can arise.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Set


class FileStatus(str, Enum):
    """Change status of a single path."""
    ADD = 'A'
    MODIFY = 'M'
    DELETE = 'D'
    SAME = 'SAME'
    CONFLICT = 'CONFLICT'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DiffEntry:
    """Status of one path plus its content hash on each side (None if absent)."""
    status: FileStatus
    receiver: Optional[str]
    base: Optional[str]
    giver: Optional[str]


Toc = Mapping[str, str]
Diff = Dict[str, DiffEntry]


def file_status(receiver: Optional[str], giver: Optional[str], base: Optional[str]) -> FileStatus:
    """
    Classify the change from receiver to giver for one path.

    Each argument is the content hash of the path in that version, or None
    if the path is absent from it.
    """
    receiver_present = receiver is not None
    base_present = base is not None
    giver_present = giver is not None

    if receiver_present and giver_present and receiver != giver:
        if receiver != base and giver != base:
            return FileStatus.CONFLICT
        return FileStatus.MODIFY
    if receiver == giver:
        return FileStatus.SAME
    if not base_present and receiver_present != giver_present:
        return FileStatus.ADD
    if base_present and receiver_present != giver_present:
        return FileStatus.DELETE
    return FileStatus.SAME


def toc_diff(receiver: Toc, giver: Toc, base: Optional[Toc] = None) -> Diff:
    """
    Diff two TOCs, optionally against their common ancestor.

    Args:
        receiver: path -> hash for the version being changed
        giver: path -> hash for the version supplying changes
        base: path -> hash for the common ancestor; when omitted the
            receiver is used, which makes CONFLICT unreachable

    Returns:
        One DiffEntry per path found in any of the three TOCs
    """
    if base is None:
        base = receiver

    paths = set(receiver) | set(base) | set(giver)
    diff: Diff = {}
    for path in sorted(paths):
        r, b, g = receiver.get(path), base.get(path), giver.get(path)
        diff[path] = DiffEntry(status=file_status(r, g, b), receiver=r, base=b, giver=g)
    return diff


def name_status(diff: Diff) -> Dict[str, FileStatus]:
    """Map each changed path to its status, leaving out SAME entries."""
    return {path: entry.status for path, entry in diff.items()
            if entry.status != FileStatus.SAME}


class DiffEngine:
    """
    Diffs between commits, the index and the working copy of a repository.
    """

    def __init__(self, repo):
        self.repo = repo

    def diff(self, hash1: Optional[str] = None, hash2: Optional[str] = None) -> Diff:
        """
        Two-way diff between two versions of the repository.

        Args:
            hash1: Commit for the first version; the index when empty
            hash2: Commit for the second version; the working copy when empty
        """
        from grove.core.index import Index

        if hash1:
            a = self.repo.commit_toc(hash1)
        else:
            a = Index.load(self.repo).toc()

        if hash2:
            b = self.repo.commit_toc(hash2)
        else:
            b = self.repo.working_copy.toc()

        return toc_diff(a, b)

    def head_toc(self) -> Dict[str, str]:
        """TOC of HEAD, or an empty mapping before the first commit."""
        head = self.repo.refs.resolve_head()
        return self.repo.commit_toc(head) if head else {}

    def changed_files_commit_would_overwrite(self, hash: str) -> Set[str]:
        """
        Paths changed in the working copy since HEAD that also differ
        between HEAD and the commit hash.
        """
        head = self.repo.refs.resolve_head()
        if not head:
            return set()

        local_changes = name_status(self.diff(head))
        incoming_changes = name_status(self.diff(head, hash))
        return set(local_changes) & set(incoming_changes)

    def added_or_modified_files(self) -> Set[str]:
        """Paths added or modified in the working copy since HEAD."""
        changes = name_status(toc_diff(self.head_toc(), self.repo.working_copy.toc()))
        return {path for path, status in changes.items() if status != FileStatus.DELETE}
