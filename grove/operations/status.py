"""Repository status computation."""

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import List, Optional, Tuple

from grove.core.index import Index
from grove.operations.diff import FileStatus, name_status, toc_diff

Change = Tuple[FileStatus, str]


@dataclass
class StatusReport:
    """Everything `grove status` shows, as plain data."""
    branch: Optional[str]
    head: Optional[str]
    merging: bool = False
    untracked: List[str] = field(default_factory=list)
    unmerged: List[str] = field(default_factory=list)
    to_be_committed: List[Change] = field(default_factory=list)
    not_staged: List[Change] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.untracked or self.unmerged or self.to_be_committed or self.not_staged)


def is_hidden(rel_path: PurePath) -> bool:
    """True if any component of a work-tree relative path starts with a dot."""
    return any(part.startswith('.') for part in rel_path.parts)


def _changes(diff) -> List[Change]:
    return [(status, path) for path, status in sorted(name_status(diff).items())]


def compute_status(repo) -> StatusReport:
    """
    Compare HEAD, the index and the working copy.

    - untracked: files on disk the index doesn't know about
    - unmerged: paths still in conflict
    - to_be_committed: HEAD vs index
    - not_staged: index vs working copy
    """
    index = Index.load(repo)
    refs = repo.refs

    report = StatusReport(
        branch=refs.get_current_branch(),
        head=refs.resolve_head(),
        merging=refs.is_merge_in_progress(),
        unmerged=index.conflicted_paths(),
    )

    report.to_be_committed = _changes(toc_diff(repo.diff.head_toc(), index.toc()))

    if repo.work_tree is not None:
        report.not_staged = _changes(repo.diff.diff())

        for file_path in sorted(repo.work_tree.rglob('*')):
            rel_path = file_path.relative_to(repo.work_tree)
            if is_hidden(rel_path):
                continue
            if file_path.is_file() and rel_path.as_posix() not in index:
                report.untracked.append(rel_path.as_posix())

    return report
