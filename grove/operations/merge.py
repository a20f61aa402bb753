"""Merge operations for Grove.

A repository is either clean or merging. Merging a commit whose history
already contains the receiver is a fast-forward: the branch simply moves
and nothing else is recorded. Any other merge writes the giver's hash to
MERGE_HEAD, prepares a merge message, rewrites the index (including
conflict stages) and the working copy, and leaves creation of the merge
commit to the commit operation, which clears MERGE_HEAD.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from grove.core.errors import (BareRepositoryError, MergeInProgressError,
                               NoCommonAncestorError, RefError, LocalChangesError)
from grove.core.index import Index
from grove.operations.diff import Diff, FileStatus, toc_diff

logger = logging.getLogger(__name__)

UP_TO_DATE = "Already up-to-date"
FAST_FORWARD = "Fast-forward"
CONFLICTS = "Automatic merge failed. Fix conflicts and commit the result."
MERGE_MADE = "Merge made by the three-way strategy"


def diff_conflicts(diff: Diff) -> List[str]:
    """Sorted paths a merge diff marks as conflicted."""
    return sorted(path for path, entry in diff.items()
                  if entry.status == FileStatus.CONFLICT)


@dataclass
class MergeResult:
    """Outcome of merging a ref into the current branch."""
    message: str
    receiver: Optional[str]
    giver: str
    is_fast_forward: bool = False
    conflicts: List[str] = field(default_factory=list)
    commit_hash: Optional[str] = None

    @property
    def success(self) -> bool:
        return not self.conflicts

    def __repr__(self) -> str:
        if self.is_fast_forward:
            return "MergeResult(fast-forward)"
        return f"MergeResult({self.message!r}, conflicts={len(self.conflicts)})"


class MergeEngine:
    """
    Three-way merge of two lines of history.

    Terminology: the receiver is the commit being merged into (HEAD), the
    giver is the commit being merged in, and the base is their common
    ancestor.
    """

    def __init__(self, repo):
        self.repo = repo

    def common_ancestor(self, a: str, b: str) -> str:
        """
        A commit both a and b descend from (or are).

        The pair is ordered lexicographically for determinism, and the
        result is the first entry of the smaller hash's lineage (itself,
        then its ancestors in traversal order) that also appears in the
        other's lineage. With several merge bases this is whichever the
        traversal reaches first, not necessarily the most recent.

        Raises:
            NoCommonAncestorError: If the histories are unrelated
        """
        first, second = sorted([a, b])
        first_lineage = [first] + self.repo.ancestors(first)
        second_lineage = {second, *self.repo.ancestors(second)}

        for hash in first_lineage:
            if hash in second_lineage:
                return hash

        raise NoCommonAncestorError(f"Commits {a} and {b} have no common ancestor")

    def can_fast_forward(self, receiver: Optional[str], giver: str) -> bool:
        """
        True if the giver's history already contains the receiver, or if
        there is no receiver because the repository has no commits yet.
        """
        return not receiver or self.repo.is_ancestor(giver, receiver)

    def is_a_force_fetch(self, receiver: Optional[str], giver: str) -> bool:
        """True if updating receiver to giver would not be a linear move."""
        return bool(receiver) and not self.repo.is_ancestor(giver, receiver)

    def merge_diff(self, receiver: str, giver: str) -> Diff:
        """Three-way diff from receiver to giver against their common ancestor."""
        base = self.common_ancestor(receiver, giver)
        return toc_diff(self.repo.commit_toc(receiver),
                        self.repo.commit_toc(giver),
                        self.repo.commit_toc(base))

    def conflicted_paths(self, receiver: str, giver: str) -> List[str]:
        """Sorted paths that merging giver into receiver would leave in conflict."""
        return diff_conflicts(self.merge_diff(receiver, giver))

    def has_conflicts(self, receiver: str, giver: str) -> bool:
        return bool(self.conflicted_paths(receiver, giver))

    def write_merge_msg(self, receiver: str, giver: str, ref_label: str,
                        diff: Optional[Diff] = None) -> str:
        """
        Write the message for the merge commit to MERGE_MSG. Pass the
        merge diff when it is already at hand.

        Returns:
            str: The message written
        """
        message = f"Merge {ref_label} into {self.repo.refs.head_branch_name()}"
        if diff is None:
            diff = self.merge_diff(receiver, giver)
        conflicts = diff_conflicts(diff)
        if conflicts:
            message += "\nConflicts:\n" + "\n".join(conflicts) + "\n"

        self.repo.refs.write_merge_msg(message)
        return message

    def write_index(self, receiver: str, giver: str, diff: Optional[Diff] = None) -> Index:
        """
        Replace the index with the result of merging giver into receiver.

        Conflicts get stages 1-3; a path only the giver modified takes the
        giver's content; unchanged and added paths keep the receiver's
        content, falling back to the giver's; deleted paths are dropped.
        """
        if diff is None:
            diff = self.merge_diff(receiver, giver)

        index = Index()
        for path, entry in diff.items():
            if entry.status == FileStatus.CONFLICT:
                index.write_conflict(path, entry.receiver, entry.giver, entry.base)
            elif entry.status == FileStatus.MODIFY:
                index.write_non_conflict(path, entry.giver)
            elif entry.status in (FileStatus.SAME, FileStatus.ADD):
                content = entry.receiver or entry.giver
                if content:
                    index.write_non_conflict(path, content)

        index.save(self.repo)
        logger.debug("Wrote merged index: %d entries, %d conflicts",
                     len(index), len(index.conflicted_paths()))
        return index

    def write_fast_forward_merge(self, receiver: Optional[str], giver: str) -> None:
        """
        Move the current branch to giver without creating a commit, and
        make the index (and working copy, unless bare) mirror giver.
        """
        refs = self.repo.refs
        refs.write_ref(refs.to_local_ref(refs.head_branch_name()), giver)

        giver_toc = self.repo.commit_toc(giver)
        Index.from_toc(giver_toc).save(self.repo)

        if not self.repo.is_bare:
            receiver_toc = self.repo.commit_toc(receiver) if receiver else {}
            self.repo.working_copy.write(toc_diff(receiver_toc, giver_toc))

        logger.info("Fast-forwarded %s to %s", refs.head_branch_name(), giver)

    def write_non_fast_forward_merge(self, receiver: str, giver: str, giver_ref_label: str) -> Diff:
        """
        Enter the merging state: record giver in MERGE_HEAD, write the
        merge message, the merged index and (unless bare) the merged
        working copy. The merge commit itself is made by the commit
        operation.

        Returns:
            Diff: The three-way merge diff all of the above were written from
        """
        diff = self.merge_diff(receiver, giver)
        self.repo.refs.write_merge_head(giver)
        self.write_merge_msg(receiver, giver, giver_ref_label, diff)
        self.write_index(receiver, giver, diff)

        if not self.repo.is_bare:
            self.repo.working_copy.write(diff, giver_label=giver_ref_label)

        logger.info("Started merge of %s into %s", giver, receiver)
        return diff

    def merge(self, ref: str) -> MergeResult:
        """
        Merge ref into the current branch.

        Returns:
            MergeResult describing what happened

        Raises:
            RefError: If HEAD is detached or ref is not a commit
            MergeInProgressError: If a merge is already under way
            LocalChangesError: If uncommitted changes would be overwritten
            NoCommonAncestorError: If the histories are unrelated
        """
        from grove.operations.commit import create_commit

        if self.repo.is_bare:
            raise BareRepositoryError("This operation must be run in a work tree")

        refs = self.repo.refs
        if refs.is_detached_head():
            raise RefError("Cannot merge into a detached HEAD")
        if refs.is_merge_in_progress():
            raise MergeInProgressError(
                "Merge already in progress; commit the result or abort the merge")

        receiver = refs.resolve_head()
        giver = refs.resolve_reference(ref)
        if giver is None:
            raise RefError(f"{ref}: expected commit type")
        self.repo.read_commit(giver)

        if self.repo.is_up_to_date(receiver, giver):
            logger.info("%s is already merged into %s", giver, receiver)
            return MergeResult(message=UP_TO_DATE, receiver=receiver, giver=giver)

        overwritten = self.repo.diff.changed_files_commit_would_overwrite(giver)
        if overwritten:
            raise LocalChangesError(overwritten, operation='merge')

        if self.can_fast_forward(receiver, giver):
            self.write_fast_forward_merge(receiver, giver)
            return MergeResult(message=FAST_FORWARD, receiver=receiver, giver=giver,
                               is_fast_forward=True)

        diff = self.write_non_fast_forward_merge(receiver, giver, ref)
        conflicts = diff_conflicts(diff)
        if conflicts:
            logger.info("Merge of %s stopped with %d conflict(s)", ref, len(conflicts))
            return MergeResult(message=CONFLICTS, receiver=receiver, giver=giver,
                               conflicts=conflicts)

        commit_hash = create_commit(self.repo)
        return MergeResult(message=MERGE_MADE, receiver=receiver, giver=giver,
                           commit_hash=commit_hash)

    def abort_merge(self) -> bool:
        """
        Abandon an in-progress merge, restoring the index and working copy
        to HEAD and clearing the merge state.

        Returns:
            False if no merge was in progress
        """
        refs = self.repo.refs
        if not refs.is_merge_in_progress():
            return False

        head_toc = self.repo.diff.head_toc()
        if not self.repo.is_bare:
            self.repo.working_copy.write(toc_diff(self.repo.working_copy.toc(), head_toc))
        Index.from_toc(head_toc).save(self.repo)

        refs.clear_merge_head()
        refs.clear_merge_msg()
        logger.info("Aborted merge")
        return True
