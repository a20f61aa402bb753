"""Checkout of branches and commits."""

import logging

from grove.core.errors import BareRepositoryError, LocalChangesError, RefError
from grove.core.index import Index
from grove.operations.diff import toc_diff

logger = logging.getLogger(__name__)


def checkout(repo, ref: str) -> str:
    """
    Switch the working copy, index and HEAD to a branch or commit.

    A branch name leaves HEAD pointing at the branch; a commit hash
    detaches HEAD.

    Returns:
        str: Human-readable summary of what happened

    Raises:
        RefError: If ref does not name a commit
        LocalChangesError: If uncommitted changes would be overwritten
    """
    if repo.is_bare:
        raise BareRepositoryError("This operation must be run in a work tree")

    refs = repo.refs
    target = refs.resolve_reference(ref)
    if target is None or not repo.object_exists(target):
        raise RefError(f"{ref} did not match any file(s) known to grove")
    repo.read_commit(target)

    if ref == refs.get_current_branch():
        return f"Already on {ref}"

    overwritten = repo.diff.changed_files_commit_would_overwrite(target)
    if overwritten:
        raise LocalChangesError(overwritten, operation='checkout')

    target_toc = repo.commit_toc(target)
    repo.working_copy.write(toc_diff(repo.diff.head_toc(), target_toc))

    detaching = not refs.branch_exists(ref)
    refs.set_head(target if detaching else ref, symbolic=not detaching)
    Index.from_toc(target_toc).save(repo)

    logger.info("Checked out %s (%s)", ref, target)
    if detaching:
        return f"Note: checking out {target}\nYou are in detached HEAD state."
    return f"Switched to branch {ref}"
