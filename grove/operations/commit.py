"""Commit creation for Grove."""

import logging
from collections import defaultdict
from typing import Optional

from grove.core.errors import (BareRepositoryError, NothingToCommitError,
                               UnmergedPathsError)
from grove.core.index import Index
from grove.core.objects import (BLOB_MODE, EXECUTABLE_MODE, TREE_MODE,
                                Commit, Tree)

logger = logging.getLogger(__name__)


def build_tree_from_index(repo, index: Index) -> str:
    """
    Write tree objects mirroring the stage-0 entries of the index.

    Returns:
        str: Hash of the root tree
    """
    trees = defaultdict(Tree)
    trees['']

    for (path, stage), entry in sorted(index.entries.items()):
        if stage != 0:
            continue
        parts = path.split('/')
        for i in range(1, len(parts)):
            trees['/'.join(parts[:i])]

        mode = EXECUTABLE_MODE if entry.mode & 0o111 else BLOB_MODE
        trees['/'.join(parts[:-1])].add_entry(mode, 'blob', entry.sha1, parts[-1])

    # Deepest directories first so every subtree hash exists before its parent
    for dir_path in sorted(trees, key=lambda p: p.count('/'), reverse=True):
        if not dir_path:
            continue
        tree_hash = repo.write_object(trees[dir_path])
        parent_path, _, dir_name = dir_path.rpartition('/')
        trees[parent_path].add_entry(TREE_MODE, 'tree', tree_hash, dir_name)

    return repo.write_object(trees[''])


def create_commit(repo, message: Optional[str] = None, author: Optional[str] = None) -> str:
    """
    Commit the index.

    During a merge the stored merge message is used and the commit gets
    HEAD and MERGE_HEAD as parents; the merge state is cleared afterwards.

    Args:
        repo: Repository instance
        message: Commit message (ignored during a merge)
        author: "Name <email>"; defaults to the configured identity

    Returns:
        str: Hash of the new commit

    Raises:
        BareRepositoryError: If the repository is bare
        UnmergedPathsError: If the index still holds conflicts
        NothingToCommitError: If the staged tree matches HEAD outside a merge
    """
    if repo.is_bare:
        raise BareRepositoryError("This operation must be run in a work tree")

    refs = repo.refs
    index = Index.load(repo)
    merging = refs.is_merge_in_progress()

    conflicts = index.conflicted_paths()
    if conflicts:
        raise UnmergedPathsError(conflicts)

    tree_hash = build_tree_from_index(repo, index)
    head = refs.resolve_head()
    head_desc = refs.get_current_branch() or 'detached HEAD'

    if not merging and head and repo.read_commit(head).tree == tree_hash:
        raise NothingToCommitError(f"On {head_desc}\nnothing to commit, working directory clean")

    if merging:
        message = refs.read_merge_msg() or message
    if not message:
        raise ValueError("Commit message required")

    if author is None:
        name, email = repo.config.get_user_identity()
        author = f"{name} <{email}>"

    commit = Commit.create(
        tree_hash=tree_hash,
        parent_hashes=refs.commit_parent_hashes(),
        author=author,
        message=message,
    )
    commit_hash = repo.write_object(commit)
    refs.update_head(commit_hash)

    if merging:
        refs.clear_merge_msg()
        refs.clear_merge_head()
        logger.info("Created merge commit %s", commit_hash)
    else:
        logger.info("Created commit %s on %s", commit_hash, head_desc)

    return commit_hash
