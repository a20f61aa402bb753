"""Reference management for Grove."""

import logging
from typing import List, Optional, Tuple

from .errors import ObjectCorruptError, RefError
from .hash import is_valid_hash

logger = logging.getLogger(__name__)


class RefManager:
    """
    Manages Grove references.

    Handles:
    - Symbolic HEAD (pointing at a branch) and detached HEAD
    - Branch references (refs/heads/*)
    - The merge marker (MERGE_HEAD) and pending merge message (MERGE_MSG)
    """

    def __init__(self, repo):
        self.repo = repo
        self.grove_dir = repo.grove_dir
        self.heads_dir = repo.heads_dir
        self.head_file = repo.head_file
        self.merge_head_file = repo.merge_head_file
        self.merge_msg_file = repo.merge_msg_file

    @staticmethod
    def to_local_ref(branch_name: str) -> str:
        """Qualify a branch name as refs/heads/<name>."""
        return f'refs/heads/{branch_name}'

    def read_ref(self, ref_name: str) -> Optional[str]:
        """
        Read a reference and return its commit hash.

        Args:
            ref_name: 'HEAD', a qualified ref ('refs/heads/main') or a
                branch name ('main')

        Returns:
            Commit hash or None if the reference doesn't exist
        """
        if ref_name == 'HEAD':
            return self.resolve_head()

        if ref_name.startswith('refs/') or ref_name == 'MERGE_HEAD':
            ref_path = self.grove_dir / ref_name
        else:
            ref_path = self.heads_dir / ref_name

        if not ref_path.is_file():
            return None

        content = ref_path.read_text().strip()
        if content.startswith('ref: '):
            return self.read_ref(content[5:])
        return content or None

    def write_ref(self, ref_name: str, commit_hash: str, create_only: bool = False) -> bool:
        """
        Point a reference at a commit.

        Args:
            ref_name: Qualified reference name (e.g., 'refs/heads/main')
            commit_hash: Commit hash to point to
            create_only: Only create if the reference doesn't exist yet

        Returns:
            False if create_only is set and the reference exists, else True

        Raises:
            RefError: If commit_hash is not a commit
        """
        ref_path = self.grove_dir / ref_name

        if create_only and ref_path.exists():
            return False

        try:
            self.repo.read_commit(commit_hash)
        except ObjectCorruptError as e:
            raise RefError(f"Cannot point {ref_name} at {commit_hash}: {e}") from e

        ref_path.parent.mkdir(parents=True, exist_ok=True)
        ref_path.write_text(commit_hash + '\n')
        logger.debug("Moved %s to %s", ref_name, commit_hash)
        return True

    def delete_ref(self, ref_name: str) -> bool:
        ref_path = self.grove_dir / ref_name
        if ref_path.is_file():
            ref_path.unlink()
            return True
        return False

    def resolve_head(self) -> Optional[str]:
        """
        Resolve HEAD to a commit hash.

        Returns:
            Commit hash, or None when HEAD's branch has no commits yet
        """
        if not self.head_file.exists():
            return None

        content = self.head_file.read_text().strip()
        if content.startswith('ref: '):
            return self.read_ref(content[5:])
        return content or None

    def get_current_branch(self) -> Optional[str]:
        """
        Name of the branch HEAD points at.

        Returns:
            Branch name or None if in detached HEAD state
        """
        if not self.head_file.exists():
            return None

        content = self.head_file.read_text().strip()
        if content.startswith('ref: refs/heads/'):
            return content[16:]
        return None

    def head_branch_name(self) -> str:
        """
        Name of the current branch.

        Raises:
            RefError: If HEAD is detached
        """
        branch = self.get_current_branch()
        if branch is None:
            raise RefError("HEAD is detached")
        return branch

    def is_detached_head(self) -> bool:
        if not self.head_file.exists():
            return False
        return not self.head_file.read_text().strip().startswith('ref: ')

    def set_head(self, target: str, symbolic: bool = True) -> None:
        """
        Point HEAD at a branch (symbolic) or directly at a commit (detached).

        Raises:
            RefError: If the branch doesn't exist or target isn't a commit
        """
        if symbolic:
            ref_name = target if target.startswith('refs/heads/') else self.to_local_ref(target)
            if not (self.grove_dir / ref_name).is_file():
                raise RefError(f"Branch {target} does not exist")
            self.head_file.write_text(f'ref: {ref_name}\n')
        else:
            try:
                self.repo.read_commit(target)
            except ObjectCorruptError as e:
                raise RefError(f"Cannot detach HEAD at {target}: {e}") from e
            self.head_file.write_text(target + '\n')

    def update_head(self, commit_hash: str) -> None:
        """Move the current branch, or a detached HEAD, to commit_hash."""
        branch = self.get_current_branch()
        if branch is None:
            self.set_head(commit_hash, symbolic=False)
        else:
            self.write_ref(self.to_local_ref(branch), commit_hash)

    def list_branches(self) -> List[Tuple[str, str]]:
        """Sorted (branch_name, commit_hash) pairs."""
        if not self.heads_dir.exists():
            return []

        branches = []
        for branch_file in self.heads_dir.rglob('*'):
            if branch_file.is_file():
                branch_name = branch_file.relative_to(self.heads_dir).as_posix()
                branches.append((branch_name, branch_file.read_text().strip()))

        return sorted(branches)

    def branch_exists(self, branch_name: str) -> bool:
        return (self.heads_dir / branch_name).is_file()

    def create_branch(self, branch_name: str, commit_hash: str) -> bool:
        """Create a branch. Returns False if it already exists."""
        return self.write_ref(self.to_local_ref(branch_name), commit_hash, create_only=True)

    def resolve_reference(self, ref: str) -> Optional[str]:
        """
        Resolve HEAD, a branch, a qualified ref or a full commit hash.

        Returns:
            Commit hash or None if the reference can't be resolved
        """
        if is_valid_hash(ref) and self.repo.object_exists(ref):
            return ref
        return self.read_ref(ref)

    # -- merge state ----------------------------------------------------

    def is_merge_in_progress(self) -> bool:
        """True while a non-fast-forward merge awaits its merge commit."""
        return self.merge_head_file.exists()

    def read_merge_head(self) -> Optional[str]:
        if self.merge_head_file.exists():
            return self.merge_head_file.read_text().strip()
        return None

    def write_merge_head(self, commit_hash: str) -> None:
        self.merge_head_file.write_text(commit_hash + '\n')
        logger.debug("Set MERGE_HEAD to %s", commit_hash)

    def clear_merge_head(self) -> None:
        if self.merge_head_file.exists():
            self.merge_head_file.unlink()
            logger.debug("Cleared MERGE_HEAD")

    def read_merge_msg(self) -> Optional[str]:
        if self.merge_msg_file.exists():
            return self.merge_msg_file.read_text()
        return None

    def write_merge_msg(self, message: str) -> None:
        self.merge_msg_file.write_text(message)

    def clear_merge_msg(self) -> None:
        if self.merge_msg_file.exists():
            self.merge_msg_file.unlink()

    def commit_parent_hashes(self) -> List[str]:
        """
        Parents for the next commit: HEAD and MERGE_HEAD during a merge,
        nothing before the first commit, otherwise HEAD.
        """
        head = self.resolve_head()
        parents = [head] if head else []
        merge_head = self.read_merge_head()
        if merge_head:
            parents.append(merge_head)
        return parents
