"""Repository management and object store for Grove."""

import logging
import zlib
from collections import deque
from pathlib import Path
from typing import Dict, List, Optional

from .errors import (InvalidHashError, NotFoundError, ObjectCorruptError,
                     RepositoryExistsError)
from .hash import is_valid_hash
from .objects import OBJECT_TYPES, Commit, GroveObject, Tree

logger = logging.getLogger(__name__)

GROVE_DIR = '.grove'
DEFAULT_BRANCH = 'main'


class Repository:
    """
    A Grove repository handle.

    The handle is the explicit root every operation works against: it owns
    the metadata directory layout and the content-addressed object store,
    and exposes the history queries (ancestors, table of contents) the diff
    and merge engines build on.

    A normal repository keeps its metadata in ``<path>/.grove`` next to the
    working copy. A bare repository has no working copy and keeps the
    metadata directly in ``<path>``.
    """

    def __init__(self, path: str = '.', bare: Optional[bool] = None):
        """
        Initialize repository handle.

        Args:
            path: Repository root (working copy root, or the bare directory)
            bare: Force bare/non-bare layout; autodetected when None
        """
        root = Path(path).resolve()
        if bare is None:
            bare = self._looks_bare(root)

        self.work_tree: Optional[Path] = None if bare else root
        self.grove_dir = root if bare else root / GROVE_DIR
        self.objects_dir = self.grove_dir / 'objects'
        self.refs_dir = self.grove_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.head_file = self.grove_dir / 'HEAD'
        self.index_file = self.grove_dir / 'index'
        self.config_file = self.grove_dir / 'config'
        self.merge_head_file = self.grove_dir / 'MERGE_HEAD'
        self.merge_msg_file = self.grove_dir / 'MERGE_MSG'

        # Lazily created to avoid circular imports
        self._ref_manager = None
        self._config = None
        self._diff_engine = None
        self._merge_engine = None
        self._working_copy = None

    @staticmethod
    def _looks_bare(root: Path) -> bool:
        return (not (root / GROVE_DIR).exists()
                and (root / 'HEAD').is_file()
                and (root / 'objects').is_dir())

    @property
    def refs(self):
        """RefManager for this repository."""
        if self._ref_manager is None:
            from .refs import RefManager
            self._ref_manager = RefManager(self)
        return self._ref_manager

    @property
    def config(self):
        """Config layered over this repository's config file."""
        if self._config is None:
            from .config import Config
            self._config = Config(self.config_file)
        return self._config

    @property
    def diff(self):
        """DiffEngine for this repository."""
        if self._diff_engine is None:
            from grove.operations.diff import DiffEngine
            self._diff_engine = DiffEngine(self)
        return self._diff_engine

    @property
    def merge(self):
        """MergeEngine for this repository."""
        if self._merge_engine is None:
            from grove.operations.merge import MergeEngine
            self._merge_engine = MergeEngine(self)
        return self._merge_engine

    @property
    def working_copy(self):
        """WorkingCopy for this repository."""
        if self._working_copy is None:
            from grove.operations.working_copy import WorkingCopy
            self._working_copy = WorkingCopy(self)
        return self._working_copy

    @property
    def is_bare(self) -> bool:
        """
        True if the repository has no working copy.

        Raises:
            ConfigError: If core.bare is set to something other than a boolean
        """
        return self.config.get_bool('core', 'bare', fallback=self.work_tree is None)

    def init(self) -> 'Repository':
        """
        Create the repository layout on disk.

        .grove/              (or the bare directory itself)
        ├── objects/         object database
        ├── refs/heads/      branch references
        ├── HEAD             current branch pointer
        └── config           repository configuration

        Returns:
            Repository: self for method chaining

        Raises:
            RepositoryExistsError: If a repository already exists here
        """
        if self.head_file.exists():
            raise RepositoryExistsError(f"Repository already exists at {self.grove_dir}")

        self.grove_dir.mkdir(parents=True, exist_ok=True)
        self.objects_dir.mkdir(exist_ok=True)
        self.heads_dir.mkdir(parents=True, exist_ok=True)

        self.head_file.write_text(f'ref: refs/heads/{DEFAULT_BRANCH}\n')

        bare = 'true' if self.work_tree is None else 'false'
        self.config_file.write_text(
            f'[core]\nrepositoryformatversion = 0\nbare = {bare}\n'
        )

        logger.debug("Initialized repository at %s (bare=%s)", self.grove_dir, bare)
        return self

    @classmethod
    def find_repository(cls, path: str = '.') -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Args:
            path: Starting path for search

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / GROVE_DIR).is_dir():
                return cls(str(current), bare=False)

            if cls._looks_bare(current) and (current / 'config').is_file():
                return cls(str(current), bare=True)

            if current == current.parent:
                return None

            current = current.parent

    # -- object store ---------------------------------------------------

    def object_path(self, hash: str) -> Path:
        """
        Filesystem path for an object: objects/<first 2 chars>/<remaining 38>.
        """
        return self.objects_dir / hash[:2] / hash[2:]

    def write_object(self, obj: GroveObject) -> str:
        """
        Store an object, zlib-compressed, under its content hash.

        Writing identical content twice stores a single object.

        Returns:
            str: SHA-1 hash of the object
        """
        hash = obj.hash
        path = self.object_path(hash)

        if path.exists():
            return hash

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(zlib.compress(obj.encode()))
        logger.debug("Wrote %s %s", obj.type, hash)

        return hash

    def read_object(self, hash: str) -> GroveObject:
        """
        Read object from repository.

        Args:
            hash: 40-character SHA-1 hash

        Returns:
            GroveObject: Deserialized object (Blob, Tree, or Commit)

        Raises:
            InvalidHashError: If hash is empty or malformed
            NotFoundError: If no object is stored for hash
            ObjectCorruptError: If the stored bytes cannot be parsed
        """
        if not is_valid_hash(hash or ''):
            raise InvalidHashError(f"Invalid object hash: {hash!r}")

        path = self.object_path(hash)
        if not path.exists():
            raise NotFoundError(f"Object {hash} not found")

        try:
            content = zlib.decompress(path.read_bytes())
            null_idx = content.index(b'\0')
            obj_type, size_str = content[:null_idx].decode().split(' ', 1)
            size = int(size_str)
        except (zlib.error, ValueError) as e:
            raise ObjectCorruptError(f"Object {hash} has an invalid header: {e}") from e

        data = content[null_idx + 1:]
        if len(data) != size:
            raise ObjectCorruptError(
                f"Object {hash} size mismatch: expected {size}, got {len(data)}"
            )

        obj_class = OBJECT_TYPES.get(obj_type)
        if obj_class is None:
            raise ObjectCorruptError(f"Object {hash} has unknown type {obj_type!r}")

        obj = obj_class()
        try:
            obj.deserialize(data)
        except (ValueError, IndexError) as e:
            raise ObjectCorruptError(f"Object {hash} is not a valid {obj_type}: {e}") from e
        return obj

    def object_exists(self, hash: str) -> bool:
        """True if an object is stored for hash; False for malformed hashes."""
        return is_valid_hash(hash or '') and self.object_path(hash).exists()

    def read_commit(self, hash: str) -> Commit:
        """Read an object and insist that it is a commit."""
        obj = self.read_object(hash)
        if not isinstance(obj, Commit):
            raise ObjectCorruptError(f"Object {hash} is a {obj.type}, not a commit")
        return obj

    # -- history --------------------------------------------------------

    @staticmethod
    def parent_hashes(obj: GroveObject) -> List[str]:
        """Parent hashes of a commit; empty for root commits and non-commits."""
        if isinstance(obj, Commit):
            return list(obj.parents)
        return []

    def ancestors(self, hash: str) -> List[str]:
        """
        All commits reachable from hash through parent links.

        The walk is breadth-first from the direct parents and each commit
        is expanded once, so diamond-shaped histories list a shared
        ancestor a single time. The result order is the traversal order
        and excludes hash itself.
        """
        result: List[str] = []
        expanded = set()
        worklist = deque(self.parent_hashes(self.read_object(hash)))

        while worklist:
            current = worklist.popleft()
            if current in expanded:
                continue
            expanded.add(current)
            result.append(current)
            worklist.extend(self.parent_hashes(self.read_object(current)))

        return result

    def is_ancestor(self, descendant: str, ancestor: str) -> bool:
        """True if ancestor is reachable from descendant through parents."""
        return ancestor in self.ancestors(descendant)

    def is_up_to_date(self, receiver: Optional[str], giver: str) -> bool:
        """
        True if giver is already incorporated into receiver: the two are
        the same commit or giver is an ancestor of receiver.
        """
        return bool(receiver) and (receiver == giver or self.is_ancestor(receiver, giver))

    def commit_toc(self, hash: str) -> Dict[str, str]:
        """
        Table of contents of a commit: repository-relative file path to
        blob hash, flattened from the commit's tree.

        Raises:
            ObjectCorruptError: If the commit or one of its trees is not of
                the expected kind
        """
        commit = self.read_commit(hash)
        return self.tree_toc(commit.tree)

    def tree_toc(self, tree_hash: str, prefix: str = '') -> Dict[str, str]:
        """Flatten the tree stored under tree_hash into a path->hash map."""
        tree = self.read_object(tree_hash)
        if not isinstance(tree, Tree):
            raise ObjectCorruptError(f"Object {tree_hash} is a {tree.type}, not a tree")

        files: Dict[str, str] = {}
        for entry in tree.entries:
            path = f"{prefix}{entry.name}"
            if entry.is_tree:
                files.update(self.tree_toc(entry.hash, f"{path}/"))
            else:
                files[path] = entry.hash
        return files

    def __repr__(self) -> str:
        location = self.work_tree or self.grove_dir
        return f"Repository(path={location}, bare={self.work_tree is None})"
