"""Content-addressed objects for Grove."""

import time
from abc import ABC, abstractmethod
from typing import List, Optional
from .hash import hash_object

TREE_MODE = '040000'
BLOB_MODE = '100644'
EXECUTABLE_MODE = '100755'


class GroveObject(ABC):
    """Base class for all Grove objects."""

    def __init__(self):
        self._hash: Optional[str] = None

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize object to bytes.

        Returns:
            bytes: Serialized object data
        """

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """
        Deserialize object from bytes.

        Args:
            data: Serialized object data

        Raises:
            ValueError: If data is not a valid encoding of this kind
        """

    @property
    def type(self) -> str:
        """Object type name (blob, tree, commit)."""
        return self.__class__.__name__.lower()

    def compute_hash(self) -> str:
        """
        Compute and cache object hash.

        Objects are hashed with a header containing the type and size.
        Format: <type> <size>\\0<content>

        Returns:
            str: 40-character SHA-1 hash
        """
        if self._hash is None:
            self._hash = hash_object(self.encode())
        return self._hash

    def encode(self) -> bytes:
        """Serialized payload prefixed with its type/size header."""
        data = self.serialize()
        header = f"{self.type} {len(data)}\0".encode()
        return header + data

    @property
    def hash(self) -> str:
        """40-character SHA-1 hash of the object."""
        return self.compute_hash()


class Blob(GroveObject):
    """
    Represents file content.

    A blob stores the raw content of a file without any metadata
    like filename or permissions.
    """

    def __init__(self, data: Optional[bytes] = None):
        super().__init__()
        self.data = data or b''

    def serialize(self) -> bytes:
        return self.data

    def deserialize(self, data: bytes) -> None:
        self.data = data
        self._hash = None

    @classmethod
    def from_file(cls, filepath: str) -> 'Blob':
        """Create blob from the bytes of a file."""
        with open(filepath, 'rb') as f:
            return cls(f.read())

    def __repr__(self) -> str:
        return f"Blob(hash={self.hash[:7]}, size={len(self.data)})"


class TreeEntry:
    """
    A single named child of a tree.

    Each entry carries a mode, the kind of the child ('blob' or 'tree'),
    the child's hash and its name within the parent directory.
    """

    def __init__(self, mode: str, obj_type: str, obj_hash: str, name: str):
        self.mode = mode
        self.type = obj_type
        self.hash = obj_hash
        self.name = name

    @property
    def is_tree(self) -> bool:
        return self.type == 'tree'

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeEntry):
            return NotImplemented
        return (self.mode, self.type, self.hash, self.name) == \
            (other.mode, other.type, other.hash, other.name)

    def __repr__(self) -> str:
        return f"TreeEntry({self.mode} {self.type} {self.hash[:7]} {self.name})"

    def __lt__(self, other: 'TreeEntry') -> bool:
        return self.name < other.name


class Tree(GroveObject):
    """
    Represents directory structure.

    A tree contains entries pointing to blobs (files) and other trees
    (subdirectories), kept sorted by name so that equal directories
    always serialize, and therefore hash, identically.
    """

    def __init__(self):
        super().__init__()
        self.entries: List[TreeEntry] = []

    def add_entry(self, mode: str, obj_type: str, obj_hash: str, name: str) -> None:
        """
        Add an entry, replacing any existing entry with the same name.

        Args:
            mode: File mode ('100644', '100755' or '040000')
            obj_type: Object type ('blob' or 'tree')
            obj_hash: Object hash
            name: Entry name (a single path component)
        """
        if not name or '/' in name or name in ('.', '..'):
            raise ValueError(f"Invalid tree entry name: {name!r}")
        self.entries = [e for e in self.entries if e.name != name]
        self.entries.append(TreeEntry(mode, obj_type, obj_hash, name))
        self.entries.sort()
        self._hash = None

    def serialize(self) -> bytes:
        """
        Serialize tree.

        Format: <mode> <name>\\0<20-byte hash> for every entry, sorted by name.
        """
        result = bytearray()
        for entry in sorted(self.entries):
            result += f"{entry.mode} {entry.name}".encode() + b'\0'
            result += bytes.fromhex(entry.hash)
        return bytes(result)

    def deserialize(self, data: bytes) -> None:
        self.entries = []
        pos = 0

        while pos < len(data):
            space_pos = data.index(b' ', pos)
            mode = data[pos:space_pos].decode()

            null_pos = data.index(b'\0', space_pos)
            name = data[space_pos + 1:null_pos].decode()

            hash_bytes = data[null_pos + 1:null_pos + 21]
            if len(hash_bytes) != 20:
                raise ValueError(f"Truncated tree entry for {name!r}")

            obj_type = 'tree' if mode == TREE_MODE else 'blob'
            self.add_entry(mode, obj_type, hash_bytes.hex(), name)

            pos = null_pos + 21

        self._hash = None

    def __repr__(self) -> str:
        return f"Tree(entries={len(self.entries)})"


class Commit(GroveObject):
    """
    A snapshot of the project plus its place in history.

    A commit records the tree hash, zero or more parent commits (none for
    the root commit, two for a merge), author/committer identity with a
    timestamp, and a free-text message.
    """

    def __init__(self):
        super().__init__()
        self.tree: str = ''
        self.parents: List[str] = []
        self.author: str = ''
        self.author_time: int = 0
        self.author_timezone: str = '+0000'
        self.committer: str = ''
        self.committer_time: int = 0
        self.committer_timezone: str = '+0000'
        self.message: str = ''

    def serialize(self) -> bytes:
        """
        Serialize commit.

        Format:
        tree <tree-hash>
        parent <parent-hash>  (zero or more)
        author Name <email> <timestamp> <timezone>
        committer Name <email> <timestamp> <timezone>

        <commit message>
        """
        lines = [f'tree {self.tree}']
        lines.extend(f'parent {parent}' for parent in self.parents)
        lines.append(f'author {self.author} {self.author_time} {self.author_timezone}')
        lines.append(f'committer {self.committer} {self.committer_time} {self.committer_timezone}')
        lines.append('')
        lines.append(self.message)
        return '\n'.join(lines).encode()

    def deserialize(self, data: bytes) -> None:
        lines = data.decode().split('\n')
        self.tree = ''
        self.parents = []

        message_start = len(lines)
        for i, line in enumerate(lines):
            if not line:
                message_start = i + 1
                break

            key, _, value = line.partition(' ')
            if key == 'tree':
                self.tree = value
            elif key == 'parent':
                self.parents.append(value)
            elif key in ('author', 'committer'):
                who, stamp, zone = value.rsplit(' ', 2)
                setattr(self, key, who)
                setattr(self, f'{key}_time', int(stamp))
                setattr(self, f'{key}_timezone', zone)
            else:
                raise ValueError(f"Unknown commit header: {key!r}")

        if not self.tree:
            raise ValueError("Commit has no tree")

        self.message = '\n'.join(lines[message_start:])
        self._hash = None

    @classmethod
    def create(
        cls,
        tree_hash: str,
        parent_hashes: List[str],
        author: str,
        message: str,
        committer: Optional[str] = None,
        timestamp: Optional[int] = None,
        timezone: str = '+0000'
    ) -> 'Commit':
        """
        Create a new commit.

        Args:
            tree_hash: Hash of tree object
            parent_hashes: Parent commit hashes (empty for a root commit)
            author: Author name and email (e.g., "Name <email>")
            message: Commit message
            committer: Committer identity (defaults to author)
            timestamp: Unix timestamp (defaults to current time)
            timezone: Timezone offset (e.g., "+0000", "-0500")
        """
        commit = cls()
        commit.tree = tree_hash
        commit.parents = list(parent_hashes)
        commit.author = author
        commit.committer = committer or author
        commit.message = message

        if timestamp is None:
            timestamp = int(time.time())

        commit.author_time = timestamp
        commit.committer_time = timestamp
        commit.author_timezone = timezone
        commit.committer_timezone = timezone

        return commit

    def __repr__(self) -> str:
        parent_info = f", parents={len(self.parents)}" if self.parents else ""
        msg_preview = self.message.split('\n')[0][:50]
        return f"Commit(hash={self.hash[:7]}{parent_info}, msg='{msg_preview}')"


OBJECT_TYPES = {
    'blob': Blob,
    'tree': Tree,
    'commit': Commit,
}
