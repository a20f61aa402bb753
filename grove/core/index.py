"""Index (staging area) implementation.

Index entries are keyed by a ``(path, stage)`` pair. Stage is always 0
unless the path is in conflict after a merge, in which case the path has
entries at stage 1 (base), 2 (receiver, "ours") and 3 (giver, "theirs"),
with stage 1 omitted when the path did not exist in the common ancestor.
A path never has a stage-0 entry and conflict-stage entries at once.
"""

import hashlib
import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import IndexCorruptError

logger = logging.getLogger(__name__)

SIGNATURE = b'DIRC'
VERSION = 2
ENTRY_FORMAT = '>IIII20sH'
ENTRY_SIZE = struct.calcsize(ENTRY_FORMAT)
STAGE_SHIFT = 12
NAME_MASK = 0xFFF

STAGE_NORMAL = 0
STAGE_BASE = 1
STAGE_RECEIVER = 2
STAGE_GIVER = 3
CONFLICT_STAGES = (STAGE_BASE, STAGE_RECEIVER, STAGE_GIVER)

IndexKey = Tuple[str, int]


@dataclass
class IndexEntry:
    """A staged content hash for one (path, stage) slot."""
    path: str
    stage: int
    sha1: str
    mode: int = 0o100644
    size: int = 0
    mtime: int = 0
    mtime_ns: int = 0

    @property
    def key(self) -> IndexKey:
        return (self.path, self.stage)

    @property
    def flags(self) -> int:
        return (self.stage << STAGE_SHIFT) | (len(self.path.encode()) & NAME_MASK)

    def __repr__(self) -> str:
        return f"IndexEntry({self.mode:o} {self.sha1[:7]} {self.stage} {self.path})"


class Index:
    """
    Grove index (staging area).

    The index is the single surface that both plain commits and merges
    write through: it describes the content of the next commit, plus any
    unresolved merge conflicts.
    """

    def __init__(self):
        self.entries: Dict[IndexKey, IndexEntry] = {}
        self.version: int = VERSION

    @classmethod
    def load(cls, repo) -> 'Index':
        """Read the repository's index file (empty if there is none)."""
        index = cls()
        index.read(str(repo.index_file))
        return index

    def save(self, repo) -> None:
        """Write this index to the repository's index file."""
        self.write(str(repo.index_file))

    @classmethod
    def from_toc(cls, toc: Mapping[str, str]) -> 'Index':
        """Build an index holding every path of a TOC at stage 0."""
        index = cls()
        for path, sha1 in toc.items():
            index.add_entry(path, sha1)
        return index

    def add_entry(
        self,
        path: str,
        sha1: str,
        stage: int = STAGE_NORMAL,
        mode: int = 0o100644,
        size: int = 0,
        mtime: int = 0,
        mtime_ns: int = 0
    ) -> IndexEntry:
        """
        Add or replace the entry for (path, stage).

        A stage-0 entry replaces every conflict stage of the path, and a
        conflict-stage entry replaces the stage-0 entry.
        """
        if stage not in (STAGE_NORMAL,) + CONFLICT_STAGES:
            raise ValueError(f"Invalid index stage: {stage}")

        if stage == STAGE_NORMAL:
            for conflict_stage in CONFLICT_STAGES:
                self.entries.pop((path, conflict_stage), None)
        else:
            self.entries.pop((path, STAGE_NORMAL), None)

        entry = IndexEntry(path=path, stage=stage, sha1=sha1, mode=mode,
                           size=size, mtime=mtime, mtime_ns=mtime_ns)
        self.entries[entry.key] = entry
        return entry

    def add_file(self, repo, filepath: str) -> str:
        """
        Hash a working-copy file into a blob and stage it at stage 0.

        Staging a conflicted path this way marks it as resolved.

        Returns:
            str: Hash of the staged blob
        """
        from .objects import Blob

        file_path = Path(filepath)
        if not file_path.is_absolute():
            file_path = repo.work_tree / file_path

        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {filepath}")

        blob = Blob.from_file(str(file_path))
        sha1 = repo.write_object(blob)

        stat = file_path.stat()
        rel_path = file_path.resolve().relative_to(repo.work_tree).as_posix()
        self.add_entry(
            path=rel_path,
            sha1=sha1,
            mode=0o100755 if stat.st_mode & 0o111 else 0o100644,
            size=stat.st_size,
            mtime=int(stat.st_mtime),
            mtime_ns=stat.st_mtime_ns % 1_000_000_000,
        )
        return sha1

    def write_non_conflict(self, path: str, sha1: str) -> None:
        """Stage sha1 for path at stage 0, clearing any conflict."""
        self.remove_path(path)
        self.add_entry(path, sha1)

    def write_conflict(
        self,
        path: str,
        receiver: str,
        giver: str,
        base: Optional[str] = None
    ) -> None:
        """
        Record path as conflicted after a merge.

        Args:
            path: Conflicted path
            receiver: Content hash in the version being merged into (stage 2)
            giver: Content hash in the version being merged in (stage 3)
            base: Content hash in the common ancestor (stage 1), or None if
                the path did not exist there
        """
        self.remove_path(path)
        if base:
            self.add_entry(path, base, stage=STAGE_BASE)
        self.add_entry(path, receiver, stage=STAGE_RECEIVER)
        self.add_entry(path, giver, stage=STAGE_GIVER)

    def remove_path(self, path: str) -> bool:
        """Remove every stage of path. Returns True if anything was removed."""
        keys = [key for key in self.entries if key[0] == path]
        for key in keys:
            del self.entries[key]
        return bool(keys)

    def get_entry(self, path: str, stage: int = STAGE_NORMAL) -> Optional[IndexEntry]:
        return self.entries.get((path, stage))

    def has_file(self, path: str, stage: int = STAGE_NORMAL) -> bool:
        return (path, stage) in self.entries

    def is_file_in_conflict(self, path: str) -> bool:
        return self.has_file(path, STAGE_RECEIVER)

    def conflicted_paths(self) -> List[str]:
        """Sorted paths that are in conflict."""
        return sorted(path for path, stage in self.entries if stage == STAGE_RECEIVER)

    def has_conflicts(self) -> bool:
        return any(stage != STAGE_NORMAL for _, stage in self.entries)

    def paths(self) -> List[str]:
        """Sorted distinct paths in the index, whatever their stage."""
        return sorted({path for path, _ in self.entries})

    def paths_under(self, prefix: str) -> List[str]:
        """
        Sorted indexed paths equal to prefix or inside the directory it
        names. An empty prefix matches everything.
        """
        if not prefix:
            return self.paths()
        return [path for path in self.paths()
                if path == prefix or path.startswith(prefix + '/')]

    def toc(self) -> Dict[str, str]:
        """
        Flatten the index to a path -> hash mapping.

        Keys are visited in (path, stage) order, so for a conflicted path
        the highest stage present wins.
        """
        return {path: self.entries[(path, stage)].sha1
                for path, stage in sorted(self.entries)}

    def clear(self) -> None:
        self.entries.clear()

    def write(self, index_path: str) -> None:
        """
        Write index to disk in binary format.

        Format:
        - Header: 'DIRC' + version (4 bytes) + entry count (4 bytes)
        - Entries sorted by (path, stage): mtime, mtime_ns, mode, size,
          20-byte hash, flags (stage in bits 12-13, name length below),
          NUL-terminated path, padded to 8-byte alignment
        - Checksum: SHA-1 of everything above
        """
        content = bytearray()
        content.extend(SIGNATURE)
        content.extend(struct.pack('>I', self.version))
        content.extend(struct.pack('>I', len(self.entries)))

        for key in sorted(self.entries):
            entry = self.entries[key]
            path_bytes = entry.path.encode()
            content.extend(struct.pack(
                ENTRY_FORMAT,
                entry.mtime,
                entry.mtime_ns,
                entry.mode,
                entry.size,
                bytes.fromhex(entry.sha1),
                entry.flags
            ))
            content.extend(path_bytes + b'\x00')

            entry_len = ENTRY_SIZE + len(path_bytes) + 1
            content.extend(b'\x00' * ((8 - entry_len % 8) % 8))

        content.extend(hashlib.sha1(content).digest())
        Path(index_path).write_bytes(bytes(content))
        logger.debug("Wrote index with %d entries", len(self.entries))

    def read(self, index_path: str) -> None:
        """
        Read index from disk, replacing current entries.

        Raises:
            IndexCorruptError: On a bad signature, checksum or entry
        """
        self.entries.clear()
        if not Path(index_path).exists():
            return

        data = Path(index_path).read_bytes()
        if len(data) < 32:
            raise IndexCorruptError("Index file is truncated")

        content, checksum = data[:-20], data[-20:]
        if hashlib.sha1(content).digest() != checksum:
            raise IndexCorruptError("Index checksum mismatch")

        if content[0:4] != SIGNATURE:
            raise IndexCorruptError(f"Invalid index signature: {content[0:4]!r}")

        self.version, entry_count = struct.unpack('>II', content[4:12])
        offset = 12

        try:
            for _ in range(entry_count):
                mtime, mtime_ns, mode, size, sha, flags = struct.unpack(
                    ENTRY_FORMAT, content[offset:offset + ENTRY_SIZE])
                offset += ENTRY_SIZE

                path_end = content.index(b'\x00', offset)
                path = content[offset:path_end].decode()
                offset = path_end + 1

                entry_len = ENTRY_SIZE + len(path.encode()) + 1
                offset += (8 - entry_len % 8) % 8

                entry = IndexEntry(path=path, stage=flags >> STAGE_SHIFT, sha1=sha.hex(),
                                   mode=mode, size=size, mtime=mtime, mtime_ns=mtime_ns)
                self.entries[entry.key] = entry
        except (struct.error, ValueError) as e:
            raise IndexCorruptError(f"Invalid index entry: {e}") from e

    def __contains__(self, path: str) -> bool:
        return any(key[0] == path for key in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Index(entries={len(self.entries)})"
