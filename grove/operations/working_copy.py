"""Working copy synchronisation for Grove."""

import logging
from pathlib import Path
from typing import Dict, Optional

from grove.core.errors import BareRepositoryError
from grove.core.objects import Blob
from grove.operations.diff import Diff, FileStatus

logger = logging.getLogger(__name__)


class WorkingCopy:
    """
    The checked-out files of a non-bare repository.
    """

    def __init__(self, repo):
        self.repo = repo

    @property
    def root(self) -> Path:
        if self.repo.work_tree is None:
            raise BareRepositoryError("This operation must be run in a work tree")
        return self.repo.work_tree

    def path(self, rel_path: str) -> Path:
        """Absolute filesystem path for a repository-relative path."""
        return self.root / rel_path

    def read_blob(self, hash: str) -> bytes:
        return self.repo.read_object(hash).data

    def write(self, diff: Diff, giver_label: str = 'MERGE_HEAD') -> None:
        """
        Apply a diff to the files on disk.

        ADD writes the receiver content if there is any, else the giver's;
        MODIFY writes the giver content; CONFLICT writes both versions
        between conflict markers; DELETE removes the file. Directories
        emptied along the way are removed.
        """
        for rel_path, entry in diff.items():
            file_path = self.path(rel_path)

            if entry.status == FileStatus.ADD:
                self._write_file(file_path, self.read_blob(entry.receiver or entry.giver))
            elif entry.status == FileStatus.MODIFY:
                self._write_file(file_path, self.read_blob(entry.giver))
            elif entry.status == FileStatus.CONFLICT:
                content = self.compose_conflict(entry.receiver, entry.giver, giver_label)
                self._write_file(file_path, content)
            elif entry.status == FileStatus.DELETE:
                file_path.unlink(missing_ok=True)
                logger.debug("Removed %s", rel_path)

        self.remove_empty_dirs()

    def _write_file(self, file_path: Path, data: bytes) -> None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(data)
        logger.debug("Wrote %s", file_path)

    def compose_conflict(self, receiver: Optional[str], giver: Optional[str],
                         giver_label: str = 'MERGE_HEAD') -> bytes:
        """File content holding both sides of a conflict between markers."""
        parts = [b'<<<<<<< HEAD\n']
        for hash, marker in ((receiver, b'=======\n'), (giver, f'>>>>>>> {giver_label}\n'.encode())):
            if hash:
                content = self.read_blob(hash)
                parts.append(content)
                if content and not content.endswith(b'\n'):
                    parts.append(b'\n')
            parts.append(marker)
        return b''.join(parts)

    def remove_empty_dirs(self) -> None:
        """Prune empty directories under the root, leaving metadata alone."""
        for directory in sorted(self.root.rglob('*'), key=lambda p: len(p.parts), reverse=True):
            if self.repo.grove_dir in (directory, *directory.parents):
                continue
            if directory.is_dir() and not any(directory.iterdir()):
                directory.rmdir()

    def toc(self, index=None) -> Dict[str, str]:
        """
        Map every staged path that exists on disk to the blob hash of its
        current content.
        """
        from grove.core.index import Index

        root = self.root
        if index is None:
            index = Index.load(self.repo)

        files = {}
        for rel_path in index.paths():
            file_path = root / rel_path
            if file_path.is_file():
                files[rel_path] = Blob.from_file(str(file_path)).hash
        return files
