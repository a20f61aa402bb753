"""Shared pytest fixtures for Grove tests."""

import itertools
import shutil
import tempfile
from pathlib import Path

import pytest

from grove.core.config import Config
from grove.core.index import Index
from grove.core.objects import Blob, Commit
from grove.core.repository import Repository
from grove.operations.commit import build_tree_from_index, create_commit

AUTHOR = "Test User <test@example.com>"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep the user's ~/.groveconfig and GROVE_* variables out of tests."""
    home = tmp_path_factory.mktemp('home')
    monkeypatch.setattr(Config, 'GLOBAL_CONFIG_PATH', home / '.groveconfig')
    for key in ('GROVE_USER_NAME', 'GROVE_USER_EMAIL', 'GROVE_CORE_BARE'):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir).resolve()
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository."""
    return Repository(str(temp_dir)).init()


@pytest.fixture
def bare_repo(temp_dir):
    """Create an initialized bare repository."""
    return Repository(str(temp_dir / 'bare.grove'), bare=True).init()


@pytest.fixture
def store_commit():
    """
    Write a commit for a {path: content} snapshot straight into the object
    store, without touching the working copy or the index.

    Timestamps increase with every call so identical snapshots still get
    distinct commits.
    """
    clock = itertools.count(1_700_000_000)

    def _store(repo, files, parents=(), message='commit', branch=None):
        toc = {}
        for path, content in files.items():
            data = content.encode() if isinstance(content, str) else content
            toc[path] = repo.write_object(Blob(data))

        tree_hash = build_tree_from_index(repo, Index.from_toc(toc))
        commit = Commit.create(
            tree_hash=tree_hash,
            parent_hashes=list(parents),
            author=AUTHOR,
            message=message,
            timestamp=next(clock),
        )
        commit_hash = repo.write_object(commit)
        if branch:
            repo.refs.write_ref(repo.refs.to_local_ref(branch), commit_hash)
        return commit_hash

    return _store


@pytest.fixture
def commit_files():
    """
    Write files into the working copy, stage them and commit through the
    regular commit operation. Paths listed in delete are removed from
    disk and from the index first.
    """

    def _commit(repo, files, message='commit', delete=()):
        index = Index.load(repo)
        for path in delete:
            (repo.work_tree / path).unlink()
            index.remove_path(path)
        for path, content in files.items():
            file_path = repo.work_tree / path
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content)
            index.add_file(repo, str(file_path))
        index.save(repo)
        return create_commit(repo, message=message, author=AUTHOR)

    return _commit


@pytest.fixture
def diverged(repo, commit_files):
    """
    Repository with main and feature branched from a shared base commit.

    base:    a.txt='a', b.txt='b'
    main:    a.txt='main'  (HEAD, checked out)
    feature: b.txt='feature'

    Returns (repo, hashes) with hashes keyed 'base', 'main', 'feature'.
    """
    from grove.operations.checkout import checkout

    base = commit_files(repo, {'a.txt': 'a\n', 'b.txt': 'b\n'}, 'base')
    repo.refs.create_branch('feature', base)

    checkout(repo, 'feature')
    feature = commit_files(repo, {'b.txt': 'feature\n'}, 'feature work')

    checkout(repo, 'main')
    main = commit_files(repo, {'a.txt': 'main\n'}, 'main work')

    return repo, {'base': base, 'main': main, 'feature': feature}
