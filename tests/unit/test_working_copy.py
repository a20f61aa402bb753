"""Unit tests for working copy synchronisation."""

import pytest

from grove.core.errors import BareRepositoryError
from grove.core.index import Index
from grove.core.objects import Blob
from grove.operations.diff import toc_diff


def store(repo, text):
    return repo.write_object(Blob(text.encode()))


def test_write_add_modify_delete(repo):
    old = {'mod.txt': store(repo, 'old'), 'gone/deep.txt': store(repo, 'bye')}
    new = {'mod.txt': store(repo, 'new'), 'dir/added.txt': store(repo, 'hi')}
    (repo.work_tree / 'mod.txt').write_text('old')
    (repo.work_tree / 'gone').mkdir()
    (repo.work_tree / 'gone' / 'deep.txt').write_text('bye')

    repo.working_copy.write(toc_diff(old, new))

    assert (repo.work_tree / 'mod.txt').read_text() == 'new'
    assert (repo.work_tree / 'dir' / 'added.txt').read_text() == 'hi'
    assert not (repo.work_tree / 'gone').exists()
    assert repo.grove_dir.is_dir()


def test_delete_tolerates_missing_file(repo):
    diff = toc_diff({'ghost.txt': store(repo, 'x')}, {})
    repo.working_copy.write(diff)
    assert not (repo.work_tree / 'ghost.txt').exists()


def test_conflict_markers(repo):
    base = {'f.txt': store(repo, 'base\n')}
    receiver = {'f.txt': store(repo, 'ours\n')}
    giver = {'f.txt': store(repo, 'theirs')}

    repo.working_copy.write(toc_diff(receiver, giver, base), giver_label='topic')

    assert (repo.work_tree / 'f.txt').read_text() == (
        '<<<<<<< HEAD\nours\n=======\ntheirs\n>>>>>>> topic\n'
    )


def test_toc_reads_staged_files_only(repo):
    (repo.work_tree / 'tracked.txt').write_text('t')
    (repo.work_tree / 'untracked.txt').write_text('u')
    index = Index()
    index.add_file(repo, 'tracked.txt')
    index.add_entry('deleted.txt', '1' * 40)
    index.save(repo)

    assert repo.working_copy.toc() == {'tracked.txt': Blob(b't').hash}


def test_toc_reflects_disk_content(repo):
    (repo.work_tree / 'f.txt').write_text('staged')
    index = Index()
    index.add_file(repo, 'f.txt')
    (repo.work_tree / 'f.txt').write_text('edited')
    assert repo.working_copy.toc(index) == {'f.txt': Blob(b'edited').hash}


def test_bare_repository_has_no_working_copy(bare_repo):
    with pytest.raises(BareRepositoryError):
        bare_repo.working_copy.toc()
