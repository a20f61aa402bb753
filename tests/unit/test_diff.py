"""Unit tests for the diff engine."""

import itertools

import pytest

from grove.core.index import Index
from grove.core.objects import Blob
from grove.operations.diff import (DiffEntry, FileStatus, file_status, name_status,
                                   toc_diff)

A, B, C = ('a' * 40, 'b' * 40, 'c' * 40)


class TestFileStatus:
    @pytest.mark.parametrize('receiver, giver, base, expected', [
        (A, B, C, FileStatus.CONFLICT),
        (A, B, A, FileStatus.MODIFY),
        (A, B, B, FileStatus.MODIFY),
        (A, B, None, FileStatus.CONFLICT),
        (A, A, None, FileStatus.SAME),
        (A, A, B, FileStatus.SAME),
        (None, None, A, FileStatus.SAME),
        (None, A, None, FileStatus.ADD),
        (A, None, None, FileStatus.ADD),
        (None, A, A, FileStatus.DELETE),
        (A, None, A, FileStatus.DELETE),
        (None, A, B, FileStatus.DELETE),
    ])
    def test_rules(self, receiver, giver, base, expected):
        assert file_status(receiver, giver, base) == expected

    def test_same_iff_equal(self):
        """Every combination is SAME exactly when receiver == giver."""
        values = [None, A, B, C]
        for receiver, giver, base in itertools.product(values, repeat=3):
            status = file_status(receiver, giver, base)
            assert (status == FileStatus.SAME) == (receiver == giver)

    def test_conflict_needs_both_sides_changed(self):
        values = [None, A, B, C]
        for receiver, giver, base in itertools.product(values, repeat=3):
            if file_status(receiver, giver, base) == FileStatus.CONFLICT:
                assert receiver is not None and giver is not None
                assert receiver != base and giver != base

    def test_str_is_letter(self):
        assert str(FileStatus.ADD) == 'A'
        assert str(FileStatus.MODIFY) == 'M'
        assert str(FileStatus.DELETE) == 'D'


class TestTocDiff:
    def test_two_way_add_modify_delete(self):
        diff = toc_diff({'kept': A, 'changed': A, 'removed': A},
                        {'kept': A, 'changed': B, 'added': C})
        assert name_status(diff) == {
            'changed': FileStatus.MODIFY,
            'removed': FileStatus.DELETE,
            'added': FileStatus.ADD,
        }
        assert diff['kept'] == DiffEntry(FileStatus.SAME, A, A, A)

    def test_two_way_never_conflicts(self):
        diff = toc_diff({'f': A}, {'f': B})
        assert diff['f'].status == FileStatus.MODIFY

    def test_three_way(self):
        base = {'both': A, 'ours': A, 'theirs': A, 'gone': A}
        receiver = {'both': B, 'ours': B, 'theirs': A, 'new': C}
        giver = {'both': C, 'ours': A, 'theirs': C, 'gone': A}
        diff = toc_diff(receiver, giver, base)

        assert diff['both'].status == FileStatus.CONFLICT
        assert diff['ours'].status == FileStatus.MODIFY
        assert diff['theirs'].status == FileStatus.MODIFY
        assert diff['gone'].status == FileStatus.DELETE
        assert diff['new'].status == FileStatus.ADD
        assert diff['both'] == DiffEntry(FileStatus.CONFLICT, B, A, C)

    def test_covers_union_of_paths(self):
        diff = toc_diff({'r': A}, {'g': B}, {'b': C})
        assert list(diff) == ['b', 'g', 'r']
        assert diff['b'].status == FileStatus.SAME

    def test_explicit_empty_base(self):
        """An empty base is a base, not a request for the default."""
        diff = toc_diff({'f': A}, {'f': B}, {})
        assert diff['f'].status == FileStatus.CONFLICT

    def test_inputs_untouched(self):
        receiver, giver = {'f': A}, {'g': B}
        toc_diff(receiver, giver)
        assert receiver == {'f': A}
        assert giver == {'g': B}

    def test_name_status_drops_same(self):
        diff = toc_diff({'f': A, 'g': A}, {'f': A, 'g': B})
        assert name_status(diff) == {'g': FileStatus.MODIFY}


class TestDiffEngine:
    def test_index_vs_working_copy(self, repo):
        (repo.work_tree / 'f.txt').write_text('one')
        index = Index()
        index.add_file(repo, 'f.txt')
        index.save(repo)

        assert name_status(repo.diff.diff()) == {}

        (repo.work_tree / 'f.txt').write_text('two')
        assert name_status(repo.diff.diff()) == {'f.txt': FileStatus.MODIFY}

        (repo.work_tree / 'f.txt').unlink()
        assert name_status(repo.diff.diff()) == {'f.txt': FileStatus.DELETE}

    def test_commit_vs_commit(self, repo, store_commit):
        first = store_commit(repo, {'a': '1', 'b': '1'})
        second = store_commit(repo, {'a': '2', 'c': '1'}, [first])
        assert name_status(repo.diff.diff(first, second)) == {
            'a': FileStatus.MODIFY,
            'b': FileStatus.DELETE,
            'c': FileStatus.ADD,
        }

    def test_head_toc(self, repo, commit_files):
        assert repo.diff.head_toc() == {}
        commit_files(repo, {'f.txt': 'x'})
        assert repo.diff.head_toc() == {'f.txt': Blob(b'x').hash}

    def test_changed_files_commit_would_overwrite(self, repo, commit_files, store_commit):
        head = commit_files(repo, {'a.txt': 'a', 'b.txt': 'b'}, 'first')
        other = store_commit(repo, {'a.txt': 'other', 'b.txt': 'b'}, [head])

        assert repo.diff.changed_files_commit_would_overwrite(other) == set()

        (repo.work_tree / 'b.txt').write_text('local')
        assert repo.diff.changed_files_commit_would_overwrite(other) == set()

        (repo.work_tree / 'a.txt').write_text('local')
        assert repo.diff.changed_files_commit_would_overwrite(other) == {'a.txt'}

    def test_added_or_modified_files(self, repo, commit_files):
        commit_files(repo, {'a.txt': 'a', 'b.txt': 'b'}, 'first')
        (repo.work_tree / 'a.txt').write_text('changed')
        (repo.work_tree / 'b.txt').unlink()
        assert repo.diff.added_or_modified_files() == {'a.txt'}
