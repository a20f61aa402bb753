"""Unit tests for commit creation."""

import pytest

from grove.core.errors import BareRepositoryError, NothingToCommitError
from grove.core.index import Index
from grove.core.objects import Blob, Tree
from grove.operations.commit import build_tree_from_index, create_commit


def stage(repo, files):
    index = Index.load(repo)
    for path, content in files.items():
        file_path = repo.work_tree / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        index.add_file(repo, path)
    index.save(repo)


class TestBuildTree:
    def test_nested_directories(self, repo):
        index = Index.from_toc({
            'README': Blob(b'r').hash,
            'src/app.py': Blob(b'a').hash,
            'src/lib/util.py': Blob(b'u').hash,
        })
        tree_hash = build_tree_from_index(repo, index)

        root = repo.read_object(tree_hash)
        assert [e.name for e in root.entries] == ['README', 'src']
        assert root.entries[1].is_tree
        assert repo.tree_toc(tree_hash) == index.toc()

    def test_empty_index(self, repo):
        assert build_tree_from_index(repo, Index()) == Tree().hash

    def test_conflict_stages_left_out(self, repo):
        index = Index.from_toc({'clean': Blob(b'c').hash})
        index.write_conflict('conflicted', '2' * 40, '3' * 40)
        assert repo.tree_toc(build_tree_from_index(repo, index)) == {'clean': Blob(b'c').hash}

    def test_executable_mode(self, repo):
        index = Index()
        index.add_entry('run.sh', Blob(b'x').hash, mode=0o100755)
        root = repo.read_object(build_tree_from_index(repo, index))
        assert root.entries[0].mode == '100755'


class TestCreateCommit:
    def test_root_commit(self, repo):
        stage(repo, {'f.txt': 'hello'})
        commit_hash = create_commit(repo, 'first', author='A <a@x>')

        commit = repo.read_commit(commit_hash)
        assert commit.parents == []
        assert commit.message == 'first'
        assert commit.author == 'A <a@x>'
        assert repo.refs.read_ref('main') == commit_hash
        assert repo.commit_toc(commit_hash) == {'f.txt': Blob(b'hello').hash}

    def test_second_commit_has_parent(self, repo):
        stage(repo, {'f.txt': '1'})
        first = create_commit(repo, 'first')
        stage(repo, {'f.txt': '2'})
        second = create_commit(repo, 'second')
        assert repo.read_commit(second).parents == [first]

    def test_identity_from_config(self, repo):
        repo.config.set('user', 'name', 'Ada')
        repo.config.set('user', 'email', 'ada@example.com')
        stage(repo, {'f.txt': '1'})
        commit_hash = create_commit(repo, 'first')
        assert repo.read_commit(commit_hash).author == 'Ada <ada@example.com>'

    def test_default_identity(self, repo):
        stage(repo, {'f.txt': '1'})
        commit_hash = create_commit(repo, 'first')
        assert repo.read_commit(commit_hash).author == 'Grove User <grove@localhost>'

    def test_nothing_to_commit(self, repo):
        stage(repo, {'f.txt': '1'})
        create_commit(repo, 'first')
        with pytest.raises(NothingToCommitError, match='nothing to commit'):
            create_commit(repo, 'again')

    def test_message_required(self, repo):
        stage(repo, {'f.txt': '1'})
        with pytest.raises(ValueError):
            create_commit(repo, '')

    def test_detached_head_commit(self, repo):
        stage(repo, {'f.txt': '1'})
        first = create_commit(repo, 'first')
        repo.refs.set_head(first, symbolic=False)
        stage(repo, {'f.txt': '2'})
        second = create_commit(repo, 'detached work')
        assert repo.refs.resolve_head() == second
        assert repo.refs.read_ref('main') == first

    def test_bare_repository(self, bare_repo):
        with pytest.raises(BareRepositoryError):
            create_commit(bare_repo, 'nope')
